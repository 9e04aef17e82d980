"""Config - immutable board tables, defaults, loading and validation."""

from deliveryhub.config.defaults import default_board_config, default_stage_graph
from deliveryhub.config.exceptions import ConfigError, ConfigLoadError, ConfigValidationError
from deliveryhub.config.loader import load_board_config, parse_board_config
from deliveryhub.config.models import DEFAULT_VIEW, BoardConfig, PersonaLayout
from deliveryhub.config.validation import validate_board_config

__all__ = [
    "DEFAULT_VIEW",
    "BoardConfig",
    "ConfigError",
    "ConfigLoadError",
    "ConfigValidationError",
    "PersonaLayout",
    "default_board_config",
    "default_stage_graph",
    "load_board_config",
    "parse_board_config",
    "validate_board_config",
]
