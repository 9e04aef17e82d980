"""Custom exceptions for board configuration."""


class ConfigError(Exception):
    """Base exception for board configuration errors."""


class ConfigLoadError(ConfigError):
    """Configuration document could not be read or parsed."""


class ConfigValidationError(ConfigError):
    """Configuration tables are inconsistent.

    Attributes:
        problems: Every rule violation found, one message each.
    """

    def __init__(self, problems: list[str]) -> None:
        self.problems = problems
        super().__init__("Invalid board configuration: " + "; ".join(problems))
