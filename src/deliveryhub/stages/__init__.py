"""Stages - lifecycle enumeration and transition graph."""

from deliveryhub.stages.exceptions import (
    IllegalTransitionError,
    StageError,
    UnknownPersonaError,
    UnknownStageError,
)
from deliveryhub.stages.graph import StageGraph
from deliveryhub.stages.models import (
    NEUTRAL_COLUMN_STYLE,
    NEUTRAL_OPTION_STYLE,
    TERMINAL_STAGES,
    ColumnStyle,
    OptionOverride,
    Persona,
    Stage,
    TransitionOption,
)

__all__ = [
    "NEUTRAL_COLUMN_STYLE",
    "NEUTRAL_OPTION_STYLE",
    "TERMINAL_STAGES",
    "ColumnStyle",
    "IllegalTransitionError",
    "OptionOverride",
    "Persona",
    "Stage",
    "StageError",
    "StageGraph",
    "TransitionOption",
    "UnknownPersonaError",
    "UnknownStageError",
]
