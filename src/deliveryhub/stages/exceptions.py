"""Custom exceptions for the stage lifecycle."""


class StageError(Exception):
    """Base exception for stage lifecycle errors."""


class UnknownStageError(StageError, ValueError):
    """Stage label is not part of the lifecycle enumeration."""


class UnknownPersonaError(StageError, ValueError):
    """Persona name is not one of the known personas."""


class IllegalTransitionError(StageError):
    """Target stage is not reachable from the current stage."""
