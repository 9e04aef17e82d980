"""Custom exceptions for the transition gate."""


class GateError(Exception):
    """Base exception for transition gate errors."""


class GateCheckError(GateError):
    """Required fields for the target stage could not be fetched."""


class StageUpdateError(GateError):
    """The stage change itself failed."""


class MissingFieldsError(GateError):
    """Required values were not supplied.

    Attributes:
        missing: Names of the fields still empty.
    """

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__("Missing required fields: " + ", ".join(missing))
