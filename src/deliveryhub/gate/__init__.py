"""Gate - required-field check in front of stage changes."""

from deliveryhub.gate.exceptions import (
    GateCheckError,
    GateError,
    MissingFieldsError,
    StageUpdateError,
)
from deliveryhub.gate.gate import TransitionGate
from deliveryhub.gate.models import PendingTransition, TransitionOutcome, TransitionStatus

__all__ = [
    "GateCheckError",
    "GateError",
    "MissingFieldsError",
    "PendingTransition",
    "StageUpdateError",
    "TransitionGate",
    "TransitionOutcome",
    "TransitionStatus",
]
