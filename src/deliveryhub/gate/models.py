"""Data models for gated stage transitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from deliveryhub.stages import Stage
from deliveryhub.tickets import FieldSpec


class TransitionStatus(StrEnum):
    """Result of asking the gate for a stage change."""

    COMMITTED = "committed"
    NEEDS_INPUT = "needs_input"


@dataclass(frozen=True)
class PendingTransition:
    """A stage change waiting for required field values."""

    ticket_id: str
    target_stage: Stage
    fields: tuple[FieldSpec, ...] = ()

    @property
    def required_names(self) -> list[str]:
        return [f.name for f in self.fields if f.required]


@dataclass(frozen=True)
class TransitionOutcome:
    """What happened to a requested transition.

    Attributes:
        status: COMMITTED or NEEDS_INPUT.
        ticket_id: Ticket being moved.
        target_stage: Requested stage.
        fields: Required fields, unchanged from the backend (NEEDS_INPUT only).
        pending: Token to pass to ``TransitionGate.complete`` (NEEDS_INPUT only).
        comment_saved: None when no comment was given, else whether the
            status comment was stored.
    """

    status: TransitionStatus
    ticket_id: str
    target_stage: Stage
    fields: list[FieldSpec] = field(default_factory=list)
    pending: PendingTransition | None = None
    comment_saved: bool | None = None

    @property
    def committed(self) -> bool:
        return self.status == TransitionStatus.COMMITTED
