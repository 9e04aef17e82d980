"""Data models for drop planning."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from deliveryhub.stages import Stage


class DropKind(StrEnum):
    """What a drop does to the ticket."""

    REORDER = "reorder"
    STAGE_CHANGE = "stage_change"


@dataclass(frozen=True)
class DropPlan:
    """Outcome of classifying a drop.

    Attributes:
        kind: REORDER for a move inside one column, STAGE_CHANGE otherwise.
        ticket_id: The dragged ticket.
        target_column: Column key the ticket was dropped into.
        new_sort_order: New fractional key (REORDER only).
        target_stage: Stage the ticket moves to (STAGE_CHANGE only).
        new_index: Insertion index in the target column (STAGE_CHANGE only).
    """

    kind: DropKind
    ticket_id: str
    target_column: str
    new_sort_order: float | None = None
    target_stage: Stage | None = None
    new_index: int | None = None
