"""ReorderEngine - classifies drops and computes fractional sort keys."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence

from deliveryhub.config import BoardConfig
from deliveryhub.enrichment import TicketView
from deliveryhub.projection import Column
from deliveryhub.reorder.exceptions import InvalidDropError
from deliveryhub.reorder.models import DropKind, DropPlan
from deliveryhub.stages import Persona

logger = logging.getLogger(__name__)

DEFAULT_MIN_GAP = 1e-6


def _key(ticket: TicketView) -> float:
    return ticket.sort_order or 0


def midpoint(prev: float, next_: float | None) -> float:
    """Sort key for a slot after ``prev`` and before ``next_``.

    With no following ticket the key is ``prev + 1``.
    """
    if next_ is None:
        return prev + 1
    return (prev + next_) / 2.0


def needs_rebalance(values: Iterable[float | None], min_gap: float = DEFAULT_MIN_GAP) -> bool:
    """Whether adjacent sort keys have drifted too close together.

    Args:
        values: Sort keys of one column, None treated as 0.
        min_gap: Smallest acceptable distance between neighbours.
    """
    ordered = sorted(v or 0 for v in values)
    return any(b - a < min_gap for a, b in zip(ordered, ordered[1:], strict=False))


def rebalance(tickets: Sequence[TicketView], step: float = 1.0) -> dict[str, float]:
    """Evenly spaced keys for ``tickets`` in their current order.

    Returns:
        Ticket id -> new sort key, starting at ``step``.
    """
    return {ticket.id: (index + 1) * step for index, ticket in enumerate(tickets)}


class ReorderEngine:
    """Turns a drop gesture into a reorder or a stage change."""

    def __init__(self, config: BoardConfig, min_gap: float = DEFAULT_MIN_GAP) -> None:
        self.config = config
        self.min_gap = min_gap

    def plan_drop(
        self,
        ticket_id: str,
        source_column: Column,
        target_column: Column,
        drop_index: int | None,
        persona: Persona,
    ) -> DropPlan:
        """Classify a drop and compute what to persist.

        Args:
            ticket_id: Dragged ticket.
            source_column: Column the ticket was dragged from.
            target_column: Column the ticket was dropped into.
            drop_index: Slot in the target column, counted without the
                dragged ticket; None drops at the end.
            persona: Persona whose column mapping applies.

        Returns:
            REORDER with a new sort key when the columns match, else
            STAGE_CHANGE to the target column's first stage.

        Raises:
            InvalidDropError: If the target column maps to no stage.
        """
        if source_column.key == target_column.key:
            siblings = [t for t in target_column.tickets if t.id != ticket_id]
            index = len(siblings) if drop_index is None else max(0, min(drop_index, len(siblings)))
            prev = _key(siblings[index - 1]) if index > 0 else 0
            next_ = _key(siblings[index]) if index < len(siblings) else None
            new_sort_order = midpoint(prev, next_)
            logger.debug(
                "Reorder %s in %s: slot %d -> %s", ticket_id, target_column.key, index, new_sort_order
            )
            return DropPlan(
                kind=DropKind.REORDER,
                ticket_id=ticket_id,
                target_column=target_column.key,
                new_sort_order=new_sort_order,
            )

        stages = self.config.layout(persona).column_to_stages.get(target_column.key, ())
        if not stages:
            raise InvalidDropError(f"Column '{target_column.key}' has no stage to move into")

        size = len(target_column.tickets)
        index = size if drop_index is None else max(0, min(drop_index, size))
        return DropPlan(
            kind=DropKind.STAGE_CHANGE,
            ticket_id=ticket_id,
            target_column=target_column.key,
            target_stage=stages[0],
            new_index=index,
        )

    def rebalance_needed(self, column: Column, ticket_id: str, new_sort_order: float) -> bool:
        """Whether ``column`` needs re-bucketing once ``ticket_id`` takes ``new_sort_order``.

        A midpoint that collapses onto a neighbour shows up as a zero gap.
        """
        values = [t.sort_order for t in column.tickets if t.id != ticket_id]
        values.append(new_sort_order)
        return needs_rebalance(values, self.min_gap)
