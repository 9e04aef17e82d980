"""Data models for enriched tickets."""

from __future__ import annotations

from dataclasses import dataclass, field

from deliveryhub.stages import Stage
from deliveryhub.tickets import DependencyLink


@dataclass(frozen=True)
class TicketView:
    """A ticket plus the display values a board card needs."""

    id: str
    name: str
    title: str
    description: str
    stage: Stage
    priority: str | None
    intention: str | None
    sort_order: float | None
    size_display: str
    hours_display: str
    uat_display: str | None
    display_date: str
    date_label: str
    relative_days: int | None
    is_high_priority: bool
    priority_class: str
    owner_name: str | None = None
    developer: str | None = None
    epic: str | None = None
    tags: list[str] = field(default_factory=list)
    is_blocked_by: tuple[DependencyLink, ...] = ()
    is_blocking: tuple[DependencyLink, ...] = ()

    @property
    def is_currently_blocked(self) -> bool:
        return len(self.is_blocked_by) > 0

    @property
    def linked_ticket_ids(self) -> set[str]:
        """Ids on the other end of every dependency edge touching this ticket."""
        return {link.ticket_id for link in (*self.is_blocked_by, *self.is_blocking)}
