"""Data models for projected board columns."""

from __future__ import annotations

from dataclasses import dataclass, field

from deliveryhub.enrichment import TicketView
from deliveryhub.stages import ColumnStyle, Stage


@dataclass(frozen=True)
class Column:
    """One rendered board column."""

    key: str
    display_name: str
    member_stages: tuple[Stage, ...]
    style: ColumnStyle
    owner: str
    is_extended: bool = False
    tickets: list[TicketView] = field(default_factory=list)

    @property
    def ticket_ids(self) -> list[str]:
        return [t.id for t in self.tickets]

    @property
    def is_empty(self) -> bool:
        return not self.tickets
