"""Data models for delivery tickets."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum

from deliveryhub.stages import Stage


class Priority(StrEnum):
    """Ticket priority levels."""

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"


DEFAULT_PRIORITY = Priority.MEDIUM

_PRIORITY_RANK = {
    Priority.CRITICAL.value.lower(): 0,
    Priority.HIGH.value.lower(): 1,
    Priority.MEDIUM.value.lower(): 2,
    Priority.LOW.value.lower(): 3,
}


def priority_rank(priority: str | None) -> int:
    """Scheduling rank for a priority, lower first. Unknown text ranks last."""
    if not priority:
        return len(_PRIORITY_RANK)
    return _PRIORITY_RANK.get(priority.strip().lower(), len(_PRIORITY_RANK))


@dataclass(frozen=True)
class DependencyLink:
    """The other end of a dependency edge, seen from one ticket."""

    ticket_id: str
    name: str
    dependency_id: str


@dataclass(frozen=True)
class Dependency:
    """A blocking edge: ``blocking_ticket_id`` blocks ``blocked_ticket_id``."""

    id: str
    blocking_ticket_id: str
    blocked_ticket_id: str


@dataclass(frozen=True)
class Ticket:
    """Canonical ticket record."""

    id: str
    name: str
    title: str
    stage: Stage
    description: str = ""
    priority: str | None = None
    intention: str | None = None
    sort_order: float | None = None
    developer_days_size: float | None = None
    actual_hours: float | None = None
    estimated_hours: float | None = None
    tags: str | None = None
    created_date: datetime | date | None = None
    projected_uat_date: date | None = None
    stored_eta: date | None = None
    developer: str | None = None
    epic: str | None = None
    owner_name: str | None = None
    is_active: bool = True
    blocked_by: tuple[DependencyLink, ...] = ()
    blocking: tuple[DependencyLink, ...] = ()


@dataclass(frozen=True)
class ETAProjection:
    """Scheduler output for one ticket."""

    ticket_id: str
    calculated_eta: date


@dataclass(frozen=True)
class ETAResult:
    """Scheduler output for the whole board.

    Attributes:
        tickets: One projection per scheduled ticket.
        pushed_back: Ids of tickets whose ETA moved later because of
            prioritization.
    """

    tickets: list[ETAProjection] = field(default_factory=list)
    pushed_back: list[str] = field(default_factory=list)

    def by_ticket(self) -> dict[str, date]:
        return {p.ticket_id: p.calculated_eta for p in self.tickets}


@dataclass(frozen=True)
class FieldSpec:
    """A field that must be provided before a stage change commits."""

    name: str
    label: str
    field_type: str = "text"
    required: bool = True


@dataclass(frozen=True)
class BlockerCandidate:
    """Search hit offered when adding a blocking ticket."""

    id: str
    name: str
    title: str = ""
    stage: str | None = None


@dataclass(frozen=True)
class AiSuggestion:
    """Rewritten ticket text returned by the enhancement service."""

    title: str | None = None
    description: str | None = None
    estimated_days: float | None = None

    @property
    def is_empty(self) -> bool:
        return not self.title and not self.description
