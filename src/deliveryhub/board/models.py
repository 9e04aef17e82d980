"""Data models for the board service."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime

from deliveryhub.enrichment import TicketView
from deliveryhub.gate import TransitionOutcome
from deliveryhub.notifications import Notification
from deliveryhub.stages import TransitionOption
from deliveryhub.tickets import AiSuggestion, BlockerCandidate, Dependency, ETAResult, Ticket


@dataclass(frozen=True)
class BoardSnapshot:
    """Tickets and ETAs as of the last refresh.

    Attributes:
        tickets: Raw tickets from the backend.
        eta: ETA projection; empty when the fetch failed.
        views: Enriched tickets, in fetch order.
        refreshed_at: When the snapshot was taken; None before the first refresh.
    """

    tickets: tuple[Ticket, ...] = ()
    eta: ETAResult = field(default_factory=ETAResult)
    views: tuple[TicketView, ...] = ()
    refreshed_at: datetime | None = None


@dataclass(frozen=True)
class TicketOptions:
    """Moves offered for the selected ticket."""

    advance: list[TransitionOption] = field(default_factory=list)
    backtrack: list[TransitionOption] = field(default_factory=list)


@dataclass(frozen=True)
class ActionResult:
    """Outcome of a user action.

    ``success`` is False whenever the notification reports a failure; only
    the attribute matching the action is filled in.
    """

    success: bool
    notification: Notification | None = None
    outcome: TransitionOutcome | None = None
    ticket: Ticket | None = None
    suggestion: AiSuggestion | None = None
    dependency: Dependency | None = None
    candidates: list[BlockerCandidate] = field(default_factory=list)
