"""TicketEnricher - derives card display values from tickets and ETAs."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from datetime import date, datetime

from deliveryhub.enrichment.models import TicketView
from deliveryhub.tickets import ETAResult, Ticket

DATE_FORMAT = "%b %d, %Y"
UAT_DATE_FORMAT = "%b %d"
NO_DATE_TEXT = "—"
NO_DATE_LABEL = "No Date"
LIVE_ETA_LABEL = "Est. Completion (Live)"
STORED_ETA_LABEL = "Est. Completion"
CREATED_LABEL = "Created"


def relative_suffix(days: int) -> str:
    """Card suffix for a date ``days`` away from today."""
    if days > 0:
        return f" (+{days}d)"
    if days < 0:
        return f" ({days}d)"
    return " (Today)"


def split_tags(raw: str | None) -> list[str]:
    """Comma-separated tag string to a list, trimmed, empties dropped."""
    if not raw or not isinstance(raw, str):
        return []
    return [tag.strip() for tag in raw.split(",") if tag.strip()]


def _as_date(value: datetime | date) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _number_text(value: float | None) -> str:
    if value is None:
        return "0"
    if float(value).is_integer():
        return str(int(value))
    return str(value)


class TicketEnricher:
    """Builds TicketView objects.

    Pure apart from the clock, which is injected so tests can pin "today".
    """

    def __init__(self, today: Callable[[], date] = date.today) -> None:
        self._today = today

    def enrich(self, tickets: Iterable[Ticket], eta: ETAResult | None = None) -> list[TicketView]:
        """Enrich every ticket, keeping input order.

        Args:
            tickets: Canonical tickets.
            eta: Live ETA projection; tickets missing from it fall back to
                their stored ETA, then their created date.

        Returns:
            One TicketView per ticket.
        """
        live = eta.by_ticket() if eta else {}
        today = self._today()
        return [self._enrich_one(ticket, live.get(ticket.id), today) for ticket in tickets]

    def _enrich_one(self, ticket: Ticket, live_eta: date | None, today: date) -> TicketView:
        display_date = NO_DATE_TEXT
        date_label = NO_DATE_LABEL
        relative_days = None

        if live_eta is not None:
            target = live_eta
            date_label = LIVE_ETA_LABEL
        elif ticket.stored_eta is not None:
            target = ticket.stored_eta
            date_label = STORED_ETA_LABEL
        else:
            target = None

        if target is not None:
            relative_days = (target - today).days
            display_date = target.strftime(DATE_FORMAT) + relative_suffix(relative_days)
        elif ticket.created_date is not None:
            display_date = _as_date(ticket.created_date).strftime(DATE_FORMAT)
            date_label = CREATED_LABEL

        priority_lower = (ticket.priority or "").lower()
        size = ticket.developer_days_size

        return TicketView(
            id=ticket.id,
            name=ticket.name,
            title=ticket.title,
            description=ticket.description,
            stage=ticket.stage,
            priority=ticket.priority,
            intention=ticket.intention,
            sort_order=ticket.sort_order,
            size_display=_number_text(size) if size else "--",
            hours_display=f"{_number_text(ticket.actual_hours)} / "
            f"{_number_text(ticket.estimated_hours)}h",
            uat_display=(
                ticket.projected_uat_date.strftime(UAT_DATE_FORMAT)
                if ticket.projected_uat_date
                else None
            ),
            display_date=display_date,
            date_label=date_label,
            relative_days=relative_days,
            is_high_priority=priority_lower == "high",
            priority_class=f"priority-badge priority-{priority_lower}",
            owner_name=ticket.owner_name,
            developer=ticket.developer,
            epic=ticket.epic,
            tags=split_tags(ticket.tags),
            is_blocked_by=ticket.blocked_by,
            is_blocking=ticket.blocking,
        )
