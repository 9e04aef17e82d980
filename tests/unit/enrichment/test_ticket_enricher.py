"""Unit tests for TicketEnricher."""

from collections.abc import Callable
from datetime import date, datetime

import pytest

from deliveryhub.enrichment import TicketEnricher, relative_suffix, split_tags
from deliveryhub.tickets import DependencyLink, ETAProjection, ETAResult, Ticket

TODAY = date(2026, 1, 15)


@pytest.fixture
def enricher() -> TicketEnricher:
    return TicketEnricher(today=lambda: TODAY)


@pytest.mark.unit
class TestHelpers:
    """Tests for relative_suffix and split_tags."""

    @pytest.mark.parametrize(
        ("days", "expected"), [(3, " (+3d)"), (-2, " (-2d)"), (0, " (Today)")]
    )
    def test_relative_suffix(self, days: int, expected: str) -> None:
        """Future, past and today are labelled differently."""
        assert relative_suffix(days) == expected

    def test_split_tags(self) -> None:
        """Tags are trimmed and empties dropped."""
        assert split_tags(" api, ,billing ,") == ["api", "billing"]
        assert split_tags(None) == []
        assert split_tags("") == []


@pytest.mark.unit
class TestDisplayDate:
    """Tests for the date fallback chain."""

    def test_live_eta_wins(
        self, enricher: TicketEnricher, make_ticket: Callable[..., Ticket]
    ) -> None:
        """A live projection beats the stored ETA."""
        ticket = make_ticket("a1", stored_eta=date(2026, 3, 1))
        eta = ETAResult(tickets=[ETAProjection("a1", date(2026, 1, 20))])

        view = enricher.enrich([ticket], eta)[0]

        assert view.display_date == "Jan 20, 2026 (+5d)"
        assert view.date_label == "Est. Completion (Live)"
        assert view.relative_days == 5

    def test_stored_eta_fallback(
        self, enricher: TicketEnricher, make_ticket: Callable[..., Ticket]
    ) -> None:
        """Without a live projection the stored ETA is used."""
        ticket = make_ticket("a1", stored_eta=date(2026, 1, 12))

        view = enricher.enrich([ticket], ETAResult())[0]

        assert view.display_date == "Jan 12, 2026 (-3d)"
        assert view.date_label == "Est. Completion"

    def test_eta_today(self, enricher: TicketEnricher, make_ticket: Callable[..., Ticket]) -> None:
        """An ETA of today is labelled as such."""
        view = enricher.enrich([make_ticket("a1", stored_eta=TODAY)])[0]

        assert view.display_date == "Jan 15, 2026 (Today)"
        assert view.relative_days == 0

    def test_created_date_fallback(
        self, enricher: TicketEnricher, make_ticket: Callable[..., Ticket]
    ) -> None:
        """Without any ETA the created date is shown without a suffix."""
        ticket = make_ticket("a1", created_date=datetime(2025, 12, 1, 8, 0))

        view = enricher.enrich([ticket])[0]

        assert view.display_date == "Dec 01, 2025"
        assert view.date_label == "Created"
        assert view.relative_days is None

    def test_no_date(self, enricher: TicketEnricher, make_ticket: Callable[..., Ticket]) -> None:
        """No dates at all gives the placeholder."""
        view = enricher.enrich([make_ticket("a1")])[0]

        assert view.display_date == "—"
        assert view.date_label == "No Date"


@pytest.mark.unit
class TestCardValues:
    """Tests for the size, hours, priority and dependency values."""

    def test_size_and_hours(
        self, enricher: TicketEnricher, make_ticket: Callable[..., Ticket]
    ) -> None:
        """Whole numbers drop the decimal point."""
        ticket = make_ticket(
            "a1", developer_days_size=2.0, actual_hours=3.5, estimated_hours=8.0
        )

        view = enricher.enrich([ticket])[0]

        assert view.size_display == "2"
        assert view.hours_display == "3.5 / 8h"

    def test_missing_size_and_hours(
        self, enricher: TicketEnricher, make_ticket: Callable[..., Ticket]
    ) -> None:
        """Missing numbers use the placeholders."""
        view = enricher.enrich([make_ticket("a1")])[0]

        assert view.size_display == "--"
        assert view.hours_display == "0 / 0h"
        assert view.uat_display is None

    def test_priority_and_uat(
        self, enricher: TicketEnricher, make_ticket: Callable[..., Ticket]
    ) -> None:
        """High priority is flagged and UAT date shortened."""
        ticket = make_ticket("a1", priority="High", projected_uat_date=date(2026, 2, 9))

        view = enricher.enrich([ticket])[0]

        assert view.is_high_priority is True
        assert view.priority_class == "priority-badge priority-high"
        assert view.uat_display == "Feb 09"

    def test_dependencies_and_tags(
        self, enricher: TicketEnricher, make_ticket: Callable[..., Ticket]
    ) -> None:
        """Dependency links carry through and drive is_currently_blocked."""
        blocker = DependencyLink("a2", "T-0002", "d1")
        blocked = DependencyLink("a3", "T-0003", "d2")
        ticket = make_ticket("a1", blocked_by=(blocker,), blocking=(blocked,), tags="ui,api")

        view = enricher.enrich([ticket])[0]

        assert view.is_currently_blocked is True
        assert view.linked_ticket_ids == {"a2", "a3"}
        assert view.tags == ["ui", "api"]

    def test_order_preserved(
        self, enricher: TicketEnricher, make_ticket: Callable[..., Ticket]
    ) -> None:
        """Output follows input order."""
        views = enricher.enrich([make_ticket("b"), make_ticket("a"), make_ticket("c")])

        assert [v.id for v in views] == ["b", "a", "c"]
