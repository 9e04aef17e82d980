"""Unit tests for TicketStore."""

from collections.abc import Iterator
from datetime import date

import pytest

from deliveryhub.stages import Stage
from deliveryhub.state_store import (
    DependencyExistsError,
    DependencyNotFoundError,
    InvalidTicketFieldError,
    TicketNotFoundError,
    TicketStore,
)
from deliveryhub.tickets import FieldSpec


@pytest.fixture
def store() -> Iterator[TicketStore]:
    """In-memory store for testing."""
    store = TicketStore(":memory:")
    yield store
    store.close()


@pytest.mark.unit
class TestCreateTicket:
    """Tests for ticket creation and lookup."""

    def test_create_assigns_name_and_defaults(self, store: TicketStore) -> None:
        """New tickets get a sequential name, Backlog and Medium priority."""
        first = store.create_ticket("Export invoices")
        second = store.create_ticket("Import payments", "From the bank feed", "High")

        assert (first.name, second.name) == ("T-0001", "T-0002")
        assert first.stage is Stage.BACKLOG
        assert first.priority == "Medium"
        assert second.priority == "High"
        assert (first.sort_order, second.sort_order) == (1.0, 2.0)
        assert first.created_date is not None

    def test_create_with_extra_fields(self, store: TicketStore) -> None:
        """Writable fields are coerced to their column types."""
        ticket = store.create_ticket(
            "Export invoices",
            intention="Will Do",
            developer_days_size="2.5",
            projected_uat_date="2026-02-01",
        )

        assert ticket.intention == "Will Do"
        assert ticket.developer_days_size == 2.5
        assert ticket.projected_uat_date == date(2026, 2, 1)

    def test_create_rejects_unknown_field(self, store: TicketStore) -> None:
        """Unknown fields are rejected and nothing is stored."""
        with pytest.raises(InvalidTicketFieldError, match="colour"):
            store.create_ticket("Export invoices", colour="red")

        assert store.list_tickets() == []

    def test_create_rejects_bad_value(self, store: TicketStore) -> None:
        """Unparseable values are rejected."""
        with pytest.raises(InvalidTicketFieldError):
            store.create_ticket("Export invoices", estimated_hours="lots")

    def test_get_missing(self, store: TicketStore) -> None:
        """Missing tickets raise."""
        with pytest.raises(TicketNotFoundError):
            store.get_ticket("nope")

    def test_list_hides_inactive(self, store: TicketStore) -> None:
        """Inactive tickets are only listed on request."""
        store.create_ticket("Visible")
        store.create_ticket("Archived", is_active=False)

        assert [t.title for t in store.list_tickets()] == ["Visible"]
        assert len(store.list_tickets(active_only=False)) == 2


@pytest.mark.unit
class TestUpdates:
    """Tests for stage, sort order and field updates."""

    def test_update_stage(self, store: TicketStore) -> None:
        """The stage is written."""
        ticket = store.create_ticket("Export invoices")

        store.update_stage(ticket.id, Stage.READY_FOR_SIZING)

        assert store.get_ticket(ticket.id).stage is Stage.READY_FOR_SIZING

    def test_update_stage_missing(self, store: TicketStore) -> None:
        """Updating a missing ticket raises."""
        with pytest.raises(TicketNotFoundError):
            store.update_stage("nope", Stage.DONE)

    def test_set_sort_orders_is_all_or_nothing(self, store: TicketStore) -> None:
        """One missing id leaves every key unchanged."""
        ticket = store.create_ticket("Export invoices")

        with pytest.raises(TicketNotFoundError):
            store.set_sort_orders({ticket.id: 9.0, "nope": 1.0})

        assert store.get_ticket(ticket.id).sort_order == 1.0

    def test_update_sort_order(self, store: TicketStore) -> None:
        """A single key is written."""
        ticket = store.create_ticket("Export invoices")

        store.update_sort_order(ticket.id, 0.25)

        assert store.get_ticket(ticket.id).sort_order == 0.25

    def test_reorder_inserts_and_renumbers(self, store: TicketStore) -> None:
        """The target stage is renumbered with the ticket at the index."""
        a = store.create_ticket("A", stage=Stage.IN_DEVELOPMENT)
        b = store.create_ticket("B", stage=Stage.IN_DEVELOPMENT)
        moving = store.create_ticket("C")

        store.reorder(moving.id, Stage.IN_DEVELOPMENT, 1)

        in_dev = [t for t in store.list_tickets() if t.stage is Stage.IN_DEVELOPMENT]
        assert [(t.id, t.sort_order) for t in in_dev] == [
            (a.id, 1.0),
            (moving.id, 2.0),
            (b.id, 3.0),
        ]

    def test_reorder_clamps_index(self, store: TicketStore) -> None:
        """An index past the end appends."""
        a = store.create_ticket("A", stage=Stage.DONE)
        moving = store.create_ticket("B")

        store.reorder(moving.id, Stage.DONE, 50)

        assert store.get_ticket(moving.id).sort_order == 2.0
        assert store.get_ticket(a.id).sort_order == 1.0

    def test_save_transition(self, store: TicketStore) -> None:
        """Values and stage are written together."""
        ticket = store.create_ticket("Export invoices")

        store.save_transition(
            ticket.id, Stage.READY_FOR_QA, {"estimated_hours": "6", "tags": "api"}
        )

        saved = store.get_ticket(ticket.id)
        assert saved.stage is Stage.READY_FOR_QA
        assert saved.estimated_hours == 6.0
        assert saved.tags == "api"

    def test_save_transition_invalid_leaves_ticket(self, store: TicketStore) -> None:
        """A bad value rolls back the whole save."""
        ticket = store.create_ticket("Export invoices")

        with pytest.raises(InvalidTicketFieldError):
            store.save_transition(ticket.id, Stage.READY_FOR_QA, {"stored_eta": "someday"})

        assert store.get_ticket(ticket.id).stage is Stage.BACKLOG

    def test_save_without_stage_keeps_stage(self, store: TicketStore) -> None:
        """Field updates alone do not move the ticket."""
        ticket = store.create_ticket("Export invoices")

        store.save_transition(ticket.id, None, {"title": "Export invoices as CSV", "epic": ""})

        saved = store.get_ticket(ticket.id)
        assert saved.title == "Export invoices as CSV"
        assert saved.epic is None
        assert saved.stage is Stage.BACKLOG

    def test_store_etas_ignores_unknown(self, store: TicketStore) -> None:
        """Known tickets get their ETA; unknown ids are skipped."""
        ticket = store.create_ticket("Export invoices")

        store.store_etas({ticket.id: date(2026, 2, 2), "ghost": date(2026, 2, 3)})

        assert store.get_ticket(ticket.id).stored_eta == date(2026, 2, 2)


@pytest.mark.unit
class TestSearch:
    """Tests for search_tickets."""

    def test_matches_name_or_title(self, store: TicketStore) -> None:
        """Case-insensitive match on name or title, ordered by name."""
        a = store.create_ticket("Export invoices")
        b = store.create_ticket("Invoice archive")
        store.create_ticket("Payments")

        assert [t.id for t in store.search_tickets("INVOICE")] == [a.id, b.id]
        assert [t.id for t in store.search_tickets("T-0002")] == [b.id]

    def test_excludes_ids_and_inactive(self, store: TicketStore) -> None:
        """Excluded and inactive tickets are not returned."""
        a = store.create_ticket("Export invoices")
        store.create_ticket("Invoice archive", is_active=False)

        assert store.search_tickets("invoice", exclude_ids=[a.id]) == []


@pytest.mark.unit
class TestDependencies:
    """Tests for dependency edges."""

    def test_add_and_hydrate(self, store: TicketStore) -> None:
        """Edges show up on both tickets with names."""
        blocked = store.create_ticket("Release")
        blocker = store.create_ticket("Migration")

        dep = store.add_dependency(blocked.id, blocker.id)

        assert store.list_dependencies() == [dep]
        [link] = store.get_ticket(blocked.id).blocked_by
        assert (link.ticket_id, link.name, link.dependency_id) == (blocker.id, "T-0002", dep.id)
        assert [link.ticket_id for link in store.get_ticket(blocker.id).blocking] == [blocked.id]

    def test_duplicate_edge(self, store: TicketStore) -> None:
        """The same edge cannot be added twice."""
        blocked = store.create_ticket("Release")
        blocker = store.create_ticket("Migration")
        store.add_dependency(blocked.id, blocker.id)

        with pytest.raises(DependencyExistsError):
            store.add_dependency(blocked.id, blocker.id)

    def test_missing_ticket(self, store: TicketStore) -> None:
        """Both ends must exist."""
        blocked = store.create_ticket("Release")

        with pytest.raises(TicketNotFoundError):
            store.add_dependency(blocked.id, "ghost")

    def test_remove(self, store: TicketStore) -> None:
        """Removed edges disappear; removing twice raises."""
        dep = store.add_dependency(
            store.create_ticket("Release").id, store.create_ticket("Migration").id
        )

        store.remove_dependency(dep.id)

        assert store.list_dependencies() == []
        with pytest.raises(DependencyNotFoundError):
            store.remove_dependency(dep.id)


@pytest.mark.unit
class TestCommentsFilesRequirements:
    """Tests for comments, file links and stage requirements."""

    def test_comments(self, store: TicketStore) -> None:
        """Comments are stored with author and source."""
        ticket = store.create_ticket("Export invoices")

        store.add_comment(ticket.id, "Moved to QA", author="Dana")

        [comment] = store.list_comments(ticket.id)
        assert (comment.body, comment.author, comment.source) == (
            "Moved to QA",
            "Dana",
            "DeliveryHub",
        )

    def test_comment_on_missing_ticket(self, store: TicketStore) -> None:
        """Comments need an existing ticket."""
        with pytest.raises(TicketNotFoundError):
            store.add_comment("ghost", "hello")

    def test_link_files_dedupes(self, store: TicketStore) -> None:
        """Files already linked are skipped."""
        ticket = store.create_ticket("Export invoices")

        store.link_files(ticket.id, ["f1", "f2", "f1"])
        store.link_files(ticket.id, ["f2", "f3"])

        assert store.list_files(ticket.id) == ["f1", "f2", "f3"]

    def test_required_fields_replace(self, store: TicketStore) -> None:
        """Setting requirements replaces the previous list, keeping order."""
        store.set_required_fields(
            Stage.READY_FOR_QA, [FieldSpec("estimated_hours", "Hours", "number")]
        )
        store.set_required_fields(
            Stage.READY_FOR_QA,
            [FieldSpec("tags", "Tags"), FieldSpec("estimated_hours", "Hours", "number")],
        )

        fields = store.required_fields(Stage.READY_FOR_QA)

        assert [f.name for f in fields] == ["tags", "estimated_hours"]
        assert fields[1].field_type == "number"
        assert store.required_fields(Stage.DONE) == []

    def test_required_fields_must_be_writable(self, store: TicketStore) -> None:
        """Requirements can only name writable fields."""
        with pytest.raises(InvalidTicketFieldError):
            store.set_required_fields(Stage.READY_FOR_QA, [FieldSpec("stage", "Stage")])
