"""Integration tests for BoardService over the local ticket store."""

from collections.abc import Iterator
from datetime import date

import pytest

from deliveryhub.board import BoardService
from deliveryhub.config import BoardConfig
from deliveryhub.reorder import InvalidDropError
from deliveryhub.stages import Persona, Stage
from deliveryhub.state_store import EtaScheduler, LocalDeliveryGateway, TicketStore
from deliveryhub.tickets import FieldSpec

TODAY = date(2026, 1, 15)


@pytest.fixture
def store() -> Iterator[TicketStore]:
    """In-memory store for testing."""
    store = TicketStore(":memory:")
    yield store
    store.close()


@pytest.fixture
def service(store: TicketStore, board_config: BoardConfig) -> BoardService:
    gateway = LocalDeliveryGateway(store, EtaScheduler(today=TODAY))
    return BoardService(gateway, board_config, dev_count=1, author="Dana", today=lambda: TODAY)


def _column_ids(service: BoardService, key: str) -> list[str]:
    columns = {c.key: c for c in service.columns(Persona.DEVELOPER)}
    return [t.id for t in columns[key].tickets]


@pytest.mark.integration
class TestGatedTransition:
    """Required fields block a move until they are supplied."""

    @pytest.mark.asyncio
    async def test_required_fields_full_flow(
        self, service: BoardService, store: TicketStore
    ) -> None:
        """Request -> Needs input -> Complete flow."""
        store.set_required_fields(
            Stage.READY_FOR_QA, [FieldSpec("estimated_hours", "Estimated Hours", "number")]
        )
        ticket = store.create_ticket("Export invoices", stage=Stage.IN_DEVELOPMENT)
        await service.refresh()

        # 1. Request: held back
        requested = await service.transition(ticket.id, Stage.READY_FOR_QA)
        assert not requested.outcome.committed
        assert store.get_ticket(ticket.id).stage is Stage.IN_DEVELOPMENT

        # 2. Complete with a blank value: still held back
        blank = await service.complete_transition(
            ticket.id, Stage.READY_FOR_QA, {"estimated_hours": ""}
        )
        assert not blank.success

        # 3. Complete with values and a comment
        done = await service.complete_transition(
            ticket.id, Stage.READY_FOR_QA, {"estimated_hours": 6}, comment="Ready for testing"
        )
        assert done.success
        saved = store.get_ticket(ticket.id)
        assert (saved.stage, saved.estimated_hours) == (Stage.READY_FOR_QA, 6.0)
        [comment] = store.list_comments(ticket.id)
        assert (comment.body, comment.author) == ("Ready for testing", "Dana")
        assert service.ticket(ticket.id).stage is Stage.READY_FOR_QA

    @pytest.mark.asyncio
    async def test_drop_into_gated_column(
        self, service: BoardService, store: TicketStore
    ) -> None:
        """A drop onto a gated stage waits for input and moves nothing."""
        store.set_required_fields(Stage.IN_DEVELOPMENT, [FieldSpec("developer", "Developer")])
        ticket = store.create_ticket("Export invoices", stage=Stage.READY_FOR_DEVELOPMENT)
        await service.refresh()

        result = await service.drop(ticket.id, Persona.DEVELOPER, "Dev Queue", "Dev Work")

        assert result.success
        assert [f.name for f in result.outcome.fields] == ["developer"]
        assert _column_ids(service, "Dev Queue") == [ticket.id]


@pytest.mark.integration
class TestOrdering:
    """Sort keys written through drops."""

    @pytest.mark.asyncio
    async def test_midpoint_reorders(self, service: BoardService, store: TicketStore) -> None:
        """A card dropped between two others lands between them."""
        ids = [
            store.create_ticket(title, stage=Stage.READY_FOR_DEVELOPMENT).id
            for title in ("A", "B", "C")
        ]
        await service.refresh()

        await service.drop(ids[2], Persona.DEVELOPER, "Dev Queue", "Dev Queue", 1)

        assert _column_ids(service, "Dev Queue") == [ids[0], ids[2], ids[1]]
        assert store.get_ticket(ids[2]).sort_order == 1.5

    @pytest.mark.asyncio
    async def test_crowded_keys_rebalanced(
        self, service: BoardService, store: TicketStore
    ) -> None:
        """Keys closer than the minimum gap are respaced."""
        a, b, c = [
            store.create_ticket(title, stage=Stage.READY_FOR_DEVELOPMENT)
            for title in ("A", "B", "C")
        ]
        store.set_sort_orders({a.id: 1.0, b.id: 1.0000001, c.id: 9.0})
        await service.refresh()

        await service.drop(c.id, Persona.DEVELOPER, "Dev Queue", "Dev Queue", 1)

        assert [store.get_ticket(t.id).sort_order for t in (a, c, b)] == [1.0, 2.0, 3.0]
        assert _column_ids(service, "Dev Queue") == [a.id, c.id, b.id]

    @pytest.mark.asyncio
    async def test_drop_from_wrong_column_writes_nothing(
        self, service: BoardService, store: TicketStore
    ) -> None:
        """A ticket not in the source column keeps its stage and sort key."""
        a, b = [
            store.create_ticket(title, stage=Stage.READY_FOR_DEVELOPMENT) for title in ("A", "B")
        ]
        store.set_sort_orders({a.id: 1.0, b.id: 1.0})
        working = store.create_ticket("C", stage=Stage.IN_DEVELOPMENT)
        before = store.get_ticket(working.id).sort_order
        await service.refresh()

        with pytest.raises(InvalidDropError):
            await service.drop(working.id, Persona.DEVELOPER, "Dev Queue", "Dev Queue", 0)

        saved = store.get_ticket(working.id)
        assert (saved.stage, saved.sort_order) == (Stage.IN_DEVELOPMENT, before)
        assert [store.get_ticket(t.id).sort_order for t in (a, b)] == [1.0, 1.0]


@pytest.mark.integration
class TestProjection:
    """ETAs flow from the scheduler onto the cards."""

    @pytest.mark.asyncio
    async def test_prioritized_ticket_pushes_others_back(
        self, service: BoardService, store: TicketStore
    ) -> None:
        """Prioritizing a ticket reports the tickets it delays."""
        high = store.create_ticket("Urgent", priority="High", developer_days_size=1)
        low = store.create_ticket("Later", priority="Low", developer_days_size=1)

        snapshot = await service.set_prioritized([low.id])

        etas = snapshot.eta.by_ticket()
        assert etas[low.id] < etas[high.id]
        assert snapshot.eta.pushed_back == [high.id]
        assert store.get_ticket(low.id).stored_eta == etas[low.id]
