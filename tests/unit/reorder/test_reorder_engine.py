"""Unit tests for drop planning, sort keys and drag state."""

from collections.abc import Callable

import pytest

from deliveryhub.config import BoardConfig
from deliveryhub.enrichment import TicketView
from deliveryhub.projection import Column
from deliveryhub.reorder import (
    DragInProgressError,
    DragState,
    DropKind,
    InvalidDropError,
    ReorderEngine,
    midpoint,
    needs_rebalance,
    rebalance,
)
from deliveryhub.stages import NEUTRAL_COLUMN_STYLE, Persona, Stage


def _column(key: str, stages: tuple[Stage, ...], tickets: list[TicketView]) -> Column:
    return Column(
        key=key,
        display_name=key,
        member_stages=stages,
        style=NEUTRAL_COLUMN_STYLE,
        owner="Developer",
        tickets=tickets,
    )


@pytest.fixture
def engine(board_config: BoardConfig) -> ReorderEngine:
    return ReorderEngine(board_config)


@pytest.fixture
def dev_queue(make_view: Callable[..., TicketView]) -> Column:
    """Dev Queue column holding a (1), b (2), c (3)."""
    tickets = [
        make_view(tid, Stage.READY_FOR_DEVELOPMENT, sort_order=order)
        for tid, order in (("a", 1.0), ("b", 2.0), ("c", 3.0))
    ]
    return _column("Dev Queue", (Stage.READY_FOR_DEVELOPMENT,), tickets)


@pytest.mark.unit
class TestSortKeyHelpers:
    """Tests for midpoint, needs_rebalance and rebalance."""

    def test_midpoint(self) -> None:
        """Between two keys, or one past the last."""
        assert midpoint(1.0, 2.0) == 1.5
        assert midpoint(0, 1.0) == 0.5
        assert midpoint(3.0, None) == 4.0

    @pytest.mark.parametrize(
        ("low", "high"),
        [(0.0, 1.0), (1.0, 1.001), (-3.5, 2.25), (1000.0, 1000.5), (0.1, 0.3)],
    )
    def test_midpoint_strictly_between(self, low: float, high: float) -> None:
        """The key always falls strictly between distinct neighbours."""
        assert low < midpoint(low, high) < high
        assert midpoint(high, None) > high

    def test_needs_rebalance(self) -> None:
        """Neighbours closer than the gap trigger a rebalance."""
        assert not needs_rebalance([1.0, 2.0, 3.0])
        assert needs_rebalance([1.0, 1.0 + 1e-9])
        assert needs_rebalance([None, 0.0])
        assert not needs_rebalance([])

    def test_rebalance(self, make_view: Callable[..., TicketView]) -> None:
        """Keys are re-spaced in the given order."""
        tickets = [make_view("x", sort_order=0.5), make_view("y", sort_order=0.5000001)]

        assert rebalance(tickets) == {"x": 1.0, "y": 2.0}
        assert rebalance(tickets, step=10.0) == {"x": 10.0, "y": 20.0}


@pytest.mark.unit
class TestPlanDropReorder:
    """Tests for drops inside the same column."""

    def test_move_to_top(self, engine: ReorderEngine, dev_queue: Column) -> None:
        """Dropping first halves the first key."""
        plan = engine.plan_drop("c", dev_queue, dev_queue, 0, Persona.DEVELOPER)

        assert plan.kind is DropKind.REORDER
        assert plan.new_sort_order == 0.5
        assert plan.target_stage is None

    def test_move_between(self, engine: ReorderEngine, dev_queue: Column) -> None:
        """Dropping between two tickets takes their midpoint."""
        plan = engine.plan_drop("a", dev_queue, dev_queue, 1, Persona.DEVELOPER)

        assert plan.new_sort_order == 2.5

    def test_move_to_end(self, engine: ReorderEngine, dev_queue: Column) -> None:
        """No index, or one past the end, appends."""
        for drop_index in (None, 99):
            plan = engine.plan_drop("a", dev_queue, dev_queue, drop_index, Persona.DEVELOPER)
            assert plan.new_sort_order == 4.0

    def test_rebalance_needed(self, engine: ReorderEngine, dev_queue: Column) -> None:
        """A key colliding with a neighbour needs rebalancing."""
        assert not engine.rebalance_needed(dev_queue, "c", 1.5)
        assert engine.rebalance_needed(dev_queue, "c", 2.0)


@pytest.mark.unit
class TestPlanDropStageChange:
    """Tests for drops into another column."""

    def test_moves_to_first_stage(
        self, engine: ReorderEngine, dev_queue: Column, make_view: Callable[..., TicketView]
    ) -> None:
        """The first member stage of the target column is used."""
        backlog = _column(
            "Backlog",
            (Stage.BACKLOG, Stage.SCOPING_IN_PROGRESS),
            [make_view("x", Stage.SCOPING_IN_PROGRESS)],
        )

        plan = engine.plan_drop("a", dev_queue, backlog, 0, Persona.DEVELOPER)

        assert plan.kind is DropKind.STAGE_CHANGE
        assert plan.target_stage is Stage.BACKLOG
        assert plan.new_index == 0
        assert plan.target_column == "Backlog"

    def test_empty_column_takes_first_stage(
        self, engine: ReorderEngine, dev_queue: Column
    ) -> None:
        """An empty two-stage column receives the ticket in its first stage at slot 0."""
        backlog = _column("Backlog", (Stage.BACKLOG, Stage.SCOPING_IN_PROGRESS), [])

        plan = engine.plan_drop("a", dev_queue, backlog, None, Persona.DEVELOPER)

        assert plan.kind is DropKind.STAGE_CHANGE
        assert plan.target_stage is Stage.BACKLOG
        assert plan.new_index == 0

    def test_index_clamped(self, engine: ReorderEngine, dev_queue: Column) -> None:
        """Indexes past the end insert at the end."""
        dev_work = _column("Dev Work", (Stage.IN_DEVELOPMENT,), [])

        plan = engine.plan_drop("a", dev_queue, dev_work, 5, Persona.DEVELOPER)

        assert plan.new_index == 0
        assert plan.target_stage is Stage.IN_DEVELOPMENT

    def test_column_without_stage(self, engine: ReorderEngine, dev_queue: Column) -> None:
        """A column unknown to the persona cannot accept drops."""
        ghost = _column("Ghost", (), [])

        with pytest.raises(InvalidDropError):
            engine.plan_drop("a", dev_queue, ghost, 0, Persona.DEVELOPER)


@pytest.mark.unit
class TestDragState:
    """Tests for DragState."""

    def test_begin_hover_clear(self) -> None:
        """State is tracked and cleared."""
        drag = DragState()
        drag.begin("a")
        drag.hover("Dev Work", 2)

        assert drag.active
        assert (drag.highlighted_column, drag.placeholder_index) == ("Dev Work", 2)

        drag.clear()
        assert drag == DragState()

    def test_second_drag_rejected(self) -> None:
        """Only one drag at a time."""
        drag = DragState()
        drag.begin("a")

        with pytest.raises(DragInProgressError):
            drag.begin("b")

    def test_session_clears_on_error(self) -> None:
        """The session clears state even when the drop fails."""
        drag = DragState()

        with pytest.raises(RuntimeError), drag.session("a"):
            assert drag.dragged_ticket_id == "a"
            raise RuntimeError("drop failed")

        assert not drag.active
