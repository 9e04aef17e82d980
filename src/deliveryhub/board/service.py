"""BoardService - composes the board engine over a delivery gateway."""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from datetime import date, datetime
from typing import Any

from deliveryhub.blocking import DependencyGraph, DependencyOperationError, SelfDependencyError
from deliveryhub.board.exceptions import BoardTicketNotFoundError
from deliveryhub.board.models import ActionResult, BoardSnapshot, TicketOptions
from deliveryhub.config import DEFAULT_VIEW, BoardConfig
from deliveryhub.enrichment import TicketEnricher, TicketView
from deliveryhub.gate import (
    GateCheckError,
    MissingFieldsError,
    StageUpdateError,
    TransitionGate,
    TransitionOutcome,
)
from deliveryhub.gateway import DeliveryGateway, GatewayError
from deliveryhub.logging import truncate_output
from deliveryhub.notifications import Notification, Severity
from deliveryhub.projection import Column, ColumnNotFoundError, PersonaViewProjector
from deliveryhub.reorder import DragState, DropKind, InvalidDropError, ReorderEngine, rebalance
from deliveryhub.stages import IllegalTransitionError, Persona, Stage
from deliveryhub.tickets import DEFAULT_PRIORITY, ETAResult, Ticket

logger = logging.getLogger(__name__)

GATE_CHECK_FAILED = "Could not check for stage requirements."
REQUEST_TIMEOUT = "Request timeout"


class BoardService:
    """The board as one user sees it.

    Holds the last fetched snapshot and runs every user action through the
    engine components. After each successful mutation the snapshot is
    re-fetched wholesale; mutations are serialised by a lock so each one
    sees the previous refresh.
    """

    def __init__(
        self,
        gateway: DeliveryGateway,
        config: BoardConfig,
        dev_count: int = 2,
        ai_timeout: float = 30.0,
        author: str | None = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        """Initialize the service.

        Args:
            gateway: Backend for reads and mutations.
            config: Board configuration.
            dev_count: Developers assumed by the ETA projection.
            ai_timeout: Seconds to wait for AI enhancement.
            author: Author recorded on status comments.
            today: Clock used for card dates.
        """
        if dev_count < 1:
            raise ValueError(f"dev_count must be at least 1, got {dev_count}")
        self.gateway = gateway
        self.config = config
        self.ai_timeout = ai_timeout
        self.projector = PersonaViewProjector(config)
        self.enricher = TicketEnricher(today)
        self.reorder_engine = ReorderEngine(config)
        self.gate = TransitionGate(gateway, author)
        self.dependencies = DependencyGraph(gateway)
        self.drag = DragState()
        self.prioritized_ids: list[str] = []
        self._dev_count = dev_count
        self._snapshot = BoardSnapshot()
        self._lock = asyncio.Lock()

    @property
    def snapshot(self) -> BoardSnapshot:
        return self._snapshot

    @property
    def dev_count(self) -> int:
        return self._dev_count

    # --- Reads ---

    async def refresh(self) -> BoardSnapshot:
        """Re-fetch tickets and ETAs and replace the snapshot."""
        async with self._lock:
            return await self._refresh()

    async def _refresh(self) -> BoardSnapshot:
        tickets, eta = await asyncio.gather(self._load_tickets(), self._load_etas())
        self._snapshot = BoardSnapshot(
            tickets=tuple(tickets),
            eta=eta,
            views=tuple(self.enricher.enrich(tickets, eta)),
            refreshed_at=datetime.now(),
        )
        logger.debug("Board refreshed: %d ticket(s)", len(tickets))
        return self._snapshot

    async def _load_tickets(self) -> list[Ticket]:
        try:
            return await self.gateway.fetch_tickets()
        except GatewayError:
            logger.exception("Fetching tickets failed")
            return []

    async def _load_etas(self) -> ETAResult:
        try:
            return await self.gateway.fetch_etas(self._dev_count, self.prioritized_ids or None)
        except GatewayError:
            logger.exception("Fetching ETAs failed")
            return ETAResult()

    async def set_dev_count(self, dev_count: int) -> BoardSnapshot:
        """Change the developer count and re-project ETAs.

        Raises:
            ValueError: If ``dev_count`` is less than 1.
        """
        if dev_count < 1:
            raise ValueError(f"dev_count must be at least 1, got {dev_count}")
        async with self._lock:
            self._dev_count = dev_count
            logger.info("Developer count set to %d", dev_count)
            return await self._refresh()

    async def set_prioritized(self, ticket_ids: Sequence[str]) -> BoardSnapshot:
        """Schedule ``ticket_ids`` ahead of everything else in the ETA projection."""
        async with self._lock:
            self.prioritized_ids = list(dict.fromkeys(ticket_ids))
            return await self._refresh()

    def columns(
        self,
        persona: Persona,
        view: str = DEFAULT_VIEW,
        show_extended: bool = False,
        intention: str | None = None,
        hide_empty: bool = False,
    ) -> list[Column]:
        """Columns of one persona view over the current snapshot.

        Raises:
            ViewNotFoundError: If ``view`` is not defined for ``persona``.
        """
        return self.projector.build_columns(
            persona, view, show_extended, intention, self._snapshot.views, hide_empty
        )

    def ticket(self, ticket_id: str) -> TicketView:
        """Enriched ticket from the current snapshot.

        Raises:
            BoardTicketNotFoundError: If the ticket is not on the board.
        """
        for view in self._snapshot.views:
            if view.id == ticket_id:
                return view
        raise BoardTicketNotFoundError(f"Ticket '{ticket_id}' is not on the board")

    def options(self, ticket_id: str, persona: Persona) -> TicketOptions:
        """Advance and backtrack moves for the selected ticket.

        Raises:
            BoardTicketNotFoundError: If the ticket is not on the board.
        """
        stage = self.ticket(ticket_id).stage
        graph = self.config.stage_graph
        return TicketOptions(
            advance=graph.get_advance_options(stage, persona),
            backtrack=graph.get_backtrack_options(stage, persona),
        )

    # --- Stage changes ---

    async def transition(
        self,
        ticket_id: str,
        target_stage: Stage,
        comment: str | None = None,
        persona: Persona | None = None,
    ) -> ActionResult:
        """Move a ticket through the transition gate.

        When ``persona`` is given the move must be one of its offered options.

        Raises:
            BoardTicketNotFoundError: If ``persona`` is given and the ticket
                is not on the board.
            IllegalTransitionError: If the move is not offered to ``persona``.
        """
        if persona is not None:
            current = self.ticket(ticket_id).stage
            if not self.config.stage_graph.is_legal(current, target_stage, persona):
                raise IllegalTransitionError(
                    f"{persona} cannot move {ticket_id} from {current} to {target_stage}"
                )

        async with self._lock:
            try:
                outcome = await self.gate.request(ticket_id, target_stage, comment)
            except GateCheckError:
                return ActionResult(success=False, notification=Notification.error(GATE_CHECK_FAILED))
            except StageUpdateError:
                return ActionResult(
                    success=False, notification=Notification.error("Failed to update ticket.")
                )
            if not outcome.committed:
                return ActionResult(success=True, outcome=outcome, notification=_input_needed(outcome))
            await self._refresh()

        if outcome.comment_saved:
            message = "Ticket moved and comment added."
        else:
            message = f"Ticket moved to {target_stage}."
        return ActionResult(success=True, outcome=outcome, notification=Notification.success(message))

    async def complete_transition(
        self,
        ticket_id: str,
        target_stage: Stage,
        values: Mapping[str, Any],
        comment: str | None = None,
    ) -> ActionResult:
        """Save the required field values and the new stage together."""
        async with self._lock:
            try:
                pending = await self.gate.prepare(ticket_id, target_stage)
                outcome = await self.gate.complete(pending, values, comment)
            except GateCheckError:
                return ActionResult(success=False, notification=Notification.error(GATE_CHECK_FAILED))
            except MissingFieldsError as e:
                return ActionResult(
                    success=False,
                    notification=Notification.error(
                        "Please fill in: " + ", ".join(e.missing), title="Error Saving Ticket"
                    ),
                )
            except StageUpdateError:
                return ActionResult(
                    success=False,
                    notification=Notification.error(
                        "Please review the fields and try again.", title="Error Saving Ticket"
                    ),
                )
            await self._refresh()

        if outcome.comment_saved:
            message = "Ticket updated and comment saved."
        else:
            message = "Ticket moved successfully."
        return ActionResult(success=True, outcome=outcome, notification=Notification.success(message))

    # --- Drag and drop ---

    async def drop(
        self,
        ticket_id: str,
        persona: Persona,
        source_column: str,
        target_column: str,
        drop_index: int | None = None,
        view: str = DEFAULT_VIEW,
        show_extended: bool = False,
        intention: str | None = None,
    ) -> ActionResult:
        """Handle a card dropped onto a column.

        Args:
            ticket_id: Dragged ticket.
            persona: Persona whose board the drop happened on.
            source_column: Column key the drag started in.
            target_column: Column key the card was dropped into.
            drop_index: Slot in the target column, None for the end.
            view: Board view the columns belong to.
            show_extended: Whether extended columns were visible.
            intention: Active intention filter.

        Raises:
            ViewNotFoundError: If ``view`` is not defined for ``persona``.
            ColumnNotFoundError: If either column is not in the view.
            InvalidDropError: If the ticket is not shown in ``source_column``.
            DragInProgressError: If another drop is still being handled.
        """
        columns = {c.key: c for c in self.columns(persona, view, show_extended, intention)}
        for key in (source_column, target_column):
            if key not in columns:
                raise ColumnNotFoundError(f"Column '{key}' is not shown in view '{view}'")
        source, target = columns[source_column], columns[target_column]
        if ticket_id not in source.ticket_ids:
            raise InvalidDropError(f"Ticket '{ticket_id}' is not in column '{source_column}'")

        with self.drag.session(ticket_id):
            self.drag.hover(target.key, drop_index)
            try:
                plan = self.reorder_engine.plan_drop(ticket_id, source, target, drop_index, persona)
            except InvalidDropError as e:
                logger.warning("Drop of %s rejected: %s", ticket_id, e)
                return ActionResult(
                    success=False, notification=Notification.error("Invalid target stage.")
                )

            async with self._lock:
                if plan.kind == DropKind.REORDER:
                    # Respacing covers tickets hidden by the intention filter too.
                    members = target
                    if intention:
                        members = {c.key: c for c in self.columns(persona, view, show_extended)}[
                            target.key
                        ]
                    return await self._reorder_within(
                        target, members, ticket_id, plan.new_sort_order, drop_index
                    )
                return await self._move_between(ticket_id, plan.target_stage, plan.new_index)

    async def _reorder_within(
        self,
        visible: Column,
        members: Column,
        ticket_id: str,
        new_sort_order: float,
        drop_index: int | None,
    ) -> ActionResult:
        try:
            await self.gateway.update_ticket_sort_order(ticket_id, new_sort_order)
            if self.reorder_engine.rebalance_needed(visible, ticket_id, new_sort_order):
                await self._rebalance(visible, members, ticket_id, drop_index)
        except GatewayError as e:
            logger.error("Reordering %s failed: %s", ticket_id, e)
            return ActionResult(
                success=False, notification=Notification.error("Failed to reorder ticket.")
            )
        await self._refresh()
        return ActionResult(success=True, notification=Notification.success("Ticket reordered."))

    async def _rebalance(
        self, visible: Column, members: Column, ticket_id: str, drop_index: int | None
    ) -> None:
        """Renumber every ticket of the column with the dragged one at its new slot.

        ``drop_index`` counts visible tickets; the dragged ticket goes just
        before the visible neighbour at that slot, or after the last one.
        """
        neighbours = [tid for tid in visible.ticket_ids if tid != ticket_id]
        index = len(neighbours) if drop_index is None else max(0, min(drop_index, len(neighbours)))
        by_id = {t.id: t for t in members.tickets}
        ordered = [t for t in members.tickets if t.id != ticket_id]
        position = [t.id for t in ordered]
        if index < len(neighbours):
            slot = position.index(neighbours[index])
        elif neighbours:
            slot = position.index(neighbours[-1]) + 1
        else:
            slot = len(ordered)
        ordered.insert(slot, by_id[ticket_id])
        keys = rebalance(ordered)
        logger.info("Rebalancing %d sort key(s) in %s", len(keys), members.key)
        for tid, value in keys.items():
            await self.gateway.update_ticket_sort_order(tid, value)

    async def _move_between(self, ticket_id: str, stage: Stage, new_index: int) -> ActionResult:
        commit = functools.partial(self.gateway.reorder_ticket, ticket_id, stage, new_index)
        try:
            outcome = await self.gate.request(ticket_id, stage, commit=commit)
        except GateCheckError:
            return ActionResult(success=False, notification=Notification.error(GATE_CHECK_FAILED))
        except StageUpdateError as e:
            return ActionResult(
                success=False,
                notification=Notification.error(str(e) or "An unknown error occurred.", title="Move Failed"),
            )
        if not outcome.committed:
            return ActionResult(success=True, outcome=outcome, notification=_input_needed(outcome))
        await self._refresh()
        return ActionResult(success=True, outcome=outcome, notification=Notification.success("Ticket moved."))

    # --- Intake ---

    async def create_ticket(
        self,
        title: str,
        description: str = "",
        priority: str | None = None,
        intention: str | None = None,
        file_ids: Iterable[str] = (),
    ) -> ActionResult:
        """Create a Backlog ticket and attach any uploaded files.

        A failure to attach files does not undo the ticket.
        """
        fields: dict[str, Any] = {
            "title": title,
            "description": description,
            "priority": priority or DEFAULT_PRIORITY.value,
        }
        if intention:
            fields["intention"] = intention

        async with self._lock:
            try:
                ticket = await self.gateway.create_ticket(fields)
            except GatewayError as e:
                logger.error("Creating ticket failed: %s", e)
                return ActionResult(
                    success=False,
                    notification=Notification.error(str(e), title="Error Creating Ticket"),
                )
            logger.info("Ticket %s created", ticket.name)

            notification = Notification.success(f"{ticket.name} created.", title="Ticket Created")
            files = list(file_ids)
            if files:
                try:
                    await self.gateway.link_files(ticket.id, files)
                except GatewayError as e:
                    logger.warning("Linking %d file(s) to %s failed: %s", len(files), ticket.id, e)
                    notification = Notification.warning(
                        f"{ticket.name} created, but its files could not be attached.",
                        title="Ticket Created",
                    )
            await self._refresh()
        return ActionResult(success=True, ticket=ticket, notification=notification)

    async def enhance(self, title: str, description: str) -> ActionResult:
        """Ask the AI service to rewrite a draft ticket."""
        title = title or ""
        description = description or ""
        if not title.strip() and not description.strip():
            return ActionResult(
                success=False,
                notification=Notification.warning(
                    "Please provide a title or description.", title="Input Required"
                ),
            )

        try:
            suggestion = await asyncio.wait_for(
                self.gateway.get_ai_enhanced_ticket_details(title, description),
                timeout=self.ai_timeout,
            )
        except TimeoutError:
            logger.warning("AI enhancement timed out after %.0fs", self.ai_timeout)
            return _ai_error(REQUEST_TIMEOUT)
        except GatewayError as e:
            logger.error("AI enhancement failed: %s", e)
            return _ai_error(str(e) or "Could not retrieve AI suggestions.")

        if suggestion is None or suggestion.is_empty:
            logger.warning("AI enhancement returned no suggestions")
            return _ai_error("AI service returned empty suggestions.")

        logger.debug("AI suggestion: %s", truncate_output(str(suggestion)))
        return ActionResult(
            success=True,
            suggestion=suggestion,
            notification=Notification.success("AI suggestions generated successfully!"),
        )

    # --- Dependencies ---

    async def search_blockers(
        self, ticket_id: str, term: str, exclude_ids: Iterable[str] = ()
    ) -> ActionResult:
        """Tickets matching ``term`` that could block ``ticket_id``."""
        try:
            current: TicketView | str = self.ticket(ticket_id)
        except BoardTicketNotFoundError:
            current = ticket_id
        try:
            candidates = await self.dependencies.search(term, current, list(exclude_ids))
        except DependencyOperationError as e:
            return ActionResult(success=False, notification=Notification.error(str(e)))
        return ActionResult(success=True, candidates=candidates)

    async def add_blocker(self, blocked_id: str, blocking_id: str) -> ActionResult:
        """Record that ``blocking_id`` blocks ``blocked_id``."""
        async with self._lock:
            try:
                dependency = await self.dependencies.create_edge(blocked_id, blocking_id)
            except SelfDependencyError as e:
                return ActionResult(success=False, notification=Notification.warning(str(e)))
            except DependencyOperationError as e:
                return ActionResult(success=False, notification=Notification.error(str(e)))
            await self._refresh()
        return ActionResult(
            success=True, dependency=dependency, notification=Notification.success("Blocker added.")
        )

    async def remove_blocker(self, dependency_id: str) -> ActionResult:
        """Delete a dependency edge."""
        async with self._lock:
            try:
                await self.dependencies.remove_edge(dependency_id)
            except DependencyOperationError as e:
                return ActionResult(success=False, notification=Notification.error(str(e)))
            await self._refresh()
        return ActionResult(success=True, notification=Notification.success("Dependency removed."))


def _input_needed(outcome: TransitionOutcome) -> Notification:
    labels = ", ".join(f.label for f in outcome.fields)
    return Notification(
        title="Input Required",
        message=f"Fill in {labels} to move this ticket to {outcome.target_stage}.",
        severity=Severity.INFO,
    )


def _ai_error(message: str) -> ActionResult:
    return ActionResult(success=False, notification=Notification.error(message, title="AI Error"))
