"""LocalDeliveryGateway - DeliveryGateway over the SQLite ticket store."""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from deliveryhub import gateway as gw
from deliveryhub.stages import Stage
from deliveryhub.state_store import exceptions as store_errors
from deliveryhub.state_store.eta import EtaScheduler
from deliveryhub.state_store.store import TicketStore
from deliveryhub.tickets import (
    AiSuggestion,
    BlockerCandidate,
    Dependency,
    ETAResult,
    FieldSpec,
    Ticket,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class LocalDeliveryGateway:
    """Runs TicketStore calls in worker threads and maps store errors.

    Calculated ETAs are written back to the tickets so the board can show
    them after a restart.
    """

    def __init__(self, store: TicketStore, scheduler: EtaScheduler | None = None) -> None:
        self.store = store
        self.scheduler = scheduler or EtaScheduler()

    async def _run(self, fn: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        try:
            return await asyncio.to_thread(functools.partial(fn, *args, **kwargs))
        except store_errors.TicketNotFoundError as e:
            raise gw.TicketNotFoundError(str(e)) from e
        except store_errors.DependencyNotFoundError as e:
            raise gw.DependencyNotFoundError(str(e)) from e
        except store_errors.StateStoreError as e:
            raise gw.GatewayError(str(e)) from e
        except SQLAlchemyError as e:
            logger.exception("Database error in %s", getattr(fn, "__name__", fn))
            raise gw.GatewayError(f"Database error: {e}") from e

    async def fetch_tickets(self) -> list[Ticket]:
        return await self._run(self.store.list_tickets)

    async def fetch_etas(
        self, dev_count: int, prioritized_ids: Sequence[str] | None = None
    ) -> ETAResult:
        tickets = await self._run(self.store.list_tickets)
        try:
            result = self.scheduler.project(tickets, dev_count, prioritized_ids)
        except ValueError as e:
            raise gw.GatewayError(str(e)) from e
        await self._run(self.store.store_etas, result.by_ticket())
        logger.debug(
            "Projected %d ETA(s), %d pushed back", len(result.tickets), len(result.pushed_back)
        )
        return result

    async def update_ticket_stage(self, ticket_id: str, new_stage: Stage) -> None:
        await self._run(self.store.update_stage, ticket_id, new_stage)

    async def update_ticket_sort_order(self, ticket_id: str, new_sort_order: float) -> None:
        await self._run(self.store.update_sort_order, ticket_id, new_sort_order)

    async def reorder_ticket(self, ticket_id: str, new_stage: Stage, new_index: int) -> None:
        await self._run(self.store.reorder, ticket_id, new_stage, new_index)

    async def get_required_fields_for_stage(self, target_stage: Stage) -> list[FieldSpec]:
        return await self._run(self.store.required_fields, target_stage)

    async def save_transition(
        self, ticket_id: str, target_stage: Stage, values: Mapping[str, Any]
    ) -> None:
        await self._run(self.store.save_transition, ticket_id, target_stage, dict(values))

    async def create_dependency(self, blocked_id: str, blocking_id: str) -> Dependency:
        return await self._run(self.store.add_dependency, blocked_id, blocking_id)

    async def remove_dependency(self, dependency_id: str) -> None:
        await self._run(self.store.remove_dependency, dependency_id)

    async def search_potential_blockers(
        self, term: str, current_id: str, exclude_ids: Sequence[str]
    ) -> list[BlockerCandidate]:
        excluded = {*exclude_ids, current_id}
        hits = await self._run(self.store.search_tickets, term, excluded)
        return [
            BlockerCandidate(id=t.id, name=t.name, title=t.title, stage=t.stage.value)
            for t in hits
        ]

    async def post_status_comment(
        self, ticket_id: str, body: str, author: str | None = None
    ) -> None:
        await self._run(self.store.add_comment, ticket_id, body, author)

    async def create_ticket(self, fields: Mapping[str, Any]) -> Ticket:
        values = dict(fields)
        title = values.pop("title", "") or ""
        description = values.pop("description", "") or ""
        priority = values.pop("priority", None)
        return await self._run(
            self.store.create_ticket, title, description, priority, **values
        )

    async def link_files(self, ticket_id: str, file_ids: Sequence[str]) -> None:
        await self._run(self.store.link_files, ticket_id, list(file_ids))

    async def get_ai_enhanced_ticket_details(self, title: str, description: str) -> AiSuggestion:
        raise gw.AiEnhancementUnavailableError("AI enhancement is not available for the local store")

    async def close(self) -> None:
        await asyncio.to_thread(self.store.close)
