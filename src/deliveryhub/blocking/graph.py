"""DependencyGraph - blocking / blocked-by edges between tickets."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Iterable, Mapping

from deliveryhub.blocking.exceptions import DependencyOperationError, SelfDependencyError
from deliveryhub.enrichment import TicketView
from deliveryhub.gateway import (
    DeliveryGateway,
    DependencyNotFoundError,
    GatewayError,
    TicketNotFoundError,
)
from deliveryhub.tickets import BlockerCandidate, Dependency, DependencyLink

logger = logging.getLogger(__name__)

MIN_SEARCH_LENGTH = 3


def link_map(
    dependencies: Iterable[Dependency], names: Mapping[str, str] | None = None
) -> tuple[dict[str, list[DependencyLink]], dict[str, list[DependencyLink]]]:
    """Group edges by ticket.

    Args:
        dependencies: Edges to group.
        names: Ticket id -> display name; ids are used when missing.

    Returns:
        ``(blocked_by, blocking)`` where ``blocked_by[t]`` lists the tickets
        blocking ``t`` and ``blocking[t]`` lists the tickets ``t`` blocks.
    """
    names = names or {}
    blocked_by: dict[str, list[DependencyLink]] = defaultdict(list)
    blocking: dict[str, list[DependencyLink]] = defaultdict(list)
    for dep in dependencies:
        blocked_by[dep.blocked_ticket_id].append(
            DependencyLink(
                ticket_id=dep.blocking_ticket_id,
                name=names.get(dep.blocking_ticket_id, dep.blocking_ticket_id),
                dependency_id=dep.id,
            )
        )
        blocking[dep.blocking_ticket_id].append(
            DependencyLink(
                ticket_id=dep.blocked_ticket_id,
                name=names.get(dep.blocked_ticket_id, dep.blocked_ticket_id),
                dependency_id=dep.id,
            )
        )
    return dict(blocked_by), dict(blocking)


class DependencyGraph:
    """Search, create and remove blocking edges through the gateway.

    Cycles are not rejected; only self edges are.
    """

    def __init__(self, gateway: DeliveryGateway) -> None:
        self.gateway = gateway

    async def search(
        self,
        term: str,
        current: TicketView | str,
        exclude_ids: Iterable[str] | None = None,
    ) -> list[BlockerCandidate]:
        """Find tickets that could block ``current``.

        Terms shorter than three characters return nothing without calling
        the backend. The current ticket and every ticket already linked to it
        are excluded.

        Raises:
            DependencyOperationError: If the backend search fails.
        """
        term = (term or "").strip()
        if len(term) < MIN_SEARCH_LENGTH:
            return []

        if isinstance(current, TicketView):
            current_id = current.id
            linked = current.linked_ticket_ids
        else:
            current_id = current
            linked = set()

        excluded = set(exclude_ids or ()) | linked | {current_id}
        try:
            results = await self.gateway.search_potential_blockers(
                term, current_id, sorted(excluded)
            )
        except GatewayError as e:
            logger.error("Blocker search for %s failed: %s", current_id, e)
            raise DependencyOperationError(f"Search failed: {e}") from e
        return [r for r in results if r.id not in excluded]

    async def create_edge(self, blocked_id: str, blocking_id: str) -> Dependency:
        """Record that ``blocking_id`` blocks ``blocked_id``.

        Raises:
            SelfDependencyError: If both ids are the same.
            TicketNotFoundError: If either ticket does not exist.
            DependencyOperationError: If the backend rejects the edge.
        """
        if blocked_id == blocking_id:
            raise SelfDependencyError(f"Ticket {blocked_id} cannot block itself")
        try:
            dependency = await self.gateway.create_dependency(blocked_id, blocking_id)
        except TicketNotFoundError:
            raise
        except GatewayError as e:
            logger.error("Creating dependency %s -> %s failed: %s", blocking_id, blocked_id, e)
            raise DependencyOperationError(f"Could not add blocker: {e}") from e
        logger.info("Ticket %s now blocks %s", blocking_id, blocked_id)
        return dependency

    async def remove_edge(self, dependency_id: str) -> None:
        """Delete a dependency edge.

        Raises:
            DependencyNotFoundError: If the edge does not exist.
            DependencyOperationError: If the backend fails.
        """
        try:
            await self.gateway.remove_dependency(dependency_id)
        except DependencyNotFoundError:
            raise
        except GatewayError as e:
            logger.error("Removing dependency %s failed: %s", dependency_id, e)
            raise DependencyOperationError(f"Could not remove dependency: {e}") from e
        logger.info("Dependency %s removed", dependency_id)
