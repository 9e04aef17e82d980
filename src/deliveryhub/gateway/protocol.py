"""DeliveryGateway - interface to the ticket backend."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

from deliveryhub.stages import Stage
from deliveryhub.tickets import (
    AiSuggestion,
    BlockerCandidate,
    Dependency,
    ETAResult,
    FieldSpec,
    Ticket,
)


class DeliveryGateway(Protocol):
    """Interface for the delivery backend.

    Every failure surfaces as a ``GatewayError`` subclass.
    """

    async def fetch_tickets(self) -> list[Ticket]:
        """All active tickets."""
        ...

    async def fetch_etas(
        self, dev_count: int, prioritized_ids: Sequence[str] | None = None
    ) -> ETAResult:
        """Projected completion dates for open tickets."""
        ...

    async def update_ticket_stage(self, ticket_id: str, new_stage: Stage) -> None:
        """Move a ticket to another stage."""
        ...

    async def update_ticket_sort_order(self, ticket_id: str, new_sort_order: float) -> None:
        """Write a ticket's fractional sort key."""
        ...

    async def reorder_ticket(self, ticket_id: str, new_stage: Stage, new_index: int) -> None:
        """Move a ticket to ``new_stage`` and insert it at ``new_index``."""
        ...

    async def get_required_fields_for_stage(self, target_stage: Stage) -> list[FieldSpec]:
        """Fields that must be set before entering ``target_stage``."""
        ...

    async def save_transition(
        self, ticket_id: str, target_stage: Stage, values: Mapping[str, Any]
    ) -> None:
        """Set field values and the new stage together."""
        ...

    async def create_dependency(self, blocked_id: str, blocking_id: str) -> Dependency:
        """Record that ``blocking_id`` blocks ``blocked_id``."""
        ...

    async def remove_dependency(self, dependency_id: str) -> None:
        """Delete a dependency edge."""
        ...

    async def search_potential_blockers(
        self, term: str, current_id: str, exclude_ids: Sequence[str]
    ) -> list[BlockerCandidate]:
        """Tickets matching ``term`` that could block ``current_id``."""
        ...

    async def post_status_comment(
        self, ticket_id: str, body: str, author: str | None = None
    ) -> None:
        """Attach a comment explaining a stage change."""
        ...

    async def create_ticket(self, fields: Mapping[str, Any]) -> Ticket:
        """Create a ticket from canonical field values."""
        ...

    async def link_files(self, ticket_id: str, file_ids: Sequence[str]) -> None:
        """Attach uploaded files to a ticket."""
        ...

    async def get_ai_enhanced_ticket_details(self, title: str, description: str) -> AiSuggestion:
        """Rewritten title and description suggested by the AI service."""
        ...

    async def close(self) -> None:
        """Release backend resources."""
        ...
