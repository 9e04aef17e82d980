"""HttpDeliveryGateway - talks to a remote delivery backend over JSON/HTTP."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from typing import Any

import httpx

from deliveryhub.gateway.exceptions import (
    DependencyNotFoundError,
    GatewayError,
    InvalidGatewayResponseError,
    TicketNotFoundError,
)
from deliveryhub.logging import redact, truncate_output
from deliveryhub.stages import Stage, StageError
from deliveryhub.tickets import (
    AiSuggestion,
    BlockerCandidate,
    Dependency,
    ETAResult,
    FieldMapper,
    FieldSpec,
    RecordMappingError,
    Ticket,
    blocker_from_payload,
    eta_result_from_payload,
    field_spec_from_payload,
)

logger = logging.getLogger(__name__)

COMMENT_SOURCE = "DeliveryHub"


class HttpDeliveryGateway:
    """DeliveryGateway backed by a remote REST service.

    Raw ticket records go through FieldMapper, so the backend may use
    namespaced or plain field names.
    """

    def __init__(
        self,
        base_url: str,
        token: str = "",
        timeout: float = 30.0,
        mapper: FieldMapper | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            base_url: Backend root, e.g. ``https://delivery.example.com/api``.
            token: Bearer token sent with every request.
            timeout: Per-request timeout in seconds.
            mapper: Field mapper for raw records.
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.mapper = mapper or FieldMapper()
        self._client: httpx.AsyncClient | None = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None:
            headers = {"Content-Type": "application/json"}
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                timeout=self.timeout,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        path: str,
        json: Any = None,
        params: Mapping[str, Any] | None = None,
        not_found: type[GatewayError] = TicketNotFoundError,
    ) -> Any:
        """Send one request and decode the JSON body.

        Raises:
            GatewayError: On transport failures and non-2xx responses; a 404
                raises ``not_found``.
        """
        try:
            response = await self.client.request(method, path, json=json, params=params)
        except httpx.HTTPError as e:
            raise GatewayError(f"{method} {path} failed: {e}") from e

        if response.status_code == 404:
            raise not_found(f"{method} {path}: not found")
        if not response.is_success:
            body = redact(truncate_output(response.text, 500), self.token)
            logger.error("%s %s -> %d: %s", method, path, response.status_code, body)
            raise GatewayError(f"{method} {path} failed: {response.status_code} - {body}")

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise InvalidGatewayResponseError(f"{method} {path}: response is not JSON") from e

    async def fetch_tickets(self) -> list[Ticket]:
        records = await self._request("GET", "/tickets")
        if not isinstance(records, list):
            raise InvalidGatewayResponseError("GET /tickets: expected a list")
        return self.mapper.tickets(records)

    async def fetch_etas(
        self, dev_count: int, prioritized_ids: Sequence[str] | None = None
    ) -> ETAResult:
        payload = await self._request(
            "POST",
            "/etas",
            json={"devCount": dev_count, "prioritizedTicketIds": list(prioritized_ids or [])},
        )
        try:
            return eta_result_from_payload(payload)
        except RecordMappingError as e:
            raise InvalidGatewayResponseError(f"POST /etas: {e}") from e

    async def update_ticket_stage(self, ticket_id: str, new_stage: Stage) -> None:
        await self._request(
            "PATCH", f"/tickets/{ticket_id}/stage", json={"newStage": new_stage.value}
        )

    async def update_ticket_sort_order(self, ticket_id: str, new_sort_order: float) -> None:
        await self._request(
            "PATCH", f"/tickets/{ticket_id}/sort-order", json={"newSortOrder": new_sort_order}
        )

    async def reorder_ticket(self, ticket_id: str, new_stage: Stage, new_index: int) -> None:
        await self._request(
            "POST",
            f"/tickets/{ticket_id}/reorder",
            json={"newStage": new_stage.value, "newIndex": new_index},
        )

    async def get_required_fields_for_stage(self, target_stage: Stage) -> list[FieldSpec]:
        payload = await self._request(
            "GET", "/required-fields", params={"targetStage": target_stage.value}
        )
        if payload is not None and not isinstance(payload, list):
            raise InvalidGatewayResponseError("GET /required-fields: expected a list")
        try:
            return [field_spec_from_payload(item) for item in payload or []]
        except RecordMappingError as e:
            raise InvalidGatewayResponseError(f"GET /required-fields: {e}") from e

    async def save_transition(
        self, ticket_id: str, target_stage: Stage, values: Mapping[str, Any]
    ) -> None:
        await self._request(
            "POST",
            f"/tickets/{ticket_id}/transition",
            json={"targetStage": target_stage.value, "fields": self.mapper.to_record(values)},
        )

    async def create_dependency(self, blocked_id: str, blocking_id: str) -> Dependency:
        payload = await self._request(
            "POST",
            "/dependencies",
            json={"blockedTicketId": blocked_id, "blockingTicketId": blocking_id},
        )
        if not isinstance(payload, dict):
            raise InvalidGatewayResponseError("POST /dependencies: expected an object")
        dependency_id = payload.get("Id") or payload.get("id")
        if not dependency_id:
            raise InvalidGatewayResponseError("POST /dependencies: no id in response")
        return Dependency(
            id=str(dependency_id), blocking_ticket_id=blocking_id, blocked_ticket_id=blocked_id
        )

    async def remove_dependency(self, dependency_id: str) -> None:
        await self._request(
            "DELETE", f"/dependencies/{dependency_id}", not_found=DependencyNotFoundError
        )

    async def search_potential_blockers(
        self, term: str, current_id: str, exclude_ids: Sequence[str]
    ) -> list[BlockerCandidate]:
        payload = await self._request(
            "GET",
            f"/tickets/{current_id}/potential-blockers",
            params={"term": term, "exclude": ",".join(exclude_ids)},
        )
        if payload is not None and not isinstance(payload, list):
            raise InvalidGatewayResponseError("GET potential-blockers: expected a list")
        try:
            return [blocker_from_payload(item, self.mapper) for item in payload or []]
        except RecordMappingError as e:
            raise InvalidGatewayResponseError(f"GET potential-blockers: {e}") from e

    async def post_status_comment(
        self, ticket_id: str, body: str, author: str | None = None
    ) -> None:
        await self._request(
            "POST",
            f"/tickets/{ticket_id}/comments",
            json={"body": body, "author": author or "", "source": COMMENT_SOURCE},
        )

    async def create_ticket(self, fields: Mapping[str, Any]) -> Ticket:
        record = await self._request("POST", "/tickets", json=self.mapper.to_record(fields))
        if not isinstance(record, dict):
            raise InvalidGatewayResponseError("POST /tickets: expected an object")
        try:
            return self.mapper.ticket(record)
        except (RecordMappingError, StageError) as e:
            raise InvalidGatewayResponseError(f"POST /tickets: {e}") from e

    async def link_files(self, ticket_id: str, file_ids: Sequence[str]) -> None:
        await self._request(
            "POST", f"/tickets/{ticket_id}/files", json={"contentDocumentIds": list(file_ids)}
        )

    async def get_ai_enhanced_ticket_details(self, title: str, description: str) -> AiSuggestion:
        payload = await self._request(
            "POST",
            "/ai/enhance",
            json={"currentTitle": title, "currentDescription": description},
        )
        if not isinstance(payload, dict):
            raise InvalidGatewayResponseError("POST /ai/enhance: expected an object")
        logger.debug("AI suggestion: %s", truncate_output(str(payload), 1000))
        estimated = payload.get("estimatedDays")
        return AiSuggestion(
            title=payload.get("title"),
            description=payload.get("description"),
            estimated_days=float(estimated) if estimated is not None else None,
        )
