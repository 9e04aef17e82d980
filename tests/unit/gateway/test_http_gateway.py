"""Unit tests for HttpDeliveryGateway."""

import json
from collections.abc import Callable
from datetime import date

import httpx
import pytest

from deliveryhub.board import BoardService
from deliveryhub.config import BoardConfig
from deliveryhub.gateway import (
    DependencyNotFoundError,
    GatewayError,
    HttpDeliveryGateway,
    InvalidGatewayResponseError,
    TicketNotFoundError,
)
from deliveryhub.stages import Stage
from deliveryhub.tickets import ETAResult

Handler = Callable[[httpx.Request], httpx.Response]


def _gateway(handler: Handler) -> HttpDeliveryGateway:
    gateway = HttpDeliveryGateway("https://delivery.test/api/", token="secret")
    gateway._client = httpx.AsyncClient(
        base_url=gateway.base_url, transport=httpx.MockTransport(handler)
    )
    return gateway


class Recorder:
    """Handler that records requests and replies with a fixed response."""

    def __init__(self, status_code: int = 200, payload: object = None, text: str | None = None):
        self.status_code = status_code
        self.payload = payload
        self.text = text
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.text is not None:
            return httpx.Response(self.status_code, text=self.text)
        if self.payload is None:
            return httpx.Response(self.status_code)
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_json(self) -> dict:
        return json.loads(self.last.content)


@pytest.mark.unit
class TestClient:
    """Tests for client setup and teardown."""

    def test_client_headers(self) -> None:
        """The lazily created client carries the bearer token."""
        gateway = HttpDeliveryGateway("https://delivery.test/api/", token="secret")

        client = gateway.client

        assert gateway.base_url == "https://delivery.test/api"
        assert client.headers["Authorization"] == "Bearer secret"
        assert gateway.client is client

    def test_no_token_no_header(self) -> None:
        """Without a token no Authorization header is sent."""
        gateway = HttpDeliveryGateway("https://delivery.test")

        assert "Authorization" not in gateway.client.headers

    @pytest.mark.asyncio
    async def test_close(self) -> None:
        """close releases the client and is safe to repeat."""
        gateway = _gateway(Recorder())

        await gateway.close()
        await gateway.close()

        assert gateway._client is None


@pytest.mark.unit
class TestErrors:
    """Tests for error mapping in _request."""

    @pytest.mark.asyncio
    async def test_not_found(self) -> None:
        """404 raises the not-found error for the resource."""
        gateway = _gateway(Recorder(404))

        with pytest.raises(TicketNotFoundError):
            await gateway.update_ticket_stage("a1", Stage.DONE)
        with pytest.raises(DependencyNotFoundError):
            await gateway.remove_dependency("d1")

    @pytest.mark.asyncio
    async def test_server_error_sanitized(self, caplog: pytest.LogCaptureFixture) -> None:
        """Non-2xx bodies are logged without credentials."""
        gateway = _gateway(Recorder(500, text="boom: Bearer leaked.token"))

        with pytest.raises(GatewayError, match="500"):
            await gateway.fetch_tickets()

        assert "leaked" not in caplog.text
        assert "Bearer [REDACTED]" in caplog.text

    @pytest.mark.asyncio
    async def test_server_error_hides_own_token(self, caplog: pytest.LogCaptureFixture) -> None:
        """A backend echoing the gateway's token does not leak it."""
        gateway = _gateway(Recorder(401, text="bad credentials: secret"))

        with pytest.raises(GatewayError) as excinfo:
            await gateway.fetch_tickets()

        assert "secret" not in caplog.text
        assert "secret" not in str(excinfo.value)

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        """Connection failures become gateway errors."""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(GatewayError, match="refused"):
            await _gateway(handler).fetch_tickets()

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        """A body that is not JSON is an invalid response."""
        gateway = _gateway(Recorder(200, text="<html>"))

        with pytest.raises(InvalidGatewayResponseError):
            await gateway.fetch_tickets()


@pytest.mark.unit
class TestReads:
    """Tests for the read operations."""

    @pytest.mark.asyncio
    async def test_fetch_tickets_maps_records(self) -> None:
        """Records are mapped and bad ones skipped."""
        recorder = Recorder(
            payload=[
                {"Id": "a1", "Name": "T-0001", "delivery__StageNamePk__c": "Backlog"},
                {"Id": "a2", "StageNamePk__c": "Nowhere"},
            ]
        )

        tickets = await _gateway(recorder).fetch_tickets()

        assert [(t.id, t.stage) for t in tickets] == [("a1", Stage.BACKLOG)]
        assert recorder.last.url.path == "/api/tickets"

    @pytest.mark.asyncio
    async def test_fetch_tickets_requires_list(self) -> None:
        """A non-list payload is rejected."""
        with pytest.raises(InvalidGatewayResponseError):
            await _gateway(Recorder(payload={"records": []})).fetch_tickets()

    @pytest.mark.asyncio
    async def test_fetch_etas(self) -> None:
        """ETA requests send the dev count and prioritized ids."""
        recorder = Recorder(
            payload={
                "tickets": [{"ticketId": "a1", "calculatedETA": "2026-02-02"}],
                "pushedBackTicketNumbers": ["T-0002"],
            }
        )

        result = await _gateway(recorder).fetch_etas(3, ["a1"])

        assert recorder.last_json == {"devCount": 3, "prioritizedTicketIds": ["a1"]}
        assert result.by_ticket() == {"a1": date(2026, 2, 2)}
        assert result.pushed_back == ["T-0002"]

    @pytest.mark.asyncio
    async def test_required_fields(self) -> None:
        """Required fields are requested per target stage."""
        recorder = Recorder(payload=[{"name": "estimated_hours", "label": "Hours"}])

        fields = await _gateway(recorder).get_required_fields_for_stage(Stage.READY_FOR_QA)

        assert [f.label for f in fields] == ["Hours"]
        assert recorder.last.url.params["targetStage"] == "Ready for QA"

    @pytest.mark.asyncio
    async def test_search_blockers(self) -> None:
        """Exclusions are sent comma separated."""
        recorder = Recorder(payload=[{"Id": "a3", "Name": "T-0003", "Title": "x"}])

        results = await _gateway(recorder).search_potential_blockers("T-0", "a1", ["a1", "a2"])

        assert [r.id for r in results] == ["a3"]
        assert recorder.last.url.path == "/api/tickets/a1/potential-blockers"
        assert recorder.last.url.params["exclude"] == "a1,a2"


@pytest.mark.unit
class TestWrites:
    """Tests for the mutating operations."""

    @pytest.mark.asyncio
    async def test_update_stage(self) -> None:
        """Stage updates send the stage label."""
        recorder = Recorder()

        await _gateway(recorder).update_ticket_stage("a1", Stage.READY_FOR_QA)

        assert recorder.last.method == "PATCH"
        assert recorder.last_json == {"newStage": "Ready for QA"}

    @pytest.mark.asyncio
    async def test_reorder(self) -> None:
        """Reorder sends stage and index."""
        recorder = Recorder()

        await _gateway(recorder).reorder_ticket("a1", Stage.IN_DEVELOPMENT, 2)

        assert recorder.last.url.path == "/api/tickets/a1/reorder"
        assert recorder.last_json == {"newStage": "In Development", "newIndex": 2}

    @pytest.mark.asyncio
    async def test_save_transition_maps_fields(self) -> None:
        """Canonical field names are translated to backend names."""
        recorder = Recorder()

        await _gateway(recorder).save_transition(
            "a1", Stage.READY_FOR_QA, {"estimated_hours": 5, "projected_uat_date": date(2026, 3, 2)}
        )

        assert recorder.last_json == {
            "targetStage": "Ready for QA",
            "fields": {
                "EstimatedHoursNumber__c": 5,
                "ProjectedUATReadyDate__c": "2026-03-02",
            },
        }

    @pytest.mark.asyncio
    async def test_create_dependency(self) -> None:
        """The new dependency id comes from the response."""
        recorder = Recorder(payload={"Id": "d7"})

        dependency = await _gateway(recorder).create_dependency("a1", "a2")

        assert (dependency.id, dependency.blocking_ticket_id, dependency.blocked_ticket_id) == (
            "d7",
            "a2",
            "a1",
        )

    @pytest.mark.asyncio
    async def test_create_dependency_without_id(self) -> None:
        """A response without an id is invalid."""
        with pytest.raises(InvalidGatewayResponseError):
            await _gateway(Recorder(payload={})).create_dependency("a1", "a2")

    @pytest.mark.asyncio
    async def test_comment(self) -> None:
        """Comments are tagged with the source."""
        recorder = Recorder()

        await _gateway(recorder).post_status_comment("a1", "Moved", None)

        assert recorder.last_json == {"body": "Moved", "author": "", "source": "DeliveryHub"}

    @pytest.mark.asyncio
    async def test_create_ticket(self) -> None:
        """The created record is mapped back into a ticket."""
        recorder = Recorder(
            201, payload={"Id": "a9", "Name": "T-0009", "StageNamePk__c": "Backlog"}
        )

        ticket = await _gateway(recorder).create_ticket({"title": "New", "priority": "High"})

        assert ticket.id == "a9"
        assert recorder.last_json == {"BriefDescriptionTxt__c": "New", "PriorityPk__c": "High"}

    @pytest.mark.asyncio
    async def test_link_files(self) -> None:
        """File ids are sent as a list."""
        recorder = Recorder()

        await _gateway(recorder).link_files("a1", ("f1", "f2"))

        assert recorder.last_json == {"contentDocumentIds": ["f1", "f2"]}

    @pytest.mark.asyncio
    async def test_ai_enhance(self) -> None:
        """The suggestion payload is parsed."""
        recorder = Recorder(
            payload={"title": "Export invoices as CSV", "description": "...", "estimatedDays": 2}
        )

        suggestion = await _gateway(recorder).get_ai_enhanced_ticket_details("export", "")

        assert suggestion.title == "Export invoices as CSV"
        assert suggestion.estimated_days == 2.0
        assert recorder.last_json == {"currentTitle": "export", "currentDescription": ""}


@pytest.mark.unit
class TestMalformedPayloads:
    """Payloads of the wrong shape become InvalidGatewayResponseError."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "payload",
        [["unexpected"], {"tickets": ["unexpected"]}, {"tickets": "a1"}],
    )
    async def test_fetch_etas(self, payload: object) -> None:
        """ETA bodies must be objects holding objects."""
        with pytest.raises(InvalidGatewayResponseError):
            await _gateway(Recorder(payload=payload)).fetch_etas(2)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"name": "estimated_hours"}, ["estimated_hours"]])
    async def test_required_fields(self, payload: object) -> None:
        """Required fields must be a list of objects."""
        with pytest.raises(InvalidGatewayResponseError):
            await _gateway(Recorder(payload=payload)).get_required_fields_for_stage(
                Stage.READY_FOR_QA
            )

    @pytest.mark.asyncio
    @pytest.mark.parametrize("payload", [{"Id": "a3"}, ["a3"]])
    async def test_search_blockers(self, payload: object) -> None:
        """Blocker candidates must be a list of objects."""
        with pytest.raises(InvalidGatewayResponseError):
            await _gateway(Recorder(payload=payload)).search_potential_blockers("T-0", "a1", [])

    @pytest.mark.asyncio
    async def test_create_dependency(self) -> None:
        """A dependency response must be an object."""
        with pytest.raises(InvalidGatewayResponseError):
            await _gateway(Recorder(payload=["d7"])).create_dependency("a1", "a2")

    @pytest.mark.asyncio
    async def test_create_ticket(self) -> None:
        """A created ticket must come back as an object."""
        with pytest.raises(InvalidGatewayResponseError):
            await _gateway(Recorder(201, payload=["a9"])).create_ticket({"title": "New"})

    @pytest.mark.asyncio
    async def test_board_refresh_degrades_on_bad_etas(self, board_config: BoardConfig) -> None:
        """A malformed ETA body leaves the board loaded with no ETAs."""

        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.path.endswith("/etas"):
                return httpx.Response(200, json=["unexpected"])
            return httpx.Response(
                200, json=[{"Id": "a1", "Name": "T-0001", "StageNamePk__c": "Backlog"}]
            )

        service = BoardService(_gateway(handler), board_config)

        snapshot = await service.refresh()

        assert [t.id for t in snapshot.tickets] == ["a1"]
        assert snapshot.eta == ETAResult()
