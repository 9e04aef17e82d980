"""Board query and settings endpoints."""

from fastapi import APIRouter, Query

from deliveryhub.api.dependencies import BoardServiceDep
from deliveryhub.api.models import (
    APIResponse,
    BoardConfigResponse,
    BoardResponse,
    ColumnResponse,
    DevCountUpdate,
    PrioritizeRequest,
)
from deliveryhub.board import BoardService
from deliveryhub.config import DEFAULT_VIEW
from deliveryhub.projection import ALL_INTENTIONS
from deliveryhub.stages import Persona

router = APIRouter(prefix="/board", tags=["board"])


def _board_response(
    service: BoardService,
    persona: Persona,
    view: str = DEFAULT_VIEW,
    show_extended: bool = False,
    intention: str | None = None,
    hide_empty: bool = False,
) -> BoardResponse:
    columns = service.columns(persona, view, show_extended, intention, hide_empty)
    snapshot = service.snapshot
    return BoardResponse(
        persona=persona,
        view=view,
        columns=[ColumnResponse.model_validate(c) for c in columns],
        pushed_back=list(snapshot.eta.pushed_back),
        dev_count=service.dev_count,
        refreshed_at=snapshot.refreshed_at,
    )


@router.get("", response_model=APIResponse[BoardResponse])
def get_board(
    service: BoardServiceDep,
    persona: str = Query(..., description="Client, Consultant, Developer or QA"),
    view: str = Query(default=DEFAULT_VIEW, description="Board view name"),
    show_extended: bool = Query(default=False, description="Include extended columns"),
    intention: str = Query(default=ALL_INTENTIONS, description="Intention filter"),
    hide_empty: bool = Query(default=False, description="Hide columns without tickets"),
) -> APIResponse[BoardResponse]:
    """Columns of one persona view over the current snapshot."""
    board = _board_response(
        service, Persona.parse(persona), view, show_extended, intention, hide_empty
    )
    return APIResponse(data=board)


@router.get("/config", response_model=APIResponse[BoardConfigResponse])
def get_board_config(service: BoardServiceDep) -> APIResponse[BoardConfigResponse]:
    """Personas, views and intention choices."""
    config = service.config
    return APIResponse(
        data=BoardConfigResponse(
            personas=[p.value for p in config.personas],
            views={p.value: service.projector.views(p) for p in config.personas},
            view_labels=dict(config.view_labels),
            intentions=[ALL_INTENTIONS, *config.intentions],
        )
    )


@router.post("/refresh", response_model=APIResponse[dict])
async def refresh_board(service: BoardServiceDep) -> APIResponse[dict]:
    """Re-fetch tickets and ETAs."""
    snapshot = await service.refresh()
    return APIResponse(
        data={"tickets": len(snapshot.tickets), "refreshed_at": snapshot.refreshed_at}
    )


@router.put("/dev-count", response_model=APIResponse[dict])
async def set_dev_count(body: DevCountUpdate, service: BoardServiceDep) -> APIResponse[dict]:
    """Change the developer count used for ETA projection."""
    snapshot = await service.set_dev_count(body.dev_count)
    return APIResponse(
        data={"dev_count": service.dev_count, "pushed_back": list(snapshot.eta.pushed_back)}
    )


@router.put("/prioritized", response_model=APIResponse[dict])
async def set_prioritized(body: PrioritizeRequest, service: BoardServiceDep) -> APIResponse[dict]:
    """Schedule the given tickets first in the ETA projection."""
    snapshot = await service.set_prioritized(body.ticket_ids)
    return APIResponse(
        data={
            "prioritized_ids": list(service.prioritized_ids),
            "pushed_back": list(snapshot.eta.pushed_back),
        }
    )
