"""Ticket action endpoints: moves, drops, intake and blockers."""

from fastapi import APIRouter, Query, status

from deliveryhub.api.dependencies import BoardServiceDep
from deliveryhub.api.models import (
    AiSuggestionResponse,
    APIResponse,
    BlockerCandidateResponse,
    BlockerCreate,
    DependencyResponse,
    DropRequest,
    EnhanceRequest,
    TicketCreate,
    TicketOptionsResponse,
    TicketResponse,
    TransitionCompleteRequest,
    TransitionOutcomeResponse,
    TransitionRequest,
    action_response,
)
from deliveryhub.stages import Persona, Stage

router = APIRouter(prefix="/tickets", tags=["tickets"])


@router.get("/{ticket_id}/options", response_model=APIResponse[TicketOptionsResponse])
def get_ticket_options(
    ticket_id: str,
    service: BoardServiceDep,
    persona: str = Query(..., description="Persona whose options to list"),
) -> APIResponse[TicketOptionsResponse]:
    """Advance and backtrack moves for a ticket."""
    options = service.options(ticket_id, Persona.parse(persona))
    return APIResponse(data=TicketOptionsResponse.model_validate(options))


@router.post("/{ticket_id}/transition", response_model=APIResponse[TransitionOutcomeResponse])
async def transition_ticket(
    ticket_id: str, body: TransitionRequest, service: BoardServiceDep
) -> APIResponse[TransitionOutcomeResponse]:
    """Move a ticket; answers with the required fields when input is needed."""
    persona = Persona.parse(body.persona) if body.persona else None
    result = await service.transition(
        ticket_id, Stage.parse(body.target_stage), body.comment, persona
    )
    data = TransitionOutcomeResponse.model_validate(result.outcome) if result.outcome else None
    return action_response(result, data)


@router.post(
    "/{ticket_id}/transition/complete",
    response_model=APIResponse[TransitionOutcomeResponse],
)
async def complete_transition(
    ticket_id: str, body: TransitionCompleteRequest, service: BoardServiceDep
) -> APIResponse[TransitionOutcomeResponse]:
    """Save required field values together with the move."""
    result = await service.complete_transition(
        ticket_id, Stage.parse(body.target_stage), body.values, body.comment
    )
    data = TransitionOutcomeResponse.model_validate(result.outcome) if result.outcome else None
    return action_response(result, data)


@router.post("/{ticket_id}/drop", response_model=APIResponse[TransitionOutcomeResponse])
async def drop_ticket(
    ticket_id: str, body: DropRequest, service: BoardServiceDep
) -> APIResponse[TransitionOutcomeResponse]:
    """Apply a drag-and-drop of a card."""
    result = await service.drop(
        ticket_id,
        Persona.parse(body.persona),
        body.source_column,
        body.target_column,
        body.drop_index,
        view=body.view,
        show_extended=body.show_extended,
        intention=body.intention,
    )
    data = TransitionOutcomeResponse.model_validate(result.outcome) if result.outcome else None
    return action_response(result, data)


@router.post(
    "",
    response_model=APIResponse[TicketResponse],
    status_code=status.HTTP_201_CREATED,
)
async def create_ticket(body: TicketCreate, service: BoardServiceDep) -> APIResponse[TicketResponse]:
    """Create a Backlog ticket."""
    result = await service.create_ticket(
        title=body.title,
        description=body.description,
        priority=body.priority,
        intention=body.intention,
        file_ids=body.file_ids,
    )
    data = TicketResponse.model_validate(result.ticket) if result.ticket else None
    return action_response(result, data)


@router.post("/enhance", response_model=APIResponse[AiSuggestionResponse])
async def enhance_ticket(
    body: EnhanceRequest, service: BoardServiceDep
) -> APIResponse[AiSuggestionResponse]:
    """AI rewrite of a draft title and description."""
    result = await service.enhance(body.title, body.description)
    data = AiSuggestionResponse.model_validate(result.suggestion) if result.suggestion else None
    return action_response(result, data)


@router.get(
    "/{ticket_id}/blockers/search",
    response_model=APIResponse[list[BlockerCandidateResponse]],
)
async def search_blockers(
    ticket_id: str,
    service: BoardServiceDep,
    term: str = Query(default="", description="Ticket number or title fragment"),
    exclude: list[str] = Query(default=[], description="Ticket ids to leave out"),
) -> APIResponse[list[BlockerCandidateResponse]]:
    """Tickets that could block this one."""
    result = await service.search_blockers(ticket_id, term, exclude)
    return action_response(
        result, [BlockerCandidateResponse.model_validate(c) for c in result.candidates]
    )


@router.post(
    "/{ticket_id}/blockers",
    response_model=APIResponse[DependencyResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_blocker(
    ticket_id: str, body: BlockerCreate, service: BoardServiceDep
) -> APIResponse[DependencyResponse]:
    """Record that another ticket blocks this one."""
    result = await service.add_blocker(ticket_id, body.blocking_ticket_id)
    data = DependencyResponse.model_validate(result.dependency) if result.dependency else None
    return action_response(result, data)
