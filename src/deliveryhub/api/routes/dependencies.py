"""Dependency edge endpoints."""

from fastapi import APIRouter

from deliveryhub.api.dependencies import BoardServiceDep
from deliveryhub.api.models import APIResponse, action_response

router = APIRouter(prefix="/dependencies", tags=["dependencies"])


@router.delete("/{dependency_id}", response_model=APIResponse[None])
async def remove_dependency(dependency_id: str, service: BoardServiceDep) -> APIResponse[None]:
    """Delete a blocking edge."""
    result = await service.remove_blocker(dependency_id)
    return action_response(result)
