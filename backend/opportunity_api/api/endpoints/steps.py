"""
Next step endpoints: toggle done and delete. Steps are created under an opportunity.
"""

from fastapi import APIRouter, Depends

from opportunity_api.core.errors import store_errors_as_bad_request
from opportunity_api.schemas.common import EntityId, ErrorDetail, OkResponse
from opportunity_api.schemas.next_step import NextStepPatch
from opportunity_api.services.opportunity_repository import (
    OpportunityRepository,
    get_opportunity_repository,
)

router = APIRouter(prefix="/steps", tags=["next-steps"])

_ERRORS = {
    400: {"model": ErrorDetail},
    404: {"model": ErrorDetail},
    500: {"model": ErrorDetail},
}


@router.patch(
    "/{step_id}",
    response_model=OkResponse,
    responses=_ERRORS,
    summary="Mark next step done or open",
)
async def toggle_step(
    step_id: EntityId,
    body: NextStepPatch,
    repo: OpportunityRepository = Depends(get_opportunity_repository),
) -> OkResponse:
    """PATCH /steps/{id} — only isDone can change."""
    with store_errors_as_bad_request():
        await repo.toggle_step(step_id, body.is_done)
    return OkResponse()


@router.delete(
    "/{step_id}",
    response_model=OkResponse,
    responses=_ERRORS,
    summary="Delete next step",
)
async def delete_step(
    step_id: EntityId,
    repo: OpportunityRepository = Depends(get_opportunity_repository),
) -> OkResponse:
    """DELETE /steps/{id}"""
    await repo.delete_step(step_id)
    return OkResponse()
