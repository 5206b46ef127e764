"""
Notes endpoints. Notes are created under an opportunity (see opportunities.py)
and deleted by their own id.
"""

from fastapi import APIRouter, Depends

from opportunity_api.schemas.common import EntityId, ErrorDetail, OkResponse
from opportunity_api.services.opportunity_repository import (
    OpportunityRepository,
    get_opportunity_repository,
)

router = APIRouter(prefix="/notes", tags=["notes"])


@router.delete(
    "/{note_id}",
    response_model=OkResponse,
    responses={400: {"model": ErrorDetail}, 404: {"model": ErrorDetail}, 500: {"model": ErrorDetail}},
    summary="Delete note",
)
async def delete_note(
    note_id: EntityId,
    repo: OpportunityRepository = Depends(get_opportunity_repository),
) -> OkResponse:
    """DELETE /notes/{id}"""
    await repo.delete_note(note_id)
    return OkResponse()
