"""
Opportunities endpoints.
List (search/sort), get with notes and next steps, create, full update, delete,
and the nested note/step creation routes.
"""

from fastapi import APIRouter, Depends, Query, status

from opportunity_api.core.errors import store_errors_as_bad_request
from opportunity_api.schemas.common import CreatedResponse, EntityId, ErrorDetail, OkResponse
from opportunity_api.schemas.next_step import NextStepInput
from opportunity_api.schemas.note import NoteInput
from opportunity_api.schemas.opportunity import (
    Opportunity,
    OpportunityDetail,
    OpportunityInput,
    SortDirection,
    SortField,
)
from opportunity_api.services.opportunity_repository import (
    OpportunityRepository,
    get_opportunity_repository,
)

router = APIRouter(prefix="/opportunities", tags=["opportunities"])

_ERRORS = {
    400: {"model": ErrorDetail},
    404: {"model": ErrorDetail},
    500: {"model": ErrorDetail},
}


@router.get(
    "",
    response_model=list[Opportunity],
    summary="List opportunities",
    description="Search name, tech owner, business owner and tags; sort by name, created or updated. At most 500 rows.",
)
async def list_opportunities(
    q: str = Query("", description="Case-insensitive search text"),
    sort: str = Query("updated", description="Sort column: name, created, updated"),
    direction: str = Query("desc", alias="dir", description="Sort direction: asc or desc"),
    repo: OpportunityRepository = Depends(get_opportunity_repository),
) -> list[Opportunity]:
    """GET /opportunities?q=&sort=&dir= — filtered, sorted list."""
    return await repo.list_opportunities(
        query=q,
        sort=SortField.parse(sort),
        direction=SortDirection.parse(direction),
    )


@router.get(
    "/{opportunity_id}",
    response_model=OpportunityDetail,
    responses=_ERRORS,
    summary="Get opportunity",
)
async def get_opportunity(
    opportunity_id: EntityId,
    repo: OpportunityRepository = Depends(get_opportunity_repository),
) -> OpportunityDetail:
    """GET /opportunities/{id} — opportunity with notes and next steps."""
    return await repo.get_opportunity(opportunity_id)


@router.post(
    "",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Create opportunity",
)
async def create_opportunity(
    body: OpportunityInput,
    repo: OpportunityRepository = Depends(get_opportunity_repository),
) -> CreatedResponse:
    """POST /opportunities — server assigns id and timestamps."""
    with store_errors_as_bad_request():
        new_id = await repo.create_opportunity(body)
    return CreatedResponse(id=new_id)


@router.put(
    "/{opportunity_id}",
    response_model=OkResponse,
    responses=_ERRORS,
    summary="Replace opportunity",
    description="Full replace: omitted optional fields are stored as null.",
)
async def update_opportunity(
    opportunity_id: EntityId,
    body: OpportunityInput,
    repo: OpportunityRepository = Depends(get_opportunity_repository),
) -> OkResponse:
    """PUT /opportunities/{id}"""
    with store_errors_as_bad_request():
        await repo.update_opportunity(opportunity_id, body)
    return OkResponse()


@router.delete(
    "/{opportunity_id}",
    response_model=OkResponse,
    responses=_ERRORS,
    summary="Delete opportunity",
    description="Deletes the opportunity together with its notes and next steps.",
)
async def delete_opportunity(
    opportunity_id: EntityId,
    repo: OpportunityRepository = Depends(get_opportunity_repository),
) -> OkResponse:
    """DELETE /opportunities/{id}"""
    await repo.delete_opportunity(opportunity_id)
    return OkResponse()


@router.post(
    "/{opportunity_id}/notes",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Add note",
)
async def add_note(
    opportunity_id: EntityId,
    body: NoteInput,
    repo: OpportunityRepository = Depends(get_opportunity_repository),
) -> CreatedResponse:
    """POST /opportunities/{id}/notes"""
    with store_errors_as_bad_request():
        new_id = await repo.add_note(opportunity_id, body)
    return CreatedResponse(id=new_id)


@router.post(
    "/{opportunity_id}/steps",
    response_model=CreatedResponse,
    status_code=status.HTTP_201_CREATED,
    responses=_ERRORS,
    summary="Add next step",
)
async def add_step(
    opportunity_id: EntityId,
    body: NextStepInput,
    repo: OpportunityRepository = Depends(get_opportunity_repository),
) -> CreatedResponse:
    """POST /opportunities/{id}/steps"""
    with store_errors_as_bad_request():
        new_id = await repo.add_step(opportunity_id, body)
    return CreatedResponse(id=new_id)
