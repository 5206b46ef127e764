# Pydantic request/response schemas (API contract). Kept in sync with client types.

from opportunity_api.schemas.common import CreatedResponse, EntityId, ErrorDetail, IsoDate, OkResponse
from opportunity_api.schemas.next_step import NextStep, NextStepInput, NextStepPatch
from opportunity_api.schemas.note import Note, NoteInput
from opportunity_api.schemas.opportunity import (
    Opportunity,
    OpportunityDetail,
    OpportunityInput,
    SortDirection,
    SortField,
)

__all__ = [
    "CreatedResponse",
    "EntityId",
    "ErrorDetail",
    "IsoDate",
    "OkResponse",
    "NextStep",
    "NextStepInput",
    "NextStepPatch",
    "Note",
    "NoteInput",
    "Opportunity",
    "OpportunityDetail",
    "OpportunityInput",
    "SortDirection",
    "SortField",
]
