"""Next step schema (API contract)."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictBool
from pydantic.alias_generators import to_camel, to_pascal

from opportunity_api.schemas.common import IsoDate


class NextStepInput(BaseModel):
    """Request body for adding a next step."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    title: str = Field(..., min_length=1, max_length=250)
    due_date: IsoDate | None = None


class NextStepPatch(BaseModel):
    """Only the done flag can be changed after creation."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    is_done: StrictBool


class NextStep(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, from_attributes=True)

    id: UUID
    opportunity_id: UUID
    title: str
    due_date: date | None = None
    is_done: bool = False
    created_at: datetime
