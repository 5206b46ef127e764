"""Note schema (API contract)."""

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel, to_pascal

from opportunity_api.schemas.common import IsoDate


class NoteInput(BaseModel):
    """Request body for adding a note. noteDate is YYYY-MM-DD; content has no upper bound."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    note_date: IsoDate
    content: str = Field(..., min_length=1)


class Note(BaseModel):
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, from_attributes=True)

    id: UUID
    opportunity_id: UUID
    note_date: date
    content: str
    created_at: datetime
