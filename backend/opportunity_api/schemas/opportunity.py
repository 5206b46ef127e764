"""
Opportunity schema (API contract). Kept in sync with the client's form fields.
Request bodies are camelCase; rows come back with the table's PascalCase column names.
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, StrictInt
from pydantic.alias_generators import to_camel, to_pascal

from opportunity_api.schemas.common import IsoDate
from opportunity_api.schemas.next_step import NextStep
from opportunity_api.schemas.note import Note


class SortField(str, Enum):
    NAME = "name"
    CREATED = "created"
    UPDATED = "updated"

    @classmethod
    def parse(cls, value: str | None) -> "SortField":
        """Unknown or missing values fall back to 'updated'."""
        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.UPDATED


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    @classmethod
    def parse(cls, value: str | None) -> "SortDirection":
        """Anything other than 'asc' sorts descending."""
        return cls.ASC if (value or "").strip().lower() == "asc" else cls.DESC


class OpportunityInput(BaseModel):
    """Request body for create and full-replace update. Absent optional fields become null."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=200)
    technology_stack: str | None = Field(None, max_length=400)
    tech_owner: str | None = Field(None, max_length=200)
    business_owner: str | None = Field(None, max_length=200)
    first_contact_date: IsoDate | None = None

    stage: str | None = Field(None, max_length=60)
    status: str | None = Field(None, max_length=30)
    priority: Annotated[StrictInt, Field(ge=1, le=5)] | None = None
    tags: str | None = Field(None, max_length=400)

    next_step_summary: str | None = Field(None, max_length=500)
    next_step_due_date: IsoDate | None = None


class Opportunity(BaseModel):
    """Opportunities row as returned by list and detail."""
    model_config = ConfigDict(alias_generator=to_pascal, populate_by_name=True, from_attributes=True)

    id: UUID
    name: str
    technology_stack: str | None = None
    tech_owner: str | None = None
    business_owner: str | None = None
    first_contact_date: date | None = None
    stage: str | None = None
    status: str | None = None
    priority: int | None = None
    tags: str | None = None
    next_step_summary: str | None = None
    next_step_due_date: date | None = None
    created_at: datetime
    updated_at: datetime


class OpportunityDetail(BaseModel):
    """Single opportunity with its notes and next steps."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    opportunity: Opportunity
    notes: list[Note]
    next_steps: list[NextStep]
