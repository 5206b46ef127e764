"""
Common Pydantic schemas (acknowledgements, errors, date fields).
"""

import re
from datetime import date
from typing import Annotated, Any
from uuid import UUID

from pydantic import BaseModel, BeforeValidator

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_CANONICAL_UUID = re.compile(r"[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}")


def _parse_iso_date(value: Any) -> Any:
    """Accept only YYYY-MM-DD strings (or date objects from Python callers)."""
    if value is None or isinstance(value, date):
        return value
    if not isinstance(value, str) or not _ISO_DATE.match(value):
        raise ValueError("must be a date in YYYY-MM-DD form")
    return date.fromisoformat(value)


IsoDate = Annotated[date, BeforeValidator(_parse_iso_date)]


def _parse_canonical_uuid(value: Any) -> Any:
    """Accept only the hyphenated 8-4-4-4-12 form (no braces, urn prefix or bare hex)."""
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str) or not _CANONICAL_UUID.fullmatch(value):
        raise ValueError("must be a UUID in 8-4-4-4-12 hyphenated form")
    return UUID(value)


EntityId = Annotated[UUID, BeforeValidator(_parse_canonical_uuid)]


class OkResponse(BaseModel):
    ok: bool = True


class CreatedResponse(BaseModel):
    id: UUID


class ErrorDetail(BaseModel):
    error: str
    kind: str
    field: str | None = None
