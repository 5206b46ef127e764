"""
Boundary validation: turns pydantic/FastAPI validation failures (bodies and path ids)
into a ValidationError that names the offending field and constraint.
"""

from typing import Any, Sequence

from opportunity_api.core.errors import ValidationError

# Location prefixes FastAPI adds in front of the field name
_LOC_SOURCES = {"body", "path", "query", "header", "cookie"}


def _field_from_loc(loc: Sequence[Any]) -> str | None:
    parts = [str(p) for p in loc if not (isinstance(p, str) and p in _LOC_SOURCES)]
    return ".".join(parts) or None


def validation_error_from_errors(errors: Sequence[Any]) -> ValidationError:
    """Build a ValidationError from the first entry of a pydantic error list."""
    if not errors:
        return ValidationError("Invalid request")
    first = errors[0]
    constraint = first.get("type")
    if constraint == "json_invalid":
        return ValidationError("Request body is not valid JSON", constraint=constraint)
    field = _field_from_loc(first.get("loc") or ())
    msg = first.get("msg") or "Invalid value"
    if field is None:
        return ValidationError(msg, constraint=constraint)
    return ValidationError(f"{field}: {msg}", field=field, constraint=constraint)
