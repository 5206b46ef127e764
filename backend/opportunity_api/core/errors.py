"""
Error taxonomy shared by the repository and the HTTP layer.
The endpoint layer picks a status code from ErrorKind, never from message text.
"""

from contextlib import contextmanager
from enum import Enum
from typing import Iterator

from fastapi import status


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONSTRAINT = "constraint"
    STORE = "store"
    CONNECTION = "connection"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONSTRAINT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.STORE: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorKind.CONNECTION: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class ApiError(Exception):
    """Base for errors the API reports to clients."""

    kind: ErrorKind = ErrorKind.STORE

    def __init__(
        self,
        message: str,
        kind: ErrorKind | None = None,
        field: str | None = None,
    ) -> None:
        self.message = message
        if kind is not None:
            self.kind = kind
        self.field = field
        # Set by the route when it reports this kind with a different status
        self.status_override: int | None = None
        super().__init__(message)

    @property
    def status_code(self) -> int:
        if self.status_override is not None:
            return self.status_override
        return STATUS_BY_KIND[self.kind]

    def to_dict(self) -> dict[str, str]:
        body = {"error": self.message, "kind": self.kind.value}
        if self.field:
            body["field"] = self.field
        return body


class ValidationError(ApiError):
    """Malformed or out-of-bounds client input, including non-UUID ids."""

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, field: str | None = None, constraint: str | None = None) -> None:
        self.constraint = constraint
        super().__init__(message, field=field)


class NotFoundError(ApiError):
    """The targeted row does not exist."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "Not found") -> None:
        super().__init__(message)


class StoreError(ApiError):
    """Query failure or constraint violation reported by the database."""

    kind = ErrorKind.STORE


class StoreConnectionError(StoreError):
    """The database could not be reached."""

    kind = ErrorKind.CONNECTION


@contextmanager
def store_errors_as_bad_request() -> Iterator[None]:
    """Write routes (create, update, add note/step, toggle) answer store failures with 400."""
    try:
        yield
    except StoreError as e:
        e.status_override = status.HTTP_400_BAD_REQUEST
        raise
