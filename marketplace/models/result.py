"""
Tagged results returned by every service operation.

Services never raise to their callers: they return ``Ok`` with the payload or
``Err`` carrying one of the ``ErrorKind`` variants. The legacy
``{"success": ..., "error": ...}`` envelope is produced by ``to_envelope``.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Generic, TypeVar, Union

from pydantic import BaseModel

T = TypeVar("T")

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"
NOT_AUTHENTICATED_MESSAGE = "User not authenticated"


class ErrorKind(str, Enum):
    AUTH_REQUIRED = "auth_required"
    NOT_FOUND = "not_found"
    PERMISSION_DENIED = "permission_denied"
    UPSTREAM_FAILURE = "upstream_failure"
    UNEXPECTED_FAILURE = "unexpected_failure"


# HTTP status used by the API layer for each failure kind
ERROR_STATUS_CODES = {
    ErrorKind.AUTH_REQUIRED: 401,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.PERMISSION_DENIED: 403,
    ErrorKind.UPSTREAM_FAILURE: 502,
    ErrorKind.UNEXPECTED_FAILURE: 500,
}


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str

    @property
    def success(self) -> bool:
        return False

    @property
    def status_code(self) -> int:
        return ERROR_STATUS_CODES[self.kind]


Result = Union[Ok[T], Err]


def auth_required() -> Err:
    return Err(ErrorKind.AUTH_REQUIRED, NOT_AUTHENTICATED_MESSAGE)


def unexpected() -> Err:
    return Err(ErrorKind.UNEXPECTED_FAILURE, UNEXPECTED_ERROR_MESSAGE)


def _jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_jsonable(item) for item in value]
    return value


def to_envelope(result: "Result[Any]", key: str | None = None) -> dict:
    """
    Render a result as the front end's envelope.

    Example:
        to_envelope(Ok(listing), "listing") -> {"success": True, "listing": {...}}
        to_envelope(Err(ErrorKind.NOT_FOUND, "Listing not found"))
            -> {"success": False, "error": "Listing not found", "kind": "not_found"}
    """
    if isinstance(result, Err):
        return {"success": False, "error": result.message, "kind": result.kind.value}
    envelope: dict[str, Any] = {"success": True}
    if key is not None:
        envelope[key] = _jsonable(result.value)
    return envelope
