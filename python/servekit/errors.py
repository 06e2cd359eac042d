"""Failure vocabulary and normalization.

Every failure that can reach a client is one of:
- AuthFailure: raised by the session gate (always 401)
- HandlerFailure: raised by a route handler with a declared status/code/context
- a framework failure (FastAPI validation error, Starlette HTTPException)
- a foreign exception, or something that is not an exception at all

normalize_failure() maps each of these to a NormalizedError, which is the
only thing serialized onto the wire.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from http import HTTPStatus
from typing import Any

from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

UNSPECIFIED_ERROR_CODE = "unspecified-error"
INVALID_REQUEST_CODE = "invalid-request"
DEFAULT_STATUS = 500


class AuthFailureKind(str, Enum):
    """Reasons the session gate rejects a request."""

    SESSION_REQUIRED = "session-required"
    SESSION_HEADER_INVALID = "session-header-is-invalid"
    SESSION_HEADER_MISSING_USER_ID = "session-header-has-no-userId"


class ApiError(Exception):
    """Base exception for failures with a declared wire representation.

    Attributes:
        status: HTTP status code
        code: Machine-readable error code
        context: Structured detail exposed to the client
    """

    def __init__(self, code: str, status: int = DEFAULT_STATUS, context: Any = None):
        self.code = str(code) if code else UNSPECIFIED_ERROR_CODE
        self.status = status
        self.context = {} if context is None else context
        super().__init__(self.code)


class AuthFailure(ApiError):
    """Session gate rejection."""

    def __init__(self, kind: AuthFailureKind):
        self.kind = kind
        super().__init__(kind.value, 401)


class HandlerFailure(ApiError):
    """Failure raised by a route handler.

    Example:
        raise HandlerFailure("user-not-found", 404, {"userId": user_id})
    """


@dataclass(frozen=True)
class NormalizedError:
    """Client-visible error: {code, status, context}."""

    code: str
    status: int
    context: Any = field(default_factory=dict)

    @property
    def is_client_error(self) -> bool:
        """Whether the failure was caused by the caller (status < 500)."""
        return self.status < 500

    def as_body(self) -> dict[str, Any]:
        return {"code": self.code, "status": self.status, "context": self.context}


UNSPECIFIED_ERROR = NormalizedError(UNSPECIFIED_ERROR_CODE, DEFAULT_STATUS, {})


def normalize_failure(failure: object) -> NormalizedError:
    """Map any raised failure to its NormalizedError.

    Never raises: anything unrecognized becomes a 500 unspecified-error.
    """
    if isinstance(failure, ApiError):
        return _normalized(failure.code, failure.status, failure.context)

    if isinstance(failure, RequestValidationError):
        return _normalized(INVALID_REQUEST_CODE, 400, {"errors": failure.errors()})

    if isinstance(failure, StarletteHTTPException):
        return _from_http_exception(failure)

    if isinstance(failure, Exception):
        return NormalizedError(_foreign_code(failure), DEFAULT_STATUS, {})

    return UNSPECIFIED_ERROR


def _normalized(code: str, status: int, context: Any) -> NormalizedError:
    if not isinstance(status, int) or isinstance(status, bool) or not 400 <= status <= 599:
        status = DEFAULT_STATUS
    try:
        encoded = jsonable_encoder(context)
    except (TypeError, ValueError, RecursionError):
        encoded = {}
    return NormalizedError(code or UNSPECIFIED_ERROR_CODE, status, encoded)


def _from_http_exception(exc: StarletteHTTPException) -> NormalizedError:
    phrase = _reason_phrase(exc.status_code)
    detail = exc.detail
    if isinstance(detail, str) and detail and detail != phrase:
        code = detail
    else:
        code = _kebab(phrase) if phrase else UNSPECIFIED_ERROR_CODE
    context = dict(detail) if isinstance(detail, Mapping) else {}
    return _normalized(code, exc.status_code, context)


def _foreign_code(exc: Exception) -> str:
    """Class name for specific exception types, else the message text."""
    if type(exc) is not Exception:
        return type(exc).__name__
    try:
        message = str(exc)
    except Exception:
        return UNSPECIFIED_ERROR_CODE
    return message or UNSPECIFIED_ERROR_CODE


def _reason_phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return ""


def _kebab(phrase: str) -> str:
    return "-".join(phrase.replace("-", " ").lower().split())
