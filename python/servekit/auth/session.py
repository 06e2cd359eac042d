"""Session header authentication.

The caller's identity arrives as a single header named `session` whose value
is a JSON object. Validation order:
1. Header absent -> session-required
2. Value is not strict JSON (NaN and Infinity included) -> session-header-is-invalid
3. Parsed value has no truthy userId -> session-header-has-no-userId
4. Otherwise the parsed object is the request's session

userId is checked for truthiness, not presence: 0, "", false and null are
rejected while empty arrays and objects are accepted.

Provides:
- parse_session_header: the pure validation above
- SessionGate: pipeline stage applying it to every protected request
- get_session / get_optional_session: dependencies for route handlers
"""

import json
from typing import Any

from fastapi import Request, Response
from structlog.stdlib import BoundLogger

from servekit.context import RequestContext, Session, get_request_context
from servekit.errors import AuthFailure, AuthFailureKind
from servekit.logging import get_logger, set_request_context
from servekit.pipeline import CallNext

SESSION_HEADER = "session"


def parse_session_header(raw: str | None) -> Session:
    """Validate a raw session header value.

    Args:
        raw: The header value, or None when the header was not sent.

    Returns:
        The parsed session object.

    Raises:
        AuthFailure: If the header is missing, not JSON, or has no truthy userId.
    """
    if raw is None:
        raise AuthFailure(AuthFailureKind.SESSION_REQUIRED)

    try:
        session = json.loads(raw, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        raise AuthFailure(AuthFailureKind.SESSION_HEADER_INVALID) from None

    if not isinstance(session, dict) or not _is_truthy(session.get("userId")):
        raise AuthFailure(AuthFailureKind.SESSION_HEADER_MISSING_USER_ID)

    return session


def _reject_constant(name: str) -> Any:
    # NaN, Infinity and -Infinity are not JSON
    raise ValueError(f"invalid JSON constant: {name}")


def _is_truthy(value: Any) -> bool:
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


class SessionGate:
    """Pipeline stage that requires a valid session before the handler runs.

    Reads the raw header from the RequestContext, stores the parsed session
    back on it, and raises AuthFailure otherwise. It never builds responses;
    the error normalizer in front of it does.
    """

    def __init__(self, log: BoundLogger | None = None):
        self.log = log or get_logger(__name__)

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        context = _require_context(request)
        context.session = parse_session_header(context.session_header)
        set_request_context(context.request_id, user_id=str(context.user_id))
        self.log.debug("session_accepted", user_id=str(context.user_id))
        return await call_next(request)


def _require_context(request: Request) -> RequestContext:
    context = get_request_context(request)
    if context is None:
        context = RequestContext(
            request_id=getattr(request.state, "request_id", None),
            session_header=request.headers.get(SESSION_HEADER),
        )
        request.state.context = context
    return context


def get_session(request: Request) -> Session:
    """FastAPI dependency to get the session attached by the gate.

    Args:
        request: The FastAPI request object.

    Returns:
        The parsed session.

    Raises:
        AuthFailure: If the route is not behind the gate (no session attached).
    """
    context = get_request_context(request)
    if context is None or context.session is None:
        raise AuthFailure(AuthFailureKind.SESSION_REQUIRED)
    return context.session


def get_optional_session(request: Request) -> Session | None:
    """FastAPI dependency for routes that accept anonymous callers.

    Reads the raw header itself rather than relying on the gate.

    Returns:
        The parsed session, or None when no session header was sent.

    Raises:
        AuthFailure: If a header was sent but is invalid.
    """
    raw = request.headers.get(SESSION_HEADER)
    if raw is None:
        return None
    return parse_session_header(raw)
