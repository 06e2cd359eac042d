"""X-Request-ID middleware for request correlation and access logging.

This middleware:
- Extracts or generates a unique request ID for each request
- Validates and normalizes incoming request IDs
- Attaches the ID to request state for the session pipeline and handlers
- Echoes the ID in response headers, including on 401 responses
- Logs one access entry after the response is produced

Middleware Ordering (Critical):
- Must be added LAST to run FIRST (Starlette middleware runs in reverse order)
- The session pipeline copies request.state.request_id into its RequestContext
"""

import re
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp
from structlog.stdlib import BoundLogger

from servekit.context import get_request_context
from servekit.logging import clear_request_context, get_logger, set_request_context

REQUEST_ID_HEADER = "X-Request-ID"

# Alphanumeric, dots, hyphens, underscores; at most 128 characters
VALID_REQUEST_ID_PATTERN = re.compile(r"^[A-Za-z0-9._-]{1,128}$")

UUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def is_valid_uuid(value: str) -> bool:
    """Check if value is a valid UUID string."""
    return bool(UUID_PATTERN.match(value))


def is_valid_request_id(value: str) -> bool:
    """A UUID, or up to 128 characters from the allowed set."""
    return is_valid_uuid(value) or bool(VALID_REQUEST_ID_PATTERN.match(value))


def normalize_request_id(value: str) -> str:
    """Lowercase UUIDs; keep other valid IDs as-is."""
    if is_valid_uuid(value):
        return value.lower()
    return value


def generate_request_id() -> str:
    """Generate a new UUID v4 request ID."""
    return str(uuid.uuid4())


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Middleware for X-Request-ID handling and access logging.

    Args:
        app: The ASGI application.
        log: Logger for access entries.
        log_requests: If True, log access entries for each request.
    """

    def __init__(self, app: ASGIApp, log: BoundLogger | None = None, log_requests: bool = True):
        super().__init__(app)
        self.log = log or get_logger(__name__)
        self.log_requests = log_requests

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Process request with request ID handling."""
        start_time = time.monotonic()

        incoming_id = request.headers.get(REQUEST_ID_HEADER)
        if incoming_id and is_valid_request_id(incoming_id):
            request_id = normalize_request_id(incoming_id)
        else:
            request_id = generate_request_id()

        request.state.request_id = request_id
        set_request_context(request_id, path=request.url.path, method=request.method)

        try:
            response = await call_next(request)

            response.headers[REQUEST_ID_HEADER] = request_id

            if self.log_requests:
                context = get_request_context(request)
                user_id = context.user_id if context else None
                duration_ms = (time.monotonic() - start_time) * 1000
                self.log.info(
                    "request_completed",
                    method=request.method,
                    path=request.url.path,
                    status_code=response.status_code,
                    duration_ms=round(duration_ms, 2),
                    user_id=str(user_id) if user_id else None,
                )

            return response

        except Exception:
            self.log.exception("request_failed", method=request.method, path=request.url.path)
            raise

        finally:
            clear_request_context()
