"""Error response wire format.

Every failure is sent as:

    HTTP status: <status>
    Content-Type: application/json
    Body: {"code": "<code>", "status": <status>, "context": {...}}

The request ID travels in the X-Request-ID header, never in the body.
"""

from typing import Any

from fastapi.responses import JSONResponse

from servekit.errors import NormalizedError


def error_response(error: NormalizedError) -> dict[str, Any]:
    """Create the error body for a normalized failure.

    Args:
        error: The normalized failure.

    Returns:
        Dict with code, status and context keys.
    """
    return error.as_body()


def error_json_response(error: NormalizedError) -> JSONResponse:
    """Create the JSON response for a normalized failure."""
    return JSONResponse(status_code=error.status, content=error_response(error))
