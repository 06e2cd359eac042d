"""Error normalization.

ErrorNormalizer is the single place a failure becomes a client response:
- as the outermost pipeline stage it catches everything raised below it,
  including session gate rejections
- its handle() method is registered as the framework exception handler so
  routing and validation failures share the same wire format

Severity rule: status < 500 logs a warning (caller's fault), anything else
logs an error with the traceback. The response is built before the log call
and a failing logger never changes it.
"""

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from structlog.stdlib import BoundLogger

from servekit.errors import NormalizedError, normalize_failure
from servekit.logging import get_logger
from servekit.pipeline import CallNext
from servekit.responses import error_json_response


class ErrorNormalizer:
    """Translate failures into {code, status, context} JSON responses."""

    def __init__(self, log: BoundLogger | None = None):
        self.log = log or get_logger(__name__)

    async def __call__(self, request: Request, call_next: CallNext) -> Response:
        try:
            return await call_next(request)
        except Exception as exc:
            return self.respond(request, exc)

    async def handle(self, request: Request, exc: Exception) -> JSONResponse:
        """Starlette exception handler entry point."""
        return self.respond(request, exc)

    def respond(self, request: Request, failure: object) -> JSONResponse:
        """Build the error response for failure, then log it."""
        error = normalize_failure(failure)
        try:
            response = error_json_response(error)
        except (TypeError, ValueError):
            # context survived encoding but is not strict JSON (e.g. NaN)
            error = NormalizedError(error.code, error.status, {})
            response = error_json_response(error)

        # e.g. Allow on 405
        if isinstance(failure, StarletteHTTPException) and failure.headers:
            response.headers.update(failure.headers)

        self._log_failure(request, error, failure)
        return response

    def _log_failure(self, request: Request, error: NormalizedError, failure: object) -> None:
        try:
            fields = {
                "code": error.code,
                "status": error.status,
                "path": request.url.path,
                "method": request.method,
            }
            if error.is_client_error:
                self.log.warning("request_failed", context=error.context, **fields)
            else:
                exc_info = failure if isinstance(failure, BaseException) else False
                self.log.error("request_failed", exc_info=exc_info, **fields)
        except Exception:
            # log delivery must not affect the response already built
            pass
