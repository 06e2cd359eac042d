"""Session pipeline middleware.

Runs every request through one of two fixed pipelines:
- protected paths: ErrorNormalizer -> SessionGate -> endpoint
- public paths:    ErrorNormalizer -> endpoint

Every path not listed as public is protected, including paths with no
matching route.

Middleware Ordering:
- Must be added FIRST (innermost) so request-id and security headers wrap it
- Reads request.state.request_id when RequestIDMiddleware ran before it
"""

from collections.abc import Iterable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.types import ASGIApp
from structlog.stdlib import BoundLogger

from servekit.auth.session import SESSION_HEADER, SessionGate
from servekit.config import DEFAULT_PUBLIC_PATHS
from servekit.context import RequestContext
from servekit.logging import get_logger
from servekit.middleware.errors import ErrorNormalizer
from servekit.pipeline import Pipeline

# Paths that don't require a session
PUBLIC_PATHS = frozenset(DEFAULT_PUBLIC_PATHS.split(","))


class SessionPipelineMiddleware(BaseHTTPMiddleware):
    """Attach a RequestContext and run the session pipeline.

    Args:
        app: The ASGI application.
        log: Logger handed to both pipeline stages.
        public_paths: Exact paths that skip the session gate.
    """

    def __init__(
        self,
        app: ASGIApp,
        log: BoundLogger | None = None,
        public_paths: Iterable[str] = PUBLIC_PATHS,
    ):
        super().__init__(app)
        self.log = log or get_logger(__name__)
        self.public_paths = frozenset(public_paths)

        normalizer = ErrorNormalizer(self.log)
        self.protected_pipeline = Pipeline([normalizer, SessionGate(self.log)])
        self.public_pipeline = Pipeline([normalizer])

    def is_public(self, path: str) -> bool:
        return path in self.public_paths

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        """Process the request through the matching pipeline."""
        request.state.context = RequestContext(
            request_id=getattr(request.state, "request_id", None),
            session_header=request.headers.get(SESSION_HEADER),
        )

        if self.is_public(request.url.path):
            pipeline = self.public_pipeline
        else:
            pipeline = self.protected_pipeline

        return await pipeline.bind(call_next)(request)
