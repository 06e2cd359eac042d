"""FastAPI application creation and configuration.

This module creates and configures the FastAPI application instance.
It registers exception handlers, routes and the middleware stack.

Middleware Ordering (Critical):
- Middleware runs in reverse order of registration
- RequestIDMiddleware is added LAST so it runs FIRST (outermost)
- This ensures all responses (including 401s) get X-Request-ID

Order of registration:
1. SessionPipelineMiddleware (runs third - error normalizer + session gate)
2. SecurityHeadersMiddleware (runs second)
3. RequestIDMiddleware (runs first - outermost)

Actual execution order per request:
1. RequestIDMiddleware (sets request_id, starts timer)
2. SecurityHeadersMiddleware
3. ErrorNormalizer stage (catches everything below)
4. SessionGate stage (protected paths only)
5. Route handler
6. RequestIDMiddleware (logs access entry, sets response header)

Hooks:
- before_routing_hook(app, log, settings) runs before routers are included
- after_routing_hook(app, log, settings) runs after routers are included
"""

from collections.abc import Callable, Sequence

from fastapi import APIRouter, FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from structlog.stdlib import BoundLogger

from servekit import __version__
from servekit.api.routes import create_api_router
from servekit.config import Settings, get_settings
from servekit.logging import get_logger
from servekit.middleware.errors import ErrorNormalizer
from servekit.middleware.gate import SessionPipelineMiddleware
from servekit.middleware.request_id import RequestIDMiddleware
from servekit.middleware.security import SecurityHeadersMiddleware

RoutingHook = Callable[[FastAPI, BoundLogger, Settings], None]


def create_app(
    settings: Settings | None = None,
    log: BoundLogger | None = None,
    routers: Sequence[APIRouter] | None = None,
    before_routing_hook: RoutingHook | None = None,
    after_routing_hook: RoutingHook | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Settings to use (defaults to get_settings()).
        log: Logger shared by every pipeline component.
        routers: Routers to include (defaults to the built-in routes).
        before_routing_hook: Called before routers are included.
        after_routing_hook: Called after routers are included.

    Returns:
        Configured FastAPI application instance.
    """
    settings = settings or get_settings()
    log = log or get_logger("servekit")

    app = FastAPI(
        title="servekit",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
    )
    app.state.settings = settings

    # Framework failures use the same normalizer as the pipeline
    normalizer = ErrorNormalizer(log)
    app.add_exception_handler(StarletteHTTPException, normalizer.handle)
    app.add_exception_handler(RequestValidationError, normalizer.handle)
    app.add_exception_handler(Exception, normalizer.handle)

    if before_routing_hook:
        before_routing_hook(app, log, settings)

    if routers is None:
        routers = [create_api_router()]
    for router in routers:
        app.include_router(router)

    if after_routing_hook:
        after_routing_hook(app, log, settings)

    app.add_middleware(
        SessionPipelineMiddleware,
        log=log,
        public_paths=settings.public_path_set,
    )

    if settings.security_headers:
        app.add_middleware(SecurityHeadersMiddleware)

    if settings.enable_request_id:
        app.add_middleware(RequestIDMiddleware, log=log, log_requests=settings.log_requests)

    log.info(
        "app_created",
        env=settings.servekit_env.value,
        public_paths=sorted(settings.public_path_set),
        request_id_enabled=settings.enable_request_id,
    )

    return app
