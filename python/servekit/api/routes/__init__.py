"""Built-in route definitions.

Uses a factory pattern so tests can build apps with their own routers
without importing these at module load time.
"""

from fastapi import APIRouter

from servekit.api.routes.health import router as health_router
from servekit.api.routes.me import router as me_router


def create_api_router() -> APIRouter:
    """Create the router holding the built-in routes.

    Returns:
        Configured APIRouter with health and session routes registered.
    """
    api_router = APIRouter()
    api_router.include_router(health_router, tags=["health"])
    api_router.include_router(me_router, tags=["session"])
    return api_router


__all__ = ["create_api_router"]
