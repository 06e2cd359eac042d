"""Test helpers for building apps and sending session headers.

Provides:
- Settings construction with test defaults
- Session header generation
- A router of handlers that fail in every supported way
"""

import json
from typing import Any

from fastapi import APIRouter, HTTPException
from fastapi.testclient import TestClient

from servekit.api.routes import create_api_router
from servekit.app import create_app
from servekit.config import Settings
from servekit.errors import HandlerFailure
from servekit.logging import get_logger

DEFAULT_SESSION = {"userId": 1, "name": "Bruce Wayne"}


def make_settings(**overrides: Any) -> Settings:
    """Build a Settings instance with test defaults + overrides."""
    defaults: dict[str, Any] = {
        "SERVEKIT_ENV": "test",
        "LOG_REQUESTS": False,
    }
    defaults.update(overrides)
    return Settings(**defaults)


def session_headers(session: Any = None) -> dict[str, str]:
    """Create a `session` header carrying the JSON-encoded session."""
    if session is None:
        session = DEFAULT_SESSION
    return {"session": json.dumps(session)}


def build_client(*routers: APIRouter, log=None, **settings_overrides: Any) -> TestClient:
    """Create a TestClient for an app with the built-in routes plus routers."""
    app = create_app(
        settings=make_settings(**settings_overrides),
        log=log or get_logger("tests"),
        routers=[create_api_router(), *routers],
    )
    return TestClient(app, raise_server_exceptions=False)


failing_router = APIRouter()


@failing_router.get("/fail/generic")
async def fail_generic() -> dict:
    raise Exception()


@failing_router.get("/fail/message")
async def fail_message() -> dict:
    raise Exception("database-unavailable")


@failing_router.get("/fail/runtime")
async def fail_runtime() -> dict:
    raise RuntimeError("SECRET_INTERNAL_DETAIL")


@failing_router.get("/fail/declared")
async def fail_declared() -> dict:
    raise HandlerFailure("user-not-found", 404, {"userId": 7})


@failing_router.get("/fail/declared-500")
async def fail_declared_server() -> dict:
    raise HandlerFailure("upstream-timeout", 504)


@failing_router.get("/fail/http")
async def fail_http() -> dict:
    raise HTTPException(status_code=409, detail="name-already-taken")


@failing_router.get("/fail/http-default")
async def fail_http_default() -> dict:
    raise HTTPException(status_code=404)


@failing_router.get("/items/{item_id}")
async def get_item(item_id: int) -> dict:
    return {"id": item_id}


@failing_router.get("/ok")
def sync_ok() -> dict:
    return {"ok": True}
