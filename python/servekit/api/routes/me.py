"""Current session endpoints."""

from fastapi import APIRouter

from servekit.api.deps import OptionalSessionDep, SessionDep

router = APIRouter()


@router.get("/me")
async def get_me(session: SessionDep) -> dict:
    """Return the caller's session.

    Protected: the session gate has already validated the `session` header.
    """
    return session


@router.get("/me-load")
async def get_me_load(session: OptionalSessionDep) -> dict:
    """Return the caller's session, or {"session": false} for anonymous callers.

    Public: the handler reads the `session` header itself.
    """
    if session is None:
        return {"session": False}
    return session
