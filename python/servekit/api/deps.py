"""FastAPI dependencies for route handlers.

Session dependencies come in two flavours:
- SessionDep: the session the gate attached (protected routes)
- OptionalSessionDep: the caller's session if one was sent (public routes)
"""

from typing import Annotated

from fastapi import Depends

from servekit.auth.session import get_optional_session, get_session
from servekit.context import Session

__all__ = ["OptionalSessionDep", "SessionDep"]

SessionDep = Annotated[Session, Depends(get_session)]
OptionalSessionDep = Annotated[Session | None, Depends(get_optional_session)]
