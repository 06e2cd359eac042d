"""Session authentication module.

This module provides:
- Session header parsing and validation
- The SessionGate pipeline stage
- Session dependencies for route handlers
"""

from servekit.auth.session import (
    SESSION_HEADER,
    SessionGate,
    get_optional_session,
    get_session,
    parse_session_header,
)

__all__ = [
    "SESSION_HEADER",
    "SessionGate",
    "get_optional_session",
    "get_session",
    "parse_session_header",
]
