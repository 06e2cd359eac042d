"""Per-request context populated by the request pipeline."""

from dataclasses import dataclass
from typing import Any

from fastapi import Request

# Parsed session header: a JSON object carrying at least a truthy userId
Session = dict[str, Any]


@dataclass
class RequestContext:
    """Mutable slot owned by a single request.

    Attributes:
        request_id: Correlation ID shared with log entries
        session_header: Raw `session` header value, None when absent
        session: Parsed session once the gate accepted it
    """

    request_id: str | None
    session_header: str | None
    session: Session | None = None

    @property
    def user_id(self) -> Any:
        if self.session is None:
            return None
        return self.session.get("userId")


def get_request_context(request: Request) -> RequestContext | None:
    """Get the context attached by the session pipeline, if it ran."""
    return getattr(request.state, "context", None)
