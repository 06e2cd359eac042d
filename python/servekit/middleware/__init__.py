"""Middleware modules for servekit."""

from servekit.middleware.errors import ErrorNormalizer
from servekit.middleware.gate import PUBLIC_PATHS, SessionPipelineMiddleware
from servekit.middleware.request_id import REQUEST_ID_HEADER, RequestIDMiddleware
from servekit.middleware.security import SecurityHeadersMiddleware

__all__ = [
    "ErrorNormalizer",
    "PUBLIC_PATHS",
    "REQUEST_ID_HEADER",
    "RequestIDMiddleware",
    "SecurityHeadersMiddleware",
    "SessionPipelineMiddleware",
]
