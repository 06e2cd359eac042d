"""Thin API launcher.

This is the uvicorn entrypoint. All application logic lives in the servekit package.
Run with: uvicorn main:app --reload
Or directly: python main.py (binds HOST:PORT from settings)

Note: The app instance is created here (not in servekit.app) to avoid import-time
side effects. This allows tests to import create_app without configuring logging
or reading the environment.
"""

import uvicorn

from servekit.app import create_app
from servekit.config import get_settings
from servekit.logging import configure_logging

settings = get_settings()

# Configure structured logging before the app logs anything
configure_logging(json_format=settings.log_json, level=settings.log_level)

app = create_app(settings)

__all__ = ["app"]


if __name__ == "__main__":
    uvicorn.run(app, host=settings.host, port=settings.port, access_log=False)
