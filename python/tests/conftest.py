"""Pytest configuration and fixtures for servekit tests.

Test isolation strategy:
- Every test builds its own app through create_app with explicit Settings
- Access logging is off by default so log_sink only sees pipeline events
- log_sink swaps structlog's configuration for the duration of a test
"""

import sys
from collections.abc import Generator
from pathlib import Path

# Add repo root to sys.path for importing top-level packages (e.g., apps)
_repo_root = Path(__file__).parent.parent.parent
if str(_repo_root) not in sys.path:
    sys.path.insert(0, str(_repo_root))

import pytest
import structlog
from fastapi.testclient import TestClient

from servekit.config import clear_settings_cache
from tests.helpers import build_client


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Generator[None, None, None]:
    """Keep cached settings from leaking between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def client() -> TestClient:
    """Provide a client for the built-in routes with the default pipeline."""
    return build_client()


@pytest.fixture
def log_sink():
    """Configure structlog to capture events into a list.

    Returns a list that will contain all emitted log event dicts, each with
    a "log_level" key holding the method name used.
    After the test, structlog is reset to its previous configuration.
    """
    events: list[dict] = []
    original_config = structlog.get_config()

    def capture_processor(logger, method_name, event_dict):
        events.append({**event_dict, "log_level": method_name})
        raise structlog.DropEvent

    structlog.configure(
        processors=[capture_processor],
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    yield events

    structlog.configure(**original_config)
