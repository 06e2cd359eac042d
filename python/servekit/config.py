"""Application settings loaded from environment variables.

Environment Configuration:
    SERVEKIT_ENV: Deployment environment (local | test | staging | prod)
    HOST: Interface the launcher binds to
    PORT: Port the launcher listens on (defaults to 5000)

Logging Configuration:
    LOG_JSON: Emit JSON log lines (true) or console-friendly lines (false)
    LOG_LEVEL: Root log level
    LOG_REQUESTS: Emit one access log entry per request

Pipeline Configuration:
    ENABLE_REQUEST_ID: Install the X-Request-ID middleware
    SECURITY_HEADERS: Install the security response headers middleware
    PUBLIC_PATHS: Comma-separated list of paths that bypass the session gate
"""

from enum import Enum
from functools import lru_cache

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

DEFAULT_PUBLIC_PATHS = "/health,/docs,/redoc,/openapi.json,/me-load"


class Environment(str, Enum):
    """Valid deployment environments."""

    LOCAL = "local"
    TEST = "test"
    STAGING = "staging"
    PROD = "prod"


class Settings(BaseSettings):
    """Application configuration.

    Settings are loaded from environment variables.
    Validation rules:
    - PORT must be a valid TCP port
    - Every PUBLIC_PATHS entry must be an absolute path
    """

    servekit_env: Environment = Field(default=Environment.LOCAL, alias="SERVEKIT_ENV")

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=5000, alias="PORT")

    log_json: bool = Field(default=True, alias="LOG_JSON")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_requests: bool = Field(default=True, alias="LOG_REQUESTS")

    enable_request_id: bool = Field(default=True, alias="ENABLE_REQUEST_ID")
    security_headers: bool = Field(default=True, alias="SECURITY_HEADERS")
    public_paths: str = Field(default=DEFAULT_PUBLIC_PATHS, alias="PUBLIC_PATHS")

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }

    @model_validator(mode="after")
    def validate_settings(self) -> "Settings":
        """Reject ports and public paths the server could never honour."""
        if not 1 <= self.port <= 65535:
            raise ValueError(f"PORT must be between 1 and 65535, got {self.port}")

        bad_paths = [p for p in self.public_path_set if not p.startswith("/")]
        if bad_paths:
            raise ValueError(
                f"PUBLIC_PATHS entries must start with '/': {', '.join(sorted(bad_paths))}"
            )

        return self

    @property
    def public_path_set(self) -> frozenset[str]:
        """Parse comma-separated public paths into a set."""
        return frozenset(p.strip() for p in self.public_paths.split(",") if p.strip())


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings instance loaded from environment.

    Raises:
        ValidationError: If settings are invalid.
    """
    return Settings()


def clear_settings_cache() -> None:
    """Clear the settings cache. Useful for testing."""
    get_settings.cache_clear()
