"""Centralized application settings via pydantic-settings.

Loads configuration from environment variables with the JOBBOARD_ prefix.
All values default to local development settings. Override via environment
variables for Docker/production deployment.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All values default to local development settings. Override via
    environment variables (prefixed with JOBBOARD_) for Docker/production
    deployment.

    Examples:
        Point at a Postgres database::

            JOBBOARD_DATABASE_URL=postgresql+asyncpg://app@db/jobboard uv run fastapi dev

        Reproduce TTL-only cache staleness (no invalidation on writes)::

            JOBBOARD_CACHE_INVALIDATE_ON_WRITE=false uv run fastapi dev
    """

    environment: Literal["development", "production", "test"] = "development"

    # Database
    database_url: str = "sqlite+aiosqlite:///./jobboard.db"
    database_echo: bool = False
    database_create_tables: bool = True

    # Redis list cache
    redis_url: str = "redis://localhost:6379"
    cache_ttl_seconds: int = 60
    cache_key_prefix: str = "jobboard"
    cache_invalidate_on_write: bool = True

    # Pagination
    pagination_default_page: int = 1
    pagination_default_limit: int = 10
    pagination_max_limit: int = 100

    # Bearer token auth
    jwt_secret: str = "dev-secret-change-me-0123456789abcdef"
    jwt_algorithm: str = "HS256"
    jwt_expires_minutes: int = 60

    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:5173",
    ]

    model_config = {"env_prefix": "JOBBOARD_"}

    @property
    def is_production(self) -> bool:
        """Whether error responses should hide internal details."""
        return self.environment == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings singleton.

    Uses lru_cache so the Settings object is created once and reused
    across all FastAPI Depends injections.
    """
    return Settings()
