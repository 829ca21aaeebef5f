"""Application Configuration - environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) - single instance per process
    - api_prefix is normalized to "/segment" form (or "" for no prefix)

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: works out of the box for local runs
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Service
    service_name: str = "users-api"
    service_version: str = "1.0.0"

    # API
    api_prefix: str = "/api"
    cors_origins: list[str] = ["http://localhost:3000"]

    @field_validator("api_prefix", mode="before")
    @classmethod
    def normalize_prefix(cls, v: str) -> str:
        """'api/' and '/api' both become '/api'; '' and '/' mean no prefix."""
        if isinstance(v, str):
            stripped = v.strip().strip("/")
            return f"/{stripped}" if stripped else ""
        return v

    # Store
    seed_demo_users: bool = True

    # Auth (demo bearer guard - replace with real verification in production)
    min_token_length: int = 8
    principal_id: int = 1
    principal_username: str = "test-user"

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
