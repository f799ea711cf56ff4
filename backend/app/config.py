"""Settings — environment-driven configuration for the adoption service.

Invariants:
    - Read once per process (get_settings is lru_cached); tests set env before import
    - lifecycle_* values bound every coordinator unit of work: time budget,
      retry count, and backoff window
    - Retry and timeout values are validated at startup, never at first use

Design Decisions:
    - pydantic-settings over os.environ: typed, validated, .env aware (ADR: developer UX)
    - Every setting has a default that matches docker-compose, so `uvicorn app.main:app`
      works without an .env file
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Storage
    database_url: str = "postgresql+asyncpg://shelter:shelter@db:5432/shelter"
    database_pool_size: int = Field(20, ge=1)
    database_max_overflow: int = Field(10, ge=0)

    # Lifecycle units of work
    lifecycle_timeout_seconds: float = Field(10.0, gt=0)
    lifecycle_max_retries: int = Field(3, ge=0, le=10)
    lifecycle_base_delay_ms: int = Field(50, ge=1)
    lifecycle_max_delay_ms: int = Field(2_000, ge=1)

    # HTTP
    cors_origins: list[str] = ["http://localhost:3000"]

    # Logging
    log_level: str = "INFO"
    log_format: Literal["json", "text"] = "json"

    @field_validator("database_url", mode="before")
    @classmethod
    def use_async_driver(cls, v: str) -> str:
        """Managed Postgres hands out postgresql:// URLs; the engine needs asyncpg."""
        if isinstance(v, str) and v.startswith(("postgres://", "postgresql://")):
            return "postgresql+asyncpg://" + v.split("://", 1)[1]
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
