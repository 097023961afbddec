"""Settings for the hierarchy service, read from the environment and .env.

get_settings() is cached; tests set environment variables and call
get_settings.cache_clear() before building the app.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    app_name: str = "hierarchy"
    app_version: str = "1.0.0"
    debug: bool = False

    # sqlite+aiosqlite for development and tests, postgresql+asyncpg in production.
    database_url: str = "sqlite+aiosqlite:///./hierarchy.db"
    database_echo: bool = False
    # PostgreSQL pool; ignored for SQLite.
    db_pool_size: int = Field(default=20, ge=1)
    db_max_overflow: int = Field(default=30, ge=0)
    db_command_timeout: int = Field(default=60, ge=1)
    # No migration tool: missing tables are created from the ORM metadata.
    create_schema_on_startup: bool = True

    # Comma-separated.
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"
    tenant_header_name: str = "X-Tenant-ID"
    request_id_header: str = "X-Request-ID"

    # Off: deleting a category's primary parent edge leaves it without a
    # primary and the response asks the caller to pick one. On: the oldest
    # remaining parent edge is promoted in the same transaction.
    auto_promote_on_primary_delete: bool = False

    telemetry_enabled: bool = True
    telemetry_exporter: Literal["console", "otlp", "none"] = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = Field(default=1.0, ge=0.0, le=1.0)
    telemetry_environment: str = "development"

    @field_validator("database_url")
    @classmethod
    def _require_async_driver(cls, value: str) -> str:
        if not value:
            raise ValueError("DATABASE_URL is required")
        scheme = value.split("://", 1)[0]
        if scheme not in ("sqlite+aiosqlite", "postgresql+asyncpg"):
            raise ValueError(
                f"DATABASE_URL must use sqlite+aiosqlite or postgresql+asyncpg, got '{scheme}'"
            )
        return value

    @property
    def cors_origins(self) -> list[str]:
        return [o.strip() for o in self.allowed_origins.split(",") if o.strip()]


@lru_cache
def get_settings() -> Settings:
    return Settings()
