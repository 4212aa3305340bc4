"""Application settings for the MarcoLand economy service."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Runtime settings, read from the environment or a local ``.env`` file."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    DATABASE_URL: str = Field(
        default="sqlite:///marcoland.db",
        description="SQLAlchemy URL of the ledger store",
    )
    DATABASE_ECHO: bool = Field(default=False, description="Log every SQL statement")
    DATABASE_POOL_SIZE: int = Field(default=10, ge=1)
    DATABASE_MAX_OVERFLOW: int = Field(default=20, ge=0)
    DATABASE_POOL_RECYCLE: int = Field(
        default=1800, description="Seconds before a pooled connection is recycled"
    )
    DATABASE_POOL_TIMEOUT: float = Field(
        default=10.0,
        gt=0.0,
        description="Seconds to wait for a pooled connection before failing",
    )
    DATABASE_BUSY_TIMEOUT: float = Field(
        default=15.0,
        gt=0.0,
        description="Seconds a SQLite writer waits for the database lock",
    )
    log_level: str = Field(default="INFO", description="Root log level for the server")
    seed_catalog_on_startup: bool = Field(
        default=True,
        description="Create tables and seed the equipment catalog when the API starts",
    )
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://127.0.0.1:5173"],
        description="Origins allowed to call the HTTP API",
    )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""

    return Settings()
