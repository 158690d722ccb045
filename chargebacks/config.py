"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - db_path is the only thing that locates persisted data; the namespace name is
      a schema constant (models/bucket_entry.py), never configuration

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: `python -m chargebacks` works with no env at all
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Storage
    db_path: Path = Path("chargebacks.db")
    lock_timeout_seconds: float = Field(1.0, gt=0)

    # HTTP
    host: str = "0.0.0.0"
    port: int = Field(8080, ge=1, le=65535)
    cors_origins: list[str] = ["*"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
