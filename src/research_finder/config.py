"""Application configuration."""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from research_finder.constants import (
    CROSSREF_WORKS_URL,
    DEFAULT_MAX_ROWS,
    DEFAULT_STATIC_DIR,
    RATE_LIMIT,
    RATE_LIMIT_MAX_KEYS,
    RATE_WINDOW_SECONDS,
    UPSTREAM_TIMEOUT_SECONDS,
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Server
    host: str = "0.0.0.0"
    port: int = 3000
    app_env: str = Field(
        default="development",
        validation_alias=AliasChoices("APP_ENV", "NODE_ENV"),
    )
    static_dir: Path = DEFAULT_STATIC_DIR

    # Search
    max_rows: int = DEFAULT_MAX_ROWS

    # Crossref
    crossref_url: str = CROSSREF_WORKS_URL
    crossref_mailto: str = ""
    upstream_timeout_seconds: float = UPSTREAM_TIMEOUT_SECONDS

    # Rate limiting
    rate_limit: int = RATE_LIMIT
    rate_window_seconds: float = RATE_WINDOW_SECONDS
    rate_limit_max_keys: int = RATE_LIMIT_MAX_KEYS

    # App Settings
    log_level: str = "INFO"

    @model_validator(mode="after")
    def validate_bounds(self) -> "Settings":
        if self.max_rows < 1:
            raise ValueError("MAX_ROWS must be >= 1")
        if self.rate_limit < 1:
            raise ValueError("RATE_LIMIT must be >= 1")
        if self.rate_window_seconds <= 0:
            raise ValueError("RATE_WINDOW_SECONDS must be > 0")
        if self.rate_limit_max_keys < 1:
            raise ValueError("RATE_LIMIT_MAX_KEYS must be >= 1")
        if self.upstream_timeout_seconds <= 0:
            raise ValueError("UPSTREAM_TIMEOUT_SECONDS must be > 0")
        return self

    @property
    def is_production(self) -> bool:
        return self.app_env.strip().lower() == "production"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
