"""Resource provider configuration with pydantic-settings.

Requires: DATASOURCE_NAME, ROOT_PATH
Optional: DATABASE_URL (only used by the CLI), STRICT_STORAGE_ERRORS

Usage:
    from db_resource_provider.config import get_settings

    settings = get_settings()
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Resource provider settings."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # === Required ===

    datasource_name: str = Field(
        ...,
        min_length=1,
        description="Name of the data source the provider binds to",
        examples=["accounts-db"],
    )
    root_path: str = Field(
        ...,
        min_length=1,
        description="Tree prefix this provider is responsible for",
        examples=["/accounts-root/"],
    )

    # === Optional fields with defaults ===

    database_url: str | None = Field(
        default=None,
        description="SQLAlchemy connection URL (optional)",
        examples=["sqlite:///accounts.db", "postgresql+psycopg://user:pass@db:5432/dbname"],
    )
    strict_storage_errors: bool = Field(
        default=False,
        description="Raise on storage failures instead of reporting them as absent",
    )

    # Logging configuration
    service_name: str = Field(
        default="db-resource-provider",
        description="Service name for structured logging",
    )
    log_format: Literal["json", "console"] = Field(
        default="console",
        description="Log output format",
    )
    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_v = v.upper()
        if upper_v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return upper_v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Validates required env vars on first call.
    Raises ValidationError if DATASOURCE_NAME or ROOT_PATH are missing.
    """
    return Settings()
