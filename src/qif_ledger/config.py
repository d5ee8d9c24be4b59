"""Centralized configuration management using pydantic-settings.

Configuration is loaded from environment variables with sensible defaults.
All settings can be overridden via environment variables or a .env file.
"""

from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Environment(str, Enum):
    """Application environment."""

    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Override via environment variables (prefixed with QIF_) or .env file.

    Examples:
        QIF_LOG_LEVEL=DEBUG
        QIF_ENVIRONMENT=production
        QIF_FILE_ENCODING=cp1252
    """

    model_config = SettingsConfigDict(
        env_prefix="QIF_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "QIF Ledger"
    environment: Environment = Environment.DEVELOPMENT

    # Logging
    log_level: LogLevel = LogLevel.WARNING
    log_format: Literal["json", "console"] | None = Field(
        default=None,
        validate_default=True,
        description="Log output format: 'json' for production, 'console' for development",
    )
    log_file: Path | None = Field(default=None, description="Optional log file path")

    # Input decoding
    file_encoding: str = Field(
        default="ascii", description="Text encoding used when opening QIF files"
    )
    encoding_errors: Literal["strict", "replace", "ignore"] = Field(
        default="replace",
        description="How undecodable bytes in QIF files are handled",
    )

    @field_validator("log_format", mode="after")
    @classmethod
    def set_log_format_from_environment(cls, v: str | None, info) -> str:
        """Default to JSON logging in production."""
        if v is None:
            if info.data.get("environment") == Environment.PRODUCTION:
                return "json"
            return "console"
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Call get_settings.cache_clear() to reload settings.
    """
    return Settings()
