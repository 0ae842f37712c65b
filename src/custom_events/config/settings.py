"""
Module: settings.py
Description: Client configuration using pydantic-settings.

Loads delivery defaults from CUSTOM_EVENTS_* environment variables with
validation. Supports .env files for local runs. Command-line flags take
precedence over every value defined here.
"""

from typing import Optional

from pydantic import Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_API_VERSION = "v8-preview"


class Settings(BaseSettings):
    """Client settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CUSTOM_EVENTS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Appliance settings
    api_key: Optional[SecretStr] = Field(
        default=None,
        description="Bearer token for the appliance API (keeps it off the command line)"
    )
    api_version: str = Field(
        default=DEFAULT_API_VERSION,
        min_length=1,
        description="API version path segment"
    )

    # Delivery settings
    max_retries: int = Field(
        default=2,
        ge=0,
        le=5,
        description="Retries after the first attempt"
    )
    timeout_seconds: int = Field(
        default=10,
        ge=5,
        le=60,
        description="HTTP timeout in seconds for each delivery attempt"
    )

    # Logging settings
    log_enabled: bool = Field(default=False, description="Append diagnostics to log_file")
    log_file: str = Field(default="custom-events.log", description="Diagnostic log path")
    log_level: str = Field(default="INFO", description="Logging level")

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a valid logging level."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of: {', '.join(valid_levels)}")
        return v.upper()


def get_settings() -> Settings:
    """Load settings from the current environment."""
    return Settings()
