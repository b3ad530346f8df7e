"""
Client configuration using Pydantic Settings.

Environment variables use the prefix "HOLIDAY_CLIENT_"
(e.g., HOLIDAY_CLIENT_PROXY_URL).
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class RequesterSettings(BaseSettings):
    """Settings for the holiday finder client."""

    proxy_url: str = Field(
        default="http://localhost:5000",
        description="Base URL of the holiday proxy"
    )
    timeout: float = Field(
        default=10.0,
        description="Timeout for calls to the proxy (seconds)",
        gt=0
    )
    preferences_path: Path = Field(
        default=Path("~/.holiday-finder.json"),
        description="File holding the persisted theme"
    )
    log_level: str = Field(
        default="WARNING",
        description="Log level: DEBUG|INFO|WARNING|ERROR|CRITICAL"
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got: {v}")
        return v_upper

    @field_validator("proxy_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    model_config = SettingsConfigDict(
        env_prefix="HOLIDAY_CLIENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


@lru_cache()
def get_requester_settings() -> RequesterSettings:
    """Get cached client settings."""
    return RequesterSettings()
