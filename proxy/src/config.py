"""
FastAPI application configuration using Pydantic Settings.

Provides centralized configuration for:
- API settings (bind host and port, CORS)
- Upstream holiday API settings (base URL, credential, timeout)
- Logging and monitoring

All settings support environment variable overrides and .env file loading.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import AliasChoices, Field, SecretStr, field_validator
from typing import List, Optional
from functools import lru_cache


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    All settings can be overridden via environment variables with the
    prefix "HOLIDAY_PROXY_" (e.g., HOLIDAY_PROXY_UPSTREAM_TIMEOUT). The
    credential and the port also accept the bare API_KEY and PORT names.

    Environment variables are loaded from:
    1. System environment
    2. .env file in the current directory
    3. Default values defined below
    """

    # =========================================================================
    # API Settings
    # =========================================================================

    app_name: str = Field(
        default="Holiday Proxy",
        description="Application name"
    )
    app_version: str = Field(
        default="1.0.0",
        description="API version"
    )
    api_prefix: str = Field(
        default="/api",
        description="API URL prefix"
    )

    debug: bool = Field(
        default=False,
        description="Debug mode - enables verbose logging and error traces"
    )
    environment: str = Field(
        default="production",
        description="Environment: development|staging|production"
    )

    host: str = Field(
        default="0.0.0.0",
        description="API bind host"
    )
    port: int = Field(
        default=5000,
        description="API bind port",
        gt=0,
        lt=65536,
        validation_alias=AliasChoices("HOLIDAY_PROXY_PORT", "PORT"),
    )

    # =========================================================================
    # Upstream Holiday API Settings
    # =========================================================================

    api_key: Optional[SecretStr] = Field(
        default=None,
        description="Holiday API key, held by the proxy and never sent to clients",
        validation_alias=AliasChoices("HOLIDAY_PROXY_API_KEY", "API_KEY"),
    )
    upstream_base_url: str = Field(
        default="https://holidayapi.com/v1",
        description="Base URL of the upstream holiday API"
    )
    upstream_timeout: float = Field(
        default=10.0,
        description="Upper bound on a single upstream call (seconds)",
        gt=0
    )

    # =========================================================================
    # CORS Settings
    # =========================================================================

    cors_enabled: bool = Field(
        default=True,
        description="Enable CORS middleware"
    )
    cors_origins: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )
    cors_allow_methods: List[str] = Field(
        default=["GET", "OPTIONS"],
        description="Allowed HTTP methods"
    )
    cors_allow_headers: List[str] = Field(
        default=["*"],
        description="Allowed HTTP headers"
    )

    # =========================================================================
    # Monitoring and Logging
    # =========================================================================

    metrics_enabled: bool = Field(
        default=True,
        description="Enable Prometheus metrics"
    )
    metrics_endpoint: str = Field(
        default="/metrics",
        description="Metrics endpoint path"
    )

    log_level: str = Field(
        default="INFO",
        description="Log level: DEBUG|INFO|WARNING|ERROR|CRITICAL"
    )
    log_format: str = Field(
        default="json",
        description="Log format: json|text"
    )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed:
            raise ValueError(f"log_level must be one of {allowed}, got: {v}")
        return v_upper

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is one of the allowed values."""
        allowed = ["development", "staging", "production"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"environment must be one of {allowed}, got: {v}")
        return v_lower

    @field_validator("cors_origins")
    @classmethod
    def validate_cors_origins(cls, v: List[str]) -> List[str]:
        """Fall back to any origin when the list is empty."""
        if not v:
            return ["*"]
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log format."""
        allowed = ["json", "text"]
        v_lower = v.lower()
        if v_lower not in allowed:
            raise ValueError(f"log_format must be one of {allowed}, got: {v}")
        return v_lower

    @field_validator("api_key", mode="before")
    @classmethod
    def blank_api_key_is_unset(cls, v):
        """Treat an empty or whitespace-only key as missing."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @field_validator("upstream_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended with a slash."""
        return v.rstrip("/")

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def api_key_configured(self) -> bool:
        """Check whether a credential was supplied."""
        return self.api_key is not None

    # =========================================================================
    # Model Config
    # =========================================================================

    model_config = SettingsConfigDict(
        env_prefix="HOLIDAY_PROXY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True,
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once per process, so the credential is read from
    the environment exactly once and stays fixed afterwards.

    Returns:
        Settings: Cached settings instance

    Example:
        >>> from proxy.src.config import get_settings
        >>> settings = get_settings()
        >>> settings.upstream_base_url
        'https://holidayapi.com/v1'
    """
    return Settings()


def clear_settings_cache():
    """
    Clear the settings cache.

    Useful for testing when you need to reload settings with different
    environment variables.
    """
    get_settings.cache_clear()
