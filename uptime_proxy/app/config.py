"""
Configuration module for the Uptime Status Proxy.

This module uses Pydantic Settings to load and validate environment variables
for the UptimeRobot upstream, CORS and logging.

Environment variables are loaded from .env file or system environment.
"""

from functools import lru_cache
from typing import List, Optional, Protocol

from pydantic import Field, HttpUrl, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    The UptimeRobot API key is optional at startup. A missing key is reported
    per request rather than preventing the service from booting.
    """

    # =========================================================================
    # UptimeRobot Upstream Configuration
    # =========================================================================

    UPTIMEROBOT_API_KEY: Optional[SecretStr] = Field(
        None,
        description="UptimeRobot API key (main, read-only or monitor-specific)",
    )

    UPTIMEROBOT_API_URL: HttpUrl = Field(
        default="https://api.uptimerobot.com/v2/getMonitors",
        description="UptimeRobot getMonitors endpoint",
    )

    UPTIMEROBOT_TIMEOUT_SECONDS: Optional[float] = Field(
        default=None,
        description="Timeout for the UptimeRobot call in seconds (unset waits indefinitely)",
        gt=0,
    )

    PROTECT_API_KEY: bool = Field(
        default=False,
        description="Keep the configured api_key even if the client sends its own",
    )

    # =========================================================================
    # Proxy Server Configuration
    # =========================================================================

    PROXY_HOST: str = Field(
        default="0.0.0.0",
        description="Host to bind the proxy server",
    )

    PROXY_PORT: int = Field(
        default=8080,
        description="Port to bind the proxy server",
        ge=1,
        le=65535,
    )

    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )

    # =========================================================================
    # CORS Configuration
    # =========================================================================

    ALLOWED_ORIGINS: Optional[str] = Field(
        None,
        description="Comma-separated list of allowed CORS origins (leave empty for no CORS)",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    # =========================================================================
    # Computed Properties
    # =========================================================================

    @property
    def allowed_origins_list(self) -> List[str]:
        """
        Parse and return ALLOWED_ORIGINS as a list.

        Returns:
            List of allowed origin URLs, or empty list if not configured.
        """
        if not self.ALLOWED_ORIGINS:
            return []

        return [
            origin.strip()
            for origin in self.ALLOWED_ORIGINS.split(",")
            if origin.strip()
        ]

    @property
    def upstream_url_str(self) -> str:
        """UptimeRobot endpoint as a plain string for the HTTP client."""
        return str(self.UPTIMEROBOT_API_URL)

    @property
    def api_key_configured(self) -> bool:
        return bool(
            self.UPTIMEROBOT_API_KEY
            and self.UPTIMEROBOT_API_KEY.get_secret_value()
        )

    # =========================================================================
    # Validators
    # =========================================================================

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Normalize LOG_LEVEL and reject unknown levels.

        Raises:
            ValueError: If the level is not a standard logging level
        """
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        level = v.strip().upper()

        if level not in allowed_levels:
            raise ValueError(
                f"LOG_LEVEL must be one of {allowed_levels}, got: {v}"
            )

        return level


# =============================================================================
# Settings Singleton
# =============================================================================

@lru_cache()
def get_settings() -> Settings:
    """
    Get or create a singleton Settings instance.

    This function is cached so that the settings are loaded only once
    during the application lifecycle. Call ``get_settings.cache_clear()``
    to force a reload (tests do this after changing the environment).

    Returns:
        Settings instance with all configuration loaded and validated.
    """
    return Settings()


# =============================================================================
# Credential Provider
# =============================================================================

class CredentialProvider(Protocol):
    """Source of the UptimeRobot API key, consulted on every request."""

    def get_api_key(self) -> Optional[str]:
        """Return the API key, or None when it is not configured."""
        ...


class SettingsCredentialProvider:
    """Reads the API key from the cached application settings."""

    def __init__(self, settings: Optional[Settings] = None):
        self._settings = settings

    def get_api_key(self) -> Optional[str]:
        settings = self._settings or get_settings()
        if not settings.UPTIMEROBOT_API_KEY:
            return None
        return settings.UPTIMEROBOT_API_KEY.get_secret_value() or None


class StaticCredentialProvider:
    """Returns a fixed API key. Pass None to simulate a missing key."""

    def __init__(self, api_key: Optional[str]):
        self._api_key = api_key

    def get_api_key(self) -> Optional[str]:
        return self._api_key or None
