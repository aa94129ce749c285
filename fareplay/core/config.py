"""
Configuration Management

Centralized configuration using Pydantic Settings.
All settings loaded from FAREPLAY_* environment variables (or .env) with
sensible defaults.
"""
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from fareplay.core.constants import (
    DEFAULT_DISCOVERY_URL,
    DEFAULT_HEARTBEAT_INTERVAL,
    DEFAULT_HTTP_TIMEOUT,
    DEFAULT_RETRIES,
    DEFAULT_RETRY_DELAY,
)
from fareplay.core.http.client import HttpClientConfig


class Settings(BaseSettings):
    """SDK settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="FAREPLAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # ============================================================
    # Discovery Service
    # ============================================================
    discovery_url: str = Field(DEFAULT_DISCOVERY_URL, description="Discovery Service base URL")
    api_key: Optional[str] = Field(None, description="Bearer token for the Discovery Service")

    # ============================================================
    # Casino identity
    # ============================================================
    casino_id: Optional[str] = Field(None, description="Registered casino ID")
    private_key: Optional[str] = Field(None, description="Base58 64-byte Ed25519 secret key")

    # ============================================================
    # HTTP transport (milliseconds)
    # ============================================================
    http_timeout: int = Field(DEFAULT_HTTP_TIMEOUT, gt=0, description="Per-attempt timeout (ms)")
    http_retries: int = Field(DEFAULT_RETRIES, ge=0, description="Retries after the first attempt")
    http_retry_delay: int = Field(DEFAULT_RETRY_DELAY, ge=0, description="Linear backoff unit (ms)")

    # ============================================================
    # Heartbeat
    # ============================================================
    heartbeat_interval: int = Field(DEFAULT_HEARTBEAT_INTERVAL, gt=0, description="Heartbeat interval (ms)")

    # ============================================================
    # Logging
    # ============================================================
    log_level: str = Field("INFO", description="Logging level")
    log_format: str = Field(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string"
    )

    def http_config(self, base_url: Optional[str] = None) -> HttpClientConfig:
        """
        Build transport configuration from these settings.

        Args:
            base_url: Override for discovery_url
        """
        headers = {}
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return HttpClientConfig(
            base_url=base_url or self.discovery_url,
            timeout=self.http_timeout,
            retries=self.http_retries,
            retry_delay=self.http_retry_delay,
            headers=headers,
        )


# Global settings instance
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get SDK settings (singleton).

    Returns:
        Settings instance
    """
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings():
    """Reload settings from environment (useful for testing)."""
    global _settings
    _settings = Settings()
    return _settings
