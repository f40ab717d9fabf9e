"""
Configuration Management Module

Configures gateway parameters via environment variables, a .env file, or an
optional JSON settings file.
"""

import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Literal, Optional

from pydantic import field_validator
from pydantic_settings import (
    BaseSettings,
    JsonConfigSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

SETTINGS_FILE_ENV = "SSE_GATEWAY_SETTINGS_FILE"


def _settings_file() -> Optional[Path]:
    """Locate the JSON settings file, if any."""
    explicit = os.getenv(SETTINGS_FILE_ENV)
    if explicit:
        return Path(explicit)
    candidate = Path.cwd() / "settings.json"
    if candidate.exists():
        return candidate
    return None


class Settings(BaseSettings):
    """
    Gateway Configuration Class

    All configuration items can be overridden by environment variables, with names matching fields (uppercase).
    Precedence: init kwargs > environment > .env > JSON settings file > defaults.
    """

    # Application Config
    APP_NAME: str = "SSE Gateway"
    DEBUG: bool = False

    # Listen Config
    LISTEN_HOST: str = "127.0.0.1"
    LISTEN_PORT: int = 3002

    # Upstream Timeouts (seconds, 0 disables)
    # Connection-level timeout for the outbound request, overridable per request
    REQUEST_TIMEOUT_DEFAULT: float = 60
    # Watchdog armed when SSE response headers arrive; not reset per chunk
    SSE_READ_TIMEOUT_DEFAULT: float = 120

    # SSE Limits (0 disables)
    SSE_MAX_BODY_BYTES: int = 10 * 1024 * 1024
    SSE_MAX_DURATION_SEC: float = 300
    # What to do when a limit is breached: "413", "504" or "close"
    ON_LIMIT: Literal["413", "504", "close"] = "413"

    # TLS Config
    TLS_REJECT_UNAUTHORIZED: bool = True
    # Optional CA bundle (PEM) attached to every verified TLS connection
    TLS_CA_FILE: str = ""

    # CORS Config
    CORS_ENABLED: bool = False
    # "*" or comma-separated list of allowed origins
    CORS_ALLOWED_ORIGINS: str = "*"

    # SSE Aggregation Config
    SSE_RESPONSE_CONTENT_TYPE: str = "text/plain; charset=utf-8"
    SSE_AGGREGATION_MODE: Literal["raw", "final-text", "smart"] = "raw"

    # Upstream Policy
    # Comma-separated list of allowed upstream hostnames; empty allows every host
    UPSTREAM_ALLOWED_HOSTS: str = ""

    # Inbound Limits
    # Maximum inbound request body size in bytes (0 = unlimited)
    MAX_REQUEST_BODY_BYTES: int = 1024 * 1024

    # Health Check Config
    HEALTH_ENABLED: bool = True
    HEALTH_PATH_HEALTHZ: str = "/healthz"
    HEALTH_PATH_READY: str = "/ready"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    @field_validator("UPSTREAM_ALLOWED_HOSTS", "CORS_ALLOWED_ORIGINS", mode="before")
    @classmethod
    def join_list_values(cls, v: Any) -> Any:
        """Accept JSON lists from the settings file"""
        if isinstance(v, (list, tuple)):
            return ",".join(str(item) for item in v)
        return v

    @field_validator("ON_LIMIT", mode="before")
    @classmethod
    def stringify_on_limit(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v

    @property
    def allowed_hosts(self) -> list[str]:
        return [h.strip() for h in self.UPSTREAM_ALLOWED_HOSTS.split(",") if h.strip()]

    @property
    def cors_origins(self) -> list[str]:
        value = self.CORS_ALLOWED_ORIGINS.strip()
        if value == "*":
            return ["*"]
        return [o.strip() for o in value.split(",") if o.strip()]

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonConfigSettingsSource(settings_cls, json_file=_settings_file()),
            file_secret_settings,
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get gateway configuration (Singleton)

    Uses lru_cache to ensure configuration is loaded only once.

    Returns:
        Settings: Gateway configuration instance
    """
    return Settings()
