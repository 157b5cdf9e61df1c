"""Application configuration and environment helpers."""

from __future__ import annotations

from functools import lru_cache
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TIMEZONE = "America/Argentina/Buenos_Aires"
DEFAULT_USER_AGENT = "Dashboard-Argentina/2.0"
DEFAULT_UPSTREAM_TIMEOUT_SECONDS = 8.0


class AppSettings(BaseSettings):
    """Configuration options for the dashboard service."""

    app_name: str = Field(default="Dashboard Económico Argentina")
    timezone: str = Field(default=DEFAULT_TIMEZONE)

    argenstats_base_url: str = Field(default="https://argenstats.com/api")
    argenstats_api_key: str | None = Field(
        default=None,
        description="Optional ArgenStats key, sent as the x-api-key header.",
    )
    bcra_base_url: str = Field(default="https://api.bcra.gob.ar/estadisticas/v3")
    series_base_url: str = Field(default="https://apis.datos.gob.ar/series/api")
    presupuesto_base_url: str | None = Field(
        default=None,
        description="Base URL for the open budget API; fallback data is served when unset.",
    )
    presupuesto_api_token: str | None = Field(default=None)

    user_agent: str = Field(default=DEFAULT_USER_AGENT)
    upstream_timeout_seconds: float = Field(default=DEFAULT_UPSTREAM_TIMEOUT_SECONDS, gt=0)
    historical_cache_max_age_seconds: int = Field(default=300, ge=0)

    dashboard_base_url: str = Field(default="http://localhost:8000")
    dashboard_refresh_seconds: float = Field(default=300.0, gt=0)

    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:3000", "http://127.0.0.1:3000"]
    )

    telemetry_enabled: bool = Field(default=False)
    telemetry_service_name: str = Field(default="argdash")
    telemetry_otlp_endpoint: str | None = Field(default=None)
    telemetry_otlp_insecure: bool = Field(default=True)
    telemetry_sample_ratio: float = Field(default=1.0, ge=0.0, le=1.0)

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @property
    def has_argenstats_key(self) -> bool:
        return bool(self.argenstats_api_key)

    def dict_for_logging(self) -> dict[str, Any]:
        """Return a sanitized dict for logging purposes."""

        hidden = {"argenstats_api_key", "presupuesto_api_token"}
        return {k: ("***" if k in hidden and v else v) for k, v in self.model_dump().items()}


@lru_cache(maxsize=1)
def get_settings(**overrides: Any) -> AppSettings:
    """Return cached application settings with optional overrides."""

    if overrides:
        return AppSettings(**overrides)
    return AppSettings()


__all__ = [
    "AppSettings",
    "DEFAULT_TIMEZONE",
    "DEFAULT_UPSTREAM_TIMEOUT_SECONDS",
    "DEFAULT_USER_AGENT",
    "get_settings",
]
