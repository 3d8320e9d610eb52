"""
Environment-driven configuration using Pydantic Settings.
Values come from STATION_FINDER_* environment variables or a .env file.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class GeocoderSettings(BaseSettings):
    """Nominatim geocoder used by the station loader."""

    model_config = SettingsConfigDict(env_prefix="STATION_FINDER_GEOCODER_")

    url: str = Field(
        default="https://nominatim.openstreetmap.org/search",
        description="Nominatim search endpoint"
    )
    user_agent: str = Field(default="FuelStationFinder/1.0", description="User-Agent sent to Nominatim")
    timeout_seconds: int = Field(default=10, description="Request timeout")
    delay_seconds: float = Field(default=1.0, ge=0.0, description="Pause between uncached lookups")


class AppSettings(BaseSettings):
    """Main application settings."""

    model_config = SettingsConfigDict(
        env_prefix="STATION_FINDER_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    environment: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Deployment environment"
    )
    debug: bool = Field(default=False, description="Django DEBUG")
    secret_key: str = Field(
        default="django-insecure-station-finder-dev-key",
        description="Django SECRET_KEY"
    )
    allowed_hosts: list[str] = Field(default=["*"], description="Django ALLOWED_HOSTS")
    log_level: str = Field(default="INFO", description="Logging level")
    database_path: str = Field(default="db.sqlite3", description="SQLite database file")

    # Station query policy
    strict_query_validation: bool = Field(
        default=False,
        description="Reject malformed query parameters instead of ignoring them"
    )
    pagination_mode: Literal["sort_then_paginate", "paginate_then_sort"] = Field(
        default="sort_then_paginate",
        description="Cut the page after (default) or before the distance sort"
    )

    geocoder: GeocoderSettings = Field(default_factory=GeocoderSettings)

    @field_validator("allowed_hosts", mode="before")
    @classmethod
    def parse_allowed_hosts(cls, v: str | list[str]) -> list[str]:
        if isinstance(v, str):
            return [host.strip() for host in v.split(",")]
        return v


@lru_cache
def get_settings() -> AppSettings:
    """Get cached settings instance."""
    return AppSettings()
