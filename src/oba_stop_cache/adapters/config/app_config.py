"""12-factor configuration adapter using environment variables."""

from datetime import timedelta
from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from oba_stop_cache.domain.models.geohash import MAX_PRECISION


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # OBA REST API configuration
    oba_api_base_url: str = Field(
        default="https://api.pugetsound.onebusaway.org",
        description="Base URL of the OneBusAway REST API server for the selected region",
    )
    oba_api_key: str = Field(
        default="TEST", description="API key sent as the 'key' query parameter"
    )
    oba_api_timeout: int = Field(default=10, description="Timeout for OBA API requests in seconds")
    oba_api_min_delay_seconds: float = Field(
        default=0.0,
        description="Minimum delay in seconds between OBA API requests (0 disables rate limiting)",
    )

    # Stop cache configuration
    geohash_precision: int = Field(
        default=6,
        description="Geohash precision of cached cells (6 yields cells of ~1.22km x 0.61km)",
    )
    cache_expiration_minutes: int = Field(
        default=60, description="Minutes after which a cached cell is refetched"
    )

    # Logging
    log_level: str = Field(default="INFO", description="Root log level")

    @field_validator("oba_api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate the base URL is http(s) and strip any trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("oba_api_base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("geohash_precision")
    @classmethod
    def validate_geohash_precision(cls, v: int) -> int:
        """Validate the geohash precision is within the encodable range."""
        if not 1 <= v <= MAX_PRECISION:
            raise ValueError(f"geohash_precision must be between 1 and {MAX_PRECISION}")
        return v

    @field_validator("cache_expiration_minutes")
    @classmethod
    def validate_cache_expiration(cls, v: int) -> int:
        """Validate the expiration window is positive."""
        if v <= 0:
            raise ValueError("cache_expiration_minutes must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate the log level is a standard logging level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    @property
    def cache_expiration(self) -> timedelta:
        return timedelta(minutes=self.cache_expiration_minutes)

    @classmethod
    def for_testing(cls, **overrides: Any) -> "AppConfig":
        """Create a config that ignores any .env file."""
        return cls(_env_file=None, **overrides)
