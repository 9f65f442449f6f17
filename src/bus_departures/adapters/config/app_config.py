"""12-factor configuration adapter using environment variables."""

from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Server configuration
    host: str = Field(default="0.0.0.0", description="Host to bind the server to")
    port: int = Field(default=3000, description="Port to bind the server to")
    log_level: str = Field(default="INFO", description="Root logging level")

    # Schedule configuration
    timezone: str = Field(
        default="UTC",
        description="Timezone for all departure calculations (IANA timezone name, e.g., 'Europe/Berlin')",
    )
    schedule_file: str = Field(
        default="buses.json",
        description="Path to the bus schedule file (.json or .toml)",
    )

    # Delivery configuration
    static_dir: str = Field(
        default="public",
        description="Directory with the dashboard's HTML, CSS and JavaScript",
    )
    push_interval_seconds: float = Field(
        default=1.0,
        description="Interval between departure board pushes to each connected browser",
    )
    rate_limit_per_minute: int = Field(
        default=100,
        description="Maximum number of departure board requests allowed per IP address per minute",
    )

    @classmethod
    def for_testing(cls, **overrides: Any) -> "AppConfig":
        """Create a config that ignores the .env file, for use in tests."""
        return cls(_env_file=None, **overrides)

    @field_validator("timezone")
    @classmethod
    def validate_timezone(cls, v: str) -> str:
        """Validate timezone is a known IANA timezone name."""
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ValueError(f"timezone must be a valid IANA timezone name, got '{v}'") from e
        return v

    @field_validator("push_interval_seconds")
    @classmethod
    def validate_push_interval(cls, v: float) -> float:
        """Validate push interval is positive."""
        if v <= 0:
            raise ValueError("push_interval_seconds must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("log_level must be one of DEBUG, INFO, WARNING, ERROR, CRITICAL")
        return level

    @property
    def zone(self) -> ZoneInfo:
        """The configured timezone."""
        return ZoneInfo(self.timezone)
