"""Pydantic models for application settings."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from wp_manager.config.constants import (
    DEFAULT_SYNC_INTERVAL,
    DEFAULT_TIMEOUT,
    OUTPUT_FORMATS,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Operator settings stored in ``config.toml``."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True)

    default_format: str = Field(default="table", description="Output format")
    timeout: float = Field(
        default=DEFAULT_TIMEOUT, gt=0, le=600,
        description="Request timeout in seconds, applied to every site call",
    )
    refresh_concurrency: int = Field(
        default=1, ge=1, le=64,
        description="Sites refreshed at once by refresh-all (1 = sequential)",
    )
    install_concurrency: int = Field(
        default=1, ge=1, le=64,
        description="Sites installed on at once by install-on-many",
    )
    auto_sync: bool = Field(default=True, description="Refresh periodically in watch mode")
    sync_interval: int = Field(
        default=DEFAULT_SYNC_INTERVAL, ge=1,
        description="Minutes between refreshes in watch mode",
    )
    log_level: str = Field(default="WARNING", description="Logging level")
    sites_file: str | None = Field(default=None, description="Path of the sites store")

    @field_validator("default_format")
    @classmethod
    def validate_format(cls, v: str) -> str:
        if v not in OUTPUT_FORMATS:
            raise ValueError(f"format must be one of: {', '.join(OUTPUT_FORMATS)}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"log level must be one of: {', '.join(LOG_LEVELS)}")
        return v
