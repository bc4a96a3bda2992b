"""Application settings models."""

from pydantic import BaseModel, ConfigDict, Field, field_validator

from kafkalens.constants.defaults import (
    BACKEND_COMMAND_DEFAULT,
    CACHE_MAX_ENTRIES_DEFAULT,
    DEFAULT_QUERY,
    LOG_LEVEL_DEFAULT,
    LOG_LEVELS,
    PAGE_SIZE_DEFAULT,
)
from kafkalens.constants.timeouts import CONSUMER_POLL_INTERVAL_MS
from kafkalens.errors import ConfigError, ConfigLoadError, ConfigSaveError


class AppSettings(BaseModel):
    """Application settings model with validation."""

    model_config = ConfigDict(populate_by_name=True, validate_assignment=True)

    # Backend process
    backend_command: str = BACKEND_COMMAND_DEFAULT

    # Topic view
    poll_interval_ms: int = Field(default=CONSUMER_POLL_INTERVAL_MS, gt=0)
    default_query: str = DEFAULT_QUERY
    page_size: int = Field(default=PAGE_SIZE_DEFAULT, gt=0)

    # Navigation cache bound, 0 = unbounded
    cache_max_entries: int = Field(default=CACHE_MAX_ENTRIES_DEFAULT, ge=0)

    log_level: str = LOG_LEVEL_DEFAULT

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {value}")
        return level

    @field_validator("backend_command")
    @classmethod
    def _require_backend_command(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("backend_command must not be empty")
        return value.strip()


__all__ = [
    "AppSettings",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSaveError",
]
