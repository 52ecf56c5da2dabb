"""Configuration and environment handling for hpgroups."""

import os
from typing import Literal

from pydantic import BaseModel, Field

__all__ = [
    "EngineSettings",
    "get_settings",
    "reset_settings",
]


def _optional_float(value: str | None) -> float | None:
    if value is None or value == "":
        return None
    return float(value)


class EngineSettings(BaseModel):
    """Query engine settings.

    Includes the aggregation cache bound, pagination limits and the
    default query deadline.

    All settings can be customized via environment variables.
    """

    aggregation_cache_size: int = Field(
        default=32,
        ge=0,
        description="Maximum number of cached aggregation results (0 disables caching)",
    )

    default_slice_size: int = Field(
        default=100,
        ge=0,
        description="Slice size used when a request does not specify one",
    )

    max_slice_size: int = Field(
        default=10_000,
        ge=0,
        description="Largest slice size a request may ask for",
    )

    query_timeout_secs: float | None = Field(
        default=None,
        gt=0,
        description="Deadline applied to queries that are not given a cancellation token",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Level of the hpgroups logger set up by the CLI",
    )

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Create EngineSettings from environment variables.

        Environment variables:
        - HPGROUPS_AGGREGATION_CACHE_SIZE: Cached aggregation results (default: 32)
        - HPGROUPS_DEFAULT_SLICE_SIZE: Default slice size (default: 100)
        - HPGROUPS_MAX_SLICE_SIZE: Maximum slice size (default: 10000)
        - HPGROUPS_QUERY_TIMEOUT_SECS: Default query deadline in seconds (default: none)
        - HPGROUPS_LOG_LEVEL: Logger level used by the CLI (default: WARNING)
        """
        return cls(
            aggregation_cache_size=int(
                os.environ.get("HPGROUPS_AGGREGATION_CACHE_SIZE", cls.model_fields["aggregation_cache_size"].default)
            ),
            default_slice_size=int(os.environ.get("HPGROUPS_DEFAULT_SLICE_SIZE", cls.model_fields["default_slice_size"].default)),
            max_slice_size=int(os.environ.get("HPGROUPS_MAX_SLICE_SIZE", cls.model_fields["max_slice_size"].default)),
            query_timeout_secs=_optional_float(os.environ.get("HPGROUPS_QUERY_TIMEOUT_SECS")),
            log_level=os.environ.get("HPGROUPS_LOG_LEVEL", cls.model_fields["log_level"].default).upper(),
        )


# Global settings instance
_settings: EngineSettings | None = None


def get_settings() -> EngineSettings:
    """Get engine settings.

    Returns cached instance if already initialized.
    """
    global _settings
    if _settings is None:
        _settings = EngineSettings.from_env()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    global _settings
    _settings = None
