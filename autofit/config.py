"""
config.py — Environment configuration for auto-fit.

Uses pydantic-settings for type-safe environment variable handling. Every
setting can be overridden with an ``AUTOFIT_``-prefixed variable or a ``.env``
file, e.g. ``AUTOFIT_DEFAULT_MAX_FONT_SIZE=120`` or
``AUTOFIT_FONT_DIRS='["/srv/fonts"]'``.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from autofit.dsl.schema import (
    DEFAULT_FONT_FAMILY,
    DEFAULT_LINE_HEIGHT,
    DEFAULT_MAX_FONT_SIZE,
    DEFAULT_MIN_FONT_SIZE,
)
from autofit.engine.units import HEIGHT_TOLERANCE, MAX_SEARCH_ITERATIONS


class AutoFitSettings(BaseSettings):
    """Auto-fit settings loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="AUTOFIT_",
        extra="ignore",
    )

    # Size bounds used when a caller supplies none
    default_min_font_size: int = Field(default=DEFAULT_MIN_FONT_SIZE, ge=1)
    default_max_font_size: int = Field(default=DEFAULT_MAX_FONT_SIZE, ge=1)

    # Search policy
    max_search_iterations: int = Field(default=MAX_SEARCH_ITERATIONS, ge=1)
    height_tolerance: float = Field(default=HEIGHT_TOLERANCE, ge=0)

    # Fonts
    font_dirs: list[str] = Field(default_factory=list)
    default_font_family: str = DEFAULT_FONT_FAMILY
    default_line_height: float = Field(default=DEFAULT_LINE_HEIGHT, gt=0)

    # Batch fitting
    batch_max_workers: int = Field(default=4, ge=1)

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @model_validator(mode="after")
    def _validate_bounds(self) -> "AutoFitSettings":
        if self.default_max_font_size < self.default_min_font_size:
            raise ValueError(
                "default_max_font_size must be >= default_min_font_size"
            )
        return self


@lru_cache()
def get_settings() -> AutoFitSettings:
    """Get cached settings instance."""
    return AutoFitSettings()
