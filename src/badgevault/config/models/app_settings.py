"""Application-level configuration: logging and presentation."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from badgevault.shared.constants import LoggingDefaults

_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: str = Field(default=LoggingDefaults.LEVEL, description="Log level")
    file: str | None = Field(default=None, description="Optional JSON log file")
    rich_console: bool = Field(
        default=True,
        description="Use rich console output (False: JSON lines on stderr)",
    )

    @field_validator("level")
    @classmethod
    def _validate_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in _LEVELS:
            msg = f"level must be one of {_LEVELS}, got {value!r}"
            raise ValueError(msg)
        return upper


class PresenterSettings(BaseModel):
    """Display flags consumed by the console presenter only."""

    show_cached_marker: bool = Field(
        default=True,
        description="Mark views rendered from cached data",
    )
    show_refetch_hint: bool = Field(
        default=True,
        description="Show how to force a re-fetch under each view",
    )
    show_updating_notice: bool = Field(
        default=True,
        description="Announce when a shown view is being refreshed",
    )


__all__ = ["LoggingSettings", "PresenterSettings"]
