"""Cache configuration model.

This module contains the cache configuration model: database location,
TTL, the soft-refresh fraction and the TTL for degraded entries.
"""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

from pydantic import BaseModel, Field

from badgevault.shared.constants import Cache


def _default_db_path() -> Path:
    return Path.home() / ".badgevault" / Cache.DEFAULT_DB_FILENAME


class CacheSettings(BaseModel):
    """Cache configuration."""

    db_path: Path = Field(
        default_factory=_default_db_path,
        description="SQLite cache database file",
    )
    ttl: int = Field(
        default=Cache.TTL,
        gt=0,
        description="Cache time-to-live in seconds",
    )
    soft_refresh_fraction: float = Field(
        default=Cache.SOFT_REFRESH_FRACTION,
        gt=0,
        le=1,
        description="Entries older than ttl * fraction are refreshed in the background",
    )
    degraded_ttl: int | None = Field(
        default=None,
        gt=0,
        description="TTL in seconds for entries from failed fetches (None: same as ttl)",
    )

    @property
    def ttl_delta(self) -> timedelta:
        return timedelta(seconds=self.ttl)

    @property
    def degraded_ttl_delta(self) -> timedelta | None:
        if self.degraded_ttl is None:
            return None
        return timedelta(seconds=self.degraded_ttl)


__all__ = ["CacheSettings"]
