"""TTL validity and soft-refresh policy for badge cache entries."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from badgevault.services.badge_models import CacheEntry
from badgevault.shared.constants import Cache

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CachePolicy:
    """Decides whether a cache entry may be served and whether to refresh it.

    An entry is valid while its age is strictly below the TTL; at exactly
    the TTL it is invalid. A valid entry whose age exceeds
    ``ttl * soft_refresh_fraction`` is soft-stale: it is still served, but
    a background refresh is scheduled.

    Entries produced by a degraded fetch cycle use ``degraded_ttl`` instead
    of ``ttl``. By default both are equal, so a transient remote failure
    suppresses automatic retries for the whole TTL window.

    Args:
        ttl: Maximum entry age
        soft_refresh_fraction: Fraction of the TTL after which entries are soft-stale
        degraded_ttl: TTL for degraded entries (None means same as ttl)
        clock: Returns the current UTC time
    """

    def __init__(
        self,
        ttl: timedelta = timedelta(seconds=Cache.TTL),
        soft_refresh_fraction: float = Cache.SOFT_REFRESH_FRACTION,
        degraded_ttl: timedelta | None = None,
        clock: Clock = utc_now,
    ) -> None:
        if ttl <= timedelta(0):
            msg = f"ttl must be positive, got {ttl}"
            raise ValueError(msg)
        if not 0 < soft_refresh_fraction <= 1:
            msg = f"soft_refresh_fraction must be in (0, 1], got {soft_refresh_fraction}"
            raise ValueError(msg)
        if degraded_ttl is not None and degraded_ttl <= timedelta(0):
            msg = f"degraded_ttl must be positive, got {degraded_ttl}"
            raise ValueError(msg)

        self.ttl = ttl
        self.soft_refresh_fraction = soft_refresh_fraction
        self.degraded_ttl = degraded_ttl
        self.clock = clock

    def now(self) -> datetime:
        return self.clock()

    def effective_ttl(self, entry: CacheEntry) -> timedelta:
        if entry.degraded and self.degraded_ttl is not None:
            return self.degraded_ttl
        return self.ttl

    def age(self, entry: CacheEntry) -> timedelta:
        return self.now() - entry.created_at

    def is_valid(self, entry: CacheEntry | None) -> bool:
        """Check structure and age of an entry.

        Args:
            entry: Cache entry or None

        Returns:
            True if the entry is well-formed and younger than its TTL
        """
        if entry is None:
            return False
        if not isinstance(entry, CacheEntry) or not entry.is_well_formed():
            logger.info("Cache entry has invalid structure: %r", entry)
            return False
        return self.age(entry) < self.effective_ttl(entry)

    def is_soft_stale(self, entry: CacheEntry) -> bool:
        """Check whether an entry is older than the soft-refresh threshold."""
        return self.age(entry) > self.effective_ttl(entry) * self.soft_refresh_fraction
