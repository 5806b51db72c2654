"""Service protocols for dependency inversion.

The fetch scheduler and orchestrator depend on these interfaces rather
than on the concrete SQLite store, aiohttp fetcher or console presenter,
so each can be replaced by a test double or another frontend.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from badgevault.services.badge_models import (
        AnnotatedRecord,
        BadgeVariant,
        CacheEntry,
        CraftedInfo,
        EnrichmentRecord,
    )
    from badgevault.services.steam.badge_fetcher import FetchOutcome


class PlaceholderReason(str, Enum):
    """Why a placeholder is shown instead of badge data."""

    LOADING = "loading"
    NO_DATA = "no_data"


class BadgeFetcherProtocol(Protocol):
    """Protocol for the remote badge data fetcher.

    Every method is total: failures are reported through the outcome,
    never raised.
    """

    async def fetch_enrichment_outcome(
        self, item_id: int
    ) -> FetchOutcome[list[EnrichmentRecord]]:
        """Fetch the badge list for an item."""
        ...

    async def fetch_crafted_info_outcome(
        self, item_id: int, variant: BadgeVariant
    ) -> FetchOutcome[CraftedInfo]:
        """Fetch the crafted status of one badge variant."""
        ...


class BadgeStoreProtocol(Protocol):
    """Protocol for the badge cache store."""

    def get(self, item_id: int) -> CacheEntry | None: ...

    def put(self, item_id: int, entry: CacheEntry) -> bool: ...

    def remove(self, item_id: int) -> bool: ...

    def is_valid(self, entry: CacheEntry | None) -> bool: ...

    def is_soft_stale(self, entry: CacheEntry) -> bool: ...


@runtime_checkable
class Presenter(Protocol):
    """Receives views produced by the pipeline.

    Implementations must not raise; an exception escaping a presenter is
    logged and otherwise ignored.
    """

    def present(
        self,
        item_id: int,
        records: Sequence[AnnotatedRecord],
        fresh: bool,
    ) -> None:
        """Show badge records for an item.

        Args:
            item_id: Item (app) id
            records: Records in display order with highlight flags
            fresh: True if the data was just fetched, False if served from cache
        """
        ...

    def present_placeholder(self, item_id: int, reason: PlaceholderReason) -> None:
        """Show a loading or no-data state for an item."""
        ...

    def present_updating(self, item_id: int) -> None:
        """Signal that a background refresh for an item has started."""
        ...


class BasePresenter:
    """Presenter base class with a no-op updating signal."""

    def present(
        self,
        item_id: int,
        records: Sequence[AnnotatedRecord],
        fresh: bool,
    ) -> None:
        raise NotImplementedError

    def present_placeholder(self, item_id: int, reason: PlaceholderReason) -> None:
        raise NotImplementedError

    def present_updating(self, item_id: int) -> None:
        return None


__all__ = [
    "BadgeFetcherProtocol",
    "BadgeStoreProtocol",
    "BasePresenter",
    "PlaceholderReason",
    "Presenter",
]
