"""Initial cache reconciliation and manual refetch."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from enum import Enum

from badgevault.services.badge_models import AnnotatedRecord
from badgevault.services.fetch_scheduler import FetchScheduler
from badgevault.services.merger import combine
from badgevault.shared.constants import LogContextKeys, LogOperationNames
from badgevault.shared.errors import BadgeVaultError, ErrorCode, ErrorContext
from badgevault.shared.logging import log_operation_error
from badgevault.shared.protocols.services import (
    BadgeStoreProtocol,
    PlaceholderReason,
    Presenter,
)

logger = logging.getLogger(__name__)


class CacheState(str, Enum):
    """How a discovered item was served."""

    FRESH = "fresh"
    SOFT_STALE = "soft_stale"
    MISSING = "missing"


class BadgeOrchestrator:
    """Serves cached views immediately and schedules the fetches still needed.

    For each discovered item:

    - valid entry: presented with ``fresh=False``; queued only if soft-stale
    - invalid or absent entry: placeholder shown and always queued

    Entries without records are shown as a no-data placeholder instead
    of an empty view.
    """

    def __init__(
        self,
        store: BadgeStoreProtocol,
        scheduler: FetchScheduler,
        presenter: Presenter,
    ) -> None:
        self.store = store
        self.scheduler = scheduler
        self.presenter = presenter

    def reconcile(self, item_ids: Iterable[int]) -> dict[int, CacheState]:
        """Reconcile the cache for a set of discovered items.

        Duplicate ids are processed once, in first-seen order.

        Args:
            item_ids: Discovered item ids

        Returns:
            Mapping of item id to how it was served
        """
        states: dict[int, CacheState] = {}
        for item_id in item_ids:
            if item_id in states:
                continue
            states[item_id] = self._reconcile_one(item_id)

        logger.info(
            "Reconciled %d items: %d fresh, %d soft-stale, %d missing",
            len(states),
            sum(1 for s in states.values() if s is CacheState.FRESH),
            sum(1 for s in states.values() if s is CacheState.SOFT_STALE),
            sum(1 for s in states.values() if s is CacheState.MISSING),
            extra={
                "operation": LogOperationNames.RECONCILE,
                "context": {LogContextKeys.QUEUE_SIZE: len(self.scheduler.pending)},
            },
        )
        return states

    def _reconcile_one(self, item_id: int) -> CacheState:
        entry = self.store.get(item_id)

        if entry is None or not self.store.is_valid(entry):
            self._present_placeholder(item_id, PlaceholderReason.LOADING)
            self.scheduler.enqueue(item_id)
            return CacheState.MISSING

        if entry.has_records:
            view = combine(entry.enrichment_records, entry.crafted_normal, entry.crafted_foil)
            self._present(item_id, view)
        else:
            self._present_placeholder(item_id, PlaceholderReason.NO_DATA)

        if self.store.is_soft_stale(entry):
            self.scheduler.enqueue(item_id)
            return CacheState.SOFT_STALE
        return CacheState.FRESH

    def refetch(self, item_id: int) -> bool:
        """Drop the cached entry for an item and queue it again.

        Validity is not checked. The currently displayed view is left in
        place until the new cycle completes.

        Returns:
            True if the item was queued, False if it was already scheduled
        """
        removed = self.store.remove(item_id)
        queued = self.scheduler.enqueue(item_id)
        logger.info(
            "Manual refetch for item %d (cache entry removed: %s, queued: %s)",
            item_id,
            removed,
            queued,
            extra={"operation": LogOperationNames.REFETCH},
        )
        return queued

    def _present(self, item_id: int, view: Sequence[AnnotatedRecord]) -> None:
        try:
            self.presenter.present(item_id, view, False)
        except Exception as e:
            self._log_presenter_error(item_id, e)

    def _present_placeholder(self, item_id: int, reason: PlaceholderReason) -> None:
        try:
            self.presenter.present_placeholder(item_id, reason)
        except Exception as e:
            self._log_presenter_error(item_id, e)

    def _log_presenter_error(self, item_id: int, e: Exception) -> None:
        error = BadgeVaultError(
            code=ErrorCode.PRESENTER_ERROR,
            message=f"Presenter failed for item {item_id}: {e!s}",
            context=ErrorContext(operation=LogOperationNames.PRESENT, item_id=item_id),
            original_error=e,
        )
        log_operation_error(logger=logger, error=error)


__all__ = ["BadgeOrchestrator", "CacheState"]
