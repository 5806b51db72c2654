"""Serialized, deduplicating fetch queue for badge data.

A single asyncio worker task drains a FIFO of item ids. For each item it
runs one fetch cycle: the badge list call and two crafted-status calls,
each preceded by a mandatory pacing delay. The merged result is written
to the cache store and handed to the presenter.

At most one item is in flight at any time, and an id that is pending or
in flight is never queued a second time.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections import deque
from collections.abc import Awaitable, Callable

from badgevault.services.badge_models import BadgeVariant, CacheEntry
from badgevault.services.cache_policy import Clock, utc_now
from badgevault.services.merger import combine
from badgevault.shared.constants import LogContextKeys, LogOperationNames, NetworkConfig
from badgevault.shared.errors import BadgeVaultError, ErrorCode, ErrorContext
from badgevault.shared.logging import log_operation_error, log_operation_success
from badgevault.shared.protocols.services import (
    BadgeFetcherProtocol,
    BadgeStoreProtocol,
    PlaceholderReason,
    Presenter,
)

logger = logging.getLogger(__name__)

Sleep = Callable[[float], Awaitable[None]]


class FetchScheduler:
    """Owns the pending queue, the in-flight marker and the worker task.

    ``enqueue`` must be called from inside a running event loop; the
    worker is started on demand and exits when the queue is empty.

    Args:
        fetcher: Remote badge data fetcher
        store: Cache store receiving each completed cycle
        presenter: Receives the fresh view of each completed cycle
        delay_before_enrichment_call: Seconds to wait before the badge list call
        delay_before_crafted_call: Seconds to wait before each crafted-status call
        clock: Returns the timestamp stamped on new cache entries
        sleep: Awaitable used for the pacing delays

    Example:
        >>> scheduler = FetchScheduler(fetcher, store, presenter)
        >>> scheduler.enqueue(730)
        True
        >>> await scheduler.wait_idle()
    """

    def __init__(
        self,
        fetcher: BadgeFetcherProtocol,
        store: BadgeStoreProtocol,
        presenter: Presenter,
        *,
        delay_before_enrichment_call: float = NetworkConfig.DELAY_BEFORE_ENRICHMENT_CALL,
        delay_before_crafted_call: float = NetworkConfig.DELAY_BEFORE_CRAFTED_CALL,
        clock: Clock = utc_now,
        sleep: Sleep = asyncio.sleep,
    ) -> None:
        if delay_before_enrichment_call < 0 or delay_before_crafted_call < 0:
            msg = "Fetch delays must be non-negative"
            raise ValueError(msg)

        self.fetcher = fetcher
        self.store = store
        self.presenter = presenter
        self.delay_before_enrichment_call = delay_before_enrichment_call
        self.delay_before_crafted_call = delay_before_crafted_call
        self._clock = clock
        self._sleep = sleep

        self._pending: deque[int] = deque()
        self._in_flight: int | None = None
        self._worker: asyncio.Task[None] | None = None
        self._idle = asyncio.Event()
        self._idle.set()

    @property
    def pending(self) -> tuple[int, ...]:
        """Queued item ids in processing order (excludes the in-flight item)."""
        return tuple(self._pending)

    @property
    def in_flight(self) -> int | None:
        return self._in_flight

    @property
    def is_running(self) -> bool:
        return self._worker is not None and not self._worker.done()

    def is_scheduled(self, item_id: int) -> bool:
        return item_id == self._in_flight or item_id in self._pending

    def enqueue(self, item_id: int) -> bool:
        """Queue an item for fetching.

        Args:
            item_id: Item (app) id

        Returns:
            True if the item was appended, False if it was already pending
            or in flight

        Raises:
            RuntimeError: If called without a running event loop
        """
        loop = asyncio.get_running_loop()
        if self.is_scheduled(item_id):
            logger.debug("Item %d already scheduled, skipping enqueue", item_id)
            return False

        self._pending.append(item_id)
        self._idle.clear()
        logger.debug(
            "Queued item %d",
            item_id,
            extra={"context": {LogContextKeys.QUEUE_SIZE: len(self._pending)}},
        )
        self._ensure_worker(loop)
        return True

    def _ensure_worker(self, loop: asyncio.AbstractEventLoop) -> None:
        if self.is_running:
            return
        self._worker = loop.create_task(self._run(), name="badgevault-fetch-worker")

    async def _run(self) -> None:
        try:
            while self._pending:
                item_id = self._pending.popleft()
                self._in_flight = item_id
                try:
                    await self._process(item_id)
                except asyncio.CancelledError:
                    raise
                except Exception:
                    logger.exception("Fetch cycle for item %d failed unexpectedly", item_id)
                finally:
                    self._in_flight = None
        finally:
            if not self._pending:
                self._idle.set()

    async def _process(self, item_id: int) -> None:
        """Run one fetch cycle, persist it and notify the presenter."""
        start = time.perf_counter()
        self._notify_updating(item_id)

        await self._sleep(self.delay_before_enrichment_call)
        enrichment = await self.fetcher.fetch_enrichment_outcome(item_id)

        await self._sleep(self.delay_before_crafted_call)
        normal = await self.fetcher.fetch_crafted_info_outcome(item_id, BadgeVariant.NORMAL)

        await self._sleep(self.delay_before_crafted_call)
        foil = await self.fetcher.fetch_crafted_info_outcome(item_id, BadgeVariant.FOIL)

        degraded = not (enrichment.ok and normal.ok and foil.ok)
        entry = CacheEntry(
            item_id=item_id,
            created_at=self._clock(),
            enrichment_records=tuple(enrichment.payload),
            crafted_normal=normal.payload,
            crafted_foil=foil.payload,
            degraded=degraded,
        )

        if not self.store.put(item_id, entry):
            logger.warning("Fetched data for item %d could not be cached", item_id)

        self._notify_fresh(entry)

        log_operation_success(
            logger=logger,
            operation=LogOperationNames.FETCH_CYCLE,
            duration_ms=(time.perf_counter() - start) * 1000,
            result_info={
                LogContextKeys.RECORD_COUNT: len(entry.enrichment_records),
                LogContextKeys.DEGRADED: degraded,
            },
            context={
                LogContextKeys.ITEM_ID: item_id,
                LogContextKeys.QUEUE_SIZE: len(self._pending),
            },
        )

    def _notify_updating(self, item_id: int) -> None:
        present_updating = getattr(self.presenter, "present_updating", None)
        if present_updating is None:
            return
        self._call_presenter(item_id, present_updating, item_id)

    def _notify_fresh(self, entry: CacheEntry) -> None:
        if entry.has_records:
            view = combine(entry.enrichment_records, entry.crafted_normal, entry.crafted_foil)
            self._call_presenter(entry.item_id, self.presenter.present, entry.item_id, view, True)
        else:
            self._call_presenter(
                entry.item_id,
                self.presenter.present_placeholder,
                entry.item_id,
                PlaceholderReason.NO_DATA,
            )

    def _call_presenter(self, item_id: int, method: Callable[..., object], *args: object) -> None:
        try:
            method(*args)
        except Exception as e:
            error = BadgeVaultError(
                code=ErrorCode.PRESENTER_ERROR,
                message=f"Presenter failed for item {item_id}: {e!s}",
                context=ErrorContext(operation=LogOperationNames.PRESENT, item_id=item_id),
                original_error=e,
            )
            log_operation_error(logger=logger, error=error)

    async def wait_idle(self) -> None:
        """Wait until the queue is drained and no item is in flight."""
        await self._idle.wait()

    async def aclose(self) -> None:
        """Stop the worker and drop pending items.

        An in-flight cycle is cancelled at its next suspension point and
        its result is discarded.
        """
        dropped = len(self._pending)
        self._pending.clear()
        worker, self._worker = self._worker, None
        if worker is not None and not worker.done():
            worker.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await worker
        self._in_flight = None
        self._idle.set()
        if dropped:
            logger.info("Fetch scheduler closed, dropped %d pending items", dropped)


__all__ = ["FetchScheduler"]
