"""Wiring of store, fetcher, scheduler and orchestrator from settings."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from badgevault.config.models.settings import Settings
from badgevault.services.cache_policy import CachePolicy
from badgevault.services.fetch_scheduler import FetchScheduler
from badgevault.services.orchestrator import BadgeOrchestrator
from badgevault.services.sqlite_cache import BadgeCacheStore
from badgevault.services.steam import BadgeDataFetcher
from badgevault.shared.protocols.services import Presenter


@dataclass
class BadgePipeline:
    store: BadgeCacheStore
    fetcher: BadgeDataFetcher
    scheduler: FetchScheduler
    orchestrator: BadgeOrchestrator


def build_store(settings: Settings) -> BadgeCacheStore:
    policy = CachePolicy(
        ttl=settings.cache.ttl_delta,
        soft_refresh_fraction=settings.cache.soft_refresh_fraction,
        degraded_ttl=settings.cache.degraded_ttl_delta,
    )
    return BadgeCacheStore(settings.cache.db_path, policy=policy)


@asynccontextmanager
async def open_pipeline(
    settings: Settings,
    presenter: Presenter,
) -> AsyncIterator[BadgePipeline]:
    """Build the full pipeline and release its resources on exit.

    Pending fetches are dropped on exit; callers that want them completed
    await ``pipeline.scheduler.wait_idle()`` first.
    """
    store = build_store(settings)
    fetcher = BadgeDataFetcher(settings.api)
    scheduler = FetchScheduler(
        fetcher,
        store,
        presenter,
        delay_before_enrichment_call=settings.queue.delay_before_enrichment_call,
        delay_before_crafted_call=settings.queue.delay_before_crafted_call,
        clock=store.policy.clock,
    )
    orchestrator = BadgeOrchestrator(store, scheduler, presenter)
    try:
        yield BadgePipeline(store, fetcher, scheduler, orchestrator)
    finally:
        await scheduler.aclose()
        await fetcher.close()
        store.close()


__all__ = ["BadgePipeline", "build_store", "open_pipeline"]
