"""BadgeVault services: cache, remote fetching, merging and scheduling."""

from badgevault.services.badge_models import (
    AnnotatedRecord,
    BadgeVariant,
    CacheEntry,
    CraftedInfo,
    EnrichmentRecord,
)
from badgevault.services.cache_policy import CachePolicy
from badgevault.services.fetch_scheduler import FetchScheduler
from badgevault.services.merger import combine
from badgevault.services.orchestrator import BadgeOrchestrator, CacheState
from badgevault.services.pipeline import BadgePipeline, build_store, open_pipeline
from badgevault.services.sqlite_cache import BadgeCacheStore
from badgevault.services.steam import BadgeDataFetcher, FetchOutcome

__all__ = [
    "AnnotatedRecord",
    "BadgePipeline",
    "BadgeCacheStore",
    "BadgeDataFetcher",
    "BadgeOrchestrator",
    "BadgeVariant",
    "CacheEntry",
    "CachePolicy",
    "CacheState",
    "CraftedInfo",
    "EnrichmentRecord",
    "FetchOutcome",
    "FetchScheduler",
    "build_store",
    "combine",
    "open_pipeline",
]
