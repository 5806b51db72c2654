"""SQLite badge cache with modular operations.

Separates query, upsert, update and migration concerns behind the
BadgeCacheStore facade.
"""

from badgevault.services.sqlite_cache.cache_db import BadgeCacheStore

__all__ = ["BadgeCacheStore"]
