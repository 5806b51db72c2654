"""SQLite badge cache facade.

This module provides the durable per-item cache used by the fetch
pipeline. Reads and writes never raise: storage failures degrade to a
cache miss (``get``) or an unsaved result (``put``/``remove`` return
False) and are logged.
"""

from __future__ import annotations

import dataclasses
import logging
import sqlite3
import time
from pathlib import Path
from typing import Any

from badgevault.services.badge_models import CacheEntry
from badgevault.services.cache_policy import CachePolicy
from badgevault.services.sqlite_cache.migration.manager import MigrationManager
from badgevault.services.sqlite_cache.operations.base import to_epoch
from badgevault.services.sqlite_cache.operations.query import QueryOperations
from badgevault.services.sqlite_cache.operations.update import UpdateOperations
from badgevault.services.sqlite_cache.operations.upsert import UpsertOperations
from badgevault.shared.constants import LogContextKeys, LogOperationNames
from badgevault.shared.errors import (
    ErrorCode,
    ErrorContext,
    InvalidCacheEntryError,
    StorageError,
)
from badgevault.shared.logging import log_operation_error, log_operation_success

logger = logging.getLogger(__name__)


class BadgeCacheStore:
    """SQLite-backed cache holding one merged badge entry per item id.

    Uses WAL mode and auto-commit; every entry is independent, so no
    multi-key transactions are needed.

    Attributes:
        db_path: Path to SQLite database file
        policy: Validity and soft-refresh policy
        conn: SQLite connection (None if the database could not be opened)

    Example:
        >>> store = BadgeCacheStore(Path("badge_cache.db"))
        >>> store.put(730, entry)
        True
        >>> store.is_valid(store.get(730))
        True
        >>> store.close()
    """

    def __init__(
        self,
        db_path: Path | str,
        policy: CachePolicy | None = None,
    ) -> None:
        """Open (or create) the cache database.

        A database that cannot be opened is logged and leaves the store in
        a degraded state where every read misses and every write fails.

        Args:
            db_path: Path to SQLite database file
            policy: Cache policy (defaults to a 7 day TTL)
        """
        self.db_path = Path(db_path)
        self.policy = policy or CachePolicy()
        self.conn: sqlite3.Connection | None = None
        self._initialize_db()

        self._query_ops = QueryOperations(self.conn)
        self._upsert_ops = UpsertOperations(self.conn)
        self._update_ops = UpdateOperations(self.conn)

    def _initialize_db(self) -> None:
        context = ErrorContext(
            operation=LogOperationNames.CACHE_INIT,
            additional_data={"db_path": self.db_path},
        )

        conn: sqlite3.Connection | None = None
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            conn = sqlite3.connect(
                str(self.db_path),
                check_same_thread=False,
                isolation_level=None,  # Auto-commit mode
            )
            conn.execute("PRAGMA journal_mode=WAL")
            conn.execute("PRAGMA synchronous=NORMAL")

            MigrationManager(conn).create_tables()
            self.conn = conn

            log_operation_success(
                logger=logger,
                operation=LogOperationNames.CACHE_INIT,
                duration_ms=0,
                context=context,
            )

        except (sqlite3.Error, OSError) as e:
            if conn is not None:
                conn.close()
            error = StorageError(
                code=ErrorCode.CACHE_OPEN_FAILED,
                message=(
                    f"Failed to open badge cache, caching will not be available: {e!s}"
                ),
                context=context,
                original_error=e,
            )
            log_operation_error(logger=logger, error=error)

    @property
    def is_available(self) -> bool:
        return self.conn is not None

    def get(self, item_id: int) -> CacheEntry | None:
        """Read the entry for an item.

        Args:
            item_id: Item id

        Returns:
            The stored entry, or None if absent, malformed or unreadable
        """
        try:
            return self._query_ops.get(item_id)
        except InvalidCacheEntryError as e:
            log_operation_error(logger=logger, error=e, level=logging.WARNING)
        except StorageError as e:
            log_operation_error(logger=logger, error=e)
        return None

    def put(self, item_id: int, entry: CacheEntry) -> bool:
        """Insert or fully replace the entry for an item.

        Args:
            item_id: Item id used as the key
            entry: Entry to store

        Returns:
            True if the entry was persisted, False on storage failure
        """
        if entry.item_id != item_id:
            entry = dataclasses.replace(entry, item_id=item_id)

        start = time.perf_counter()
        try:
            size = self._upsert_ops.upsert(entry)
        except StorageError as e:
            log_operation_error(logger=logger, error=e)
            return False

        log_operation_success(
            logger=logger,
            operation=LogOperationNames.CACHE_PUT,
            duration_ms=(time.perf_counter() - start) * 1000,
            result_info={"response_size": size},
            context={
                LogContextKeys.ITEM_ID: item_id,
                LogContextKeys.RECORD_COUNT: len(entry.enrichment_records),
                LogContextKeys.DEGRADED: entry.degraded,
            },
        )
        return True

    def remove(self, item_id: int) -> bool:
        """Delete the entry for an item.

        Returns:
            True if an entry was deleted, False if absent or on failure
        """
        try:
            removed = self._update_ops.delete(item_id)
        except StorageError as e:
            log_operation_error(logger=logger, error=e)
            return False

        if removed:
            logger.info("Removed cache entry for item %d", item_id)
        return removed

    def is_valid(self, entry: CacheEntry | None) -> bool:
        return self.policy.is_valid(entry)

    def is_soft_stale(self, entry: CacheEntry) -> bool:
        return self.policy.is_soft_stale(entry)

    def _cutoffs(self) -> tuple[float, float]:
        now = to_epoch(self.policy.now())
        ttl = self.policy.ttl.total_seconds()
        degraded_ttl = (self.policy.degraded_ttl or self.policy.ttl).total_seconds()
        return now - ttl, now - degraded_ttl

    def purge_expired(self) -> int:
        """Delete entries past their effective TTL.

        Returns:
            Number of purged entries

        Raises:
            StorageError: If the database operation fails
        """
        purged = self._update_ops.purge_expired(*self._cutoffs())
        if purged:
            logger.info("Purged %d expired cache entries", purged)
        return purged

    def clear(self) -> int:
        """Delete every entry.

        Returns:
            Number of cleared entries

        Raises:
            StorageError: If the database operation fails
        """
        cleared = self._update_ops.clear()
        logger.info("Cleared %d cache entries", cleared)
        return cleared

    def get_cache_info(self) -> dict[str, Any]:
        """Get cache statistics.

        Returns:
            Dictionary with cache information:
            - db_path: Path to the database file
            - total_entries: Number of stored entries
            - valid_entries: Entries younger than their TTL
            - expired_entries: Entries at or past their TTL
            - degraded_entries: Entries from degraded fetch cycles
            - total_size_bytes: Total size of stored record payloads

        Raises:
            StorageError: If the database operation fails
        """
        info: dict[str, Any] = {"db_path": str(self.db_path)}
        info.update(self._query_ops.count_entries(*self._cutoffs()))
        return info

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            self._query_ops.conn = None
            self._upsert_ops.conn = None
            self._update_ops.conn = None
            logger.debug("Closed badge cache connection: %s", self.db_path)
