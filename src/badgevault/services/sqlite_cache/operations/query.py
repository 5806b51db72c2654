"""Query operations for the badge cache.

This module provides read operations and row to CacheEntry conversion.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any

from badgevault.services.badge_models import CacheEntry, CraftedInfo, EnrichmentRecord
from badgevault.services.sqlite_cache.operations.base import BaseOperation, from_epoch
from badgevault.shared.constants import Cache, LogOperationNames
from badgevault.shared.errors import (
    ErrorCode,
    ErrorContext,
    InvalidCacheEntryError,
    create_storage_error,
)

logger = logging.getLogger(__name__)


def build_cache_entry_from_row(row: tuple[Any, ...]) -> CacheEntry:
    """Build a CacheEntry from a database row.

    Args:
        row: (item_id, created_at, enrichment_records, crafted_normal,
              crafted_foil, degraded)

    Returns:
        Reconstructed CacheEntry

    Raises:
        InvalidCacheEntryError: If the row does not match the entry schema
    """
    item_id = row[0]
    try:
        records_data = json.loads(row[2])
        if not isinstance(records_data, list):
            msg = f"enrichment_records must be a list, got {type(records_data).__name__}"
            raise TypeError(msg)
        if not isinstance(row[1], (int, float)):
            msg = f"created_at must be numeric, got {type(row[1]).__name__}"
            raise TypeError(msg)

        return CacheEntry(
            item_id=item_id,
            created_at=from_epoch(row[1]),
            enrichment_records=tuple(EnrichmentRecord.from_dict(r) for r in records_data),
            crafted_normal=CraftedInfo.from_dict(json.loads(row[3])),
            crafted_foil=CraftedInfo.from_dict(json.loads(row[4])),
            degraded=bool(row[5]),
        )
    except (json.JSONDecodeError, KeyError, TypeError, ValueError, OverflowError) as e:
        raise InvalidCacheEntryError(
            code=ErrorCode.CACHE_CORRUPTED,
            message=f"Stored cache entry for item {item_id} is malformed: {e!s}",
            context=ErrorContext(operation=LogOperationNames.CACHE_GET, item_id=item_id),
            original_error=e,
        ) from e


class QueryOperations(BaseOperation):
    """Query operations for cache retrieval."""

    def get(self, item_id: int) -> CacheEntry | None:
        """Retrieve the entry for an item.

        Args:
            item_id: Item id

        Returns:
            CacheEntry if a row exists, None otherwise

        Raises:
            StorageError: If the database read fails
            InvalidCacheEntryError: If the stored row is malformed
        """
        conn = self._validate_connection(LogOperationNames.CACHE_GET)

        sql = f"""
        SELECT item_id, created_at, enrichment_records,
               crafted_normal, crafted_foil, degraded
        FROM {Cache.TABLE_NAME}
        WHERE item_id = ?
        """

        try:
            row = conn.execute(sql, (item_id,)).fetchone()
        except (sqlite3.Error, OverflowError) as e:
            raise create_storage_error(
                ErrorCode.CACHE_READ_FAILED, LogOperationNames.CACHE_GET, e, item_id
            ) from e

        if row is None:
            return None

        return build_cache_entry_from_row(row)

    def count_entries(
        self,
        ttl_cutoff: float,
        degraded_ttl_cutoff: float,
    ) -> dict[str, int]:
        """Count total, valid and degraded entries.

        Args:
            ttl_cutoff: Epoch time; regular entries created at or before it are expired
            degraded_ttl_cutoff: Same cutoff for degraded entries

        Returns:
            Dictionary with total, valid, degraded and size counts

        Raises:
            StorageError: If the database read fails
        """
        conn = self._validate_connection(LogOperationNames.CACHE_INFO)

        try:
            total, size, degraded = conn.execute(
                f"SELECT COUNT(*), COALESCE(SUM(response_size), 0), "
                f"COALESCE(SUM(degraded), 0) FROM {Cache.TABLE_NAME}"
            ).fetchone()
            (valid,) = conn.execute(
                f"""
                SELECT COUNT(*) FROM {Cache.TABLE_NAME}
                WHERE (degraded = 0 AND created_at > ?)
                   OR (degraded = 1 AND created_at > ?)
                """,
                (ttl_cutoff, degraded_ttl_cutoff),
            ).fetchone()
        except sqlite3.Error as e:
            raise create_storage_error(
                ErrorCode.CACHE_READ_FAILED, LogOperationNames.CACHE_INFO, e
            ) from e

        return {
            "total_entries": total,
            "valid_entries": valid,
            "expired_entries": total - valid,
            "degraded_entries": degraded,
            "total_size_bytes": size,
        }
