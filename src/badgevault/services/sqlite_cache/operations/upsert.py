"""Upsert operations for the badge cache."""

from __future__ import annotations

import json
import logging
import sqlite3

from badgevault.services.badge_models import CacheEntry
from badgevault.services.sqlite_cache.operations.base import BaseOperation, to_epoch
from badgevault.shared.constants import Cache, LogOperationNames
from badgevault.shared.errors import ErrorCode, create_storage_error

logger = logging.getLogger(__name__)


class UpsertOperations(BaseOperation):
    """Insert-or-replace operations for cache storage."""

    def upsert(self, entry: CacheEntry) -> int:
        """Store an entry, fully replacing any previous entry for the item.

        Args:
            entry: Cache entry to store

        Returns:
            Size of the stored payload in bytes

        Raises:
            StorageError: If serialization or the database write fails
        """
        conn = self._validate_connection(LogOperationNames.CACHE_PUT)

        try:
            records_json = json.dumps(
                [r.to_dict() for r in entry.enrichment_records], ensure_ascii=False
            )
            normal_json = json.dumps(entry.crafted_normal.to_dict())
            foil_json = json.dumps(entry.crafted_foil.to_dict())
        except (TypeError, ValueError, AttributeError) as e:
            raise create_storage_error(
                ErrorCode.CACHE_SERIALIZATION_ERROR,
                LogOperationNames.CACHE_PUT,
                e,
                entry.item_id,
            ) from e

        response_size = len(records_json.encode("utf-8"))

        sql = f"""
        INSERT OR REPLACE INTO {Cache.TABLE_NAME} (
            item_id, created_at, enrichment_records,
            crafted_normal, crafted_foil, degraded, response_size
        ) VALUES (?, ?, ?, ?, ?, ?, ?)
        """

        try:
            conn.execute(
                sql,
                (
                    entry.item_id,
                    to_epoch(entry.created_at),
                    records_json,
                    normal_json,
                    foil_json,
                    int(entry.degraded),
                    response_size,
                ),
            )
        except (sqlite3.Error, OverflowError) as e:
            raise create_storage_error(
                ErrorCode.CACHE_WRITE_FAILED,
                LogOperationNames.CACHE_PUT,
                e,
                entry.item_id,
            ) from e

        return response_size
