"""Delete and maintenance operations for the badge cache."""

from __future__ import annotations

import logging
import sqlite3

from badgevault.services.sqlite_cache.operations.base import BaseOperation
from badgevault.shared.constants import Cache, LogOperationNames
from badgevault.shared.errors import ErrorCode, create_storage_error

logger = logging.getLogger(__name__)


class UpdateOperations(BaseOperation):
    """Delete, purge and clear operations."""

    def delete(self, item_id: int) -> bool:
        """Delete the entry for an item.

        Returns:
            True if a row was deleted, False if none existed

        Raises:
            StorageError: If the database write fails
        """
        conn = self._validate_connection(LogOperationNames.CACHE_REMOVE)
        try:
            cursor = conn.execute(
                f"DELETE FROM {Cache.TABLE_NAME} WHERE item_id = ?", (item_id,)
            )
        except (sqlite3.Error, OverflowError) as e:
            raise create_storage_error(
                ErrorCode.CACHE_DELETE_FAILED, LogOperationNames.CACHE_REMOVE, e, item_id
            ) from e
        return cursor.rowcount > 0

    def purge_expired(self, ttl_cutoff: float, degraded_ttl_cutoff: float) -> int:
        """Delete entries created at or before their cutoff.

        Args:
            ttl_cutoff: Epoch cutoff for regular entries
            degraded_ttl_cutoff: Epoch cutoff for degraded entries

        Returns:
            Number of purged entries

        Raises:
            StorageError: If the database write fails
        """
        conn = self._validate_connection(LogOperationNames.CACHE_PURGE)
        try:
            cursor = conn.execute(
                f"""
                DELETE FROM {Cache.TABLE_NAME}
                WHERE (degraded = 0 AND created_at <= ?)
                   OR (degraded = 1 AND created_at <= ?)
                """,
                (ttl_cutoff, degraded_ttl_cutoff),
            )
        except sqlite3.Error as e:
            raise create_storage_error(
                ErrorCode.CACHE_DELETE_FAILED, LogOperationNames.CACHE_PURGE, e
            ) from e
        return cursor.rowcount

    def clear(self) -> int:
        """Delete every entry.

        Returns:
            Number of cleared entries

        Raises:
            StorageError: If the database write fails
        """
        conn = self._validate_connection(LogOperationNames.CACHE_CLEAR)
        try:
            cursor = conn.execute(f"DELETE FROM {Cache.TABLE_NAME}")
        except sqlite3.Error as e:
            raise create_storage_error(
                ErrorCode.CACHE_DELETE_FAILED, LogOperationNames.CACHE_CLEAR, e
            ) from e
        return cursor.rowcount
