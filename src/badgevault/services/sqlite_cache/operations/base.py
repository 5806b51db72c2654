"""Base operation class for badge cache operations."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING

from badgevault.shared.errors import ErrorCode, ErrorContext, StorageError

if TYPE_CHECKING:
    import sqlite3

logger = logging.getLogger(__name__)


def to_epoch(dt: datetime) -> float:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp()


def from_epoch(value: float) -> datetime:
    return datetime.fromtimestamp(value, tz=timezone.utc)


class BaseOperation:
    """Base class for cache operations with shared functionality."""

    def __init__(self, conn: sqlite3.Connection | None) -> None:
        """Initialize base operation.

        Args:
            conn: SQLite database connection (None if opening failed)
        """
        self.conn = conn

    def _validate_connection(self, operation: str) -> sqlite3.Connection:
        """Return the connection or fail if the database is unavailable.

        Raises:
            StorageError: If the connection is not initialized
        """
        if self.conn is None:
            raise StorageError(
                code=ErrorCode.CACHE_OPEN_FAILED,
                message="Cache database connection not initialized",
                context=ErrorContext(operation=operation),
            )
        return self.conn
