"""Migration manager for the badge cache database.

This module provides database schema creation and version tracking.
"""

from __future__ import annotations

import logging
import sqlite3

from badgevault.shared.constants import Cache

logger = logging.getLogger(__name__)


class MigrationManager:
    """Database schema migration manager."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        """Initialize migration manager.

        Args:
            conn: SQLite database connection
        """
        self.conn = conn
        self._current_version = self._get_current_version()

    def get_current_version(self) -> int:
        """Get current schema version.

        Returns:
            Current schema version number (0 for an empty database)
        """
        return self._current_version

    def _get_current_version(self) -> int:
        cursor = self.conn.execute(
            "SELECT name FROM sqlite_master WHERE type='table' AND name='schema_version'"
        )
        if cursor.fetchone() is None:
            return 0

        cursor = self.conn.execute("SELECT MAX(version) FROM schema_version")
        row = cursor.fetchone()
        return row[0] if row and row[0] is not None else 0

    def create_tables(self) -> None:
        """Create database schema (v1).

        One row per item id. Records and crafted infos are stored as JSON
        text; created_at is a UTC epoch timestamp so that age comparisons
        can be done in SQL.
        """
        if self._current_version >= Cache.SCHEMA_VERSION:
            return

        schema_sql = f"""
        CREATE TABLE IF NOT EXISTS {Cache.TABLE_NAME} (
            item_id INTEGER PRIMARY KEY,

            -- Fetch cycle completion time (UTC epoch seconds)
            created_at REAL NOT NULL,

            -- Merged payload (JSON)
            enrichment_records TEXT NOT NULL,
            crafted_normal TEXT NOT NULL,
            crafted_foil TEXT NOT NULL,

            -- 1 if any remote call of the cycle failed
            degraded INTEGER NOT NULL DEFAULT 0,

            response_size INTEGER
        );

        CREATE INDEX IF NOT EXISTS idx_{Cache.TABLE_NAME}_created_at
            ON {Cache.TABLE_NAME}(created_at);

        CREATE TABLE IF NOT EXISTS schema_version (
            version INTEGER PRIMARY KEY,
            applied_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP NOT NULL
        );
        """

        self.conn.executescript(schema_sql)
        self.conn.execute(
            "INSERT OR REPLACE INTO schema_version (version) VALUES (?)",
            (Cache.SCHEMA_VERSION,),
        )
        self._current_version = Cache.SCHEMA_VERSION

        logger.info("Created badge cache schema (v%d)", Cache.SCHEMA_VERSION)
