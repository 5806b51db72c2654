"""
Cache Configuration Constants

This module provides the cache constants for the badge cache: TTL
defaults, the soft-refresh policy and the SQLite schema names.
"""

# Base time units for TTL calculations
BASE_SECOND = 1
BASE_MINUTE = 60 * BASE_SECOND
BASE_HOUR = 60 * BASE_MINUTE
BASE_DAY = 24 * BASE_HOUR


class Cache:
    """Badge cache configuration constants."""

    # Entries older than this are invalid (boundary is invalid)
    TTL = 7 * BASE_DAY  # 7 days

    # Entries older than TTL * fraction are served and refreshed
    SOFT_REFRESH_FRACTION = 0.5

    DEFAULT_DB_FILENAME = "badge_cache.db"
    TABLE_NAME = "badge_cache"
    SCHEMA_VERSION = 1


class CacheValidationConstants:
    """Validation constants for stored cache rows."""

    # Top-level JSON keys of a serialized enrichment record
    RECORD_KEYS = (
        "name",
        "image_ref",
        "scarcity",
        "base_level",
        "is_foil",
        "first_completion",
    )
    CRAFTED_KEYS = ("crafted_level", "is_crafted")
