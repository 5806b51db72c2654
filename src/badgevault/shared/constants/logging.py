"""Logging Constants.

This module contains logger defaults, operation names and context keys
to keep structured logging consistent across the application.
"""


class LoggingDefaults:
    """Logger setup defaults."""

    LOGGER_NAME = "badgevault"
    LEVEL = "INFO"
    MAX_BYTES = 10 * 1024 * 1024  # 10 MB
    BACKUP_COUNT = 5


class LogOperationNames:
    """Operation names used in structured log records."""

    CACHE_INIT = "cache_init"
    CACHE_GET = "cache_get"
    CACHE_PUT = "cache_put"
    CACHE_REMOVE = "cache_remove"
    CACHE_PURGE = "cache_purge"
    CACHE_CLEAR = "cache_clear"
    CACHE_INFO = "cache_info"
    FETCH_ENRICHMENT = "fetch_enrichment"
    FETCH_CRAFTED = "fetch_crafted_info"
    FETCH_CYCLE = "fetch_cycle"
    PRESENT = "present"
    RECONCILE = "reconcile"
    REFETCH = "refetch"
    LOAD_SETTINGS = "load_settings"


class LogContextKeys:
    """Logging context dictionary keys."""

    ITEM_ID = "item_id"
    VARIANT = "variant"
    RECORD_COUNT = "record_count"
    QUEUE_SIZE = "queue_size"
    DEGRADED = "degraded"
