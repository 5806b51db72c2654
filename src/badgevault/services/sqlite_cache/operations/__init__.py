"""Cache operations split by concern (query, upsert, update)."""

from badgevault.services.sqlite_cache.operations.query import QueryOperations
from badgevault.services.sqlite_cache.operations.update import UpdateOperations
from badgevault.services.sqlite_cache.operations.upsert import UpsertOperations

__all__ = ["QueryOperations", "UpdateOperations", "UpsertOperations"]
