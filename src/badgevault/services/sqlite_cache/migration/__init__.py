"""Schema migration for the badge cache database."""

from badgevault.services.sqlite_cache.migration.manager import MigrationManager

__all__ = ["MigrationManager"]
