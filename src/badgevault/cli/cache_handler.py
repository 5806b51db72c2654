"""Cache maintenance command handlers."""

from __future__ import annotations

import logging

from rich.table import Table

from badgevault.cli.common.error_handler import format_json_output, handle_cli_errors
from badgevault.cli.common.setup import prepare_command
from badgevault.config.models.settings import Settings
from badgevault.services.pipeline import build_store
from badgevault.services.sqlite_cache import BadgeCacheStore
from badgevault.shared.errors import ErrorCode, StorageError

logger = logging.getLogger(__name__)


def _open_store_or_fail(settings: Settings) -> BadgeCacheStore:
    store = build_store(settings)
    if not store.is_available:
        store.close()
        raise StorageError(
            code=ErrorCode.CACHE_OPEN_FAILED,
            message=f"Cache database is not available: {settings.cache.db_path}",
        )
    return store


@handle_cli_errors(command_name="cache info")
def handle_cache_info_command() -> int:
    """Print cache statistics."""
    env = prepare_command()
    store = _open_store_or_fail(env.settings)
    try:
        info = store.get_cache_info()
    finally:
        store.close()

    if env.context.json_output:
        env.console.print_json(format_json_output("cache info", success=True, data=info))
        return 0

    table = Table(title="Badge cache", show_header=False)
    table.add_column("Key", style="bold")
    table.add_column("Value", justify="right")
    for key, value in info.items():
        table.add_row(key.replace("_", " "), str(value))
    env.console.print(table)
    return 0


@handle_cli_errors(command_name="cache purge")
def handle_cache_purge_command() -> int:
    """Delete expired entries."""
    env = prepare_command()
    store = _open_store_or_fail(env.settings)
    try:
        purged = store.purge_expired()
    finally:
        store.close()

    if env.context.json_output:
        env.console.print_json(
            format_json_output("cache purge", success=True, data={"purged": purged})
        )
    else:
        env.console.print(f"Purged {purged} expired entries")
    return 0


@handle_cli_errors(command_name="cache clear")
def handle_cache_clear_command() -> int:
    """Delete every entry."""
    env = prepare_command()
    store = _open_store_or_fail(env.settings)
    try:
        cleared = store.clear()
    finally:
        store.close()

    if env.context.json_output:
        env.console.print_json(
            format_json_output("cache clear", success=True, data={"cleared": cleared})
        )
    else:
        env.console.print(f"Cleared {cleared} entries")
    return 0
