"""Enrich and refetch command handlers."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from pathlib import Path

from badgevault.cli.common.error_handler import handle_cli_errors
from badgevault.cli.common.setup import CommandEnvironment, prepare_command
from badgevault.presentation import ConsolePresenter
from badgevault.services.orchestrator import CacheState
from badgevault.services.pipeline import open_pipeline
from badgevault.shared.errors import ApplicationError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)

# Largest value a SQLite INTEGER key can hold
MAX_ITEM_ID = 2**63 - 1


def read_ids_file(path: Path) -> list[int]:
    """Read item ids from a text file, one per line.

    Blank lines and lines starting with ``#`` are ignored.

    Raises:
        ApplicationError: If a line is not an integer
    """
    item_ids: list[int] = []
    with open(path, encoding="utf-8") as f:
        for line_no, line in enumerate(f, start=1):
            text = line.strip()
            if not text or text.startswith("#"):
                continue
            try:
                item_ids.append(int(text))
            except ValueError as e:
                raise ApplicationError(
                    code=ErrorCode.CLI_INVALID_ARGUMENTS,
                    message=f"{path}:{line_no}: not an item id: {text!r}",
                    context=ErrorContext(
                        operation="read_ids_file",
                        additional_data={"path": str(path), "line": line_no},
                    ),
                    original_error=e,
                ) from e
    return item_ids


def collect_item_ids(item_ids: Iterable[int], ids_file: Path | None) -> list[int]:
    """Merge ids from arguments and file, dropping duplicates in first-seen order.

    Raises:
        ApplicationError: If no ids were given or an id is out of range
    """
    collected = list(item_ids)
    if ids_file is not None:
        collected.extend(read_ids_file(ids_file))

    unique = list(dict.fromkeys(collected))
    if not unique:
        raise ApplicationError(
            code=ErrorCode.CLI_INVALID_ARGUMENTS,
            message="No item ids given",
            context=ErrorContext(operation="collect_item_ids"),
        )
    out_of_range = [i for i in unique if not 0 <= i <= MAX_ITEM_ID]
    if out_of_range:
        raise ApplicationError(
            code=ErrorCode.CLI_INVALID_ARGUMENTS,
            message=f"Item ids must be between 0 and {MAX_ITEM_ID}: {out_of_range}",
            context=ErrorContext(operation="collect_item_ids"),
        )
    return unique


def _presenter(env: CommandEnvironment) -> ConsolePresenter:
    return ConsolePresenter(
        console=env.console,
        settings=env.settings.presenter,
        image_base_url=env.settings.api.image_base_url,
        json_output=env.context.json_output,
    )


async def run_enrich(env: CommandEnvironment, item_ids: list[int]) -> dict[int, CacheState]:
    """Serve cached views, then wait for every scheduled fetch to finish."""
    async with open_pipeline(env.settings, _presenter(env)) as pipeline:
        states = pipeline.orchestrator.reconcile(item_ids)
        await pipeline.scheduler.wait_idle()
    return states


async def run_refetch(env: CommandEnvironment, item_ids: list[int]) -> None:
    async with open_pipeline(env.settings, _presenter(env)) as pipeline:
        for item_id in item_ids:
            pipeline.orchestrator.refetch(item_id)
        await pipeline.scheduler.wait_idle()


@handle_cli_errors(command_name="enrich")
def handle_enrich_command(item_ids: list[int], ids_file: Path | None) -> int:
    """Handle the enrich command.

    Returns:
        Exit code (0 for success)
    """
    ids = collect_item_ids(item_ids, ids_file)
    env = prepare_command()
    logger.info("Enriching %d items", len(ids))
    states = asyncio.run(run_enrich(env, ids))
    fetched = sum(1 for s in states.values() if s is not CacheState.FRESH)
    logger.info("Done: %d served from cache, %d fetched", len(states) - fetched, fetched)
    return 0


@handle_cli_errors(command_name="refetch")
def handle_refetch_command(item_ids: list[int]) -> int:
    """Handle the refetch command."""
    ids = collect_item_ids(item_ids, None)
    env = prepare_command()
    asyncio.run(run_refetch(env, ids))
    return 0
