"""
BadgeVault Typer CLI Application

Command-line front end for the badge enrichment pipeline: serve cached
badge views, fetch missing or stale ones, force re-fetches and maintain
the cache.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer

from badgevault.cli.cache_handler import (
    handle_cache_clear_command,
    handle_cache_info_command,
    handle_cache_purge_command,
)
from badgevault.cli.common.context import CliContext, LogLevel, set_cli_context
from badgevault.cli.common.options import (
    config_option,
    json_output_option,
    log_level_option,
    verbose_option,
)
from badgevault.cli.enrich_handler import handle_enrich_command, handle_refetch_command
from badgevault.shared.constants import APPLICATION_NAME, APPLICATION_VERSION

__version__ = APPLICATION_VERSION


def version_callback(value: bool) -> None:
    """Print version information and exit."""
    if value:
        typer.echo(f"{APPLICATION_NAME} {__version__}")
        raise typer.Exit


app = typer.Typer(
    name=APPLICATION_NAME,
    help="Enrich Steam badges with level details, crafted highlights and a local TTL cache.",
    add_completion=False,
    rich_markup_mode="rich",
    no_args_is_help=True,
)

cache_app = typer.Typer(help="Inspect and maintain the badge cache.", no_args_is_help=True)
app.add_typer(cache_app, name="cache")


@app.callback()
def main(
    verbose: Annotated[int, verbose_option] = 0,
    log_level: Annotated[Optional[LogLevel], log_level_option] = None,
    json_output: Annotated[bool, json_output_option] = False,
    config: Annotated[Optional[Path], config_option] = None,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version information and exit.",
        ),
    ] = False,
) -> None:
    """Set up the CLI context shared by every command."""
    set_cli_context(
        CliContext(
            verbose=verbose,
            log_level=log_level,
            json_output=json_output,
            config_path=config,
        )
    )


@app.command("enrich")
def enrich_command_typer(
    item_ids: Annotated[
        Optional[list[int]],
        typer.Argument(help="Item (app) ids to enrich.", show_default=False),
    ] = None,
    ids_file: Annotated[
        Optional[Path],
        typer.Option(
            "--ids-file",
            "-f",
            exists=True,
            dir_okay=False,
            readable=True,
            help="File with one item id per line.",
        ),
    ] = None,
) -> None:
    """
    Show badge details for items, fetching what the cache cannot serve.

    Valid cached entries are shown immediately; entries older than half
    the TTL are refreshed in the background. Missing or expired entries
    are fetched one at a time with the configured delays.

    Examples:
        badgevault enrich 730 570

        badgevault --json enrich --ids-file ids.txt
    """
    raise typer.Exit(handle_enrich_command(item_ids or [], ids_file))


@app.command("refetch")
def refetch_command_typer(
    item_ids: Annotated[list[int], typer.Argument(help="Item (app) ids to re-fetch.")],
) -> None:
    """Drop cached entries and fetch them again."""
    raise typer.Exit(handle_refetch_command(item_ids))


@cache_app.command("info")
def cache_info_command_typer() -> None:
    """Show cache statistics."""
    raise typer.Exit(handle_cache_info_command())


@cache_app.command("purge")
def cache_purge_command_typer() -> None:
    """Delete entries older than their TTL."""
    raise typer.Exit(handle_cache_purge_command())


@cache_app.command("clear")
def cache_clear_command_typer(
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Do not ask for confirmation."),
    ] = False,
) -> None:
    """Delete every cache entry."""
    if not yes:
        typer.confirm("Delete every cached badge entry?", abort=True)
    raise typer.Exit(handle_cache_clear_command())


def run() -> None:
    """Console script entry point."""
    app()


if __name__ == "__main__":
    run()
