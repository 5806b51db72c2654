"""
Reusable Typer Options Module

This module centralizes the option definitions shared by the main
callback and the commands. Use them as ``Annotated[int, verbose_option]``.
"""

from __future__ import annotations

import typer

# Verbose option - count-based for multiple -v flags
verbose_option = typer.Option(
    "--verbose",
    "-v",
    count=True,
    help="Enable verbose output (equivalent to --log-level DEBUG).",
)

# Log level option - enum-based with case-insensitive choices
log_level_option = typer.Option(
    "--log-level",
    case_sensitive=False,
    help="Set the logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL). Default: from configuration.",
)

# JSON output option - flag-based
json_output_option = typer.Option(
    "--json",
    help="Enable machine-readable JSON output instead of tables.",
)

# Configuration file option
config_option = typer.Option(
    "--config",
    "-c",
    exists=True,
    dir_okay=False,
    readable=True,
    help="Path to a TOML configuration file.",
)
