"""Per-command initialization: settings, logging and output console."""

from __future__ import annotations

from dataclasses import dataclass

from rich.console import Console

from badgevault.cli.common.context import CliContext, cli_context_var
from badgevault.config.loader import load_settings
from badgevault.config.models.settings import Settings
from badgevault.shared.logging import setup_structured_logger


@dataclass
class CommandEnvironment:
    settings: Settings
    console: Console
    context: CliContext


def prepare_command() -> CommandEnvironment:
    """Load settings and configure logging for the running command.

    Raises:
        ApplicationError: If the configuration cannot be loaded
    """
    context = cli_context_var.get() or CliContext()
    settings = load_settings(context.config_path)

    setup_structured_logger(
        level=context.get_effective_log_level(settings.logging.level),
        log_file=settings.logging.file,
        use_rich_console=settings.logging.rich_console,
    )
    return CommandEnvironment(settings=settings, console=Console(), context=context)
