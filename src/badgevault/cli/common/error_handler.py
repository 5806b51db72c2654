"""
CLI Error Handling Utilities

This module maps exceptions raised while running a command to an exit
code and a user-facing message, in text or JSON form.
"""

from __future__ import annotations

import functools
import logging
import sys
from typing import Any, Callable, TypeVar

import orjson
import typer

from badgevault.cli.common.context import cli_context_var
from badgevault.shared.errors import (
    ApplicationError,
    BadgeVaultError,
    DomainError,
    ErrorCode,
    InfrastructureError,
)

logger = logging.getLogger(__name__)

EXIT_ERROR = 1
EXIT_CONFIG_ERROR = 2
EXIT_INTERRUPTED = 130


def format_json_output(
    command: str,
    *,
    success: bool,
    errors: list[str] | None = None,
    data: dict[str, Any] | None = None,
) -> str:
    """Format command output as a JSON document."""
    output: dict[str, Any] = {"success": success, "command": command}
    if errors:
        output["errors"] = errors
    if data:
        output["data"] = data
    return orjson.dumps(
        output,
        default=str,
        option=orjson.OPT_SORT_KEYS | orjson.OPT_INDENT_2,
    ).decode("utf-8")


def _describe(error: BaseException) -> tuple[str, ErrorCode, int]:
    if isinstance(error, KeyboardInterrupt):
        return "Command interrupted by user", ErrorCode.CLI_UNEXPECTED_ERROR, EXIT_INTERRUPTED
    if isinstance(error, ApplicationError):
        exit_code = (
            EXIT_CONFIG_ERROR
            if error.code in (ErrorCode.CONFIG_INVALID, ErrorCode.CONFIG_MISSING)
            else EXIT_ERROR
        )
        return f"Application error: {error.message}", error.code, exit_code
    if isinstance(error, InfrastructureError):
        return f"Infrastructure error: {error.message}", error.code, EXIT_ERROR
    if isinstance(error, DomainError):
        return f"Data error: {error.message}", error.code, EXIT_ERROR
    if isinstance(error, BadgeVaultError):
        return error.message, error.code, EXIT_ERROR
    return f"Unexpected error: {error}", ErrorCode.CLI_UNEXPECTED_ERROR, EXIT_ERROR


def handle_cli_error(
    error: BaseException,
    command: str,
    *,
    json_output: bool = False,
) -> int:
    """Handle CLI errors with consistent formatting and logging.

    Args:
        error: The exception that occurred
        command: The CLI command being executed
        json_output: Whether to output JSON format

    Returns:
        Exit code for the CLI command
    """
    message, code, exit_code = _describe(error)
    error_context = {
        "command": command,
        "error_type": type(error).__name__,
        "error_code": code.value,
    }

    if isinstance(error, KeyboardInterrupt):
        logger.warning("Command interrupted: %s", command, extra={"context": error_context})
    elif isinstance(error, BadgeVaultError):
        logger.error("CLI error in %s: %s", command, message, extra={"context": error_context})
    else:
        logger.exception("CLI error in %s: %s", command, message, extra={"context": error_context})

    if json_output:
        sys.stdout.write(
            format_json_output(
                command,
                success=False,
                errors=[message],
                data={"error_code": code.value, "exit_code": exit_code},
            )
            + "\n"
        )
    else:
        sys.stderr.write(f"Error: {message}\n")

    return exit_code


F = TypeVar("F", bound=Callable[..., Any])


def handle_cli_errors(command_name: str) -> Callable[[F], F]:
    """Convert exceptions escaping a command handler into a typer exit.

    Example:
        >>> @handle_cli_errors(command_name="enrich")
        ... def handle_enrich_command(item_ids): ...
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            try:
                return func(*args, **kwargs)
            except typer.Exit:
                raise
            except (Exception, KeyboardInterrupt) as e:
                context = cli_context_var.get()
                json_output = bool(context and context.json_output)
                exit_code = handle_cli_error(e, command_name, json_output=json_output)
                raise typer.Exit(exit_code) from e

        return wrapper  # type: ignore[return-value]

    return decorator


__all__ = ["format_json_output", "handle_cli_error", "handle_cli_errors"]
