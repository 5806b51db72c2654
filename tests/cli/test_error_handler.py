"""Tests for CLI error mapping."""

from __future__ import annotations

import json
from pathlib import Path

import pytest
import typer

from badgevault.cli.common.context import CliContext, set_cli_context
from badgevault.cli.common.error_handler import (
    EXIT_CONFIG_ERROR,
    EXIT_ERROR,
    EXIT_INTERRUPTED,
    format_json_output,
    handle_cli_error,
    handle_cli_errors,
)
from badgevault.shared.errors import ApplicationError, ErrorCode, StorageError


class TestFormatJsonOutput:
    def test_sorted_keys_and_stringified_values(self) -> None:
        text = format_json_output("cache info", success=True, data={"db_path": Path("/tmp/c.db")})

        data = json.loads(text)
        assert data == {"command": "cache info", "data": {"db_path": str(Path("/tmp/c.db"))}, "success": True}
        assert text.index('"command"') < text.index('"success"')

    def test_empty_sections_are_omitted(self) -> None:
        assert json.loads(format_json_output("enrich", success=True)) == {
            "command": "enrich",
            "success": True,
        }


class TestHandleCliError:
    @pytest.mark.parametrize(
        ("error", "exit_code"),
        [
            (ApplicationError(ErrorCode.CONFIG_INVALID, "bad ttl"), EXIT_CONFIG_ERROR),
            (ApplicationError(ErrorCode.CLI_INVALID_ARGUMENTS, "no ids"), EXIT_ERROR),
            (StorageError(ErrorCode.CACHE_OPEN_FAILED, "locked"), EXIT_ERROR),
            (RuntimeError("surprise"), EXIT_ERROR),
            (KeyboardInterrupt(), EXIT_INTERRUPTED),
        ],
    )
    def test_exit_codes(self, error: BaseException, exit_code: int, capsys: pytest.CaptureFixture[str]) -> None:
        assert handle_cli_error(error, "enrich") == exit_code
        assert capsys.readouterr().err.startswith("Error: ")

    def test_json_error_goes_to_stdout(self, capsys: pytest.CaptureFixture[str]) -> None:
        error = StorageError(ErrorCode.CACHE_OPEN_FAILED, "locked")

        handle_cli_error(error, "cache info", json_output=True)

        data = json.loads(capsys.readouterr().out)
        assert data["success"] is False
        assert data["errors"] == ["Infrastructure error: locked"]
        assert data["data"]["error_code"] == "CACHE_OPEN_FAILED"


class TestDecorator:
    def test_exception_becomes_exit(self, capsys: pytest.CaptureFixture[str]) -> None:
        set_cli_context(CliContext(json_output=True))

        @handle_cli_errors(command_name="refetch")
        def failing() -> int:
            raise ApplicationError(ErrorCode.CLI_INVALID_ARGUMENTS, "No item ids given")

        with pytest.raises(typer.Exit) as exc_info:
            failing()

        assert exc_info.value.exit_code == EXIT_ERROR
        assert json.loads(capsys.readouterr().out)["command"] == "refetch"

    def test_return_value_passes_through(self) -> None:
        @handle_cli_errors(command_name="enrich")
        def ok() -> int:
            return 0

        assert ok() == 0
