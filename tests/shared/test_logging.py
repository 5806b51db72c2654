"""Tests for structured logging helpers."""

from __future__ import annotations

import json
import logging
from collections.abc import Generator
from pathlib import Path

import pytest
from rich.logging import RichHandler

from badgevault.shared.errors import ErrorCode, ErrorContext, StorageError
from badgevault.shared.logging import (
    StructuredFormatter,
    log_api_call,
    log_operation_error,
    log_operation_success,
    setup_structured_logger,
)


@pytest.fixture
def clean_logger() -> Generator[str, None, None]:
    name = "tests.logging_setup"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


class TestStructuredFormatter:
    def test_formats_record_as_json(self) -> None:
        record = logging.LogRecord(
            name="badgevault.test",
            level=logging.WARNING,
            pathname="test.py",
            lineno=1,
            msg="Cache miss for %d",
            args=(730,),
            exc_info=None,
        )
        record.error_code = "CACHE_READ_FAILED"
        record.context = {"item_id": 730}

        entry = json.loads(StructuredFormatter().format(record))

        assert entry["level"] == "WARNING"
        assert entry["message"] == "Cache miss for 730"
        assert entry["error_code"] == "CACHE_READ_FAILED"
        assert entry["context"] == {"item_id": 730}
        assert "operation" not in entry


class TestSetupStructuredLogger:
    def test_rich_console_handler(self, clean_logger: str) -> None:
        logger = setup_structured_logger(clean_logger, "debug")

        assert logger.level == logging.DEBUG
        assert isinstance(logger.handlers[0], RichHandler)
        assert logger.propagate is False

    def test_json_console_and_file(self, clean_logger: str, tmp_path: Path) -> None:
        log_file = tmp_path / "badgevault.log"

        logger = setup_structured_logger(
            clean_logger, "INFO", str(log_file), use_rich_console=False
        )
        logger.info("hello", extra={"operation": "test"})
        for handler in logger.handlers:
            handler.flush()

        assert len(logger.handlers) == 2
        assert isinstance(logger.handlers[0].formatter, StructuredFormatter)
        entry = json.loads(log_file.read_text(encoding="utf-8").splitlines()[0])
        assert entry["message"] == "hello"
        assert entry["operation"] == "test"

    def test_repeated_setup_replaces_handlers(self, clean_logger: str) -> None:
        setup_structured_logger(clean_logger)
        logger = setup_structured_logger(clean_logger)

        assert len(logger.handlers) == 1


class TestLogHelpers:
    def test_log_operation_error(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = logging.getLogger("tests.logging_helpers")
        error = StorageError(
            code=ErrorCode.CACHE_WRITE_FAILED,
            message="Could not write",
            context=ErrorContext(operation="cache_put", item_id=730),
        )

        with caplog.at_level(logging.WARNING, logger=logger.name):
            log_operation_error(logger, error, level=logging.WARNING, additional_context={"retry": False})

        (record,) = caplog.records
        assert record.levelno == logging.WARNING
        assert record.error_code == "CACHE_WRITE_FAILED"
        assert record.operation == "cache_put"
        assert record.context["item_id"] == 730
        assert record.context["retry"] is False

    def test_log_operation_success_is_debug(self, caplog: pytest.LogCaptureFixture) -> None:
        logger = logging.getLogger("tests.logging_helpers")

        with caplog.at_level(logging.DEBUG, logger=logger.name):
            log_operation_success(logger, "cache_get", 1.5, result_info={"hit": True})

        (record,) = caplog.records
        assert record.levelno == logging.DEBUG
        assert record.duration_ms == 1.5
        assert record.result_info == {"hit": True}

    @pytest.mark.parametrize(
        ("status", "level", "fragment"),
        [(200, logging.DEBUG, "succeeded"), (503, logging.WARNING, "failed with status 503")],
    )
    def test_log_api_call_level_follows_status(
        self, caplog: pytest.LogCaptureFixture, status: int, level: int, fragment: str
    ) -> None:
        logger = logging.getLogger("tests.logging_helpers")

        with caplog.at_level(logging.DEBUG, logger=logger.name):
            log_api_call(logger, "https://example.test/badges", "POST", status_code=status)

        (record,) = caplog.records
        assert record.levelno == level
        assert fragment in record.getMessage()
        assert record.context["method"] == "POST"
