"""
Pytest configuration and shared fixtures for BadgeVault tests.

Fakes live in tests/helpers.py; this module wires them into fixtures.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Generator
from pathlib import Path

import pytest

from badgevault.cli.common.context import clear_cli_context
from badgevault.services.cache_policy import CachePolicy
from badgevault.services.sqlite_cache import BadgeCacheStore
from tests.helpers import FakeClock, FakeFetcher, RecordingPresenter, RecordingSleep


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def policy(clock: FakeClock) -> CachePolicy:
    return CachePolicy(clock=clock)


@pytest.fixture
def store(tmp_path: Path, policy: CachePolicy) -> Generator[BadgeCacheStore, None, None]:
    """Badge cache store backed by a temporary database."""
    cache = BadgeCacheStore(tmp_path / "badge_cache.db", policy=policy)
    yield cache
    cache.close()


@pytest.fixture
def presenter() -> RecordingPresenter:
    return RecordingPresenter()


@pytest.fixture
def fetcher() -> FakeFetcher:
    return FakeFetcher()


@pytest.fixture
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer BADGEVAULT_* variables out of the tests."""
    for key in list(os.environ):
        if key.startswith("BADGEVAULT_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_badgevault_logger() -> Generator[None, None, None]:
    """Undo handlers installed by CLI setup so caplog keeps working."""
    logger = logging.getLogger("badgevault")
    handlers, level, propagate = list(logger.handlers), logger.level, logger.propagate
    yield
    for handler in logger.handlers:
        if handler not in handlers:
            handler.close()
    logger.handlers = handlers
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture(autouse=True)
def _reset_cli_context() -> Generator[None, None, None]:
    yield
    clear_cli_context()
