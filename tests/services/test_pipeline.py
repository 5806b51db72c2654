"""Tests for pipeline wiring from settings."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import pytest

from badgevault.config import Settings
from badgevault.services.pipeline import build_store, open_pipeline
from tests.helpers import RecordingPresenter


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        cache={"db_path": str(tmp_path / "cache.db"), "ttl": 3600, "degraded_ttl": 600},
        queue={"delay_before_enrichment_call": 0.5, "delay_before_crafted_call": 0.1},
    )


def test_build_store_uses_cache_settings(settings: Settings) -> None:
    store = build_store(settings)
    try:
        assert store.is_available
        assert store.policy.ttl == timedelta(hours=1)
        assert store.policy.degraded_ttl == timedelta(minutes=10)
    finally:
        store.close()


@pytest.mark.asyncio
async def test_open_pipeline_wires_and_releases(settings: Settings) -> None:
    presenter = RecordingPresenter()

    async with open_pipeline(settings, presenter) as pipeline:
        assert pipeline.scheduler.delay_before_enrichment_call == 0.5
        assert pipeline.scheduler.delay_before_crafted_call == 0.1
        assert pipeline.orchestrator.store is pipeline.store
        assert pipeline.scheduler.presenter is presenter

    assert not pipeline.store.is_available
    assert not pipeline.scheduler.is_running
