"""
Tests for the Typer CLI.

Failure-First: bad input exits with a non-zero code and a readable
message; no command touches the network (the fetcher is replaced).
"""

from __future__ import annotations

import json
from datetime import timedelta
from pathlib import Path

import pytest
from typer.testing import CliRunner

from badgevault.cli import app
from badgevault.cli.common.error_handler import EXIT_CONFIG_ERROR, EXIT_ERROR
from badgevault.cli.enrich_handler import MAX_ITEM_ID, collect_item_ids, read_ids_file
from badgevault.services.badge_models import BadgeVariant
from badgevault.services.cache_policy import CachePolicy, utc_now
from badgevault.services.sqlite_cache import BadgeCacheStore
from badgevault.shared.constants import APPLICATION_VERSION
from badgevault.shared.errors import ApplicationError, ErrorCode
from tests.helpers import FakeFetcher, make_entry, make_record

runner = CliRunner()


class ClosableFakeFetcher(FakeFetcher):
    instances: list[ClosableFakeFetcher] = []

    def __init__(self, *args: object, **kwargs: object) -> None:
        super().__init__()
        self.records[730] = [make_record(2), make_record(1), make_record(1, foil=True)]
        self.crafted[(730, BadgeVariant.NORMAL)] = 2
        self.closed = False
        ClosableFakeFetcher.instances.append(self)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def db_path(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the CLI at a temporary cache with no pacing delays."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("HOME", str(tmp_path))
    path = tmp_path / "cache" / "badge_cache.db"
    monkeypatch.setenv("BADGEVAULT_CACHE__DB_PATH", str(path))
    monkeypatch.setenv("BADGEVAULT_QUEUE__DELAY_BEFORE_ENRICHMENT_CALL", "0")
    monkeypatch.setenv("BADGEVAULT_QUEUE__DELAY_BEFORE_CRAFTED_CALL", "0")
    return path


@pytest.fixture
def fake_fetcher(monkeypatch: pytest.MonkeyPatch) -> type[ClosableFakeFetcher]:
    ClosableFakeFetcher.instances = []
    monkeypatch.setattr("badgevault.services.pipeline.BadgeDataFetcher", ClosableFakeFetcher)
    return ClosableFakeFetcher


def _seed(db_path: Path, *entries) -> None:
    store = BadgeCacheStore(db_path, policy=CachePolicy())
    try:
        for entry in entries:
            store.put(entry.item_id, entry)
    finally:
        store.close()


class TestMainCallback:
    def test_version(self) -> None:
        result = runner.invoke(app, ["--version"])

        assert result.exit_code == 0
        assert APPLICATION_VERSION in result.stdout

    def test_no_args_shows_help(self) -> None:
        result = runner.invoke(app, [])

        assert "enrich" in result.output
        assert "refetch" in result.output

    def test_invalid_config_file_exits_with_config_error(self, db_path: Path) -> None:
        config = db_path.parent.parent / "bad.toml"
        config.write_text("[cache]\nttl = -1\n", encoding="utf-8")

        result = runner.invoke(app, ["--config", str(config), "cache", "info"])

        assert result.exit_code == EXIT_CONFIG_ERROR


class TestEnrichCommand:
    def test_fetches_missing_item_and_caches_it(
        self, db_path: Path, fake_fetcher: type[ClosableFakeFetcher]
    ) -> None:
        # When
        result = runner.invoke(app, ["--log-level", "CRITICAL", "--json", "enrich", "730"])

        # Then
        assert result.exit_code == 0, result.output
        assert "Loading detailed badge data" in result.stdout
        assert '"fresh": true' in result.stdout
        (fetcher,) = fake_fetcher.instances
        assert fetcher.enrichment_calls() == [730]
        assert fetcher.closed is True

        store = BadgeCacheStore(db_path)
        try:
            entry = store.get(730)
        finally:
            store.close()
        assert entry is not None
        assert entry.crafted_normal.crafted_level == 2

    def test_fresh_cache_is_served_without_fetch(
        self, db_path: Path, fake_fetcher: type[ClosableFakeFetcher]
    ) -> None:
        _seed(db_path, make_entry(730, utc_now() - timedelta(hours=1), [make_record(1)]))

        result = runner.invoke(app, ["--log-level", "CRITICAL", "enrich", "730"])

        assert result.exit_code == 0, result.output
        assert "App 730 (cached)" in result.stdout
        assert fake_fetcher.instances[0].calls == []

    def test_ids_file(self, db_path: Path, fake_fetcher: type[ClosableFakeFetcher]) -> None:
        ids_file = db_path.parent.parent / "ids.txt"
        ids_file.write_text("# games\n730\n\n570\n730\n", encoding="utf-8")

        result = runner.invoke(app, ["--log-level", "CRITICAL", "enrich", "-f", str(ids_file)])

        assert result.exit_code == 0, result.output
        assert fake_fetcher.instances[0].enrichment_calls() == [730, 570]

    def test_no_ids_is_an_error(self, db_path: Path, fake_fetcher: type[ClosableFakeFetcher]) -> None:
        result = runner.invoke(app, ["enrich"])

        assert result.exit_code == EXIT_ERROR
        assert fake_fetcher.instances == []

    def test_error_as_json(self, db_path: Path) -> None:
        result = runner.invoke(app, ["--json", "enrich", "--", "-5"])

        assert result.exit_code == EXIT_ERROR
        data = json.loads(result.stdout)
        assert data["success"] is False
        assert data["data"]["error_code"] == ErrorCode.CLI_INVALID_ARGUMENTS.value


class TestRefetchCommand:
    def test_refetch_replaces_valid_entry(
        self, db_path: Path, fake_fetcher: type[ClosableFakeFetcher]
    ) -> None:
        _seed(db_path, make_entry(730, utc_now(), [make_record(5)]))

        result = runner.invoke(app, ["--log-level", "CRITICAL", "refetch", "730"])

        assert result.exit_code == 0, result.output
        assert fake_fetcher.instances[0].enrichment_calls() == [730]
        store = BadgeCacheStore(db_path)
        try:
            entry = store.get(730)
        finally:
            store.close()
        assert entry is not None
        assert sorted(r.base_level for r in entry.enrichment_records) == [1, 1, 2]


class TestCacheCommands:
    def test_info_as_json(self, db_path: Path) -> None:
        _seed(
            db_path,
            make_entry(1, utc_now(), [make_record(1)]),
            make_entry(2, utc_now() - timedelta(days=30), degraded=True),
        )

        result = runner.invoke(app, ["--log-level", "CRITICAL", "--json", "cache", "info"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)["data"]
        assert data["total_entries"] == 2
        assert data["valid_entries"] == 1
        assert data["expired_entries"] == 1
        assert data["degraded_entries"] == 1

    def test_purge_removes_expired(self, db_path: Path) -> None:
        _seed(
            db_path,
            make_entry(1, utc_now(), [make_record(1)]),
            make_entry(2, utc_now() - timedelta(days=30)),
        )

        result = runner.invoke(app, ["--log-level", "CRITICAL", "cache", "purge"])

        assert result.exit_code == 0, result.output
        assert "Purged 1 expired entries" in result.stdout

    def test_clear_requires_confirmation(self, db_path: Path) -> None:
        _seed(db_path, make_entry(1, utc_now(), [make_record(1)]))

        aborted = runner.invoke(app, ["cache", "clear"], input="n\n")
        cleared = runner.invoke(app, ["--log-level", "CRITICAL", "cache", "clear", "--yes"])

        assert aborted.exit_code != 0
        assert cleared.exit_code == 0
        assert "Cleared 1 entries" in cleared.stdout


class TestIdParsing:
    def test_read_ids_file_rejects_garbage(self, tmp_path: Path) -> None:
        ids_file = tmp_path / "ids.txt"
        ids_file.write_text("730\nabc\n", encoding="utf-8")

        with pytest.raises(ApplicationError) as exc_info:
            read_ids_file(ids_file)

        assert exc_info.value.code == ErrorCode.CLI_INVALID_ARGUMENTS
        assert ":2:" in exc_info.value.message

    def test_collect_deduplicates_in_order(self, tmp_path: Path) -> None:
        ids_file = tmp_path / "ids.txt"
        ids_file.write_text("570\n10\n", encoding="utf-8")

        assert collect_item_ids([10, 730, 10], ids_file) == [10, 730, 570]

    @pytest.mark.parametrize("item_id", [-1, MAX_ITEM_ID + 1])
    def test_collect_rejects_ids_outside_storage_range(self, item_id: int) -> None:
        with pytest.raises(ApplicationError) as exc_info:
            collect_item_ids([730, item_id], None)

        assert exc_info.value.code == ErrorCode.CLI_INVALID_ARGUMENTS

    def test_collect_accepts_largest_storable_id(self) -> None:
        assert collect_item_ids([MAX_ITEM_ID], None) == [MAX_ITEM_ID]
