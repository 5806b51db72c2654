"""Tests for badge domain models."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from badgevault.services.badge_models import (
    BadgeVariant,
    CacheEntry,
    CraftedInfo,
    EnrichmentRecord,
    parse_timestamp,
)
from tests.helpers import FIXED_NOW, make_entry, make_record


class TestParseTimestamp:
    """Test ISO timestamp parsing."""

    def test_zulu_suffix_is_utc(self) -> None:
        result = parse_timestamp("2024-01-05T15:04:00Z")

        assert result == datetime(2024, 1, 5, 15, 4, tzinfo=timezone.utc)

    def test_naive_value_is_assumed_utc(self) -> None:
        result = parse_timestamp("2024-01-05T15:04:00")

        assert result is not None
        assert result.tzinfo == timezone.utc

    @pytest.mark.parametrize("value", [None, "", "   ", "not a date", 12345])
    def test_invalid_values_return_none(self, value: object) -> None:
        assert parse_timestamp(value) is None


class TestEnrichmentRecord:
    """Test EnrichmentRecord validation and serialization."""

    def test_rejects_negative_level(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            make_record(-1)

    def test_rejects_bool_level(self) -> None:
        with pytest.raises(TypeError, match="base_level"):
            EnrichmentRecord(
                name="x", image_ref="x.png", scarcity="1", base_level=True, is_foil=False
            )

    def test_rejects_non_string_scarcity(self) -> None:
        with pytest.raises(TypeError, match="scarcity"):
            EnrichmentRecord(
                name="x", image_ref="x.png", scarcity=5, base_level=1, is_foil=False  # type: ignore[arg-type]
            )

    def test_from_dict_missing_key_raises(self) -> None:
        data = make_record(1).to_dict()
        del data["image_ref"]

        with pytest.raises(KeyError):
            EnrichmentRecord.from_dict(data)

    def test_dict_round_trip_keeps_completion_time(self) -> None:
        record = make_record(2, first_completion=FIXED_NOW)

        assert EnrichmentRecord.from_dict(record.to_dict()) == record

    def test_image_url(self) -> None:
        record = make_record(1)

        url = record.image_url(730, "https://cdn.example/items/")

        assert url == "https://cdn.example/items/730/badge_normal_1.png"


class TestCraftedInfo:
    """Test the crafted level invariant."""

    def test_from_level_sets_flag(self) -> None:
        assert CraftedInfo.from_level(3) == CraftedInfo(crafted_level=3, is_crafted=True)
        assert CraftedInfo.from_level(0) == CraftedInfo.none()

    def test_inconsistent_flag_raises(self) -> None:
        with pytest.raises(ValueError, match="inconsistent"):
            CraftedInfo(crafted_level=0, is_crafted=True)

    def test_negative_level_raises(self) -> None:
        with pytest.raises(ValueError):
            CraftedInfo(crafted_level=-2, is_crafted=False)

    def test_from_dict_rejects_non_dict(self) -> None:
        with pytest.raises(TypeError):
            CraftedInfo.from_dict([1, True])  # type: ignore[arg-type]


class TestCacheEntry:
    """Test CacheEntry structure checks."""

    def test_well_formed_entry(self) -> None:
        entry = make_entry(730, FIXED_NOW, [make_record(1)], normal_level=1)

        assert entry.is_well_formed()
        assert entry.has_records
        assert entry.crafted_for(BadgeVariant.NORMAL).crafted_level == 1
        assert entry.crafted_for(BadgeVariant.FOIL) == CraftedInfo.none()

    def test_naive_created_at_is_malformed(self) -> None:
        entry = make_entry(730, datetime(2024, 1, 1))

        assert not entry.is_well_formed()

    def test_wrong_record_type_is_malformed(self) -> None:
        entry = CacheEntry(
            item_id=730,
            created_at=FIXED_NOW,
            enrichment_records=({"name": "x"},),  # type: ignore[arg-type]
        )

        assert not entry.is_well_formed()

    def test_defaults(self) -> None:
        entry = CacheEntry(item_id=1, created_at=FIXED_NOW)

        assert entry.enrichment_records == ()
        assert entry.crafted_normal == CraftedInfo.none()
        assert not entry.degraded
        assert not entry.has_records
