"""Tests for combining badge records with crafted status."""

from __future__ import annotations

from badgevault.services.badge_models import CraftedInfo
from badgevault.services.merger import combine
from tests.helpers import make_record


def _levels(view) -> list[tuple[bool, int]]:
    return [(item.record.is_foil, item.record.base_level) for item in view]


class TestOrdering:
    """Test display order."""

    def test_normal_levels_then_foil_levels(self) -> None:
        records = [
            make_record(2, foil=True),
            make_record(4),
            make_record(1),
            make_record(1, foil=True),
            make_record(5),
            make_record(3),
            make_record(2),
        ]

        view = combine(records, CraftedInfo.none(), CraftedInfo.none())

        assert _levels(view) == [
            (False, 1),
            (False, 2),
            (False, 3),
            (False, 4),
            (False, 5),
            (True, 1),
            (True, 2),
        ]

    def test_sort_is_stable_for_equal_keys(self) -> None:
        first = make_record(1, name="first")
        second = make_record(1, name="second")

        view = combine([first, second], CraftedInfo.none(), CraftedInfo.none())

        assert [item.record.name for item in view] == ["first", "second"]

    def test_empty_input(self) -> None:
        assert combine([], CraftedInfo.from_level(1), CraftedInfo.none()) == []


class TestHighlight:
    """Test crafted highlight marking."""

    def test_normal_crafted_level_highlights_matching_normal_record_only(self) -> None:
        records = [make_record(level) for level in range(1, 6)] + [make_record(3, foil=True)]

        view = combine(records, CraftedInfo.from_level(3), CraftedInfo.none())

        highlighted = [(i.record.is_foil, i.record.base_level) for i in view if i.highlighted]
        assert highlighted == [(False, 3)]

    def test_foil_crafted_highlights_foil_record(self) -> None:
        records = [make_record(1), make_record(1, foil=True)]

        view = combine(records, CraftedInfo.none(), CraftedInfo.from_level(1))

        assert [i.highlighted for i in view] == [False, True]

    def test_nothing_highlighted_when_uncrafted(self) -> None:
        records = [make_record(1), make_record(2)]

        view = combine(records, CraftedInfo.none(), CraftedInfo.none())

        assert not any(i.highlighted for i in view)

    def test_level_without_record_highlights_nothing(self) -> None:
        view = combine([make_record(1), make_record(2)], CraftedInfo.from_level(5), CraftedInfo.none())

        assert not any(i.highlighted for i in view)
