"""Combine badge records with crafted status into one ordered view."""

from __future__ import annotations

from collections.abc import Iterable

from badgevault.services.badge_models import AnnotatedRecord, CraftedInfo, EnrichmentRecord


def sort_key(record: EnrichmentRecord) -> tuple[bool, int]:
    """Normal badges first, then foil; ascending level within each."""
    return (record.is_foil, record.base_level)


def is_highlighted(
    record: EnrichmentRecord,
    crafted_normal: CraftedInfo,
    crafted_foil: CraftedInfo,
) -> bool:
    """A record is highlighted when its variant was crafted at exactly its level."""
    crafted = crafted_foil if record.is_foil else crafted_normal
    return crafted.is_crafted and crafted.crafted_level == record.base_level


def combine(
    records: Iterable[EnrichmentRecord],
    crafted_normal: CraftedInfo,
    crafted_foil: CraftedInfo,
) -> list[AnnotatedRecord]:
    """Order records for display and mark the crafted level of each variant.

    The sort is stable, so records with equal keys keep their input order.
    More than one highlighted record per variant is possible only with
    duplicate levels in the input; it is not corrected here.

    Args:
        records: Badge records in any order
        crafted_normal: Crafted status of the normal badge
        crafted_foil: Crafted status of the foil badge

    Returns:
        Annotated records in display order

    Example:
        >>> combine(records, CraftedInfo.from_level(3), CraftedInfo.none())
        [AnnotatedRecord(record=<level 1>, highlighted=False), ...]
    """
    return [
        AnnotatedRecord(record, is_highlighted(record, crafted_normal, crafted_foil))
        for record in sorted(records, key=sort_key)
    ]


__all__ = ["combine", "is_highlighted", "sort_key"]
