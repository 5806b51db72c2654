"""Badge domain models.

This module defines the dataclasses that flow through the fetch pipeline:
the enrichment records returned by the badge list service, the crafted
status of each badge variant, and the per-item cache entry that merges
both.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, NamedTuple

from badgevault.shared.constants import CacheValidationConstants

__all__ = [
    "AnnotatedRecord",
    "BadgeVariant",
    "CacheEntry",
    "CraftedInfo",
    "EnrichmentRecord",
    "parse_timestamp",
]


def _is_int(value: Any) -> bool:
    # bool is a subclass of int and never a valid level
    return isinstance(value, int) and not isinstance(value, bool)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO 8601 timestamp into a timezone-aware datetime.

    Args:
        value: ISO string (a trailing "Z" is accepted), datetime or None

    Returns:
        UTC-aware datetime, or None if the value is missing or unparsable
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            dt = datetime.fromisoformat(text)
        except ValueError:
            return None
    else:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


class BadgeVariant(str, Enum):
    """Badge variant queried by the crafted-status call."""

    NORMAL = "normal"
    FOIL = "foil"

    @property
    def is_foil(self) -> bool:
        return self is BadgeVariant.FOIL


@dataclass(frozen=True)
class EnrichmentRecord:
    """One badge level as described by the badge list service.

    Attributes:
        name: Badge name
        image_ref: Image file name relative to the item's image folder
        scarcity: Scarcity as reported by the service
        base_level: Badge level (1-5 for normal badges, 1 for foil)
        is_foil: Whether this is the foil badge
        first_completion: When the badge was first crafted by anyone
    """

    name: str
    image_ref: str
    scarcity: str
    base_level: int
    is_foil: bool
    first_completion: datetime | None = None

    def __post_init__(self) -> None:
        """Validate record fields.

        Raises:
            TypeError: If a field has the wrong type
            ValueError: If base_level is negative
        """
        for name in ("name", "image_ref", "scarcity"):
            if not isinstance(getattr(self, name), str):
                msg = f"{name} must be str, got {type(getattr(self, name)).__name__}"
                raise TypeError(msg)
        if not _is_int(self.base_level):
            msg = f"base_level must be int, got {type(self.base_level).__name__}"
            raise TypeError(msg)
        if self.base_level < 0:
            msg = f"base_level must be non-negative, got {self.base_level}"
            raise ValueError(msg)
        if not isinstance(self.is_foil, bool):
            msg = f"is_foil must be bool, got {type(self.is_foil).__name__}"
            raise TypeError(msg)
        if self.first_completion is not None and not isinstance(
            self.first_completion, datetime
        ):
            msg = "first_completion must be a datetime or None"
            raise TypeError(msg)

    def image_url(self, item_id: int, base_url: str) -> str:
        """Build the absolute image URL for this badge.

        Example:
            >>> record.image_url(730, "https://cdn.example/items")
            'https://cdn.example/items/730/badge.png'
        """
        return f"{base_url.rstrip('/')}/{item_id}/{self.image_ref}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "image_ref": self.image_ref,
            "scarcity": self.scarcity,
            "base_level": self.base_level,
            "is_foil": self.is_foil,
            "first_completion": (
                self.first_completion.isoformat() if self.first_completion else None
            ),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> EnrichmentRecord:
        """Rebuild a record from its stored form.

        Raises:
            TypeError: If data is not a dict or a field has the wrong type
            KeyError: If a required key is missing
            ValueError: If a field value is out of range
        """
        if not isinstance(data, dict):
            msg = f"record must be a dict, got {type(data).__name__}"
            raise TypeError(msg)
        missing = [k for k in CacheValidationConstants.RECORD_KEYS if k not in data]
        if missing:
            raise KeyError(f"Missing record fields: {missing}")

        return cls(
            name=data["name"],
            image_ref=data["image_ref"],
            scarcity=data["scarcity"],
            base_level=data["base_level"],
            is_foil=data["is_foil"],
            first_completion=parse_timestamp(data["first_completion"]),
        )


@dataclass(frozen=True)
class CraftedInfo:
    """Crafted status of one badge variant.

    Invariant: ``is_crafted == (crafted_level > 0)``.
    """

    crafted_level: int = 0
    is_crafted: bool = False

    def __post_init__(self) -> None:
        if not _is_int(self.crafted_level):
            msg = f"crafted_level must be int, got {type(self.crafted_level).__name__}"
            raise TypeError(msg)
        if self.crafted_level < 0:
            msg = f"crafted_level must be non-negative, got {self.crafted_level}"
            raise ValueError(msg)
        if not isinstance(self.is_crafted, bool):
            msg = f"is_crafted must be bool, got {type(self.is_crafted).__name__}"
            raise TypeError(msg)
        if self.is_crafted != (self.crafted_level > 0):
            msg = (
                f"is_crafted ({self.is_crafted}) inconsistent with "
                f"crafted_level ({self.crafted_level})"
            )
            raise ValueError(msg)

    @classmethod
    def from_level(cls, level: int) -> CraftedInfo:
        return cls(crafted_level=level, is_crafted=level > 0)

    @classmethod
    def none(cls) -> CraftedInfo:
        """Default for a variant that was never crafted or could not be fetched."""
        return cls(crafted_level=0, is_crafted=False)

    def to_dict(self) -> dict[str, Any]:
        return {"crafted_level": self.crafted_level, "is_crafted": self.is_crafted}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CraftedInfo:
        if not isinstance(data, dict):
            msg = f"crafted info must be a dict, got {type(data).__name__}"
            raise TypeError(msg)
        missing = [k for k in CacheValidationConstants.CRAFTED_KEYS if k not in data]
        if missing:
            raise KeyError(f"Missing crafted info fields: {missing}")
        return cls(crafted_level=data["crafted_level"], is_crafted=data["is_crafted"])


class AnnotatedRecord(NamedTuple):
    """A record in display order with its crafted highlight flag."""

    record: EnrichmentRecord
    highlighted: bool


@dataclass
class CacheEntry:
    """Cached result of one completed fetch cycle.

    Attributes:
        item_id: Item (app) id, primary key
        created_at: When the fetch cycle completed (UTC)
        enrichment_records: Records from the badge list service
        crafted_normal: Crafted status of the normal badge
        crafted_foil: Crafted status of the foil badge
        degraded: True if any remote call of the cycle failed
    """

    item_id: int
    created_at: datetime
    enrichment_records: tuple[EnrichmentRecord, ...] = field(default_factory=tuple)
    crafted_normal: CraftedInfo = field(default_factory=CraftedInfo.none)
    crafted_foil: CraftedInfo = field(default_factory=CraftedInfo.none)
    degraded: bool = False

    def is_well_formed(self) -> bool:
        """Check that every structural field is present and well-typed."""
        return (
            _is_int(self.item_id)
            and isinstance(self.created_at, datetime)
            and self.created_at.tzinfo is not None
            and isinstance(self.enrichment_records, (tuple, list))
            and all(isinstance(r, EnrichmentRecord) for r in self.enrichment_records)
            and isinstance(self.crafted_normal, CraftedInfo)
            and isinstance(self.crafted_foil, CraftedInfo)
            and isinstance(self.degraded, bool)
        )

    @property
    def has_records(self) -> bool:
        return len(self.enrichment_records) > 0

    def crafted_for(self, variant: BadgeVariant) -> CraftedInfo:
        return self.crafted_foil if variant.is_foil else self.crafted_normal
