"""Response models for the remote badge services.

These pydantic models validate raw JSON from the badge list (Steamsets)
and crafted-status (Steam community) endpoints before it is turned into
domain records. Unknown fields are ignored so that additive API changes
do not break parsing.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator

from badgevault.services.badge_models import EnrichmentRecord, parse_timestamp


class BaseResponseModel(BaseModel):
    """Base model for remote API responses."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SteamsetsBadge(BaseResponseModel):
    """One badge entry of the badge list response.

    Attributes:
        name: Badge name
        is_foil: Whether this is the foil badge
        base_level: Badge level
        scarcity: Scarcity (numbers are coerced to their string form)
        badge_image: Image file name
        first_completion: ISO timestamp of the first craft, if known
    """

    name: str
    is_foil: bool = Field(..., alias="isFoil")
    base_level: StrictInt = Field(..., alias="baseLevel", ge=0)
    scarcity: str
    badge_image: str = Field(..., alias="badgeImage")
    first_completion: str | None = Field(default=None, alias="firstCompletion")

    @field_validator("scarcity", mode="before")
    @classmethod
    def _scarcity_to_str(cls, value: object) -> object:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    def to_record(self) -> EnrichmentRecord:
        return EnrichmentRecord(
            name=self.name,
            image_ref=self.badge_image,
            scarcity=self.scarcity,
            base_level=self.base_level,
            is_foil=self.is_foil,
            first_completion=parse_timestamp(self.first_completion),
        )


class SteamsetsBadgeList(BaseResponseModel):
    """Badge list response: ``{"badges": [...]}``."""

    badges: list[SteamsetsBadge]


class BadgeData(BaseResponseModel):
    """``badgedata`` object of the crafted-status response."""

    level: StrictInt | StrictFloat | None = None


class BadgeInfoResponse(BaseResponseModel):
    """Crafted-status response: ``{"badgedata": {"level": N}}``."""

    badgedata: BadgeData | None = None

    @property
    def level(self) -> int | None:
        """Crafted level, or None if the response carries no usable number."""
        if self.badgedata is None or self.badgedata.level is None:
            return None
        level = self.badgedata.level
        if not math.isfinite(level) or level < 0:
            return None
        # A non-integral level never matches a badge level
        if isinstance(level, float) and not level.is_integer():
            return None
        return int(level)


__all__ = [
    "BadgeData",
    "BadgeInfoResponse",
    "SteamsetsBadge",
    "SteamsetsBadgeList",
]
