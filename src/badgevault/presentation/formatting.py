"""Text formatting helpers for badge views."""

from __future__ import annotations

from datetime import datetime, tzinfo

from badgevault.services.badge_models import EnrichmentRecord

DATE_UNAVAILABLE = "Date unavailable"
LOADING_TEXT = "Loading detailed badge data..."
NO_DATA_TEXT = "No detailed badge data available for this game (App ID: {item_id})."
UPDATING_TEXT = "Updating data..."


def format_completion_date(value: datetime | None, tz: tzinfo | None = None) -> str:
    """Format a first-completion timestamp as e.g. "Jan 5, 2024, 3:04 PM".

    Args:
        value: Timestamp (timezone-aware) or None
        tz: Display timezone (local time if None)

    Returns:
        Formatted date, or "Date unavailable"
    """
    if value is None:
        return DATE_UNAVAILABLE
    local = value.astimezone(tz)
    hour = local.hour % 12 or 12
    return f"{local:%b} {local.day}, {local.year}, {hour}:{local:%M} {local:%p}"


def format_level(record: EnrichmentRecord) -> str:
    return f"{record.base_level} (Foil)" if record.is_foil else str(record.base_level)


def no_data_text(item_id: int) -> str:
    return NO_DATA_TEXT.format(item_id=item_id)


__all__ = [
    "DATE_UNAVAILABLE",
    "LOADING_TEXT",
    "UPDATING_TEXT",
    "format_completion_date",
    "format_level",
    "no_data_text",
]
