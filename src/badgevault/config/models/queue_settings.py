"""Fetch queue pacing configuration."""

from __future__ import annotations

from pydantic import BaseModel, Field

from badgevault.shared.constants import NetworkConfig


class QueueSettings(BaseModel):
    """Mandatory delays inserted before each remote call of a fetch cycle."""

    delay_before_enrichment_call: float = Field(
        default=NetworkConfig.DELAY_BEFORE_ENRICHMENT_CALL,
        ge=0,
        description="Seconds to wait before the badge list call",
    )
    delay_before_crafted_call: float = Field(
        default=NetworkConfig.DELAY_BEFORE_CRAFTED_CALL,
        ge=0,
        description="Seconds to wait before each crafted-status call",
    )


__all__ = ["QueueSettings"]
