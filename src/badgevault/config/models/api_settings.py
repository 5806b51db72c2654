"""Remote API configuration model."""

from __future__ import annotations

from pydantic import BaseModel, Field, SecretStr

from badgevault.shared.constants import NetworkConfig


class APISettings(BaseModel):
    """Configuration for the two remote badge services.

    The Steamsets key is kept as a SecretStr so it never shows up in
    reprs or logs.
    """

    steamsets_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Bearer token for the Steamsets badge list API",
    )
    steamsets_url: str = Field(
        default=NetworkConfig.STEAMSETS_URL,
        description="Badge list (enrichment) endpoint",
    )
    badge_info_url: str = Field(
        default=NetworkConfig.BADGE_INFO_URL,
        description="Crafted-status endpoint prefix; the item id is appended",
    )
    image_base_url: str = Field(
        default=NetworkConfig.IMAGE_BASE_URL,
        description="Base URL for badge images",
    )
    steam_cookies: SecretStr | None = Field(
        default=None,
        description="Cookie header sent with the crafted-status call (logged-in session)",
    )
    request_timeout: float | None = Field(
        default=None,
        gt=0,
        description="Total timeout per remote call in seconds (None: no timeout)",
    )
    requests_per_window: int = Field(
        default=NetworkConfig.DEFAULT_REQUESTS_PER_WINDOW,
        gt=0,
        description="Maximum remote calls per rate limit window",
    )
    rate_limit_window: float = Field(
        default=NetworkConfig.DEFAULT_RATE_LIMIT_WINDOW,
        gt=0,
        description="Rate limit window in seconds",
    )


__all__ = ["APISettings"]
