"""
Network Configuration Constants

This module contains the remote endpoints and pacing constants used by
the badge data fetcher and the fetch scheduler.
"""

from .cache import BASE_SECOND


class NetworkConfig:
    """Network configuration constants."""

    # Remote endpoints
    STEAMSETS_URL = "https://api.steamsets.com/v1/app.listBadges"
    BADGE_INFO_URL = "https://steamcommunity.com/my/ajaxgetbadgeinfo/"
    IMAGE_BASE_URL = (
        "https://cdn.fastly.steamstatic.com/steamcommunity/public/images/items"
    )

    # Query parameter that selects the foil variant on the badge info call
    FOIL_QUERY_PARAM = "border"
    FOIL_QUERY_VALUE = "1"

    # Mandatory pacing between remote calls (seconds)
    DELAY_BEFORE_ENRICHMENT_CALL = 1.0 * BASE_SECOND
    DELAY_BEFORE_CRAFTED_CALL = 0.2 * BASE_SECOND

    # Optional request ceiling on top of the pacing (aiolimiter)
    DEFAULT_REQUESTS_PER_WINDOW = 60
    DEFAULT_RATE_LIMIT_WINDOW = 60 * BASE_SECOND

    # User agent
    USER_AGENT = "BadgeVault/1.0.0"

    # HTTP headers
    CONTENT_TYPE_JSON = "application/json"
    ACCEPT_JSON = "application/json"
