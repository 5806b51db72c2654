"""Remote badge service client."""

from badgevault.services.steam.badge_fetcher import BadgeDataFetcher, FetchOutcome

__all__ = ["BadgeDataFetcher", "FetchOutcome"]
