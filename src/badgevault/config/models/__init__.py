"""Configuration domain models."""

from badgevault.config.models.api_settings import APISettings
from badgevault.config.models.app_settings import LoggingSettings, PresenterSettings
from badgevault.config.models.cache_settings import CacheSettings
from badgevault.config.models.queue_settings import QueueSettings
from badgevault.config.models.settings import Settings

__all__ = [
    "APISettings",
    "CacheSettings",
    "LoggingSettings",
    "PresenterSettings",
    "QueueSettings",
    "Settings",
]
