"""Configuration package for BadgeVault."""

from badgevault.config.loader import load_settings
from badgevault.config.models import (
    APISettings,
    CacheSettings,
    LoggingSettings,
    PresenterSettings,
    QueueSettings,
    Settings,
)

__all__ = [
    "APISettings",
    "CacheSettings",
    "LoggingSettings",
    "PresenterSettings",
    "QueueSettings",
    "Settings",
    "load_settings",
]
