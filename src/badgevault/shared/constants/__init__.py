"""
BadgeVault Constants Module

This module re-exports the constants used across the application.
"""

from .cache import (
    BASE_DAY,
    BASE_HOUR,
    BASE_MINUTE,
    BASE_SECOND,
    Cache,
    CacheValidationConstants,
)
from .logging import LogContextKeys, LoggingDefaults, LogOperationNames
from .network import NetworkConfig

APPLICATION_NAME = "badgevault"
APPLICATION_VERSION = "1.0.0"

__all__ = [
    "APPLICATION_NAME",
    "APPLICATION_VERSION",
    "BASE_DAY",
    "BASE_HOUR",
    "BASE_MINUTE",
    "BASE_SECOND",
    "Cache",
    "CacheValidationConstants",
    "LogContextKeys",
    "LogOperationNames",
    "LoggingDefaults",
    "NetworkConfig",
]
