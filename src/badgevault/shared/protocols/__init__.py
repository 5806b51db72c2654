"""Protocols shared across service layers."""

from badgevault.shared.protocols.services import (
    BadgeFetcherProtocol,
    BadgeStoreProtocol,
    BasePresenter,
    PlaceholderReason,
    Presenter,
)

__all__ = [
    "BadgeFetcherProtocol",
    "BadgeStoreProtocol",
    "BasePresenter",
    "PlaceholderReason",
    "Presenter",
]
