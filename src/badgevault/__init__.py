"""BadgeVault - Steam badge enrichment with a local TTL cache."""

from badgevault.shared.constants import APPLICATION_VERSION

__version__ = APPLICATION_VERSION

__all__ = ["__version__"]
