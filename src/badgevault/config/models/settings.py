"""BadgeVault Settings Configuration Model.

Main Settings class that consolidates all configuration domains.
"""

from __future__ import annotations

import logging
from pathlib import Path

import toml
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from badgevault.config.models.api_settings import APISettings
from badgevault.config.models.app_settings import LoggingSettings, PresenterSettings
from badgevault.config.models.cache_settings import CacheSettings
from badgevault.config.models.queue_settings import QueueSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Unified configuration.

    Values come from keyword arguments (e.g. a TOML file); anything they
    leave unset is read from environment variables such as
    ``BADGEVAULT_CACHE__TTL=86400`` or ``BADGEVAULT_API__STEAMSETS_API_KEY``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BADGEVAULT_",
        env_nested_delimiter="__",
        env_ignore_empty=True,
        extra="ignore",
    )

    api: APISettings = Field(default_factory=APISettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    queue: QueueSettings = Field(default_factory=QueueSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    presenter: PresenterSettings = Field(default_factory=PresenterSettings)

    @classmethod
    def from_toml_file(cls, file_path: str | Path) -> Settings:
        """Load settings from a TOML file, falling back to the environment.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        file_path = Path(file_path)
        if not file_path.exists():
            msg = f"Configuration file not found: {file_path}"
            raise FileNotFoundError(msg)

        raw_config = toml.load(file_path)
        logger.debug("Loaded configuration file %s", file_path)
        return cls(**raw_config)

    def to_toml_file(self, file_path: str | Path) -> None:
        """Save settings to TOML file.

        Secrets are written in clear text since the file is the place
        they are configured; file permissions protect it.
        """
        file_path = Path(file_path)
        file_path.parent.mkdir(parents=True, exist_ok=True)

        config_dict = self.model_dump(mode="json", exclude_none=True)
        config_dict["api"]["steamsets_api_key"] = self.api.steamsets_api_key.get_secret_value()
        if self.api.steam_cookies is not None:
            config_dict["api"]["steam_cookies"] = self.api.steam_cookies.get_secret_value()

        with open(file_path, "w", encoding="utf-8") as f:
            toml.dump(config_dict, f)


__all__ = ["Settings"]
