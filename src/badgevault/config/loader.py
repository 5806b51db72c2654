"""Settings loader.

This module handles:
- Environment variable loading from .env files
- Configuration file loading from TOML
- Wrapping validation failures into ApplicationError
"""

from __future__ import annotations

import logging
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from badgevault.config.models.settings import Settings
from badgevault.shared.constants import LogOperationNames
from badgevault.shared.errors import ApplicationError, ErrorCode, ErrorContext

logger = logging.getLogger(__name__)

HOME_DIR = ".badgevault"


def default_config_paths() -> list[Path]:
    """Configuration files tried in order when no path is given."""
    return [
        Path("config/config.toml"),
        Path("config.toml"),
        Path.home() / HOME_DIR / "config.toml",
    ]


def _load_env_file(env_file: Path = Path(".env")) -> None:
    """Load a .env file if present.

    Variables already set in the process environment win over the file.
    """
    if env_file.exists():
        load_dotenv(env_file, override=False)
        logger.debug("Loaded environment file %s", env_file)


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from TOML configuration file or environment.

    Args:
        config_path: Optional path to TOML configuration file. If None, tries
            the default locations and finally environment variables only.

    Returns:
        Settings instance loaded from the specified source

    Raises:
        ApplicationError: If the file is missing (explicit path only) or the
            configuration does not validate
    """
    _load_env_file()

    path: Path | None = Path(config_path) if config_path else None
    if path is None:
        path = next((p for p in default_config_paths() if p.exists()), None)

    context = ErrorContext(
        operation=LogOperationNames.LOAD_SETTINGS,
        additional_data={"config_path": str(path) if path else ""},
    )

    try:
        if path is None:
            return Settings()
        return Settings.from_toml_file(path)
    except FileNotFoundError as e:
        raise ApplicationError(
            code=ErrorCode.CONFIG_MISSING,
            message=str(e),
            context=context,
            original_error=e,
        ) from e
    except ValidationError as e:
        raise ApplicationError(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Invalid configuration: {e.error_count()} validation error(s)\n{e}",
            context=context,
            original_error=e,
        ) from e
    except (ValueError, TypeError) as e:
        # toml.TomlDecodeError is a ValueError
        raise ApplicationError(
            code=ErrorCode.CONFIG_INVALID,
            message=f"Failed to parse configuration file: {e}",
            context=context,
            original_error=e,
        ) from e


__all__ = ["default_config_paths", "load_settings"]
