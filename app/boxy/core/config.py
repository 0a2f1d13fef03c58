"""Application configuration.

Configuration is stored in ~/.config/boxy/config.toml. Every key is
optional; a missing file means all defaults::

    manager = "apt"
    show_all = true
    layout = "sectioned"
    command_timeout_seconds = 900
"""

import logging
import tomllib
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from boxy.core.paths import get_app_config_path
from boxy.managers.detect import ManagerChoice
from boxy.models.state import LayoutType

logger = logging.getLogger(__name__)


class AppConfig(BaseModel):
    """Configuration for the interactive view.

    Attributes:
        manager: Package manager to use ('auto' detects by platform).
        show_all: Start with every installed package visible.
        layout: 'combined' single list or 'sectioned' bookmarked/installed lists.
        command_timeout_seconds: Maximum time for one package manager command.
        search_limit: Maximum number of search results kept (None = unlimited).
    """

    model_config = ConfigDict(extra="forbid")

    manager: Annotated[
        ManagerChoice,
        Field(description="Package manager to use"),
    ] = "auto"
    show_all: Annotated[
        bool,
        Field(description="Show all installed packages on startup"),
    ] = False
    layout: Annotated[
        LayoutType,
        Field(description="Package list layout"),
    ] = "combined"
    command_timeout_seconds: Annotated[
        int,
        Field(ge=10, le=3600, description="Timeout in seconds (10-3600)"),
    ] = 600
    search_limit: Annotated[
        int | None,
        Field(ge=1, description="Maximum number of search results"),
    ] = None


class ConfigError(Exception):
    """Raised when the configuration file cannot be read or is invalid."""


def load_app_config(path: Path | None = None) -> AppConfig:
    """Load application configuration from a TOML file.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated AppConfig (defaults if the file does not exist).

    Raises:
        ConfigError: If the file cannot be read, parsed, or validated.
    """
    config_path = path or get_app_config_path()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except FileNotFoundError:
        logger.debug("No config file at %s, using defaults", config_path)
        return AppConfig()
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config: {e}") from e

    try:
        return AppConfig.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e
