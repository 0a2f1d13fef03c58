"""XDG-compliant path management for boxy.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and state storage.

XDG defaults:
- Config: ~/.config/boxy/
- State: ~/.local/state/boxy/
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "boxy"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/boxy/ (or XDG_CONFIG_HOME/boxy/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    Returns:
        Path to ~/.local/state/boxy/ (or XDG_STATE_HOME/boxy/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_bookmarks_path() -> Path:
    """Get the bookmarks file path.

    Returns:
        Path to ~/.config/boxy/bookmarks.toml.
    """
    return get_config_dir() / "bookmarks.toml"


def get_app_config_path() -> Path:
    """Get the application configuration file path.

    Returns:
        Path to ~/.config/boxy/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_user_theme_path() -> Path:
    """Get the user theme configuration path.

    Returns:
        Path to ~/.config/boxy/theme.toml.
    """
    return get_config_dir() / "theme.toml"


def get_log_path() -> Path:
    """Get the log file path.

    Returns:
        Path to ~/.local/state/boxy/boxy.log.
    """
    return get_state_dir() / "boxy.log"


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_config_dir() -> Path:
    """Create the configuration directory if it doesn't exist.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_config_dir(), "config")


def ensure_state_dir() -> Path:
    """Create the state directory if it doesn't exist.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_state_dir(), "state")
