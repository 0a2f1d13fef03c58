"""Package manager detection.

Selects the backend for the current platform, or the one requested by
name in the configuration or on the command line.
"""

import logging
import sys
from typing import Literal

from boxy.managers.apt import AptManager
from boxy.managers.base import PackageManager
from boxy.managers.brew import BrewManager

logger = logging.getLogger(__name__)

ManagerChoice = Literal["auto", "apt", "brew"]

_MANAGERS: dict[str, type[PackageManager]] = {
    "apt": AptManager,
    "brew": BrewManager,
}


class ManagerNotFoundError(Exception):
    """Raised when no supported package manager is available."""


def get_manager(name: str, timeout: float = 600.0) -> PackageManager:
    """Instantiate a package manager by name.

    Args:
        name: Manager name ('apt' or 'brew').
        timeout: Per-command timeout passed to the manager.

    Returns:
        PackageManager instance (not checked for availability).

    Raises:
        ValueError: If the name is not a supported manager.
    """
    try:
        manager_cls = _MANAGERS[name]
    except KeyError:
        msg = f"Unsupported package manager '{name}' (expected one of: {', '.join(_MANAGERS)})"
        raise ValueError(msg) from None
    return manager_cls(timeout=timeout)


def detect_manager(
    choice: ManagerChoice = "auto",
    timeout: float = 600.0,
    platform: str | None = None,
) -> PackageManager:
    """Detect the package manager to use.

    With ``choice="auto"`` Homebrew is used on macOS and APT on Linux.

    Args:
        choice: 'auto' or an explicit manager name.
        timeout: Per-command timeout passed to the manager.
        platform: Platform override (defaults to sys.platform).

    Returns:
        An available PackageManager.

    Raises:
        ManagerNotFoundError: If no supported manager is available.
    """
    if choice != "auto":
        manager = get_manager(choice, timeout=timeout)
        if not manager.is_available():
            msg = f"Package manager '{choice}' is not available on this system"
            raise ManagerNotFoundError(msg)
        return manager

    platform = platform or sys.platform
    if platform == "darwin":
        candidates = ["brew"]
    elif platform.startswith("linux"):
        candidates = ["apt"]
    else:
        candidates = []

    for name in candidates:
        manager = get_manager(name, timeout=timeout)
        if manager.is_available():
            logger.debug("Detected package manager: %s", name)
            return manager

    msg = "No supported package manager found (brew or apt)"
    raise ManagerNotFoundError(msg)
