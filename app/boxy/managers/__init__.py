"""Package manager backends.

This module exports the package manager classes and detection helpers.
"""

from boxy.managers.apt import AptManager
from boxy.managers.base import PackageManager, PackageManagerError
from boxy.managers.brew import BrewManager
from boxy.managers.detect import ManagerNotFoundError, detect_manager, get_manager

__all__ = [
    "AptManager",
    "BrewManager",
    "ManagerNotFoundError",
    "PackageManager",
    "PackageManagerError",
    "detect_manager",
    "get_manager",
]
