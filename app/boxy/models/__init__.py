"""Data models for boxy.

This module exports the core data structures used throughout the application.
"""

from boxy.models.package import PackageFact, PackageItem
from boxy.models.state import (
    AppState,
    ConfirmAction,
    Mode,
    OperationKind,
    PendingConfirm,
    StatusLine,
)

__all__ = [
    "AppState",
    "ConfirmAction",
    "Mode",
    "OperationKind",
    "PackageFact",
    "PackageItem",
    "PendingConfirm",
    "StatusLine",
]
