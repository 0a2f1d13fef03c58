"""Interactive view state.

This module defines the aggregate owned by the state machine. Every field
is mutated exclusively on the event-loop thread.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Literal

from boxy.models.package import PackageItem

LayoutType = Literal["combined", "sectioned"]


class Mode(Enum):
    """Interaction mode gating which key handler is active."""

    NORMAL = "normal"
    SEARCH = "search"
    INFO = "info"
    CONFIRM = "confirm"


class ConfirmAction(Enum):
    """Mutating action awaiting a yes/no answer."""

    INSTALL = "install"
    UNINSTALL = "uninstall"


class OperationKind(Enum):
    """Kind of a schedulable background operation.

    Each kind owns one in-flight flag in :class:`AppState`.
    """

    LOAD = "load"
    SEARCH = "search"
    INFO = "info"
    INSTALL = "install"
    UNINSTALL = "uninstall"
    BOOKMARK = "bookmark"


@dataclass(frozen=True, slots=True)
class PendingConfirm:
    """Target recorded when entering Confirm mode.

    Attributes:
        package: Name of the package the action applies to.
        action: The action to run once confirmed.
    """

    package: str
    action: ConfirmAction


@dataclass(frozen=True, slots=True)
class StatusLine:
    """Most recent success or failure message.

    Attributes:
        message: Text shown in the status line.
        is_error: Whether the message reports a failure.
    """

    message: str
    is_error: bool = False


@dataclass
class AppState:
    """Aggregate UI state.

    Created once at startup with ``LOAD`` in flight and empty sets, then
    mutated only by the state machine in response to events.

    Attributes:
        mode: Current interaction mode.
        items: Primary item set (bookmarks + installed packages).
        filtered: Search results, or None when browsing.
        cursor: Index into the currently visible set.
        scroll: Index of the first rendered row of the visible set.
        confirm: Target of a pending confirmation.
        status: Most recent status message.
        in_flight: Operation kinds currently running in the background.
        generations: Latest request stamp per generation-stamped kind.
        show_all: Show every installed package instead of bookmarked/manual ones.
        layout: Combined list or bookmarked/installed sections.
        manual_names: Names the package manager reports as manually installed.
        query: Search input text.
        info_text: Body of the Info modal.
        width: Terminal width in columns.
        height: Terminal height in rows.
    """

    mode: Mode = Mode.NORMAL
    items: list[PackageItem] = field(default_factory=list)
    filtered: list[PackageItem] | None = None
    cursor: int = 0
    scroll: int = 0
    confirm: PendingConfirm | None = None
    status: StatusLine | None = None
    in_flight: set[OperationKind] = field(default_factory=lambda: {OperationKind.LOAD})
    generations: dict[OperationKind, int] = field(default_factory=dict)
    show_all: bool = False
    layout: LayoutType = "combined"
    manual_names: set[str] = field(default_factory=set)
    query: str = ""
    info_text: str = ""
    width: int = 80
    height: int = 24

    @property
    def loading(self) -> bool:
        """Check if the initial package list is still loading."""
        return OperationKind.LOAD in self.in_flight

    @property
    def searching(self) -> bool:
        """Check if a search is running."""
        return OperationKind.SEARCH in self.in_flight

    @property
    def is_searching_view(self) -> bool:
        """Check if search results are shown instead of the primary set."""
        return self.filtered is not None

    def set_status(self, message: str, is_error: bool = False) -> None:
        """Replace the status line."""
        self.status = StatusLine(message=message, is_error=is_error)

    def next_generation(self, kind: OperationKind) -> int:
        """Stamp a new request of ``kind`` and return its generation."""
        generation = self.generations.get(kind, 0) + 1
        self.generations[kind] = generation
        return generation

    def is_current(self, kind: OperationKind, generation: int) -> bool:
        """Check if ``generation`` is the latest request of ``kind``."""
        return self.generations.get(kind, 0) == generation
