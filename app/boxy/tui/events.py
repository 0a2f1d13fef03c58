"""Events consumed by the state machine.

Two categories exist: user input (keys, terminal resize) and completion
events, exactly one of which is delivered per scheduled operation.
"""

from dataclasses import dataclass, field
from typing import ClassVar

from boxy.models.package import PackageFact
from boxy.models.state import OperationKind


@dataclass(frozen=True, slots=True)
class KeyEvent:
    """A decoded key token (e.g. 'UP', 'ENTER', 'q')."""

    key: str


@dataclass(frozen=True, slots=True)
class ResizeEvent:
    """New terminal dimensions."""

    width: int
    height: int


@dataclass(frozen=True, slots=True, kw_only=True)
class Completion:
    """Base class for completion events.

    Attributes:
        error: Failure message, or None on success.
    """

    kind: ClassVar[OperationKind]

    error: str | None = None

    @property
    def ok(self) -> bool:
        """Check if the operation succeeded."""
        return self.error is None


@dataclass(frozen=True, slots=True, kw_only=True)
class PackagesLoaded(Completion):
    """Result of the initial package listing."""

    kind: ClassVar[OperationKind] = OperationKind.LOAD

    installed: list[PackageFact] = field(default_factory=list)
    manual: list[str] = field(default_factory=list)


@dataclass(frozen=True, slots=True, kw_only=True)
class SearchCompleted(Completion):
    """Result of a search, stamped with its request generation."""

    kind: ClassVar[OperationKind] = OperationKind.SEARCH

    generation: int
    query: str
    results: list[PackageFact] = field(default_factory=list)


@dataclass(frozen=True, slots=True, kw_only=True)
class InfoLoaded(Completion):
    """Result of an info fetch, stamped with its request generation."""

    kind: ClassVar[OperationKind] = OperationKind.INFO

    generation: int
    package: str
    fact: PackageFact | None = None


@dataclass(frozen=True, slots=True, kw_only=True)
class InstallCompleted(Completion):
    """Result of installing a package."""

    kind: ClassVar[OperationKind] = OperationKind.INSTALL

    package: str


@dataclass(frozen=True, slots=True, kw_only=True)
class UninstallCompleted(Completion):
    """Result of uninstalling a package."""

    kind: ClassVar[OperationKind] = OperationKind.UNINSTALL

    package: str


@dataclass(frozen=True, slots=True, kw_only=True)
class BookmarkToggled(Completion):
    """Status event emitted after a bookmark toggle was applied and persisted."""

    kind: ClassVar[OperationKind] = OperationKind.BOOKMARK

    package: str
    bookmarked: bool


Event = KeyEvent | ResizeEvent | Completion
