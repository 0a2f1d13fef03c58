"""Package models for browsing and managing packages.

This module defines the snapshot reported by a package manager and the
row type the interactive view keeps for each package.
"""

from dataclasses import dataclass, field, replace


@dataclass(frozen=True, slots=True)
class PackageFact:
    """Immutable snapshot of one package as reported by a package manager.

    Facts are never mutated; a refreshed fact replaces the old one wholesale.

    Attributes:
        name: Package name, unique within a package manager.
        version: Version string (if known).
        description: Human-readable package summary (if known).
        installed: Whether the package is currently installed.
    """

    name: str
    version: str | None = field(default=None)
    description: str | None = field(default=None)
    installed: bool = field(default=False)

    def __post_init__(self) -> None:
        """Validate package data after initialization."""
        if not self.name:
            msg = "Package name cannot be empty"
            raise ValueError(msg)

    def with_installed(self, installed: bool) -> "PackageFact":
        """Return a copy of this fact with a different installed flag."""
        return replace(self, installed=installed)


@dataclass(slots=True)
class PackageItem:
    """One row of the interactive view.

    The bookmarked flag is owned by the UI and is independent of the
    package manager: bookmarked packages need not be installed.

    Attributes:
        fact: Latest known snapshot of the package.
        bookmarked: Whether the package is in the bookmark store.
    """

    fact: PackageFact
    bookmarked: bool = False

    @property
    def name(self) -> str:
        """Package name of the underlying fact."""
        return self.fact.name

    @property
    def installed(self) -> bool:
        """Installed flag of the underlying fact."""
        return self.fact.installed
