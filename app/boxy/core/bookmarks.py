"""Bookmark persistence.

Bookmarks are an ordered set of package names stored in
~/.config/boxy/bookmarks.toml::

    packages = ["curl", "htop"]
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile

import tomli_w
from pydantic import BaseModel, ConfigDict, ValidationError

from boxy.core.paths import get_bookmarks_path

logger = logging.getLogger(__name__)


class BookmarkStoreError(Exception):
    """Base exception for bookmark storage errors."""


class BookmarkParseError(BookmarkStoreError):
    """Raised when the bookmarks file exists but cannot be parsed."""


class BookmarksFile(BaseModel):
    """Schema of the bookmarks file."""

    model_config = ConfigDict(extra="ignore")

    packages: list[str] = []


class BookmarkStore:
    """Ordered set of bookmarked package names with TOML load/save.

    The store is only touched from the event-loop thread, so it carries no
    locking.

    Attributes:
        path: Location of the bookmarks file.
    """

    def __init__(self, path: Path | None = None, names: list[str] | None = None) -> None:
        """Initialize BookmarkStore.

        Args:
            path: Optional override for the bookmarks file.
                  Default: ~/.config/boxy/bookmarks.toml
            names: Initial bookmark names (duplicates are dropped).
        """
        self._path = path if path is not None else get_bookmarks_path()
        self._names: list[str] = _dedupe(names or [])

    @property
    def path(self) -> Path:
        """Location of the bookmarks file."""
        return self._path

    @property
    def names(self) -> list[str]:
        """Bookmarked names in insertion order."""
        return list(self._names)

    def __len__(self) -> int:
        return len(self._names)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def load(self) -> list[str]:
        """Load bookmarks from disk, replacing the in-memory set.

        A missing file yields an empty set.

        Returns:
            Bookmarked names in stored order.

        Raises:
            BookmarkParseError: If the file is not valid TOML or has the wrong shape.
            BookmarkStoreError: If the file exists but cannot be read.
        """
        try:
            with open(self._path, "rb") as f:
                data = tomllib.load(f)
        except FileNotFoundError:
            logger.debug("No bookmarks file at %s", self._path)
            self._names = []
            return []
        except tomllib.TOMLDecodeError as e:
            raise BookmarkParseError(f"Invalid TOML syntax in {self._path}: {e}") from e
        except OSError as e:
            raise BookmarkStoreError(f"Failed to read bookmarks: {e}") from e

        try:
            parsed = BookmarksFile.model_validate(data)
        except ValidationError as e:
            raise BookmarkParseError(f"Invalid bookmarks file {self._path}: {e}") from e

        self._names = _dedupe(parsed.packages)
        logger.debug("Loaded %d bookmarks from %s", len(self._names), self._path)
        return list(self._names)

    def save(self) -> Path:
        """Write bookmarks to disk atomically.

        Returns:
            Path where the bookmarks were saved.

        Raises:
            BookmarkStoreError: If the file cannot be written.
        """
        tmp_path: Path | None = None
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with NamedTemporaryFile(
                mode="wb",
                dir=self._path.parent,
                delete=False,
                suffix=".tmp",
            ) as f:
                tmp_path = Path(f.name)
                tomli_w.dump({"packages": self._names}, f)
            os.replace(str(tmp_path), str(self._path))
        except OSError as e:
            if tmp_path is not None and tmp_path.exists():
                tmp_path.unlink()
            raise BookmarkStoreError(f"Failed to write bookmarks: {e}") from e

        return self._path

    def is_bookmarked(self, name: str) -> bool:
        """Check if a package is bookmarked."""
        return name in self._names

    def add(self, name: str) -> bool:
        """Bookmark a package.

        Returns:
            True if the name was added, False if it was already present.
        """
        if name in self._names:
            return False
        self._names.append(name)
        return True

    def remove(self, name: str) -> bool:
        """Remove a bookmark.

        Returns:
            True if the name was removed, False if it was not bookmarked.
        """
        if name not in self._names:
            return False
        self._names.remove(name)
        return True

    def toggle(self, name: str) -> bool:
        """Toggle a bookmark.

        Returns:
            True if the package is bookmarked afterwards.
        """
        if self.remove(name):
            return False
        self.add(name)
        return True


def _dedupe(names: list[str]) -> list[str]:
    """Drop duplicate and empty names, keeping first occurrences in order."""
    seen: set[str] = set()
    result: list[str] = []
    for name in names:
        name = name.strip()
        if name and name not in seen:
            seen.add(name)
            result.append(name)
    return result
