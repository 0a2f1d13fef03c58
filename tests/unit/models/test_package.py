"""Unit tests for package models.

Tests for PackageFact and PackageItem.
"""

import dataclasses

import pytest
from boxy.models.package import PackageFact, PackageItem


class TestPackageFact:
    """Tests for PackageFact dataclass."""

    def test_create_with_defaults(self) -> None:
        """PackageFact only requires a name."""
        fact = PackageFact(name="curl")
        assert fact.name == "curl"
        assert fact.version is None
        assert fact.description is None
        assert fact.installed is False

    def test_empty_name_rejected(self) -> None:
        """PackageFact rejects an empty name."""
        with pytest.raises(ValueError, match="name cannot be empty"):
            PackageFact(name="")

    def test_is_frozen(self) -> None:
        """PackageFact cannot be mutated."""
        fact = PackageFact(name="curl")
        with pytest.raises(dataclasses.FrozenInstanceError):
            fact.installed = True  # type: ignore[misc]

    def test_with_installed_returns_copy(self) -> None:
        """with_installed replaces the fact instead of mutating it."""
        fact = PackageFact(name="curl", version="8.5.0", description="URL tool")
        patched = fact.with_installed(True)

        assert patched is not fact
        assert patched.installed is True
        assert fact.installed is False
        assert patched.version == "8.5.0"
        assert patched.description == "URL tool"


class TestPackageItem:
    """Tests for PackageItem dataclass."""

    def test_defaults_to_not_bookmarked(self) -> None:
        """New items are not bookmarked."""
        item = PackageItem(fact=PackageFact(name="curl"))
        assert item.bookmarked is False

    def test_name_and_installed_delegate_to_fact(self) -> None:
        """name and installed come from the fact."""
        item = PackageItem(fact=PackageFact(name="htop", installed=True), bookmarked=True)
        assert item.name == "htop"
        assert item.installed is True

    def test_bookmark_independent_of_installed(self) -> None:
        """Bookmarked packages need not be installed."""
        item = PackageItem(fact=PackageFact(name="ripgrep", installed=False), bookmarked=True)
        assert item.bookmarked is True
        assert item.installed is False
