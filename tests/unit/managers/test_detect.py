"""Unit tests for package manager detection."""

from unittest.mock import patch

import pytest
from boxy.managers.apt import AptManager
from boxy.managers.brew import BrewManager
from boxy.managers.detect import ManagerNotFoundError, detect_manager, get_manager


class TestGetManager:
    """Tests for get_manager."""

    def test_known_names(self) -> None:
        """Known names map to their manager classes."""
        assert isinstance(get_manager("apt"), AptManager)
        assert isinstance(get_manager("brew"), BrewManager)

    def test_timeout_passed_through(self) -> None:
        """The timeout is handed to the manager."""
        assert get_manager("apt", timeout=30.0).timeout == 30.0

    def test_unknown_name_raises(self) -> None:
        """Unsupported names raise ValueError."""
        with pytest.raises(ValueError, match="Unsupported package manager 'pacman'"):
            get_manager("pacman")


class TestDetectManager:
    """Tests for detect_manager."""

    def test_auto_on_linux_uses_apt(self) -> None:
        """Linux resolves to APT."""
        with patch.object(AptManager, "is_available", return_value=True):
            manager = detect_manager("auto", platform="linux")

        assert manager.name == "apt"

    def test_auto_on_macos_uses_brew(self) -> None:
        """macOS resolves to Homebrew."""
        with patch.object(BrewManager, "is_available", return_value=True):
            manager = detect_manager("auto", platform="darwin")

        assert manager.name == "brew"

    def test_auto_without_manager_raises(self) -> None:
        """No available backend raises ManagerNotFoundError."""
        with (
            patch.object(AptManager, "is_available", return_value=False),
            pytest.raises(ManagerNotFoundError, match="No supported package manager"),
        ):
            detect_manager("auto", platform="linux")

    def test_unsupported_platform_raises(self) -> None:
        """Platforms without a backend raise ManagerNotFoundError."""
        with pytest.raises(ManagerNotFoundError):
            detect_manager("auto", platform="win32")

    def test_explicit_choice(self) -> None:
        """An explicit, available choice is used regardless of platform."""
        with patch.object(BrewManager, "is_available", return_value=True):
            manager = detect_manager("brew", platform="linux", timeout=20.0)

        assert manager.name == "brew"
        assert manager.timeout == 20.0

    def test_explicit_choice_unavailable(self) -> None:
        """An explicit choice that is missing raises."""
        with (
            patch.object(AptManager, "is_available", return_value=False),
            pytest.raises(ManagerNotFoundError, match="'apt' is not available"),
        ):
            detect_manager("apt")
