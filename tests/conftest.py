"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
import os
from collections.abc import Iterator
from pathlib import Path
from unittest.mock import patch

import pytest
from boxy.core.bookmarks import BookmarkStore
from boxy.managers.base import PackageManager, PackageManagerError
from boxy.models.package import PackageFact
from boxy.models.state import AppState, OperationKind
from boxy.tui.events import Event
from boxy.tui.operations import Operation


class FakeManager(PackageManager):
    """In-memory package manager recording the calls it receives."""

    def __init__(
        self,
        installed: list[PackageFact] | None = None,
        manual: list[str] | None = None,
        index: list[PackageFact] | None = None,
    ) -> None:
        super().__init__(timeout=5.0)
        self.installed = list(installed or [])
        self.manual = list(manual or [])
        self.index = list(index or [])
        self.calls: list[tuple[str, tuple[str, ...]]] = []
        self.fail: dict[str, str] = {}

    def _record(self, op: str, *args: str) -> None:
        self.calls.append((op, args))
        if op in self.fail:
            raise PackageManagerError(self.fail[op])

    @property
    def name(self) -> str:
        return "fake"

    def is_available(self) -> bool:
        return True

    def search(self, query: str) -> list[PackageFact]:
        self._record("search", query)
        return [fact for fact in self.index if query in fact.name]

    def install(self, *names: str) -> None:
        self._record("install", *names)
        for name in names:
            self.installed.append(PackageFact(name=name, installed=True))

    def uninstall(self, *names: str) -> None:
        self._record("uninstall", *names)
        self.installed = [fact for fact in self.installed if fact.name not in names]

    def is_installed(self, name: str) -> bool:
        self._record("is_installed", name)
        return any(fact.name == name for fact in self.installed)

    def get_info(self, name: str) -> PackageFact:
        self._record("get_info", name)
        for fact in self.index + self.installed:
            if fact.name == name:
                return fact.with_installed(self.is_installed(name))
        raise PackageManagerError(f"Package not found: {name}")

    def list_installed(self) -> list[PackageFact]:
        self._record("list_installed")
        return list(self.installed)

    def list_manually_installed(self) -> list[str]:
        self._record("list_manually_installed")
        return list(self.manual)


class RecordingDispatcher:
    """Dispatcher that queues operations instead of running them."""

    def __init__(self) -> None:
        self.scheduled: list[Operation] = []
        self.posted: list[Event] = []

    def schedule(self, operation: Operation) -> None:
        self.scheduled.append(operation)

    def post(self, event: Event) -> None:
        self.posted.append(event)

    def kinds(self) -> list[OperationKind]:
        return [operation.kind for operation in self.scheduled]


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path):
    """Point XDG directories at a temporary location for every test."""
    with patch.dict(
        os.environ,
        {
            "XDG_CONFIG_HOME": str(tmp_path / "config"),
            "XDG_STATE_HOME": str(tmp_path / "state"),
        },
    ):
        yield


@pytest.fixture(autouse=True)
def reset_boxy_logger() -> Iterator[None]:
    """Undo logging setup done by a test (CLI runs attach a file handler)."""
    yield
    logger = logging.getLogger("boxy")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def fake_manager_cls() -> type[FakeManager]:
    """The FakeManager class, for tests that build their own instances."""
    return FakeManager


@pytest.fixture
def fake_manager() -> FakeManager:
    """Package manager with alpha/beta/gamma installed and beta manual."""
    return FakeManager(
        installed=[
            PackageFact(name="alpha", version="1.0", installed=True),
            PackageFact(name="beta", version="2.0", installed=True),
            PackageFact(name="gamma", version="3.0", installed=True),
        ],
        manual=["beta"],
        index=[
            PackageFact(name="curl", description="Command line tool for transferring data"),
            PackageFact(
                name="libcurl4", description="easy-to-use client-side URL transfer library"
            ),
            PackageFact(name="alpha", description="First package"),
        ],
    )


@pytest.fixture
def recording_dispatcher() -> RecordingDispatcher:
    """Dispatcher that records scheduled operations."""
    return RecordingDispatcher()


@pytest.fixture
def bookmark_store(tmp_path: Path) -> BookmarkStore:
    """Empty bookmark store backed by a temporary file."""
    return BookmarkStore(path=tmp_path / "bookmarks.toml")


@pytest.fixture
def app_state() -> AppState:
    """Fresh startup state on a 80x24 terminal."""
    return AppState(width=80, height=24)


@pytest.fixture
def mock_apt_search_output() -> str:
    """Sample apt-cache search output for testing."""
    return """curl - command line tool for transferring data with URL syntax
libcurl4 - easy-to-use client-side URL transfer library (OpenSSL flavour)
curlftpfs - filesystem to access FTP hosts based on FUSE and cURL"""


@pytest.fixture
def mock_apt_show_output() -> str:
    """Sample apt-cache show output with two records."""
    return """Package: curl
Version: 8.5.0-2ubuntu10
Priority: optional
Section: web
Description: command line tool for transferring data with URL syntax
Homepage: https://curl.se/

Package: curl
Version: 7.81.0-1
Description: older record
"""


@pytest.fixture
def mock_dpkg_output() -> str:
    """Sample dpkg-query listing (name, version) for testing."""
    return """firefox\t128.0
neovim\t0.9.5
libgtk-3-0\t3.24.41
curl\t8.5.0"""


@pytest.fixture
def mock_apt_mark_output() -> str:
    """Sample apt-mark showmanual output for testing."""
    return """firefox
neovim
"""


@pytest.fixture
def mock_brew_info_json() -> str:
    """Sample brew info --json=v2 output for a formula."""
    return """{
  "formulae": [
    {
      "name": "wget",
      "full_name": "wget",
      "desc": "Internet file retriever",
      "versions": {"stable": "1.24.5", "head": "HEAD"}
    }
  ],
  "casks": []
}"""
