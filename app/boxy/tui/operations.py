"""Background units of work.

Each factory returns an :class:`Operation`: a callable that talks to the
package manager off the event-loop thread and returns a completion event,
plus the failure variant of that event. Operations never touch AppState.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass

from boxy.managers.base import PackageManager, PackageManagerError
from boxy.models.state import OperationKind
from boxy.tui.events import (
    Completion,
    InfoLoaded,
    InstallCompleted,
    PackagesLoaded,
    SearchCompleted,
    UninstallCompleted,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Operation:
    """A schedulable unit of work.

    Attributes:
        kind: Operation kind, matching the completion event it produces.
        description: Short text for log messages.
        run: Performs the work and returns the success (or handled failure) event.
        fail: Builds the failure event from an error message.
    """

    kind: OperationKind
    description: str
    run: Callable[[], Completion]
    fail: Callable[[str], Completion]


def load_packages(manager: PackageManager) -> Operation:
    """List installed packages, then the manually installed names.

    The manual listing is best-effort: its failure yields no manual tags
    instead of failing the load.
    """

    def run() -> Completion:
        installed = manager.list_installed()
        try:
            manual = manager.list_manually_installed()
        except PackageManagerError as e:
            logger.debug("Manual package listing unavailable: %s", e)
            manual = []
        return PackagesLoaded(installed=installed, manual=manual)

    return Operation(
        kind=OperationKind.LOAD,
        description="load packages",
        run=run,
        fail=lambda error: PackagesLoaded(error=error),
    )


def search_packages(manager: PackageManager, query: str, generation: int) -> Operation:
    """Search, then tag results with one installed listing.

    A failing installed listing leaves results untagged rather than
    failing the search.
    """

    def run() -> Completion:
        results = manager.search(query)
        try:
            installed = {fact.name for fact in manager.list_installed()}
        except PackageManagerError as e:
            logger.debug("Could not tag search results as installed: %s", e)
            installed = set()
        tagged = [fact.with_installed(fact.name in installed) for fact in results]
        return SearchCompleted(generation=generation, query=query, results=tagged)

    return Operation(
        kind=OperationKind.SEARCH,
        description=f"search {query!r}",
        run=run,
        fail=lambda error: SearchCompleted(generation=generation, query=query, error=error),
    )


def fetch_info(manager: PackageManager, package: str, generation: int) -> Operation:
    """Fetch package details."""
    return Operation(
        kind=OperationKind.INFO,
        description=f"info {package}",
        run=lambda: InfoLoaded(
            generation=generation, package=package, fact=manager.get_info(package)
        ),
        fail=lambda error: InfoLoaded(generation=generation, package=package, error=error),
    )


def install_package(manager: PackageManager, package: str) -> Operation:
    """Install one package."""

    def run() -> Completion:
        manager.install(package)
        return InstallCompleted(package=package)

    return Operation(
        kind=OperationKind.INSTALL,
        description=f"install {package}",
        run=run,
        fail=lambda error: InstallCompleted(package=package, error=error),
    )


def uninstall_package(manager: PackageManager, package: str) -> Operation:
    """Uninstall one package."""

    def run() -> Completion:
        manager.uninstall(package)
        return UninstallCompleted(package=package)

    return Operation(
        kind=OperationKind.UNINSTALL,
        description=f"uninstall {package}",
        run=run,
        fail=lambda error: UninstallCompleted(package=package, error=error),
    )
