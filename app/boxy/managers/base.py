"""Abstract base class for package managers.

This module defines the PackageManager interface that every supported
backend must implement, plus the error type its operations raise.
"""

import logging
import subprocess
from abc import ABC, abstractmethod

from boxy.models.package import PackageFact
from boxy.utils.shell import CommandResult, run_command

logger = logging.getLogger(__name__)


class PackageManagerError(RuntimeError):
    """Raised when a package manager operation fails."""


class PackageManager(ABC):
    """Abstract base class for all package managers.

    A package manager answers queries about packages and performs
    install/uninstall operations. Every call may be slow (it runs an
    external process) and may fail with :class:`PackageManagerError`.

    Attributes:
        timeout: Maximum time in seconds for a single command.

    Example:
        >>> manager = AptManager()
        >>> if manager.is_available():
        ...     for fact in manager.search("curl"):
        ...         print(fact.name, fact.description)
    """

    def __init__(self, timeout: float = 600.0) -> None:
        """Initialize the package manager.

        Args:
            timeout: Maximum time in seconds for a single command.
        """
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        """Maximum time in seconds for a single command."""
        return self._timeout

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the short name shown in the header (e.g. 'apt')."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if this package manager is available on the system."""

    @abstractmethod
    def search(self, query: str) -> list[PackageFact]:
        """Search the package index.

        Args:
            query: Search term.

        Returns:
            Matching packages. Installed flags are not reliable here.

        Raises:
            PackageManagerError: If the search command fails.
        """

    @abstractmethod
    def install(self, *names: str) -> None:
        """Install one or more packages.

        Raises:
            PackageManagerError: If the installation fails.
        """

    @abstractmethod
    def uninstall(self, *names: str) -> None:
        """Uninstall one or more packages.

        Raises:
            PackageManagerError: If the removal fails.
        """

    @abstractmethod
    def is_installed(self, name: str) -> bool:
        """Check if a single package is installed.

        Raises:
            PackageManagerError: If the status cannot be determined.
        """

    @abstractmethod
    def get_info(self, name: str) -> PackageFact:
        """Fetch detailed information about a package.

        Raises:
            PackageManagerError: If the package is unknown or the query fails.
        """

    @abstractmethod
    def list_installed(self) -> list[PackageFact]:
        """List all installed packages.

        Raises:
            PackageManagerError: If the listing command fails.
        """

    @abstractmethod
    def list_manually_installed(self) -> list[str]:
        """List names of packages explicitly installed by the user.

        Raises:
            PackageManagerError: If the listing command fails.
        """

    def _run(self, args: list[str], *, what: str) -> CommandResult:
        """Run a command, converting launch failures into PackageManagerError.

        Args:
            args: Command and arguments.
            what: Short description used in error messages.

        Returns:
            CommandResult of the finished command (possibly non-zero).

        Raises:
            PackageManagerError: If the command cannot be started or times out.
        """
        logger.debug("Running %s: %s", what, " ".join(args))
        try:
            return run_command(args, timeout=self._timeout)
        except FileNotFoundError as e:
            msg = f"{what} failed: command not found: {args[0]}"
            raise PackageManagerError(msg) from e
        except subprocess.TimeoutExpired as e:
            msg = f"{what} timed out after {self._timeout:.0f}s"
            raise PackageManagerError(msg) from e
        except OSError as e:
            msg = f"{what} failed: {e}"
            raise PackageManagerError(msg) from e

    def _run_checked(self, args: list[str], *, what: str) -> CommandResult:
        """Run a command and raise PackageManagerError on non-zero exit."""
        result = self._run(args, what=what)
        if not result.success:
            detail = result.stderr.strip() or f"exit status {result.returncode}"
            msg = f"{what} failed: {detail}"
            raise PackageManagerError(msg)
        return result


def split_lines(output: str) -> list[str]:
    """Return the stripped, non-empty lines of command output."""
    return [line.strip() for line in output.splitlines() if line.strip()]
