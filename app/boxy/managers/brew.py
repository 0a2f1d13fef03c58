"""Homebrew package manager implementation."""

import json
import logging
from typing import Any

from boxy.managers.base import PackageManager, PackageManagerError, split_lines
from boxy.models.package import PackageFact
from boxy.utils.shell import command_exists

logger = logging.getLogger(__name__)


class BrewManager(PackageManager):
    """Package manager for Homebrew formulae and casks."""

    @property
    def name(self) -> str:
        """Return 'brew' as the manager name."""
        return "brew"

    def is_available(self) -> bool:
        """Check if brew is available."""
        return command_exists("brew")

    def search(self, query: str) -> list[PackageFact]:
        """Search formulae and casks using brew search.

        Section headings such as ``==> Formulae`` are skipped.
        """
        result = self._run_checked(["brew", "search", query], what="brew search")
        return [
            PackageFact(name=line)
            for line in split_lines(result.stdout)
            if not line.startswith("==>")
        ]

    def install(self, *names: str) -> None:
        """Install packages using brew install."""
        if names:
            logger.info("Executing brew install for packages: %s", ", ".join(names))
            self._run_checked(["brew", "install", *names], what="brew install")

    def uninstall(self, *names: str) -> None:
        """Uninstall packages using brew uninstall."""
        if names:
            logger.info("Executing brew uninstall for packages: %s", ", ".join(names))
            self._run_checked(["brew", "uninstall", *names], what="brew uninstall")

    def is_installed(self, name: str) -> bool:
        """Check installation status using brew list.

        brew exits with status 1 for formulae that are not installed.
        """
        result = self._run(["brew", "list", "--formula", name], what="brew list")
        if result.returncode == 1:
            return False
        if not result.success:
            msg = f"brew list failed: {result.stderr.strip() or 'unknown error'}"
            raise PackageManagerError(msg)
        return True

    def get_info(self, name: str) -> PackageFact:
        """Fetch package details using brew info --json=v2.

        Formulae take precedence over casks. Casks are reported as not
        installed since ``brew list --formula`` does not cover them.
        """
        result = self._run_checked(["brew", "info", "--json=v2", name], what="brew info")
        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            msg = f"brew info returned invalid JSON: {e}"
            raise PackageManagerError(msg) from e

        formulae: list[dict[str, Any]] = data.get("formulae") or []
        casks: list[dict[str, Any]] = data.get("casks") or []

        if formulae:
            entry = formulae[0]
            try:
                installed = self.is_installed(name)
            except PackageManagerError as e:
                logger.debug("Could not determine install status of %s: %s", name, e)
                installed = False
            return self._fact_from_entry(entry, name, installed)

        if casks:
            return self._fact_from_entry(casks[0], name, installed=False)

        return PackageFact(name=name)

    def list_installed(self) -> list[PackageFact]:
        """List installed formulae using brew list."""
        result = self._run_checked(["brew", "list", "--formula", "-1"], what="brew list")
        return [PackageFact(name=line, installed=True) for line in split_lines(result.stdout)]

    def list_manually_installed(self) -> list[str]:
        """List formulae that are not dependencies of others using brew leaves."""
        result = self._run_checked(["brew", "leaves"], what="brew leaves")
        return split_lines(result.stdout)

    @staticmethod
    def _fact_from_entry(entry: dict[str, Any], fallback: str, installed: bool) -> PackageFact:
        """Build a PackageFact from one ``brew info`` JSON entry."""
        # Casks are keyed by token and report "name" as a list of display names
        raw_name = entry.get("token") or entry.get("name") or fallback
        name = raw_name[0] if isinstance(raw_name, list) and raw_name else str(raw_name)
        versions = entry.get("versions")
        version = versions.get("stable") if isinstance(versions, dict) else entry.get("version")
        return PackageFact(
            name=name or fallback,
            version=version or None,
            description=entry.get("desc") or None,
            installed=installed,
        )
