"""APT package manager implementation.

Searches with apt-cache, queries installed state with dpkg-query and
apt-mark, and installs/removes packages with apt-get.
"""

import logging

from boxy.managers.base import PackageManager, PackageManagerError, split_lines
from boxy.models.package import PackageFact
from boxy.utils.shell import command_exists, is_root, sudo_cached

logger = logging.getLogger(__name__)


class AptManager(PackageManager):
    """Package manager for APT/dpkg systems.

    Install and uninstall require root. When not running as root the
    commands go through ``sudo -n`` so they fail fast instead of prompting
    on a terminal that the interactive view owns.
    """

    # dpkg-query format string: Package, Version
    _DPKG_FORMAT = "${Package}\\t${Version}\\n"
    _INSTALLED_MARKER = "install ok installed"

    @property
    def name(self) -> str:
        """Return 'apt' as the manager name."""
        return "apt"

    def is_available(self) -> bool:
        """Check if apt is available."""
        return command_exists("apt")

    def search(self, query: str) -> list[PackageFact]:
        """Search packages using apt-cache search.

        Output lines have the form ``name - description``.
        """
        result = self._run_checked(["apt-cache", "search", query], what="apt-cache search")

        facts: list[PackageFact] = []
        for line in split_lines(result.stdout):
            name, _, description = line.partition(" - ")
            name = name.strip()
            if not name:
                continue
            facts.append(PackageFact(name=name, description=description.strip() or None))
        return facts

    def install(self, *names: str) -> None:
        """Install packages using apt-get install."""
        self._apt_get("install", names)

    def uninstall(self, *names: str) -> None:
        """Remove packages using apt-get remove."""
        self._apt_get("remove", names)

    def is_installed(self, name: str) -> bool:
        """Check installation status using dpkg-query.

        dpkg-query exits with status 1 for packages it does not know,
        which means "not installed" rather than a failure.
        """
        result = self._run(["dpkg-query", "-W", "-f=${Status}", name], what="dpkg-query")
        if result.returncode == 1:
            return False
        if not result.success:
            msg = f"dpkg-query failed: {result.stderr.strip() or 'unknown error'}"
            raise PackageManagerError(msg)
        return self._INSTALLED_MARKER in result.stdout

    def get_info(self, name: str) -> PackageFact:
        """Fetch package details using apt-cache show.

        Only the first record is used when several versions are available.
        """
        result = self._run_checked(["apt-cache", "show", name], what="apt-cache show")
        if not result.stdout.strip():
            msg = f"Package not found: {name}"
            raise PackageManagerError(msg)

        fields: dict[str, str] = {}
        for line in result.stdout.splitlines():
            if not line.strip():
                # Blank line ends the first record
                if fields:
                    break
                continue
            key, sep, value = line.partition(": ")
            if sep and key in ("Package", "Version", "Description") and key not in fields:
                fields[key] = value.strip()

        try:
            installed = self.is_installed(name)
        except PackageManagerError as e:
            logger.debug("Could not determine install status of %s: %s", name, e)
            installed = False

        return PackageFact(
            name=fields.get("Package", name),
            version=fields.get("Version"),
            description=fields.get("Description"),
            installed=installed,
        )

    def list_installed(self) -> list[PackageFact]:
        """List installed packages using dpkg-query."""
        result = self._run_checked(["dpkg-query", "-W", "-f", self._DPKG_FORMAT], what="dpkg-query")

        facts: list[PackageFact] = []
        for line in split_lines(result.stdout):
            name, _, version = line.partition("\t")
            if not name.strip():
                logger.debug("Skipping malformed dpkg line: %r", line[:100])
                continue
            facts.append(
                PackageFact(name=name.strip(), version=version.strip() or None, installed=True)
            )
        return facts

    def list_manually_installed(self) -> list[str]:
        """List manually installed packages using apt-mark showmanual."""
        result = self._run_checked(["apt-mark", "showmanual"], what="apt-mark showmanual")
        return split_lines(result.stdout)

    def _apt_get(self, command: str, names: tuple[str, ...]) -> None:
        """Run ``apt-get <command> -y`` for the given packages.

        Args:
            command: apt-get subcommand (install or remove).
            names: Package names.

        Raises:
            PackageManagerError: If apt-get fails or sudo needs a password.
        """
        if not names:
            return

        args = ["apt-get", command, "-y", *names]
        if not is_root():
            if not sudo_cached():
                msg = (
                    f"sudo apt-get {command} needs a password "
                    "(run 'sudo -v' first to cache credentials)"
                )
                raise PackageManagerError(msg)
            args = ["sudo", "-n", *args]

        logger.info("Executing APT %s for packages: %s", command, ", ".join(names))
        self._run_checked(args, what=f"apt-get {command}")
