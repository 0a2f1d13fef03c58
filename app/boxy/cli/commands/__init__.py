"""CLI command modules.

Each module defines a Typer sub-application for a specific command.
"""

from boxy.cli.commands import bookmarks

__all__ = ["bookmarks"]
