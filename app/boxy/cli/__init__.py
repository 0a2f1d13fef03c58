"""CLI module for boxy.

This module contains the Typer-based command-line interface.
"""

from boxy.cli.main import app

__all__ = ["app"]
