"""Main CLI application entry point.

Defines the Typer application, global options, and the interactive
session launched when no subcommand is given.
"""

import logging
import sys
from pathlib import Path
from typing import Annotated

import typer

from boxy import __version__
from boxy.cli.commands import bookmarks
from boxy.core.config import AppConfig, ConfigError, load_app_config
from boxy.core.log import setup_logging
from boxy.managers.detect import ManagerChoice, ManagerNotFoundError, detect_manager
from boxy.tui.app import run_app
from boxy.utils.formatting import print_error

logger = logging.getLogger(__name__)

app = typer.Typer(
    name="boxy",
    help="Browse, search, install and bookmark packages from the terminal.",
    invoke_without_command=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"boxy version {__version__}")
        raise typer.Exit()


def load_config_or_exit(path: Path | None) -> AppConfig:
    """Load the application config, exiting with an error message on failure."""
    try:
        return load_app_config(path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Write debug logs to the log file.",
        ),
    ] = False,
    manager: Annotated[
        str | None,
        typer.Option(
            "--manager",
            "-m",
            help="Package manager to use: apt or brew (default: detect).",
        ),
    ] = None,
    show_all: Annotated[
        bool | None,
        typer.Option(
            "--show-all/--manual",
            "-a",
            help="Start with all installed packages visible.",
        ),
    ] = None,
    layout: Annotated[
        str | None,
        typer.Option(
            "--layout",
            help="Package list layout: combined or sectioned.",
        ),
    ] = None,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to config.toml.",
        ),
    ] = None,
) -> None:
    """boxy - interactive package browser.

    Without a subcommand, opens the interactive view for the detected
    package manager (Homebrew on macOS, APT on Linux).
    """
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose

    if ctx.invoked_subcommand is not None:
        return

    config = load_config_or_exit(config_path)
    overrides: dict[str, object] = {}
    if manager is not None:
        overrides["manager"] = manager
    if show_all is not None:
        overrides["show_all"] = show_all
    if layout is not None:
        overrides["layout"] = layout
    if overrides:
        try:
            config = AppConfig.model_validate({**config.model_dump(), **overrides})
        except ValueError as e:
            print_error(f"Invalid option: {e}")
            raise typer.Exit(code=1) from e

    choice: ManagerChoice = config.manager
    try:
        package_manager = detect_manager(choice, timeout=float(config.command_timeout_seconds))
    except ManagerNotFoundError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    store = bookmarks.load_store_or_exit()

    if not sys.stdin.isatty() or not sys.stdout.isatty():
        print_error("boxy needs an interactive terminal")
        raise typer.Exit(code=1)

    logger.debug("Using %s with %s layout", package_manager.name, config.layout)
    run_app(package_manager, store, config)


app.add_typer(bookmarks.app, name="bookmarks")


if __name__ == "__main__":
    app()
