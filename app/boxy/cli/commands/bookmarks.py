"""Bookmarks command implementation.

Lists and edits bookmarked packages without opening the interactive view.
"""

from typing import Annotated

import typer

from boxy.core.bookmarks import BookmarkStore, BookmarkStoreError
from boxy.utils.formatting import (
    console,
    create_bookmark_table,
    print_error,
    print_info,
    print_success,
    print_warning,
)

app = typer.Typer(
    help="List and edit bookmarked packages.",
    invoke_without_command=True,
)


def load_store_or_exit() -> BookmarkStore:
    store = BookmarkStore()
    try:
        store.load()
    except BookmarkStoreError as e:
        print_error(f"Error loading bookmarks: {e}")
        raise typer.Exit(code=1) from e
    return store


def _save_store(store: BookmarkStore) -> None:
    try:
        store.save()
    except BookmarkStoreError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e


@app.callback(invoke_without_command=True)
def bookmarks_main(ctx: typer.Context) -> None:
    """List bookmarks when no subcommand is given."""
    if ctx.invoked_subcommand is None:
        list_bookmarks()


@app.command("list")
def list_bookmarks() -> None:
    """Show bookmarked packages in stored order."""
    store = load_store_or_exit()
    if not len(store):
        print_info("No bookmarks yet. Press 'b' in the interactive view to add one.")
        return

    table = create_bookmark_table()
    for index, name in enumerate(store.names, start=1):
        table.add_row(str(index), name)
    console.print(table)


@app.command("add")
def add_bookmarks(
    packages: Annotated[list[str], typer.Argument(help="Package names to bookmark.")],
) -> None:
    """Bookmark one or more packages."""
    store = load_store_or_exit()
    added = [name for name in packages if store.add(name)]
    for name in packages:
        if name not in added:
            print_warning(f"{name} is already bookmarked")
    if added:
        _save_store(store)
        print_success(f"Bookmarked {', '.join(added)}")


@app.command("remove")
def remove_bookmarks(
    packages: Annotated[list[str], typer.Argument(help="Package names to remove.")],
) -> None:
    """Remove one or more bookmarks."""
    store = load_store_or_exit()
    removed = [name for name in packages if store.remove(name)]
    for name in packages:
        if name not in removed:
            print_warning(f"{name} is not bookmarked")
    if removed:
        _save_store(store)
        print_success(f"Removed bookmark for {', '.join(removed)}")
