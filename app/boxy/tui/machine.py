"""Interactive state machine.

The state machine is the only writer of :class:`AppState`. It consumes key,
resize and completion events one at a time, switches between modes, and
schedules background operations through the dispatcher.

Mode transitions (initial mode is Normal)::

    Normal  --/-->            Search
    Normal  --Enter-->        Info     (info fetch scheduled)
    Normal  --i/u-->          Confirm  (only for not installed / installed)
    Search  --Enter/Esc-->    Normal
    Info    --Esc/Enter/q-->  Normal
    Confirm --y/n/Esc-->      Normal
    Normal  --q-->            quit

Search and info requests are generation-stamped: a newer request, or
backing out of the view that asked for it, makes older completions stale
and they are discarded. Install and uninstall completions are always
applied because the change already happened on the system.
"""

import logging
from collections.abc import Callable
from typing import Any, Protocol

from boxy.core.bookmarks import BookmarkStore, BookmarkStoreError
from boxy.managers.base import PackageManager
from boxy.models.package import PackageFact, PackageItem
from boxy.models.state import AppState, ConfirmAction, Mode, OperationKind, PendingConfirm
from boxy.tui import keys
from boxy.tui.events import (
    BookmarkToggled,
    Completion,
    Event,
    InfoLoaded,
    InstallCompleted,
    KeyEvent,
    PackagesLoaded,
    ResizeEvent,
    SearchCompleted,
    UninstallCompleted,
)
from boxy.tui.items import (
    build_primary_set,
    dedupe_items,
    merge_filtered_into_primary,
    patch_bookmarked,
    patch_installed,
    replace_fact,
    selected_item,
    visible_items,
)
from boxy.tui.operations import (
    Operation,
    fetch_info,
    install_package,
    load_packages,
    search_packages,
    uninstall_package,
)
from boxy.tui.viewport import capacity_for, clamp_cursor, ensure_visible

logger = logging.getLogger(__name__)

QUERY_CHAR_LIMIT = 100

# Kinds that refuse a second request while one is running
_EXCLUSIVE_KINDS = {
    OperationKind.LOAD: "Package list is already loading",
    OperationKind.INSTALL: "An install is already in progress",
    OperationKind.UNINSTALL: "An uninstall is already in progress",
}


class Dispatcher(Protocol):
    """What the state machine needs from a command dispatcher."""

    def schedule(self, operation: Operation) -> object: ...

    def post(self, event: Event) -> None: ...


def format_info(fact: PackageFact) -> str:
    """Format package details for the Info modal."""
    lines = [f"Name: {fact.name}"]
    if fact.version:
        lines.append(f"Version: {fact.version}")
    if fact.description:
        lines.append(f"Description: {fact.description}")
    lines.append(f"Status: {'Installed' if fact.installed else 'Not installed'}")
    return "\n".join(lines)


class StateMachine:
    """Reducer over AppState for key, resize and completion events.

    Attributes:
        state: The state being driven.
    """

    def __init__(
        self,
        state: AppState,
        manager: PackageManager,
        bookmarks: BookmarkStore,
        dispatcher: Dispatcher,
        search_limit: int | None = None,
    ) -> None:
        """Initialize the state machine.

        Args:
            state: Initial state (usually fresh, with LOAD in flight).
            manager: Package manager the operations run against.
            bookmarks: Loaded bookmark store.
            dispatcher: Dispatcher for background operations.
            search_limit: Maximum number of search results kept.
        """
        self.state = state
        self._manager = manager
        self._bookmarks = bookmarks
        self._dispatcher = dispatcher
        self._search_limit = search_limit

        self._mode_handlers: dict[Mode, Callable[[str], bool]] = {
            Mode.NORMAL: self._handle_normal_key,
            Mode.SEARCH: self._handle_search_key,
            Mode.INFO: self._handle_info_key,
            Mode.CONFIRM: self._handle_confirm_key,
        }
        self._completion_handlers: dict[type[Completion], Callable[[Any], None]] = {
            PackagesLoaded: self._on_packages_loaded,
            SearchCompleted: self._on_search_completed,
            InfoLoaded: self._on_info_loaded,
            InstallCompleted: self._on_install_completed,
            UninstallCompleted: self._on_uninstall_completed,
            BookmarkToggled: self._on_bookmark_toggled,
        }

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    @property
    def capacity(self) -> int:
        """Number of list rows that fit on screen."""
        return capacity_for(self.state.height)

    def start(self) -> None:
        """Schedule the initial package load."""
        self.state.in_flight.add(OperationKind.LOAD)
        self._dispatcher.schedule(load_packages(self._manager))

    def handle(self, event: Event) -> bool:
        """Apply one event.

        Returns:
            True if the program should terminate.
        """
        quit_requested = False
        if isinstance(event, KeyEvent):
            quit_requested = self.on_key(event.key)
        elif isinstance(event, ResizeEvent):
            self.on_resize(event.width, event.height)
        elif isinstance(event, Completion):
            self.on_completion(event)
        else:
            logger.warning("Ignoring unknown event: %r", event)
        self._clamp()
        return quit_requested

    def on_resize(self, width: int, height: int) -> None:
        """Record new terminal dimensions."""
        self.state.width = max(1, width)
        self.state.height = max(1, height)

    def on_key(self, key: str) -> bool:
        """Run the key handler of the current mode.

        Returns:
            True if the program should terminate.
        """
        return self._mode_handlers[self.state.mode](key)

    def on_completion(self, event: Completion) -> None:
        """Apply the result of a background operation."""
        handler = self._completion_handlers.get(type(event))
        if handler is None:
            logger.warning("No handler for completion %r", event)
            return
        handler(event)

    # ------------------------------------------------------------------
    # Mode handlers
    # ------------------------------------------------------------------

    def _handle_normal_key(self, key: str) -> bool:
        state = self.state

        if key == "q":
            return True

        if key in (keys.UP, "k"):
            self._move_cursor(-1)
        elif key in (keys.DOWN, "j"):
            self._move_cursor(1)
        elif key == keys.PAGE_UP:
            self._move_cursor(-self.capacity)
        elif key == keys.PAGE_DOWN:
            self._move_cursor(self.capacity)
        elif key in (keys.HOME, "g"):
            self._move_cursor(-len(visible_items(state)))
        elif key in (keys.END, "G"):
            self._move_cursor(len(visible_items(state)))
        elif key == "/":
            state.mode = Mode.SEARCH
        elif key == keys.ESC:
            self._leave_search_results()
        elif key == keys.ENTER:
            self._open_info()
        elif key == "i":
            self._request_confirm(ConfirmAction.INSTALL)
        elif key == "u":
            self._request_confirm(ConfirmAction.UNINSTALL)
        elif key == "a":
            state.show_all = not state.show_all
            self._reset_cursor()
        elif key == "b":
            self._toggle_bookmark()
        return False

    def _handle_search_key(self, key: str) -> bool:
        state = self.state

        if key == keys.ESC:
            state.mode = Mode.NORMAL
            state.query = ""
            if state.filtered is not None:
                state.items = merge_filtered_into_primary(state.items, state.filtered)
            state.filtered = None
            self._abandon(OperationKind.SEARCH)
            self._reset_cursor()
        elif key == keys.ENTER:
            query = state.query.strip()
            if query:
                state.mode = Mode.NORMAL
                self._schedule_search(query)
        elif key == keys.BACKSPACE:
            state.query = state.query[:-1]
        elif key == keys.CTRL_U:
            state.query = ""
        elif key == keys.CTRL_W:
            state.query = state.query.rstrip().rpartition(" ")[0]
            if state.query:
                state.query += " "
        elif len(key) == 1 and key.isprintable() and len(state.query) < QUERY_CHAR_LIMIT:
            state.query += key
        return False

    def _handle_info_key(self, key: str) -> bool:
        if key in (keys.ESC, keys.ENTER, "q"):
            self.state.mode = Mode.NORMAL
            self.state.info_text = ""
            self._abandon(OperationKind.INFO)
        return False

    def _handle_confirm_key(self, key: str) -> bool:
        state = self.state

        if key == "y" and state.confirm is not None:
            target = state.confirm
            state.confirm = None
            state.mode = Mode.NORMAL
            if target.action is ConfirmAction.INSTALL:
                self._schedule(install_package(self._manager, target.package))
            else:
                self._schedule(uninstall_package(self._manager, target.package))
        elif key in ("n", keys.ESC):
            state.confirm = None
            state.mode = Mode.NORMAL
        return False

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def _move_cursor(self, delta: int) -> None:
        state = self.state
        state.cursor = clamp_cursor(state.cursor + delta, len(visible_items(state)))
        state.scroll = ensure_visible(state.cursor, state.scroll, self.capacity)

    def _reset_cursor(self) -> None:
        self.state.cursor = 0
        self.state.scroll = 0

    def _leave_search_results(self) -> None:
        """Return from search results to the primary set."""
        state = self.state
        if state.filtered is None and not state.searching:
            return
        if state.filtered is not None:
            state.items = merge_filtered_into_primary(state.items, state.filtered)
        state.filtered = None
        state.query = ""
        self._abandon(OperationKind.SEARCH)
        self._reset_cursor()

    def _open_info(self) -> None:
        item = selected_item(self.state)
        if item is None:
            return
        generation = self.state.next_generation(OperationKind.INFO)
        self.state.mode = Mode.INFO
        self.state.info_text = "Loading..."
        self.state.in_flight.add(OperationKind.INFO)
        self._dispatcher.schedule(fetch_info(self._manager, item.name, generation))

    def _request_confirm(self, action: ConfirmAction) -> None:
        item = selected_item(self.state)
        if item is None:
            return
        # Installing an installed package or removing a missing one is never offered
        if action is ConfirmAction.INSTALL and item.installed:
            return
        if action is ConfirmAction.UNINSTALL and not item.installed:
            return
        self.state.confirm = PendingConfirm(package=item.name, action=action)
        self.state.mode = Mode.CONFIRM

    def _toggle_bookmark(self) -> None:
        item = selected_item(self.state)
        if item is None:
            return
        name = item.name
        bookmarked = self._bookmarks.toggle(name)
        error: str | None = None
        try:
            self._bookmarks.save()
        except BookmarkStoreError as e:
            logger.error("Failed to save bookmarks: %s", e)
            error = str(e)
        patch_bookmarked(self.state.items, name, bookmarked)
        patch_bookmarked(self.state.filtered, name, bookmarked)
        self._dispatcher.post(BookmarkToggled(package=name, bookmarked=bookmarked, error=error))

    def _schedule_search(self, query: str) -> None:
        generation = self.state.next_generation(OperationKind.SEARCH)
        self.state.in_flight.add(OperationKind.SEARCH)
        self._dispatcher.schedule(search_packages(self._manager, query, generation))

    def _schedule(self, operation: Operation) -> None:
        """Schedule an operation of an exclusive kind unless one is already running."""
        if operation.kind in self.state.in_flight:
            self.state.set_status(_EXCLUSIVE_KINDS[operation.kind], is_error=True)
            return
        self.state.in_flight.add(operation.kind)
        self._dispatcher.schedule(operation)

    def _abandon(self, kind: OperationKind) -> None:
        """Make any running request of ``kind`` stale."""
        if kind in self.state.in_flight:
            self.state.next_generation(kind)
            self.state.in_flight.discard(kind)

    def _return_to_normal(self) -> None:
        """Leave whatever mode is active, dropping its transient state."""
        state = self.state
        if state.mode is Mode.CONFIRM:
            state.confirm = None
        elif state.mode is Mode.INFO:
            state.info_text = ""
            self._abandon(OperationKind.INFO)
        state.mode = Mode.NORMAL

    def _clamp(self) -> None:
        state = self.state
        state.cursor = clamp_cursor(state.cursor, len(visible_items(state)))
        state.scroll = ensure_visible(state.cursor, state.scroll, self.capacity)

    # ------------------------------------------------------------------
    # Completion handlers
    # ------------------------------------------------------------------

    def _on_packages_loaded(self, event: PackagesLoaded) -> None:
        state = self.state
        state.in_flight.discard(OperationKind.LOAD)
        if not event.ok:
            state.set_status(f"Error: {event.error}", is_error=True)
        state.manual_names = set(event.manual)
        state.items = build_primary_set(self._bookmarks.names, event.installed, event.manual)
        logger.info(
            "Loaded %d installed packages (%d manual, %d bookmarks)",
            len(event.installed),
            len(event.manual),
            len(self._bookmarks),
        )

    def _on_search_completed(self, event: SearchCompleted) -> None:
        state = self.state
        if not state.is_current(OperationKind.SEARCH, event.generation):
            logger.debug("Discarding stale search results for %r", event.query)
            return
        state.in_flight.discard(OperationKind.SEARCH)
        if not event.ok:
            state.set_status(f"Search error: {event.error}", is_error=True)
            return

        results = dedupe_items(
            PackageItem(fact=fact, bookmarked=self._bookmarks.is_bookmarked(fact.name))
            for fact in event.results
        )
        if self._search_limit is not None:
            results = results[: self._search_limit]
        state.filtered = results
        self._reset_cursor()

    def _on_info_loaded(self, event: InfoLoaded) -> None:
        state = self.state
        if not state.is_current(OperationKind.INFO, event.generation):
            logger.debug("Discarding stale info for %s", event.package)
            return
        state.in_flight.discard(OperationKind.INFO)
        if event.ok and event.fact is not None:
            state.info_text = format_info(event.fact)
            replace_fact(state.items, event.fact)
            replace_fact(state.filtered, event.fact)
        else:
            state.info_text = f"Error loading info: {event.error}"
            state.set_status(f"Error loading info: {event.error}", is_error=True)
        state.mode = Mode.INFO

    def _on_install_completed(self, event: InstallCompleted) -> None:
        self._apply_install_result(event, installed=True, verb="Installed", noun="Install")

    def _on_uninstall_completed(self, event: UninstallCompleted) -> None:
        self._apply_install_result(event, installed=False, verb="Uninstalled", noun="Uninstall")

    def _apply_install_result(
        self,
        event: InstallCompleted | UninstallCompleted,
        *,
        installed: bool,
        verb: str,
        noun: str,
    ) -> None:
        state = self.state
        state.in_flight.discard(event.kind)
        if event.ok:
            state.set_status(f"{verb} {event.package}")
            patch_installed(state.items, event.package, installed)
            patch_installed(state.filtered, event.package, installed)
        else:
            state.set_status(f"{noun} failed: {event.error}", is_error=True)
        self._return_to_normal()

    def _on_bookmark_toggled(self, event: BookmarkToggled) -> None:
        if not event.ok:
            self.state.set_status(event.error or "Failed to save bookmarks", is_error=True)
        elif event.bookmarked:
            self.state.set_status(f"Bookmarked {event.package}")
        else:
            self.state.set_status(f"Removed bookmark for {event.package}")
