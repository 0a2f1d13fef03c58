"""Event loop for the interactive session.

One thread reads keys and watches the terminal size; the thread pool of
the dispatcher runs package manager commands. Both only put events on the
queue. The main thread takes events one at a time, feeds them to the
state machine, and redraws when the queue is drained.
"""

import logging
import sys
import threading
from queue import Queue

from rich.console import Console
from rich.live import Live

from boxy.core.bookmarks import BookmarkStore
from boxy.core.config import AppConfig
from boxy.core.theme import get_theme
from boxy.managers.base import PackageManager
from boxy.models.state import AppState
from boxy.tui.dispatcher import CommandDispatcher
from boxy.tui.events import Event, KeyEvent, ResizeEvent
from boxy.tui.keys import KeyReader
from boxy.tui.machine import StateMachine
from boxy.tui.render import render
from boxy.tui.terminal import cbreak_mode, terminal_size

logger = logging.getLogger(__name__)

# How long the input thread waits for a key before re-checking the terminal size
INPUT_POLL_MS = 100


def _pump_input(reader: KeyReader, events: Queue[Event], stop: threading.Event) -> None:
    """Post key and resize events until ``stop`` is set."""
    last_size = terminal_size()
    while not stop.is_set():
        try:
            key = reader.read_key(timeout_ms=INPUT_POLL_MS)
        except OSError as e:
            logger.error("Input read failed: %s", e)
            break
        if key is not None:
            events.put(KeyEvent(key))
        size = terminal_size()
        if size != last_size:
            last_size = size
            events.put(ResizeEvent(*size))


def create_state(config: AppConfig) -> AppState:
    """Create the startup state: loading, empty sets, current terminal size."""
    width, height = terminal_size()
    return AppState(show_all=config.show_all, layout=config.layout, width=width, height=height)


def run_app(
    manager: PackageManager,
    bookmarks: BookmarkStore,
    config: AppConfig,
    console: Console | None = None,
) -> None:
    """Run the interactive session until the user quits.

    Args:
        manager: Package manager to browse.
        bookmarks: Loaded bookmark store.
        config: Application configuration.
        console: Rich console to draw on (default: themed stdout console).
    """
    console = console or Console(theme=get_theme())
    events: Queue[Event] = Queue()
    dispatcher = CommandDispatcher(events)
    state = create_state(config)
    machine = StateMachine(
        state,
        manager,
        bookmarks,
        dispatcher,
        search_limit=config.search_limit,
    )

    stop = threading.Event()
    stdin_fd = sys.stdin.fileno()
    input_thread = threading.Thread(
        target=_pump_input,
        args=(KeyReader(stdin_fd), events, stop),
        name="boxy-input",
        daemon=True,
    )

    logger.info("Starting session with %s", manager.name)
    machine.start()
    try:
        with (
            cbreak_mode(stdin_fd),
            Live(
                render(state, manager.name),
                console=console,
                screen=True,
                auto_refresh=False,
                transient=True,
            ) as live,
        ):
            input_thread.start()
            while True:
                if machine.handle(events.get()):
                    break
                if events.empty():
                    live.update(render(state, manager.name), refresh=True)
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        stop.set()
        dispatcher.shutdown(wait=False)
        logger.info("Session ended")
