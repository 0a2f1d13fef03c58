"""Command dispatcher.

Runs operations on a thread pool and delivers exactly one completion
event per operation into the event queue, even when the operation raises.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from queue import Queue

from boxy.tui.events import Completion, Event
from boxy.tui.operations import Operation

logger = logging.getLogger(__name__)


class CommandDispatcher:
    """Schedules background operations and funnels their results into one queue.

    The dispatcher holds no state besides the executor and the queue handle;
    concurrent schedules are independent of each other.

    Example:
        >>> dispatcher = CommandDispatcher()
        >>> dispatcher.schedule(load_packages(manager))
        >>> event = dispatcher.events.get()
    """

    def __init__(self, events: Queue[Event] | None = None, max_workers: int = 4) -> None:
        """Initialize the dispatcher.

        Args:
            events: Queue the event loop consumes. A new one is created if None.
            max_workers: Maximum number of operations running at once.
        """
        self._events: Queue[Event] = events if events is not None else Queue()
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="boxy-op")

    @property
    def events(self) -> Queue[Event]:
        """Queue receiving completion events."""
        return self._events

    def schedule(self, operation: Operation) -> Future[None]:
        """Run ``operation`` in the background.

        Returns:
            Future that resolves once the completion event has been queued.
        """
        logger.debug("Scheduling %s", operation.description)
        return self._executor.submit(self._execute, operation)

    def post(self, event: Event) -> None:
        """Queue an event produced synchronously on the event-loop thread."""
        self._events.put(event)

    def shutdown(self, wait: bool = False) -> None:
        """Stop accepting operations.

        Args:
            wait: Block until running operations finish.
        """
        self._executor.shutdown(wait=wait, cancel_futures=not wait)

    def _execute(self, operation: Operation) -> None:
        """Run one operation and queue its single completion event."""
        event: Completion
        try:
            event = operation.run()
        except Exception as e:
            logger.warning("Operation %s failed: %s", operation.description, e)
            event = operation.fail(str(e) or type(e).__name__)
        logger.debug("Completed %s (ok=%s)", operation.description, event.ok)
        self._events.put(event)
