"""Logging setup for boxy.

The interactive view owns the terminal, so log records go to a file in
the state directory instead of stderr.
"""

import logging
from pathlib import Path

from boxy.core.paths import ensure_state_dir, get_log_path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def setup_logging(verbose: bool = False, path: Path | None = None) -> Path | None:
    """Route boxy log records to a file.

    Args:
        verbose: Log at DEBUG level instead of WARNING.
        path: Log file override. Default: ~/.local/state/boxy/boxy.log

    Returns:
        Path of the log file, or None if it could not be opened.
    """
    root = logging.getLogger("boxy")
    root.setLevel(logging.DEBUG if verbose else logging.WARNING)
    root.propagate = False

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    try:
        if path is None:
            ensure_state_dir()
            path = get_log_path()
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(path, encoding="utf-8")
    except (OSError, RuntimeError):
        root.addHandler(logging.NullHandler())
        return None

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    return path
