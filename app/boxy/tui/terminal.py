"""Terminal mode handling for the interactive session.

Rich's live display owns the alternate screen and cursor; this module only
switches stdin into cbreak mode so keys arrive unbuffered and unechoed.
"""

import contextlib
import shutil
import termios
import tty
from collections.abc import Iterator


@contextlib.contextmanager
def cbreak_mode(fd: int) -> Iterator[None]:
    """Put ``fd`` into cbreak mode and restore its settings on exit."""
    saved = termios.tcgetattr(fd)
    try:
        tty.setcbreak(fd, termios.TCSANOW)
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSAFLUSH, saved)


def terminal_size() -> tuple[int, int]:
    """Return the terminal size as (columns, lines), defaulting to 80x24."""
    size = shutil.get_terminal_size((80, 24))
    return size.columns, size.lines
