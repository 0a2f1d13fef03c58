"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into named key tokens.
Printable characters are returned as themselves; everything else maps to
one of the upper-case names below.
"""

import os
import select

UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
ENTER = "ENTER"
ESC = "ESC"
TAB = "TAB"
BACKSPACE = "BACKSPACE"
DELETE = "DELETE"
HOME = "HOME"
END = "END"
PAGE_UP = "PAGE_UP"
PAGE_DOWN = "PAGE_DOWN"
CTRL_U = "CTRL_U"
CTRL_W = "CTRL_W"
UNKNOWN = "UNKNOWN"

ESC_SEQUENCE_TIMEOUT_MS = 25

_CONTROL_BYTES: dict[bytes, str] = {
    b"\r": ENTER,
    b"\n": ENTER,
    b"\t": TAB,
    b"\x08": BACKSPACE,
    b"\x7f": BACKSPACE,
    b"\x15": CTRL_U,
    b"\x17": CTRL_W,
}

# Final byte of ``ESC [ <final>`` sequences
_CSI_FINALS: dict[bytes, str] = {
    b"A": UP,
    b"B": DOWN,
    b"C": RIGHT,
    b"D": LEFT,
    b"H": HOME,
    b"F": END,
}

# Parameter of ``ESC [ <n> ~`` sequences
_CSI_TILDE: dict[str, str] = {
    "1": HOME,
    "3": DELETE,
    "4": END,
    "5": PAGE_UP,
    "6": PAGE_DOWN,
    "7": HOME,
    "8": END,
}


def _utf8_length(first: int) -> int:
    """Return the encoded length of a UTF-8 sequence from its first byte."""
    if first >= 0xF0:
        return 4
    if first >= 0xE0:
        return 3
    if first >= 0xC0:
        return 2
    return 1


class KeyReader:
    """Decode key tokens from a file descriptor in cbreak/raw mode."""

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._pending: list[bytes] = []

    def _read_byte(self, timeout_ms: int | None) -> bytes | None:
        if self._pending:
            return self._pending.pop(0)
        if timeout_ms is not None:
            ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
            if not ready:
                return None
        ch = os.read(self.fd, 1)
        return ch or None

    def read_key(self, timeout_ms: int | None = None) -> str | None:
        """Read one key token.

        Args:
            timeout_ms: Maximum wait for the first byte; None blocks.

        Returns:
            Key token, or None if no input arrived in time.
        """
        ch = self._read_byte(timeout_ms)
        if ch is None:
            return None
        if ch == b"\x1b":
            return self._read_escape()
        if ch in _CONTROL_BYTES:
            return _CONTROL_BYTES[ch]
        if ch[0] < 0x20:
            return UNKNOWN

        data = ch
        for _ in range(_utf8_length(ch[0]) - 1):
            more = self._read_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if more is None:
                break
            data += more
        return data.decode("utf-8", errors="replace")

    def _read_escape(self) -> str:
        """Decode the remainder of an escape sequence."""
        seq = self._read_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return ESC
        if seq not in (b"[", b"O"):
            # Bare ESC followed by an unrelated key
            self._pending.append(seq)
            return ESC

        final = self._read_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if final is None:
            return ESC
        if final in _CSI_FINALS:
            return _CSI_FINALS[final]

        params = b""
        while final is not None and (final.isdigit() or final == b";"):
            params += final
            if len(params) > 16:
                return UNKNOWN
            final = self._read_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if final == b"~":
            return _CSI_TILDE.get(params.decode("ascii").split(";")[0], UNKNOWN)
        if final in _CSI_FINALS:
            # Modified arrows such as ESC [ 1 ; 5 A
            return _CSI_FINALS[final]
        return UNKNOWN
