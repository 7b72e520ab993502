"""Non-blocking console keyboard.

Keys are reported as upper-case characters, or as ``UP``/``DOWN``/``LEFT``/
``RIGHT`` for the arrow keys. On Windows the console is read through
``msvcrt``; elsewhere stdin is switched to cbreak mode and polled with
``select``.
"""
from __future__ import annotations

import os
import sys
from typing import Optional

UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
ARROWS = (UP, DOWN, LEFT, RIGHT)

# Second byte after a 0x00/0xE0 prefix from msvcrt.getwch()
_WINDOWS_ARROWS = {"H": UP, "P": DOWN, "K": LEFT, "M": RIGHT}
# Final byte of an ESC [ x sequence
_ANSI_ARROWS = {"A": UP, "B": DOWN, "D": LEFT, "C": RIGHT}


def normalize(ch: str) -> Optional[str]:
    if not ch or not ch.isprintable():
        return None
    return ch.upper()


class ConsoleKeyboard:
    """Poll the controlling console without blocking."""

    def __init__(self, stream=None) -> None:
        self._stream = stream or sys.stdin
        self._windows = os.name == "nt"
        self._saved_attrs = None

    # ------------------------------------------------------------------
    # Terminal mode
    # ------------------------------------------------------------------
    def __enter__(self) -> "ConsoleKeyboard":
        if not self._windows and self._stream.isatty():
            import termios
            import tty

            fd = self._stream.fileno()
            self._saved_attrs = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        return self

    def __exit__(self, *exc) -> None:
        if self._saved_attrs is not None:
            import termios

            termios.tcsetattr(self._stream.fileno(), termios.TCSADRAIN, self._saved_attrs)
            self._saved_attrs = None

    # ------------------------------------------------------------------
    # Polling
    # ------------------------------------------------------------------
    def key_pending(self) -> bool:
        if self._windows:
            import msvcrt

            return bool(msvcrt.kbhit())
        return self._readable()

    def read_key(self) -> Optional[str]:
        """Consume one key press, or return ``None`` if nothing usable is pending."""

        if not self.key_pending():
            return None
        if self._windows:
            return self._read_windows()
        return self._read_posix()

    def _readable(self) -> bool:
        import select

        try:
            ready, _, _ = select.select([self._stream], [], [], 0)
        except (OSError, ValueError):
            return False
        return bool(ready)

    def _read_char(self) -> str:
        data = os.read(self._stream.fileno(), 1)
        return data.decode("latin-1") if data else ""

    def _read_posix(self) -> Optional[str]:
        ch = self._read_char()
        if ch != "\x1b":
            return normalize(ch)
        if not self._readable() or self._read_char() != "[":
            return None
        if not self._readable():
            return None
        return _ANSI_ARROWS.get(self._read_char())

    def _read_windows(self) -> Optional[str]:
        import msvcrt

        ch = msvcrt.getwch()
        if ch in ("\x00", "\xe0"):
            return _WINDOWS_ARROWS.get(msvcrt.getwch())
        return normalize(ch)
