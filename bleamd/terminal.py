"""Terminal control helpers for the viewer session.

Owns raw-mode lifecycle, alternate-screen switching, and mouse toggles.
Mouse tracking uses any-motion reporting so hover feedback works.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

_MOUSE_ON = b"\x1b[?1000h\x1b[?1003h\x1b[?1006h"
_MOUSE_OFF = b"\x1b[?1000l\x1b[?1003l\x1b[?1006l"


class TerminalController:
    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._mouse_reporting_enabled = False

    @property
    def mouse_reporting_enabled(self) -> bool:
        return self._mouse_reporting_enabled

    def enable_tui_mode(self, mouse: bool = True) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        # Enter alternate screen and hide cursor.
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l")
        self._mouse_reporting_enabled = False
        self.set_mouse_reporting(mouse)

    def disable_tui_mode(self) -> None:
        # Disable mouse reporting, show cursor, and restore the main screen buffer.
        os.write(self.stdout_fd, _MOUSE_OFF + b"\x1b[?25h\x1b[?1049l")
        self._mouse_reporting_enabled = False
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def set_mouse_reporting(self, enabled: bool) -> None:
        desired = bool(enabled)
        if desired == self._mouse_reporting_enabled:
            return
        os.write(self.stdout_fd, _MOUSE_ON if desired else _MOUSE_OFF)
        self._mouse_reporting_enabled = desired

    def write_frame(self, lines: list[str]) -> None:
        """Redraw the whole screen from the top-left corner."""
        body = "\r\n".join(f"{line}\x1b[0m\x1b[K" for line in lines)
        os.write(self.stdout_fd, ("\x1b[H" + body).encode("utf-8", errors="replace"))

    @contextlib.contextmanager
    def raw_mode(self, mouse: bool = True):
        try:
            self.enable_tui_mode(mouse)
            yield
        finally:
            self.disable_tui_mode()
