"""Interactive event loop for the viewer.

Coordinates resize polling, redraws, and input dispatch. Feature logic lives
in :class:`bleamd.app.Viewer`; this module is the only place that blocks.
"""

from __future__ import annotations

import logging
import os
import shutil
import sys
from collections.abc import Callable

from .app import Viewer
from .config import Config
from .input import read_key
from .terminal import TerminalController

INPUT_POLL_MS = 100


def run_loop(
    viewer: Viewer,
    terminal: TerminalController,
    stdin_fd: int,
    get_size: Callable[..., os.terminal_size] = shutil.get_terminal_size,
) -> None:
    """Redraw and dispatch input until a quit action occurs.

    Frames are only written when they differ from the last one drawn.
    """
    last_lines: tuple[str, ...] | None = None
    while True:
        size = get_size((80, 24))
        if (size.columns, size.lines) != (viewer.state.width, viewer.state.height):
            viewer.resize(size.columns, size.lines)
            last_lines = None
        terminal.set_mouse_reporting(viewer.state.mouse_enabled)
        frame = viewer.frame()
        if frame.lines != last_lines:
            terminal.write_frame(list(frame.lines))
            last_lines = frame.lines
        key = read_key(stdin_fd, timeout_ms=INPUT_POLL_MS)
        if not key:
            continue
        if viewer.handle_key(key):
            return


def run_viewer(markdown: str, config: Config, logger: logging.Logger | None = None) -> None:
    """Run the full-screen viewer for ``markdown`` on the controlling terminal.

    When the document arrived on stdin, keyboard input is read from
    ``/dev/tty`` instead.
    """
    logger = logger or logging.getLogger(__name__)
    stdin_fd = sys.stdin.fileno()
    tty_fd: int | None = None
    if not os.isatty(stdin_fd):
        tty_fd = os.open("/dev/tty", os.O_RDWR)
        stdin_fd = tty_fd
    try:
        term = shutil.get_terminal_size((80, 24))
        viewer = Viewer(markdown, config, term.columns, term.lines, logger=logger)
        terminal = TerminalController(stdin_fd, sys.stdout.fileno())
        logger.debug("starting viewer at %dx%d", term.columns, term.lines)
        with terminal.raw_mode(mouse=viewer.state.mouse_enabled):
            run_loop(viewer, terminal, stdin_fd)
    finally:
        if tty_fd is not None:
            os.close(tty_fd)
