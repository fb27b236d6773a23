"""Tests for terminal mode control sequences.

Verifies raw-mode lifecycle safety and expected escape-command payloads.
These guard the low-level terminal contract used by the runtime loop.
"""

from __future__ import annotations

import termios
import unittest
from unittest import mock

from bleamd.terminal import TerminalController


class TerminalBehaviorTests(unittest.TestCase):
    def test_enable_and_disable_tui_mode_use_alternate_screen_sequences(self) -> None:
        saved_state = [1, 2, 3]

        with mock.patch("bleamd.terminal.termios.tcgetattr", return_value=saved_state), mock.patch(
            "bleamd.terminal.tty.setraw"
        ) as setraw_mock, mock.patch("bleamd.terminal.os.write") as write_mock, mock.patch(
            "bleamd.terminal.termios.tcsetattr"
        ) as setattr_mock:
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            controller.enable_tui_mode()
            self.assertTrue(controller.mouse_reporting_enabled)
            controller.disable_tui_mode()

        setraw_mock.assert_called_once_with(0, termios.TCSAFLUSH)
        self.assertEqual(write_mock.call_args_list[0].args, (1, b"\x1b[?1049h\x1b[?25l"))
        self.assertEqual(write_mock.call_args_list[1].args, (1, b"\x1b[?1000h\x1b[?1003h\x1b[?1006h"))
        self.assertEqual(
            write_mock.call_args_list[2].args,
            (1, b"\x1b[?1000l\x1b[?1003l\x1b[?1006l\x1b[?25h\x1b[?1049l"),
        )
        setattr_mock.assert_called_once_with(0, termios.TCSAFLUSH, saved_state)
        self.assertFalse(controller.mouse_reporting_enabled)

    def test_enable_without_mouse_skips_tracking(self) -> None:
        with mock.patch("bleamd.terminal.termios.tcgetattr", return_value=[0]), mock.patch(
            "bleamd.terminal.tty.setraw"
        ), mock.patch("bleamd.terminal.os.write") as write_mock:
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            controller.enable_tui_mode(mouse=False)

        write_mock.assert_called_once_with(1, b"\x1b[?1049h\x1b[?25l")
        self.assertFalse(controller.mouse_reporting_enabled)

    def test_set_mouse_reporting_only_writes_on_change(self) -> None:
        with mock.patch("bleamd.terminal.termios.tcgetattr", return_value=[0]):
            controller = TerminalController(stdin_fd=0, stdout_fd=1)

        with mock.patch("bleamd.terminal.os.write") as write_mock:
            controller.set_mouse_reporting(False)
            controller.set_mouse_reporting(True)
            controller.set_mouse_reporting(True)
            controller.set_mouse_reporting(False)

        self.assertEqual(
            [call.args[1] for call in write_mock.call_args_list],
            [b"\x1b[?1000h\x1b[?1003h\x1b[?1006h", b"\x1b[?1000l\x1b[?1003l\x1b[?1006l"],
        )

    def test_write_frame_homes_cursor_and_clears_line_ends(self) -> None:
        with mock.patch("bleamd.terminal.termios.tcgetattr", return_value=[0]):
            controller = TerminalController(stdin_fd=0, stdout_fd=1)

        with mock.patch("bleamd.terminal.os.write") as write_mock:
            controller.write_frame(["ab", "☃"])

        write_mock.assert_called_once_with(
            1,
            "\x1b[Hab\x1b[0m\x1b[K\r\n☃\x1b[0m\x1b[K".encode("utf-8"),
        )

    def test_raw_mode_restores_terminal_after_exception(self) -> None:
        with mock.patch("bleamd.terminal.termios.tcgetattr", return_value=[0]):
            controller = TerminalController(stdin_fd=0, stdout_fd=1)

        with mock.patch.object(controller, "enable_tui_mode") as enable_mock, mock.patch.object(
            controller, "disable_tui_mode"
        ) as disable_mock:
            with self.assertRaises(RuntimeError):
                with controller.raw_mode():
                    raise RuntimeError("boom")

        enable_mock.assert_called_once_with(True)
        disable_mock.assert_called_once()


if __name__ == "__main__":
    unittest.main()
