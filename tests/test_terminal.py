"""Tests for terminal mode control sequences and raw-mode lifecycle."""

from __future__ import annotations

import os
import termios
import unittest
from unittest import mock

from walked.runtime.terminal import TerminalController


class TerminalBehaviorTests(unittest.TestCase):
    def test_enable_and_disable_tui_mode_use_alternate_screen_sequences(self) -> None:
        saved_state = [1, 2, 3]

        with mock.patch("walked.runtime.terminal.termios.tcgetattr", return_value=saved_state), mock.patch(
            "walked.runtime.terminal.tty.setraw"
        ) as setraw_mock, mock.patch("walked.runtime.terminal.os.write") as write_mock, mock.patch(
            "walked.runtime.terminal.termios.tcsetattr"
        ) as setattr_mock:
            controller = TerminalController(stdin_fd=0, stdout_fd=1)
            controller.enable_tui_mode()
            controller.disable_tui_mode()

        setraw_mock.assert_called_once_with(0, termios.TCSAFLUSH)
        self.assertEqual(write_mock.call_args_list[0].args, (1, b"\x1b[?1049h\x1b[?25l"))
        self.assertEqual(write_mock.call_args_list[1].args, (1, b"\x1b[?25h\x1b[?1049l"))
        setattr_mock.assert_called_once_with(0, termios.TCSAFLUSH, saved_state)

    def test_extended_keys_are_requested_and_released(self) -> None:
        with mock.patch("walked.runtime.terminal.termios.tcgetattr", return_value=[0]), mock.patch(
            "walked.runtime.terminal.tty.setraw"
        ), mock.patch("walked.runtime.terminal.os.write") as write_mock, mock.patch(
            "walked.runtime.terminal.termios.tcsetattr"
        ):
            controller = TerminalController(stdin_fd=0, stdout_fd=1, extended_keys=True)
            controller.enable_tui_mode()
            controller.disable_tui_mode()

        self.assertEqual(
            write_mock.call_args_list[0].args,
            (1, b"\x1b[?1049h\x1b[?25l\x1b[>1u\x1b[>4;2m"),
        )
        self.assertEqual(
            write_mock.call_args_list[1].args,
            (1, b"\x1b[<u\x1b[>4m\x1b[?25h\x1b[?1049l"),
        )

    def test_raw_mode_restores_terminal_after_exception(self) -> None:
        with mock.patch("walked.runtime.terminal.termios.tcgetattr", return_value=[0]):
            controller = TerminalController(stdin_fd=0, stdout_fd=1)

        with mock.patch.object(controller, "enable_tui_mode") as enable_mock, mock.patch.object(
            controller, "disable_tui_mode"
        ) as disable_mock:
            with self.assertRaises(RuntimeError):
                with controller.raw_mode():
                    raise RuntimeError("boom")

        enable_mock.assert_called_once()
        disable_mock.assert_called_once()

    def test_write_handles_partial_writes(self) -> None:
        with mock.patch("walked.runtime.terminal.termios.tcgetattr", return_value=[0]):
            controller = TerminalController(stdin_fd=0, stdout_fd=1)

        with mock.patch("walked.runtime.terminal.os.write", side_effect=[2, 3]) as write_mock:
            controller.write("héll")

        self.assertEqual(write_mock.call_args_list, [mock.call(1, "héll".encode("utf-8")), mock.call(1, b"\xa9ll")])

    def test_size_falls_back_when_unavailable(self) -> None:
        with mock.patch("walked.runtime.terminal.termios.tcgetattr", return_value=[0]):
            controller = TerminalController(stdin_fd=0, stdout_fd=1)

        with mock.patch("walked.runtime.terminal.os.get_terminal_size", side_effect=OSError):
            self.assertEqual(controller.size(), os.terminal_size((80, 24)))


if __name__ == "__main__":
    unittest.main()
