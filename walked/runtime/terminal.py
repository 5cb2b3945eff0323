"""Terminal control helpers for the TUI session.

Owns raw-mode lifecycle, alternate-screen switching, cursor visibility, and
optional extended key reporting.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

# Kitty "disambiguate escape codes" plus xterm modifyOtherKeys level 2.
EXTENDED_KEYS_ON = b"\x1b[>1u\x1b[>4;2m"
EXTENDED_KEYS_OFF = b"\x1b[<u\x1b[>4m"


class TerminalController:
    """Manage terminal mode transitions for one tty file descriptor pair."""

    def __init__(self, stdin_fd: int, stdout_fd: int, extended_keys: bool = False) -> None:
        """Capture tty state and bind input/output file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self.extended_keys = extended_keys
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        """Enter raw alternate-screen mode with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        sequence = b"\x1b[?1049h\x1b[?25l"
        if self.extended_keys:
            sequence += EXTENDED_KEYS_ON
        os.write(self.stdout_fd, sequence)

    def disable_tui_mode(self) -> None:
        """Show the cursor, leave the alternate screen, and restore tty state."""
        sequence = b"\x1b[?25h\x1b[?1049l"
        if self.extended_keys:
            sequence = EXTENDED_KEYS_OFF + sequence
        os.write(self.stdout_fd, sequence)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def write(self, frame: str) -> None:
        data = frame.encode("utf-8")
        while data:
            written = os.write(self.stdout_fd, data)
            data = data[written:]

    def size(self) -> os.terminal_size:
        try:
            return os.get_terminal_size(self.stdout_fd)
        except OSError:
            return os.terminal_size((80, 24))

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield
        finally:
            self.disable_tui_mode()
