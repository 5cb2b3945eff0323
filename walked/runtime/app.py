"""Browser bootstrap: config, bindings, session, and terminal wiring."""

from __future__ import annotations

import contextlib
import os
from pathlib import Path

from ..file_model import LocalFilesystem
from ..input import build_binding_table
from .config import LoadedConfig, load_settings
from .loop import run_main_loop
from .session import Session
from .terminal import TerminalController

TTY_PATH = "/dev/tty"


def build_session(start: Path, loaded: LoadedConfig) -> Session:
    """Create the session with every startup problem queued for display."""
    fs = LocalFilesystem(show_hidden=loaded.settings.show_hidden)
    bindings, binding_problems = build_binding_table(
        loaded.bindings,
        extended_keys=loaded.settings.extended_keys,
    )
    problems = list(loaded.problems) + [problem.message for problem in binding_problems]
    return Session.start(start, fs, bindings, problems)


@contextlib.contextmanager
def open_tty():
    """Yield a read/write fd on the controlling terminal.

    Using the tty directly keeps stdout free for the exit directory.
    """
    fd = os.open(TTY_PATH, os.O_RDWR | os.O_NOCTTY)
    try:
        yield fd
    finally:
        os.close(fd)


def run_browser(start: Path, config_path: Path | None = None, create_missing: bool = False) -> Path | None:
    """Run the interactive browser on ``start`` and return the exit directory."""
    loaded = load_settings(config_path, create_missing=create_missing)
    session = build_session(start, loaded)
    with open_tty() as tty_fd:
        terminal = TerminalController(
            stdin_fd=tty_fd,
            stdout_fd=tty_fd,
            extended_keys=loaded.settings.extended_keys,
        )
        return run_main_loop(session, terminal, tty_fd, loaded.settings)
