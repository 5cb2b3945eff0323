"""Main interactive event loop for the terminal UI.

Blocks on the next key, hands it to the session, and redraws. There is no
background work: a key is fully applied, including any re-listing, before
the next one is read.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path

from ..input import KeyEvent, read_key
from ..render import pane_body_rows, render_frame
from .config import Settings
from .session import Session
from .terminal import TerminalController

LOGGER = logging.getLogger(__name__)

RESIZE_POLL_MS = 250


def run_main_loop(
    session: Session,
    terminal: TerminalController,
    stdin_fd: int,
    settings: Settings,
    read_key_fn: Callable[[int, int | None], KeyEvent | None] = read_key,
) -> Path | None:
    """Run the session until it quits and return its exit directory.

    The terminal size is polled between keys so resizes trigger a redraw.
    """
    last_size: tuple[int, int] | None = None
    with terminal.raw_mode():
        while not session.should_quit:
            size = terminal.size()
            current_size = (size.columns, size.lines)
            if current_size != last_size:
                last_size = current_size
                session.state.dirty = True

            if session.state.dirty:
                columns, rows = current_size
                session.fit_viewports(lambda rect: pane_body_rows(rect, columns, rows))
                terminal.write(render_frame(session.snapshot(), settings, columns, rows))
                session.state.dirty = False

            try:
                key = read_key_fn(stdin_fd, RESIZE_POLL_MS)
            except KeyboardInterrupt:
                continue
            if key is None:
                continue
            session.handle_key(key)
    LOGGER.debug("session ended in %s", session.exit_directory)
    return session.exit_directory
