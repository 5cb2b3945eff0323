"""Session state machine: key events in, pane/layout/filesystem effects out.

Every key is resolved against the binding table for the current mode's
input class and dispatched synchronously, including any follow-up
re-listing, before the next key is accepted. Insert and search modes treat
unbound printable keys as text; normal mode ignores unbound keys.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from pathlib import Path

from ..errors import EmptyName, FilesystemError, InvalidName, NameCollision, WalkedError
from ..input import Action, ActionBinding, ActionRegistry, BindingTable, KeyEvent
from ..operations import Clipboard, OperationEngine, OperationReport
from ..operations.engine import Filesystem
from ..pane import Direction, LayoutManager, Leaf, Orientation, Pane, Rect
from ..pane import search
from .state import (
    AppState,
    InsertMode,
    InsertPurpose,
    NormalMode,
    PaneView,
    QuitMode,
    SearchMode,
    SessionSnapshot,
)

LOGGER = logging.getLogger(__name__)


class Session:
    """Owns the app state and routes each key through the current mode."""

    def __init__(self, state: AppState, fs: Filesystem, engine: OperationEngine | None = None) -> None:
        self.state = state
        self.fs = fs
        self.engine = engine if engine is not None else OperationEngine(fs, state.clipboard)
        self._normal = ActionRegistry().register_bindings(
            ActionBinding((Action.UP,), lambda: self.active_pane.move_cursor(-1)),
            ActionBinding((Action.DOWN,), lambda: self.active_pane.move_cursor(1)),
            ActionBinding((Action.SELECT_UP,), lambda: self.active_pane.move_selecting(-1)),
            ActionBinding((Action.SELECT_DOWN,), lambda: self.active_pane.move_selecting(1)),
            ActionBinding((Action.DIR_WALK,), lambda: self.active_pane.walk_into_current(self.fs)),
            ActionBinding((Action.DIR_UP,), lambda: self.active_pane.walk_to_parent(self.fs)),
            ActionBinding((Action.NEW_FILE,), lambda: self._begin_insert(InsertPurpose.NEW_FILE)),
            ActionBinding((Action.NEW_DIRECTORY,), lambda: self._begin_insert(InsertPurpose.NEW_DIRECTORY)),
            ActionBinding((Action.RENAME,), lambda: self._begin_insert(InsertPurpose.RENAME)),
            ActionBinding((Action.DUPLICATE,), lambda: self._run_operation(self.engine.duplicate)),
            ActionBinding((Action.COPY,), lambda: self._run_operation(self.engine.copy)),
            ActionBinding((Action.PASTE,), lambda: self._run_operation(self.engine.paste)),
            ActionBinding((Action.REMOVE,), lambda: self._run_operation(self.engine.remove)),
            ActionBinding((Action.INCREMENTAL_SEARCH,), self._begin_search),
            ActionBinding((Action.SPLIT_HORIZONTAL,), lambda: self._split(Orientation.HORIZONTAL)),
            ActionBinding((Action.SPLIT_VERTICAL,), lambda: self._split(Orientation.VERTICAL)),
            ActionBinding((Action.CLOSE_PANE,), self.state.layout.close_active),
            ActionBinding((Action.FOCUS_LEFT,), lambda: self.state.layout.move_focus(Direction.LEFT)),
            ActionBinding((Action.FOCUS_RIGHT,), lambda: self.state.layout.move_focus(Direction.RIGHT)),
            ActionBinding((Action.FOCUS_UP,), lambda: self.state.layout.move_focus(Direction.UP)),
            ActionBinding((Action.FOCUS_DOWN,), lambda: self.state.layout.move_focus(Direction.DOWN)),
            ActionBinding((Action.QUIT,), self._quit),
        )
        self._insert = ActionRegistry().register_bindings(
            ActionBinding((Action.NORMAL_MODE,), self._cancel_insert),
            ActionBinding((Action.CONFIRM,), self._commit_insert),
            ActionBinding((Action.DELETE_CHAR,), self._insert_backspace),
            ActionBinding((Action.CURSOR_LEFT,), lambda: self._insert_move_cursor(-1)),
            ActionBinding((Action.CURSOR_RIGHT,), lambda: self._insert_move_cursor(1)),
        )
        self._search = ActionRegistry().register_bindings(
            ActionBinding((Action.NORMAL_MODE, Action.CONFIRM), self._end_search),
            ActionBinding((Action.DELETE_CHAR,), lambda: search.shrink_query(self.active_pane)),
            ActionBinding((Action.NEXT_SEARCH_RESULT,), lambda: search.step_match(self.active_pane, 1)),
            ActionBinding((Action.PREV_SEARCH_RESULT,), lambda: search.step_match(self.active_pane, -1)),
        )

    @classmethod
    def start(
        cls,
        directory: Path,
        fs: Filesystem,
        bindings: BindingTable,
        problems: Iterable[str] = (),
    ) -> Session:
        """Open one pane on ``directory`` in normal mode; listing errors propagate."""
        pane = Pane.open(fs, directory)
        state = AppState(
            mode=NormalMode(),
            layout=LayoutManager(Leaf(pane)),
            clipboard=Clipboard(),
            bindings=bindings,
            messages=list(problems),
        )
        return cls(state, fs)

    @property
    def active_pane(self) -> Pane:
        return self.state.layout.active_pane

    @property
    def should_quit(self) -> bool:
        return self.state.should_quit

    @property
    def exit_directory(self) -> Path | None:
        return self.state.exit_directory

    def report(self, message: str) -> None:
        LOGGER.debug("report: %s", message)
        self.state.messages.append(message)

    def handle_key(self, key: KeyEvent) -> None:
        """Resolve and apply one key event."""
        if self.state.should_quit:
            return
        self.state.messages.clear()
        self.state.dirty = True
        mode = self.state.mode
        action = self.state.bindings.lookup(mode.mode_class, key)
        LOGGER.debug("key %s in %s -> %s", key, type(mode).__name__, action)
        try:
            if isinstance(mode, InsertMode):
                self._handle_insert_key(mode, key, action)
            elif isinstance(mode, SearchMode):
                self._handle_search_key(key, action)
            elif action is not None:
                self._normal.dispatch(action)
        except WalkedError as exc:
            self.report(exc.message)

    def _handle_insert_key(self, mode: InsertMode, key: KeyEvent, action: Action | None) -> None:
        if action is not None and self._insert.dispatch(action):
            return
        if action is None and key.is_printable:
            mode.buffer = mode.buffer[: mode.cursor] + key.code + mode.buffer[mode.cursor :]
            mode.cursor += len(key.code)

    def _handle_search_key(self, key: KeyEvent, action: Action | None) -> None:
        if action is not None and self._search.dispatch(action):
            return
        if action is None and key.is_printable:
            search.extend_query(self.active_pane, key.code)

    def _begin_insert(self, purpose: InsertPurpose) -> None:
        if purpose is InsertPurpose.RENAME and self.active_pane.current_entry() is None:
            return
        self.state.mode = InsertMode(purpose=purpose)

    def _cancel_insert(self) -> None:
        self.state.mode = NormalMode()

    def _insert_backspace(self) -> None:
        mode = self.state.mode
        assert isinstance(mode, InsertMode)
        if mode.cursor == 0:
            return
        mode.buffer = mode.buffer[: mode.cursor - 1] + mode.buffer[mode.cursor :]
        mode.cursor -= 1

    def _insert_move_cursor(self, delta: int) -> None:
        mode = self.state.mode
        assert isinstance(mode, InsertMode)
        mode.cursor = max(0, min(len(mode.buffer), mode.cursor + delta))

    def _commit_insert(self) -> None:
        """Apply the insert buffer; name problems keep the session in insert mode."""
        mode = self.state.mode
        assert isinstance(mode, InsertMode)
        pane = self.active_pane
        commit: dict[InsertPurpose, Callable[[Pane, str], object]] = {
            InsertPurpose.NEW_FILE: self.engine.create_file,
            InsertPurpose.NEW_DIRECTORY: self.engine.create_directory,
            InsertPurpose.RENAME: self.engine.rename,
        }
        try:
            commit[mode.purpose](pane, mode.buffer)
        except (EmptyName, InvalidName, NameCollision) as exc:
            self.report(exc.message)
            return
        except FilesystemError as exc:
            self.state.mode = NormalMode()
            self.report(exc.message)
            return
        self.state.mode = NormalMode()
        self._refresh_other_panes(pane)

    def _begin_search(self) -> None:
        search.begin_search(self.active_pane)
        self.state.mode = SearchMode()

    def _end_search(self) -> None:
        search.end_search(self.active_pane)
        self.state.mode = NormalMode()

    def _split(self, orientation: Orientation) -> None:
        current = self.active_pane
        self.state.layout.split(orientation, Pane.open(self.fs, current.current_directory))

    def _quit(self) -> None:
        self.state.exit_directory = self.active_pane.current_directory
        self.state.mode = QuitMode()

    def _run_operation(self, operation: Callable[[Pane], OperationReport]) -> None:
        pane = self.active_pane
        report = operation(pane)
        if report.completed or not report.ok:
            self.report(report.summary())
        for message in report.messages():
            self.report(message)
        if report.operation != "copy":
            self._refresh_other_panes(pane)

    def _refresh_other_panes(self, changed: Pane) -> None:
        """Re-list other panes showing the directory ``changed`` just mutated.

        A pane whose directory vanished (removed or renamed away) moves up to
        its nearest surviving ancestor.
        """
        for pane in self.state.layout.panes():
            if pane is changed:
                continue
            try:
                if not self.fs.is_directory(pane.current_directory):
                    ancestor, focus = self._surviving_ancestor(pane.current_directory)
                    pane.change_directory(self.fs, ancestor, focus_path=focus)
                elif pane.current_directory == changed.current_directory:
                    pane.reload(self.fs)
            except FilesystemError as exc:
                self.report(exc.message)

    def _surviving_ancestor(self, directory: Path) -> tuple[Path, Path]:
        child = directory
        parent = directory.parent
        while parent != child and not self.fs.is_directory(parent):
            child, parent = parent, parent.parent
        return parent, child

    def fit_viewports(self, visible_rows: Callable[[Rect], int]) -> None:
        """Scroll every pane so its cursor fits the rows its rectangle offers."""
        for _locator, pane, rect in self.state.layout.leaf_rects():
            pane.ensure_cursor_visible(visible_rows(rect))

    def snapshot(self) -> SessionSnapshot:
        """Read-only view of layout, mode, and per-pane state for rendering."""
        views = []
        for locator, pane, rect in self.state.layout.leaf_rects():
            views.append(
                PaneView(
                    pane_id=pane.id,
                    rect=rect,
                    active=locator == self.state.layout.active,
                    directory=pane.current_directory,
                    names=tuple(entry.name for entry in pane.listing),
                    kinds=tuple(entry.kind.value for entry in pane.listing),
                    cursor_index=pane.cursor_index,
                    selected=frozenset(idx for idx, entry in enumerate(pane.listing) if entry.path in pane.selection),
                    scroll_offset=pane.scroll_offset,
                    search=replace(pane.search, matches=list(pane.search.matches)) if pane.search is not None else None,
                )
            )
        mode = self.state.mode
        if isinstance(mode, InsertMode):
            mode = replace(mode)
        return SessionSnapshot(
            mode=mode,
            panes=tuple(views),
            messages=tuple(self.state.messages),
            clipboard_size=len(self.state.clipboard.entries),
        )


__all__ = [
    "Session",
]
