"""Session modes, application state, and the render snapshot."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..input import BindingTable, ModeClass
from ..operations import Clipboard
from ..pane import LayoutManager, Leaf, Orientation, Rect, SearchState, Split


class InsertPurpose(Enum):
    NEW_FILE = "new_file"
    NEW_DIRECTORY = "new_directory"
    RENAME = "rename"


@dataclass(frozen=True)
class NormalMode:
    mode_class = ModeClass.NORMAL


@dataclass
class InsertMode:
    """Literal text entry for a file name; ``cursor`` indexes into ``buffer``."""

    purpose: InsertPurpose
    buffer: str = ""
    cursor: int = 0
    mode_class = ModeClass.INSERT


@dataclass(frozen=True)
class SearchMode:
    """Incremental search on the active pane; the query lives on the pane."""

    mode_class = ModeClass.INSERT


@dataclass(frozen=True)
class QuitMode:
    mode_class = ModeClass.NORMAL


Mode = NormalMode | InsertMode | SearchMode | QuitMode


@dataclass
class AppState:
    mode: Mode
    layout: LayoutManager
    clipboard: Clipboard
    bindings: BindingTable
    exit_directory: Path | None = None
    messages: list[str] = field(default_factory=list)
    dirty: bool = True

    @property
    def should_quit(self) -> bool:
        return isinstance(self.mode, QuitMode)

    @property
    def active_locator(self) -> tuple[int, ...]:
        return self.layout.active


@dataclass(frozen=True)
class PaneView:
    """Read-only per-pane data the renderer needs."""

    pane_id: int
    rect: Rect
    active: bool
    directory: Path
    names: tuple[str, ...]
    kinds: tuple[str, ...]
    cursor_index: int
    selected: frozenset[int]
    scroll_offset: int
    search: SearchState | None


@dataclass(frozen=True)
class SessionSnapshot:
    mode: Mode
    panes: tuple[PaneView, ...]
    messages: tuple[str, ...]
    clipboard_size: int


def layout_shape(node) -> object:
    """Describe the split structure as nested tuples of pane ids (for tests/debug)."""
    if isinstance(node, Leaf):
        return node.pane.id
    assert isinstance(node, Split)
    tag = "H" if node.orientation is Orientation.HORIZONTAL else "V"
    return (tag, tuple(layout_shape(child) for child in node.children))


__all__ = [
    "InsertPurpose",
    "NormalMode",
    "InsertMode",
    "SearchMode",
    "QuitMode",
    "Mode",
    "AppState",
    "PaneView",
    "SessionSnapshot",
    "layout_shape",
]
