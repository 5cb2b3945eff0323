"""One independently navigable directory view.

A pane owns its listing, cursor, selection set, and optional search state.
Listing refreshes keep the cursor on the same path when it survives and
prune selected paths that disappeared.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from itertools import count
from pathlib import Path
from typing import Protocol

from ..file_model import Entry
from .search import SearchState

_PANE_IDS = count(1)


class DirectoryLister(Protocol):
    def list(self, directory: Path) -> list[Entry]: ...

    def is_directory(self, path: Path) -> bool: ...


@dataclass
class Pane:
    id: int
    current_directory: Path
    listing: list[Entry] = field(default_factory=list)
    cursor_index: int = 0
    selection: set[Path] = field(default_factory=set)
    scroll_offset: int = 0
    search: SearchState | None = None

    @classmethod
    def open(cls, lister: DirectoryLister, directory: Path) -> Pane:
        """Create a pane listing ``directory``; listing errors propagate."""
        resolved = directory.resolve()
        return cls(id=next(_PANE_IDS), current_directory=resolved, listing=lister.list(resolved))

    def current_entry(self) -> Entry | None:
        if not self.listing:
            return None
        return self.listing[self.cursor_index]

    def index_of(self, path: Path) -> int | None:
        for idx, entry in enumerate(self.listing):
            if entry.path == path:
                return idx
        return None

    def targets(self) -> list[Entry]:
        """Entries a bulk action applies to: the selection, else the cursor entry."""
        if self.selection:
            return [entry for entry in self.listing if entry.path in self.selection]
        entry = self.current_entry()
        return [entry] if entry is not None else []

    def clamp_cursor(self) -> None:
        if not self.listing:
            self.cursor_index = 0
            return
        self.cursor_index = max(0, min(self.cursor_index, len(self.listing) - 1))

    def move_cursor(self, delta: int) -> bool:
        """Move the cursor by ``delta`` rows, clamped; return whether it moved."""
        previous = self.cursor_index
        self.cursor_index += delta
        self.clamp_cursor()
        return self.cursor_index != previous

    def move_selecting(self, delta: int) -> None:
        """Move the cursor and toggle selection of the entry it lands on."""
        if not self.listing:
            return
        self.move_cursor(delta)
        path = self.listing[self.cursor_index].path
        if path in self.selection:
            self.selection.discard(path)
        else:
            self.selection.add(path)

    def apply_listing(self, listing: list[Entry], prefer_path: Path | None = None) -> None:
        """Install a fresh listing, keeping cursor and selection consistent."""
        anchor = prefer_path
        if anchor is None:
            current = self.current_entry()
            anchor = current.path if current is not None else None
        previous_index = self.cursor_index
        self.listing = list(listing)
        surviving = {entry.path for entry in self.listing}
        self.selection &= surviving
        new_index = self.index_of(anchor) if anchor is not None else None
        self.cursor_index = new_index if new_index is not None else previous_index
        self.clamp_cursor()

    def reload(self, lister: DirectoryLister, prefer_path: Path | None = None) -> None:
        """Re-list ``current_directory``; errors leave the pane untouched."""
        self.apply_listing(lister.list(self.current_directory), prefer_path=prefer_path)

    def change_directory(self, lister: DirectoryLister, directory: Path, focus_path: Path | None = None) -> None:
        """Switch to ``directory``; on listing failure nothing changes."""
        listing = lister.list(directory)
        self.current_directory = directory
        self.listing = listing
        self.selection.clear()
        self.search = None
        self.scroll_offset = 0
        focused = self.index_of(focus_path) if focus_path is not None else None
        self.cursor_index = focused if focused is not None else 0

    def walk_into_current(self, lister: DirectoryLister) -> bool:
        entry = self.current_entry()
        if entry is None or not lister.is_directory(entry.path):
            return False
        self.change_directory(lister, entry.path)
        return True

    def walk_to_parent(self, lister: DirectoryLister) -> bool:
        parent = self.current_directory.parent
        if parent == self.current_directory:
            return False
        self.change_directory(lister, parent, focus_path=self.current_directory)
        return True

    def ensure_cursor_visible(self, visible_rows: int) -> None:
        """Adjust ``scroll_offset`` so the cursor row is inside the viewport."""
        rows = max(1, visible_rows)
        if self.cursor_index < self.scroll_offset:
            self.scroll_offset = self.cursor_index
        elif self.cursor_index >= self.scroll_offset + rows:
            self.scroll_offset = self.cursor_index - rows + 1
        self.scroll_offset = max(0, min(self.scroll_offset, max(0, len(self.listing) - rows)))
