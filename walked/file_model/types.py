"""Domain datatypes for directory listing entries."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class EntryKind(Enum):
    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    OTHER = "other"


@dataclass(frozen=True)
class Entry:
    """Immutable snapshot of one directory child, stale after any mutation."""

    name: str
    path: Path
    kind: EntryKind

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


def listing_sort_key(entry: Entry) -> tuple[bool, str]:
    """Directories first, then case-insensitive name order."""
    return (not entry.is_dir, entry.name.casefold())


__all__ = [
    "EntryKind",
    "Entry",
    "listing_sort_key",
]
