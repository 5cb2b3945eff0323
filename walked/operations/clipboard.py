"""Process-wide single-slot clipboard shared by all panes."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class ClipboardOperation(Enum):
    COPY = "copy"


@dataclass
class Clipboard:
    """Most recent ``copy`` payload; ``paste`` reads it without consuming it."""

    operation: ClipboardOperation = ClipboardOperation.COPY
    entries: tuple[Path, ...] = ()

    def set_copy(self, paths: list[Path]) -> None:
        self.operation = ClipboardOperation.COPY
        self.entries = tuple(dict.fromkeys(paths))

    def is_empty(self) -> bool:
        return not self.entries

    def clear(self) -> None:
        self.entries = ()
