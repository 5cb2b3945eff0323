"""Selection-driven bulk file operations.

Every bulk action targets the pane's selection when it is non-empty and the
cursor entry otherwise. Per-entry failures are collected into an
``OperationReport`` and never abort the rest of the batch. After each
mutation the pane is re-listed with its cursor kept on the same path when
possible and its selection pruned to surviving paths.
"""

from __future__ import annotations

import errno
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from ..errors import EmptyName, FilesystemError, InvalidName, NameCollision, WalkedError
from ..file_model import Entry
from ..pane import Pane
from .clipboard import Clipboard

LOGGER = logging.getLogger(__name__)

DISALLOWED_NAME_CHARS = frozenset('\\/:*?"<>|')


class Filesystem(Protocol):
    def list(self, directory: Path) -> list[Entry]: ...

    def exists(self, path: Path) -> bool: ...

    def is_directory(self, path: Path) -> bool: ...

    def copy_recursive(self, src: Path, dst: Path) -> None: ...

    def remove_recursive(self, path: Path) -> None: ...

    def create_file(self, path: Path) -> None: ...

    def create_directory(self, path: Path) -> None: ...

    def rename(self, src: Path, dst: Path) -> None: ...


@dataclass
class OperationReport:
    """Outcome of one bulk action."""

    operation: str
    completed: list[Path] = field(default_factory=list)
    failures: list[WalkedError] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures and not self.skipped

    def messages(self) -> list[str]:
        lines = [failure.message for failure in self.failures]
        lines.extend(f"{self.operation}: '{path}' no longer exists" for path in self.skipped)
        return lines

    def summary(self) -> str:
        count = len(self.completed)
        noun = "entry" if count == 1 else "entries"
        text = f"{self.operation}: {count} {noun}"
        problems = len(self.failures) + len(self.skipped)
        if problems:
            text += f", {problems} failed"
        return text


def validate_name(name: str) -> str:
    """Return ``name`` if usable as a single path component, else raise."""
    if not name:
        raise EmptyName()
    if name in {".", ".."} or "\0" in name or any(ch in DISALLOWED_NAME_CHARS for ch in name):
        raise InvalidName(name)
    return name


def available_path(path: Path, exists) -> Path:
    """Return ``path`` or the first free ``<name>.<n>`` sibling, ``n`` from 1."""
    if not exists(path):
        return path
    suffix = 1
    while True:
        candidate = path.with_name(f"{path.name}.{suffix}")
        if not exists(candidate):
            return candidate
        suffix += 1


def _is_within(path: Path, ancestor: Path) -> bool:
    return path == ancestor or ancestor in path.parents


class OperationEngine:
    """Applies selection/clipboard actions to a pane through the filesystem."""

    def __init__(self, fs: Filesystem, clipboard: Clipboard) -> None:
        self.fs = fs
        self.clipboard = clipboard

    def refresh(self, pane: Pane, report: OperationReport | None = None, prefer_path: Path | None = None) -> None:
        """Re-list ``pane``; a listing failure is added to ``report`` or raised."""
        try:
            pane.reload(self.fs, prefer_path=prefer_path)
        except FilesystemError as exc:
            if report is None:
                raise
            report.failures.append(exc)

    def _copy_into(self, src: Path, directory: Path, report: OperationReport) -> None:
        destination = available_path(directory / src.name, self.fs.exists)
        if self.fs.is_directory(src) and _is_within(destination, src):
            report.failures.append(
                FilesystemError("copy", src, OSError(errno.EINVAL, "cannot copy a directory into itself"))
            )
            return
        try:
            self.fs.copy_recursive(src, destination)
        except FilesystemError as exc:
            LOGGER.warning("%s", exc.message)
            report.failures.append(exc)
            return
        report.completed.append(destination)

    def duplicate(self, pane: Pane) -> OperationReport:
        """Copy each target next to itself under a non-colliding name."""
        report = OperationReport("duplicate")
        for entry in pane.targets():
            self._copy_into(entry.path, entry.path.parent, report)
        self.refresh(pane, report)
        return report

    def copy(self, pane: Pane) -> OperationReport:
        """Load the targets into the clipboard; the filesystem is untouched."""
        report = OperationReport("copy")
        paths = [entry.path for entry in pane.targets()]
        if paths:
            self.clipboard.set_copy(paths)
        report.completed.extend(paths)
        return report

    def paste(self, pane: Pane) -> OperationReport:
        """Copy every clipboard path into the pane's directory.

        The clipboard is left intact so the same payload can be pasted again.
        Paths that vanished since ``copy`` are skipped and reported.
        """
        report = OperationReport("paste")
        for src in self.clipboard.entries:
            if not self.fs.exists(src):
                report.skipped.append(src)
                continue
            self._copy_into(src, pane.current_directory, report)
        self.refresh(pane, report)
        return report

    def remove(self, pane: Pane) -> OperationReport:
        """Delete every target recursively, continuing past failures."""
        report = OperationReport("remove")
        for entry in pane.targets():
            try:
                self.fs.remove_recursive(entry.path)
            except FilesystemError as exc:
                LOGGER.warning("%s", exc.message)
                report.failures.append(exc)
                continue
            report.completed.append(entry.path)
        self.refresh(pane, report)
        return report

    def _free_path(self, pane: Pane, name: str) -> Path:
        path = pane.current_directory / validate_name(name)
        if self.fs.exists(path):
            raise NameCollision(path)
        return path

    def create_file(self, pane: Pane, name: str) -> Path:
        path = self._free_path(pane, name)
        self.fs.create_file(path)
        self.refresh(pane, prefer_path=path)
        return path

    def create_directory(self, pane: Pane, name: str) -> Path:
        path = self._free_path(pane, name)
        self.fs.create_directory(path)
        self.refresh(pane, prefer_path=path)
        return path

    def rename(self, pane: Pane, name: str) -> Path | None:
        """Rename the cursor entry; renaming to its own name is a no-op."""
        entry = pane.current_entry()
        if entry is None:
            return None
        validate_name(name)
        destination = pane.current_directory / name
        if destination == entry.path:
            return entry.path
        if self.fs.exists(destination):
            raise NameCollision(destination)
        self.fs.rename(entry.path, destination)
        if entry.path in pane.selection:
            pane.selection.discard(entry.path)
            pane.selection.add(destination)
        self.refresh(pane, prefer_path=destination)
        return destination


__all__ = [
    "DISALLOWED_NAME_CHARS",
    "Filesystem",
    "OperationReport",
    "OperationEngine",
    "available_path",
    "validate_name",
]
