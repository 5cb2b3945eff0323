"""Local filesystem collaborator used by panes and the operation engine.

All primitive calls are funneled through ``LocalFilesystem`` so the engine
never touches ``os``/``shutil`` directly and tests can swap in a fake.
Every ``OSError`` is re-raised as ``FilesystemError(op, path, cause)``.
"""

from __future__ import annotations

import errno
import logging
import os
import shutil
from pathlib import Path

from ..errors import FilesystemError
from .types import Entry, EntryKind, listing_sort_key

LOGGER = logging.getLogger(__name__)


def _entry_kind(child: os.DirEntry) -> EntryKind:
    try:
        if child.is_symlink():
            return EntryKind.SYMLINK
        if child.is_dir(follow_symlinks=False):
            return EntryKind.DIRECTORY
        if child.is_file(follow_symlinks=False):
            return EntryKind.FILE
    except OSError:
        pass
    return EntryKind.OTHER


class LocalFilesystem:
    """Filesystem capability backed by ``os.scandir`` and ``shutil``."""

    def __init__(self, show_hidden: bool = True) -> None:
        self.show_hidden = show_hidden

    def list(self, directory: Path) -> list[Entry]:
        """Return sorted children of ``directory``."""
        entries: list[Entry] = []
        try:
            with os.scandir(directory) as children:
                for child in children:
                    if not self.show_hidden and child.name.startswith("."):
                        continue
                    entries.append(Entry(name=child.name, path=Path(child.path), kind=_entry_kind(child)))
        except OSError as exc:
            raise FilesystemError("list", directory, exc) from exc
        entries.sort(key=listing_sort_key)
        return entries

    def exists(self, path: Path) -> bool:
        return os.path.lexists(path)

    def is_directory(self, path: Path) -> bool:
        """Return whether ``path`` is a directory, following symlinks."""
        return path.is_dir()

    def copy_recursive(self, src: Path, dst: Path) -> None:
        try:
            if src.is_symlink():
                os.symlink(os.readlink(src), dst)
            elif src.is_dir():
                shutil.copytree(src, dst, symlinks=True)
            else:
                shutil.copy2(src, dst)
        except OSError as exc:
            raise FilesystemError("copy", src, exc) from exc
        LOGGER.info("copied %s -> %s", src, dst)

    def remove_recursive(self, path: Path) -> None:
        try:
            if path.is_symlink() or not path.is_dir():
                path.unlink()
            else:
                shutil.rmtree(path)
        except OSError as exc:
            raise FilesystemError("remove", path, exc) from exc
        LOGGER.info("removed %s", path)

    def create_file(self, path: Path) -> None:
        try:
            with open(path, "x", encoding="utf-8"):
                pass
        except OSError as exc:
            raise FilesystemError("create file", path, exc) from exc
        LOGGER.info("created file %s", path)

    def create_directory(self, path: Path) -> None:
        try:
            path.mkdir()
        except OSError as exc:
            raise FilesystemError("create directory", path, exc) from exc
        LOGGER.info("created directory %s", path)

    def rename(self, src: Path, dst: Path) -> None:
        try:
            if os.path.lexists(dst):
                raise FileExistsError(errno.EEXIST, "File exists", str(dst))
            os.rename(src, dst)
        except OSError as exc:
            raise FilesystemError("rename", src, exc) from exc
        LOGGER.info("renamed %s -> %s", src, dst)


__all__ = [
    "LocalFilesystem",
]
