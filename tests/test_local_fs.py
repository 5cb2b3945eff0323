"""Tests for the local filesystem collaborator."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path

from walked.errors import FilesystemError
from walked.file_model import EntryKind, LocalFilesystem


class LocalFilesystemTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "dir").mkdir()
        (self.root / "file.txt").write_text("data", encoding="utf-8")
        (self.root / ".hidden").write_text("", encoding="utf-8")
        os.symlink(self.root / "dir", self.root / "link")
        self.fs = LocalFilesystem()

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_list_reports_kinds(self) -> None:
        kinds = {entry.name: entry.kind for entry in self.fs.list(self.root)}
        self.assertEqual(
            kinds,
            {
                "dir": EntryKind.DIRECTORY,
                "file.txt": EntryKind.FILE,
                ".hidden": EntryKind.FILE,
                "link": EntryKind.SYMLINK,
            },
        )

    def test_hidden_entries_can_be_filtered(self) -> None:
        names = [entry.name for entry in LocalFilesystem(show_hidden=False).list(self.root)]
        self.assertNotIn(".hidden", names)

    def test_list_missing_directory_raises(self) -> None:
        with self.assertRaises(FilesystemError) as ctx:
            self.fs.list(self.root / "missing")
        self.assertEqual(ctx.exception.op, "list")
        self.assertIn("missing", ctx.exception.message)

    def test_is_directory_follows_symlinks(self) -> None:
        self.assertTrue(self.fs.is_directory(self.root / "link"))
        self.assertFalse(self.fs.is_directory(self.root / "file.txt"))

    def test_copy_symlink_stays_a_link(self) -> None:
        self.fs.copy_recursive(self.root / "link", self.root / "link2")
        self.assertTrue((self.root / "link2").is_symlink())

    def test_remove_symlink_keeps_target(self) -> None:
        self.fs.remove_recursive(self.root / "link")
        self.assertFalse(self.fs.exists(self.root / "link"))
        self.assertTrue((self.root / "dir").is_dir())

    def test_create_file_refuses_existing(self) -> None:
        with self.assertRaises(FilesystemError):
            self.fs.create_file(self.root / "file.txt")
        self.assertEqual((self.root / "file.txt").read_text(encoding="utf-8"), "data")

    def test_rename_refuses_existing_destination(self) -> None:
        with self.assertRaises(FilesystemError):
            self.fs.rename(self.root / "file.txt", self.root / "dir")
        self.fs.rename(self.root / "file.txt", self.root / "moved.txt")
        self.assertTrue((self.root / "moved.txt").exists())


if __name__ == "__main__":
    unittest.main()
