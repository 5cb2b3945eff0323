"""Tests for bulk file operations driven by selection and clipboard."""

from __future__ import annotations

import errno
import tempfile
import unittest
from pathlib import Path

from walked.errors import EmptyName, FilesystemError, InvalidName, NameCollision
from walked.file_model import LocalFilesystem
from walked.operations import Clipboard, OperationEngine
from walked.operations.engine import available_path, validate_name
from walked.pane import Pane


class FlakyFilesystem(LocalFilesystem):
    """Local filesystem that fails chosen paths with a permission error."""

    def __init__(self, fail_remove: set[Path] | None = None, fail_copy: set[Path] | None = None) -> None:
        super().__init__(show_hidden=True)
        self.fail_remove = set(fail_remove or ())
        self.fail_copy = set(fail_copy or ())
        self.remove_calls: list[Path] = []

    def remove_recursive(self, path: Path) -> None:
        self.remove_calls.append(path)
        if path in self.fail_remove:
            raise FilesystemError("remove", path, PermissionError(errno.EACCES, "Permission denied"))
        super().remove_recursive(path)

    def copy_recursive(self, src: Path, dst: Path) -> None:
        if src in self.fail_copy:
            raise FilesystemError("copy", src, PermissionError(errno.EACCES, "Permission denied"))
        super().copy_recursive(src, dst)


def _names(pane: Pane) -> list[str]:
    return [entry.name for entry in pane.listing]


class OperationEngineTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        self.src = self.root / "src"
        self.dst = self.root / "dst"
        self.src.mkdir()
        self.dst.mkdir()
        for name in ("a.txt", "b.txt", "c.txt"):
            (self.src / name).write_text(name, encoding="utf-8")
        self.fs = LocalFilesystem()
        self.clipboard = Clipboard()
        self.engine = OperationEngine(self.fs, self.clipboard)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _select_all(self, pane: Pane) -> None:
        pane.selection = {entry.path for entry in pane.listing}

    def test_duplicate_cursor_entry_appends_suffix(self) -> None:
        pane = Pane.open(self.fs, self.src)
        report = self.engine.duplicate(pane)
        self.assertTrue(report.ok)
        self.assertEqual(report.completed, [self.src / "a.txt.1"])
        self.assertEqual((self.src / "a.txt.1").read_text(encoding="utf-8"), "a.txt")
        self.assertEqual(_names(pane), ["a.txt", "a.txt.1", "b.txt", "c.txt"])
        self.assertEqual(pane.current_entry().name, "a.txt")

    def test_duplicate_twice_picks_next_free_suffix(self) -> None:
        pane = Pane.open(self.fs, self.src)
        self.engine.duplicate(pane)
        report = self.engine.duplicate(pane)
        self.assertEqual(report.completed, [self.src / "a.txt.2"])

    def test_duplicate_directory_recursively(self) -> None:
        nested = self.src / "nested"
        nested.mkdir()
        (nested / "inner.txt").write_text("inner", encoding="utf-8")
        pane = Pane.open(self.fs, self.src)
        self.assertEqual(pane.current_entry().name, "nested")
        self.engine.duplicate(pane)
        self.assertEqual((self.src / "nested.1" / "inner.txt").read_text(encoding="utf-8"), "inner")

    def test_copy_touches_only_the_clipboard(self) -> None:
        pane = Pane.open(self.fs, self.src)
        pane.selection = {self.src / "c.txt", self.src / "a.txt"}
        report = self.engine.copy(pane)
        self.assertEqual(self.clipboard.entries, (self.src / "a.txt", self.src / "c.txt"))
        self.assertEqual(report.completed, [self.src / "a.txt", self.src / "c.txt"])
        self.assertEqual(_names(pane), ["a.txt", "b.txt", "c.txt"])

    def test_paste_keeps_clipboard_for_repeated_paste(self) -> None:
        source = Pane.open(self.fs, self.src)
        self._select_all(source)
        self.engine.copy(source)
        target = Pane.open(self.fs, self.dst)

        first = self.engine.paste(target)
        self.assertTrue(first.ok)
        self.assertEqual(_names(target), ["a.txt", "b.txt", "c.txt"])
        self.assertEqual(len(self.clipboard.entries), 3)

        second = self.engine.paste(target)
        self.assertEqual(
            second.completed,
            [self.dst / "a.txt.1", self.dst / "b.txt.1", self.dst / "c.txt.1"],
        )
        self.assertEqual(len(self.clipboard.entries), 3)
        self.assertEqual((self.src / "b.txt").read_text(encoding="utf-8"), "b.txt")

    def test_paste_skips_vanished_paths(self) -> None:
        source = Pane.open(self.fs, self.src)
        self._select_all(source)
        self.engine.copy(source)
        (self.src / "b.txt").unlink()
        target = Pane.open(self.fs, self.dst)
        report = self.engine.paste(target)
        self.assertEqual(report.skipped, [self.src / "b.txt"])
        self.assertEqual(_names(target), ["a.txt", "c.txt"])
        self.assertEqual(report.summary(), "paste: 2 entries, 1 failed")

    def test_paste_directory_into_itself_is_rejected(self) -> None:
        root_pane = Pane.open(self.fs, self.root)
        root_pane.cursor_index = _names(root_pane).index("src")
        self.engine.copy(root_pane)
        inside = Pane.open(self.fs, self.src)
        report = self.engine.paste(inside)
        self.assertEqual(len(report.failures), 1)
        self.assertFalse((self.src / "src").exists())

    def test_remove_continues_past_a_failure(self) -> None:
        flaky = FlakyFilesystem(fail_remove={self.src / "b.txt"})
        engine = OperationEngine(flaky, self.clipboard)
        pane = Pane.open(flaky, self.src)
        self._select_all(pane)

        report = engine.remove(pane)

        self.assertEqual(flaky.remove_calls, [self.src / "a.txt", self.src / "b.txt", self.src / "c.txt"])
        self.assertEqual(len(report.failures), 1)
        self.assertIsInstance(report.failures[0], FilesystemError)
        self.assertEqual(report.completed, [self.src / "a.txt", self.src / "c.txt"])
        self.assertEqual(_names(pane), ["b.txt"])
        self.assertEqual(pane.selection, {self.src / "b.txt"})
        self.assertEqual(report.summary(), "remove: 2 entries, 1 failed")

    def test_remove_directory_recursively(self) -> None:
        (self.src / "deep" / "er").mkdir(parents=True)
        (self.src / "deep" / "er" / "x").write_text("x", encoding="utf-8")
        pane = Pane.open(self.fs, self.src)
        report = self.engine.remove(pane)
        self.assertTrue(report.ok)
        self.assertFalse((self.src / "deep").exists())

    def test_failed_copy_is_reported(self) -> None:
        flaky = FlakyFilesystem(fail_copy={self.src / "a.txt"})
        engine = OperationEngine(flaky, self.clipboard)
        pane = Pane.open(flaky, self.src)
        report = engine.duplicate(pane)
        self.assertEqual(len(report.failures), 1)
        self.assertIn("Permission denied", report.messages()[0])

    def test_create_file_and_directory_focus_the_new_entry(self) -> None:
        pane = Pane.open(self.fs, self.src)
        self.engine.create_file(pane, "new.txt")
        self.assertTrue((self.src / "new.txt").is_file())
        self.assertEqual(pane.current_entry().name, "new.txt")
        self.engine.create_directory(pane, "folder")
        self.assertTrue((self.src / "folder").is_dir())
        self.assertEqual(pane.current_entry().name, "folder")

    def test_create_rejects_existing_names(self) -> None:
        pane = Pane.open(self.fs, self.src)
        with self.assertRaises(NameCollision):
            self.engine.create_file(pane, "a.txt")
        with self.assertRaises(NameCollision):
            self.engine.create_directory(pane, "b.txt")

    def test_create_rejects_bad_names(self) -> None:
        pane = Pane.open(self.fs, self.src)
        with self.assertRaises(EmptyName):
            self.engine.create_file(pane, "")
        with self.assertRaises(InvalidName):
            self.engine.create_directory(pane, "a/b")

    def test_rename_moves_cursor_and_selection(self) -> None:
        pane = Pane.open(self.fs, self.src)
        pane.cursor_index = 1
        pane.selection = {self.src / "b.txt"}
        destination = self.engine.rename(pane, "z.txt")
        self.assertEqual(destination, self.src / "z.txt")
        self.assertEqual(_names(pane), ["a.txt", "c.txt", "z.txt"])
        self.assertEqual(pane.current_entry().name, "z.txt")
        self.assertEqual(pane.selection, {self.src / "z.txt"})

    def test_rename_to_own_name_is_a_no_op(self) -> None:
        pane = Pane.open(self.fs, self.src)
        self.assertEqual(self.engine.rename(pane, "a.txt"), self.src / "a.txt")
        self.assertEqual(_names(pane), ["a.txt", "b.txt", "c.txt"])

    def test_rename_onto_sibling_is_a_collision(self) -> None:
        pane = Pane.open(self.fs, self.src)
        with self.assertRaises(NameCollision):
            self.engine.rename(pane, "b.txt")
        self.assertTrue((self.src / "a.txt").exists())

    def test_operations_on_empty_pane_do_nothing(self) -> None:
        pane = Pane.open(self.fs, self.dst)
        self.assertEqual(self.engine.remove(pane).completed, [])
        self.assertEqual(self.engine.duplicate(pane).completed, [])
        self.assertIsNone(self.engine.rename(pane, "x"))
        self.engine.copy(pane)
        self.assertTrue(self.clipboard.is_empty())


class NameHelperTests(unittest.TestCase):
    def test_validate_name(self) -> None:
        self.assertEqual(validate_name("report.txt"), "report.txt")
        for bad in (".", "..", "a\\b", "what?", 'q"t', "p|q"):
            with self.subTest(name=bad):
                with self.assertRaises(InvalidName):
                    validate_name(bad)

    def test_available_path_counts_up(self) -> None:
        taken = {Path("/d/f"), Path("/d/f.1")}
        self.assertEqual(available_path(Path("/d/g"), taken.__contains__), Path("/d/g"))
        self.assertEqual(available_path(Path("/d/f"), taken.__contains__), Path("/d/f.2"))

    def test_clipboard_dedupes_in_order(self) -> None:
        clipboard = Clipboard()
        clipboard.set_copy([Path("/b"), Path("/a"), Path("/b")])
        self.assertEqual(clipboard.entries, (Path("/b"), Path("/a")))
        clipboard.clear()
        self.assertTrue(clipboard.is_empty())


if __name__ == "__main__":
    unittest.main()
