"""Tests for the split tree, active-pane locator, and directional focus."""

from __future__ import annotations

import unittest
from pathlib import Path

from walked.errors import CannotCloseLastPane
from walked.pane import Direction, LayoutManager, Leaf, Orientation, Pane, Rect, Split


def _pane(pane_id: int) -> Pane:
    return Pane(id=pane_id, current_directory=Path("/srv"))


def _ids(layout: LayoutManager) -> list[int]:
    return [pane.id for pane in layout.panes()]


class LayoutManagerTests(unittest.TestCase):
    def _three_pane_layout(self) -> LayoutManager:
        # | 1 | 2 |
        # |   | 3 |
        layout = LayoutManager(Leaf(_pane(1)))
        layout.split(Orientation.HORIZONTAL, _pane(2))
        layout.split(Orientation.VERTICAL, _pane(3))
        return layout

    def test_split_activates_new_pane(self) -> None:
        layout = LayoutManager(Leaf(_pane(1)))
        layout.split(Orientation.HORIZONTAL, _pane(2))
        self.assertEqual(_ids(layout), [1, 2])
        self.assertEqual(layout.active, (1,))
        self.assertEqual(layout.active_pane.id, 2)

    def test_horizontal_split_places_children_side_by_side(self) -> None:
        layout = LayoutManager(Leaf(_pane(1)))
        layout.split(Orientation.HORIZONTAL, _pane(2))
        rects = [rect for _locator, _pane_obj, rect in layout.leaf_rects()]
        self.assertEqual(rects, [Rect(0.0, 0.0, 0.5, 1.0), Rect(0.5, 0.0, 0.5, 1.0)])

    def test_vertical_split_stacks_children(self) -> None:
        layout = LayoutManager(Leaf(_pane(1)))
        layout.split(Orientation.VERTICAL, _pane(2))
        rects = [rect for _locator, _pane_obj, rect in layout.leaf_rects()]
        self.assertEqual(rects, [Rect(0.0, 0.0, 1.0, 0.5), Rect(0.0, 0.5, 1.0, 0.5)])

    def test_closing_the_last_pane_is_rejected(self) -> None:
        pane = _pane(1)
        layout = LayoutManager(Leaf(pane))
        with self.assertRaises(CannotCloseLastPane):
            layout.close_active()
        self.assertEqual(layout.root, Leaf(pane))
        self.assertEqual(layout.active, ())

    def test_close_collapses_single_child_split(self) -> None:
        layout = self._three_pane_layout()
        layout.focus_pane(2)
        closed = layout.close_active()
        self.assertEqual(closed.id, 2)
        self.assertEqual(_ids(layout), [1, 3])
        self.assertIsInstance(layout.root, Split)
        self.assertIsInstance(layout.root.children[1], Leaf)
        self.assertEqual(layout.active_pane.id, 3)

    def test_close_back_to_single_leaf(self) -> None:
        layout = LayoutManager(Leaf(_pane(1)))
        layout.split(Orientation.VERTICAL, _pane(2))
        layout.close_active()
        self.assertIsInstance(layout.root, Leaf)
        self.assertEqual(layout.active, ())
        self.assertEqual(layout.active_pane.id, 1)

    def test_move_focus_follows_geometry(self) -> None:
        layout = self._three_pane_layout()
        self.assertEqual(layout.active_pane.id, 3)
        self.assertTrue(layout.move_focus(Direction.UP))
        self.assertEqual(layout.active_pane.id, 2)
        self.assertFalse(layout.move_focus(Direction.UP))
        self.assertTrue(layout.move_focus(Direction.LEFT))
        self.assertEqual(layout.active_pane.id, 1)
        self.assertFalse(layout.move_focus(Direction.LEFT))
        self.assertTrue(layout.move_focus(Direction.RIGHT))
        self.assertEqual(layout.active_pane.id, 2)
        self.assertTrue(layout.move_focus(Direction.DOWN))
        self.assertEqual(layout.active_pane.id, 3)
        self.assertFalse(layout.move_focus(Direction.DOWN))

    def test_stale_locator_falls_back_to_a_leaf(self) -> None:
        root = Split(Orientation.HORIZONTAL, [Leaf(_pane(1)), Leaf(_pane(2))])
        layout = LayoutManager(root, active=(7, 3))
        self.assertEqual(layout.active, (0,))
        layout = LayoutManager(root, active=())
        self.assertEqual(layout.active, (0,))

    def test_focus_pane_by_id(self) -> None:
        layout = self._three_pane_layout()
        self.assertTrue(layout.focus_pane(1))
        self.assertEqual(layout.active, (0,))
        self.assertFalse(layout.focus_pane(42))
        self.assertEqual(layout.active, (0,))

    def test_split_requires_two_children(self) -> None:
        with self.assertRaises(ValueError):
            Split(Orientation.HORIZONTAL, [Leaf(_pane(1))])


if __name__ == "__main__":
    unittest.main()
