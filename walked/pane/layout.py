"""Split-tree layout of panes and the active-pane locator.

The tree is owned recursive data: ``Leaf`` wraps one pane, ``Split`` holds
two or more children laid out along one axis. The active pane is addressed
by a path of child indices from the root rather than a back-reference, and
the path is re-validated after every structural edit.

Geometry is computed top-down in the unit square; the renderer scales the
same rectangles to terminal cells.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field
from enum import Enum

from ..errors import CannotCloseLastPane
from .pane import Pane

EPSILON = 1e-9


class Orientation(Enum):
    HORIZONTAL = "horizontal"  # children side by side
    VERTICAL = "vertical"  # children stacked


class Direction(Enum):
    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"


@dataclass
class Leaf:
    pane: Pane


@dataclass
class Split:
    orientation: Orientation
    children: list[LayoutNode]
    ratio: float = 0.5

    def __post_init__(self) -> None:
        if len(self.children) < 2:
            raise ValueError("a split needs at least two children")
        if not 0.0 < self.ratio < 1.0:
            raise ValueError("split ratio must be inside (0, 1)")


LayoutNode = Leaf | Split
Locator = tuple[int, ...]


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


UNIT_RECT = Rect(0.0, 0.0, 1.0, 1.0)


def child_rects(split: Split, rect: Rect) -> list[Rect]:
    """Divide ``rect`` among ``split``'s children.

    The first child takes ``ratio`` of the axis; the rest share the remainder.
    """
    count = len(split.children)
    shares = [split.ratio] + [(1.0 - split.ratio) / (count - 1)] * (count - 1)
    rects: list[Rect] = []
    offset = 0.0
    for share in shares:
        if split.orientation is Orientation.HORIZONTAL:
            rects.append(Rect(rect.x + rect.width * offset, rect.y, rect.width * share, rect.height))
        else:
            rects.append(Rect(rect.x, rect.y + rect.height * offset, rect.width, rect.height * share))
        offset += share
    return rects


def iter_leaves(node: LayoutNode, rect: Rect = UNIT_RECT, locator: Locator = ()) -> Iterator[tuple[Locator, Pane, Rect]]:
    """Yield ``(locator, pane, rect)`` for every leaf in layout order."""
    if isinstance(node, Leaf):
        yield locator, node.pane, rect
        return
    for idx, (child, child_rect) in enumerate(zip(node.children, child_rects(node, rect))):
        yield from iter_leaves(child, child_rect, locator + (idx,))


def node_at(root: LayoutNode, locator: Locator) -> LayoutNode:
    node = root
    for idx in locator:
        if not isinstance(node, Split) or not 0 <= idx < len(node.children):
            raise LookupError(f"locator {locator} does not address a node")
        node = node.children[idx]
    return node


def _overlap(a_start: float, a_end: float, b_start: float, b_end: float) -> float:
    return min(a_end, b_end) - max(a_start, b_start)


@dataclass
class LayoutManager:
    """Owns the split tree and the active-pane locator."""

    root: LayoutNode
    active: Locator = field(default=())

    def __post_init__(self) -> None:
        self._validate_active()

    def _validate_active(self) -> None:
        try:
            node = node_at(self.root, self.active)
        except LookupError:
            node = None
        if isinstance(node, Leaf):
            return
        # Fall back to the first leaf at or below the deepest valid prefix.
        prefix: Locator = ()
        for idx in self.active:
            candidate = prefix + (idx,)
            try:
                node_at(self.root, candidate)
            except LookupError:
                break
            prefix = candidate
        subtree = node_at(self.root, prefix)
        first_locator, _pane, _rect = next(iter_leaves(subtree))
        self.active = prefix + first_locator

    @property
    def active_pane(self) -> Pane:
        node = node_at(self.root, self.active)
        assert isinstance(node, Leaf)
        return node.pane

    def panes(self) -> list[Pane]:
        return [pane for _locator, pane, _rect in iter_leaves(self.root)]

    def leaf_rects(self, area: Rect = UNIT_RECT) -> list[tuple[Locator, Pane, Rect]]:
        return list(iter_leaves(self.root, area))

    def pane_count(self) -> int:
        return sum(1 for _ in iter_leaves(self.root))

    def focus_pane(self, pane_id: int) -> bool:
        for locator, pane, _rect in iter_leaves(self.root):
            if pane.id == pane_id:
                self.active = locator
                return True
        return False

    def _replace(self, locator: Locator, node: LayoutNode) -> None:
        if not locator:
            self.root = node
            return
        parent = node_at(self.root, locator[:-1])
        assert isinstance(parent, Split)
        parent.children[locator[-1]] = node

    def split(self, orientation: Orientation, new_pane: Pane) -> Pane:
        """Replace the active leaf with a split of it and ``new_pane``.

        The new pane becomes active.
        """
        current = node_at(self.root, self.active)
        self._replace(self.active, Split(orientation=orientation, children=[current, Leaf(new_pane)], ratio=0.5))
        self.active = self.active + (1,)
        self._validate_active()
        return new_pane

    def close_active(self) -> Pane:
        """Remove the active leaf, collapsing single-child splits upward.

        Raises ``CannotCloseLastPane`` without touching the tree when the
        active pane is the only one.
        """
        if not self.active:
            raise CannotCloseLastPane()
        closed = self.active_pane
        parent_locator = self.active[:-1]
        removed_idx = self.active[-1]
        parent = node_at(self.root, parent_locator)
        assert isinstance(parent, Split)
        del parent.children[removed_idx]

        if len(parent.children) == 1:
            self._replace(parent_locator, parent.children[0])
            self.active = parent_locator
        else:
            self.active = parent_locator + (min(removed_idx, len(parent.children) - 1),)
        self._validate_active()
        return closed

    def move_focus(self, direction: Direction, area: Rect = UNIT_RECT) -> bool:
        """Focus the nearest pane in ``direction`` from the active pane.

        Candidates must lie entirely on that side and overlap the active pane
        on the perpendicular axis. Ties prefer the largest overlap, then the
        first in layout order. Returns ``False`` when there is none.
        """
        leaves = self.leaf_rects(area)
        current = next(rect for locator, _pane, rect in leaves if locator == self.active)
        best: tuple[float, float] | None = None
        best_locator: Locator | None = None
        for locator, _pane, rect in leaves:
            if locator == self.active:
                continue
            if direction is Direction.RIGHT:
                distance = rect.x - current.right
                overlap = _overlap(rect.y, rect.bottom, current.y, current.bottom)
            elif direction is Direction.LEFT:
                distance = current.x - rect.right
                overlap = _overlap(rect.y, rect.bottom, current.y, current.bottom)
            elif direction is Direction.DOWN:
                distance = rect.y - current.bottom
                overlap = _overlap(rect.x, rect.right, current.x, current.right)
            else:
                distance = current.y - rect.bottom
                overlap = _overlap(rect.x, rect.right, current.x, current.right)
            if distance < -EPSILON or overlap <= EPSILON:
                continue
            score = (distance, -overlap)
            if best is None or score < best:
                best = score
                best_locator = locator
        if best_locator is None:
            return False
        self.active = best_locator
        return True


__all__ = [
    "Orientation",
    "Direction",
    "Leaf",
    "Split",
    "LayoutNode",
    "Locator",
    "Rect",
    "UNIT_RECT",
    "child_rects",
    "iter_leaves",
    "node_at",
    "LayoutManager",
]
