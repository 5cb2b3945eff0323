"""Pane package: per-directory views, incremental search, and split layout."""

from .layout import Direction, LayoutManager, Leaf, Orientation, Rect, Split, iter_leaves
from .pane import Pane
from .search import SearchState

__all__ = [
    "Pane",
    "SearchState",
    "LayoutManager",
    "Leaf",
    "Split",
    "Orientation",
    "Direction",
    "Rect",
    "iter_leaves",
]
