"""Incremental name search over a pane's listing.

Matches are listing indices whose entry name contains the query as a
case-insensitive substring. The search state exists only while the session
is in search mode and is dropped on exit; the cursor stays where it was.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .pane import Pane


@dataclass
class SearchState:
    query: str = ""
    matches: list[int] = field(default_factory=list)
    match_cursor: int = 0

    def current_match(self) -> int | None:
        if not self.matches:
            return None
        return self.matches[self.match_cursor]


def matching_indices(names: list[str], query: str) -> list[int]:
    """Return indices of ``names`` containing ``query`` (case-insensitive)."""
    folded = query.casefold()
    return [idx for idx, name in enumerate(names) if folded in name.casefold()]


def first_match_at_or_after(matches: list[int], index: int) -> int:
    """Position in ``matches`` of the first index ``>= index``, wrapping to 0."""
    for position, match in enumerate(matches):
        if match >= index:
            return position
    return 0


def _recompute(pane: Pane, state: SearchState) -> None:
    state.matches = matching_indices([entry.name for entry in pane.listing], state.query)
    state.match_cursor = first_match_at_or_after(state.matches, pane.cursor_index)
    current = state.current_match()
    if current is not None:
        pane.cursor_index = current


def begin_search(pane: Pane) -> SearchState:
    """Attach a fresh search state whose matches cover the whole listing."""
    state = SearchState()
    pane.search = state
    _recompute(pane, state)
    return state


def set_query(pane: Pane, query: str) -> SearchState:
    """Replace the query and recompute matches relative to the cursor."""
    state = pane.search if pane.search is not None else begin_search(pane)
    state.query = query
    _recompute(pane, state)
    return state


def extend_query(pane: Pane, text: str) -> SearchState:
    query = pane.search.query if pane.search is not None else ""
    return set_query(pane, query + text)


def shrink_query(pane: Pane) -> SearchState:
    query = pane.search.query if pane.search is not None else ""
    return set_query(pane, query[:-1])


def step_match(pane: Pane, delta: int) -> int | None:
    """Move the match cursor by ``delta`` with wraparound and follow it."""
    state = pane.search
    if state is None or not state.matches:
        return None
    state.match_cursor = (state.match_cursor + delta) % len(state.matches)
    pane.cursor_index = state.matches[state.match_cursor]
    return pane.cursor_index


def end_search(pane: Pane) -> None:
    pane.search = None


__all__ = [
    "SearchState",
    "matching_indices",
    "first_match_at_or_after",
    "begin_search",
    "set_query",
    "extend_query",
    "shrink_query",
    "step_match",
    "end_search",
]
