"""Action names, default bindings, and the compiled binding table.

The table is built once at startup from the defaults overridden by
configuration and is read-only afterwards. Lookups are a single dict hit
keyed by ``(ModeClass, Modifier, code)``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum

from ..errors import DuplicateBinding, InvalidBinding, UnknownAction, WalkedError
from .keys import KeyEvent, Modifier, describe_key, parse_binding

LOGGER = logging.getLogger(__name__)


class ModeClass(Enum):
    """Input class of a mode: command dispatch or literal text entry."""

    NORMAL = "normal"
    INSERT = "insert"


class Action(Enum):
    UP = "up"
    DOWN = "down"
    SELECT_UP = "select_up"
    SELECT_DOWN = "select_down"
    DIR_WALK = "dir_walk"
    DIR_UP = "dir_up"
    NEW_FILE = "new_file"
    NEW_DIRECTORY = "new_directory"
    RENAME = "rename"
    DUPLICATE = "duplicate"
    REMOVE = "remove"
    COPY = "copy"
    PASTE = "paste"
    INCREMENTAL_SEARCH = "incremental_search"
    SPLIT_HORIZONTAL = "split_horizontal"
    SPLIT_VERTICAL = "split_vertical"
    CLOSE_PANE = "close_pane"
    FOCUS_LEFT = "focus_left"
    FOCUS_RIGHT = "focus_right"
    FOCUS_UP = "focus_up"
    FOCUS_DOWN = "focus_down"
    QUIT = "quit"
    NORMAL_MODE = "normal_mode"
    CONFIRM = "confirm"
    DELETE_CHAR = "delete_char"
    CURSOR_LEFT = "cursor_left"
    CURSOR_RIGHT = "cursor_right"
    NEXT_SEARCH_RESULT = "next_search_result"
    PREV_SEARCH_RESULT = "prev_search_result"

    @property
    def mode_class(self) -> ModeClass:
        return ModeClass.INSERT if self in INSERT_CLASS_ACTIONS else ModeClass.NORMAL


INSERT_CLASS_ACTIONS: frozenset[Action] = frozenset(
    {
        Action.NORMAL_MODE,
        Action.CONFIRM,
        Action.DELETE_CHAR,
        Action.CURSOR_LEFT,
        Action.CURSOR_RIGHT,
        Action.NEXT_SEARCH_RESULT,
        Action.PREV_SEARCH_RESULT,
    }
)

DEFAULT_BINDINGS: dict[Action, str] = {
    Action.UP: "k",
    Action.DOWN: "j",
    Action.SELECT_UP: "K",
    Action.SELECT_DOWN: "J",
    Action.DIR_WALK: " ",
    Action.DIR_UP: "x",
    Action.NEW_FILE: "C-n",
    Action.NEW_DIRECTORY: "C-a",
    Action.RENAME: "i",
    Action.DUPLICATE: "C-d",
    Action.REMOVE: "C-x",
    Action.COPY: "C-y",
    Action.PASTE: "C-p",
    Action.INCREMENTAL_SEARCH: "/",
    Action.SPLIT_HORIZONTAL: "s",
    Action.SPLIT_VERTICAL: "v",
    Action.CLOSE_PANE: "c",
    Action.FOCUS_LEFT: "Left",
    Action.FOCUS_RIGHT: "Right",
    Action.FOCUS_UP: "Up",
    Action.FOCUS_DOWN: "Down",
    Action.QUIT: "q",
    Action.NORMAL_MODE: "Esc",
    Action.CONFIRM: "Enter",
    Action.DELETE_CHAR: "Backspace",
    Action.CURSOR_LEFT: "Left",
    Action.CURSOR_RIGHT: "Right",
    Action.NEXT_SEARCH_RESULT: "C-n",
    Action.PREV_SEARCH_RESULT: "C-p",
}

ACTION_NAMES: frozenset[str] = frozenset(action.value for action in Action)


def collapse_legacy_key(key: KeyEvent) -> KeyEvent:
    """Fold Control+Shift onto plain Control for legacy terminal input.

    Without extended key metadata the terminal sends the same byte for both,
    so the binding degrades instead of becoming unreachable.
    """
    if not (key.modifiers & Modifier.CONTROL and key.modifiers & Modifier.SHIFT):
        return key
    code = key.code.lower() if len(key.code) == 1 else key.code
    return KeyEvent(code, key.modifiers & ~Modifier.SHIFT)


@dataclass(frozen=True)
class BindingTable:
    """Immutable ``(ModeClass, modifiers, code) -> Action`` lookup."""

    entries: Mapping[tuple[ModeClass, Modifier, str], Action]
    specs: Mapping[Action, str] = field(default_factory=dict)

    def lookup(self, mode_class: ModeClass, key: KeyEvent) -> Action | None:
        return self.entries.get((mode_class, key.modifiers, key.code))

    def key_for(self, action: Action) -> KeyEvent | None:
        """Return the key currently resolving to ``action``, if any."""
        for (_mode_class, modifiers, code), bound in self.entries.items():
            if bound is action:
                return KeyEvent(code, modifiers)
        return None


def build_binding_table(
    overrides: Mapping[str, object] | None = None,
    *,
    extended_keys: bool = False,
) -> tuple[BindingTable, list[WalkedError]]:
    """Compile defaults plus configured overrides into a ``BindingTable``.

    Returns the table together with every problem found. Invalid specs keep
    the action's default. Configured actions are registered first in config
    order, so when two of them collide the first keeps the key and a
    ``DuplicateBinding`` is reported; defaults never displace a configured
    binding.
    """
    problems: list[WalkedError] = []
    specs: dict[Action, str] = dict(DEFAULT_BINDINGS)
    configured: list[Action] = []

    for name, raw_spec in (overrides or {}).items():
        if name not in ACTION_NAMES:
            problems.append(UnknownAction(name))
            continue
        action = Action(name)
        try:
            parse_binding(raw_spec)  # type: ignore[arg-type]
        except InvalidBinding as exc:
            problems.append(exc)
            continue
        specs[action] = str(raw_spec)
        if action not in configured:
            configured.append(action)

    entries: dict[tuple[ModeClass, Modifier, str], Action] = {}
    order = configured + [action for action in Action if action not in configured]
    for action in order:
        key = parse_binding(specs[action])
        if not extended_keys:
            key = collapse_legacy_key(key)
        slot = (action.mode_class, key.modifiers, key.code)
        holder = entries.get(slot)
        if holder is None:
            entries[slot] = action
            continue
        if action in configured:
            problems.append(DuplicateBinding(describe_key(key), holder.value, action.value))
        else:
            LOGGER.debug("default %s for %s shadowed by %s", describe_key(key), action.value, holder.value)

    for problem in problems:
        LOGGER.warning("%s", problem.message)
    return BindingTable(entries=entries, specs=specs), problems


__all__ = [
    "ModeClass",
    "Action",
    "INSERT_CLASS_ACTIONS",
    "DEFAULT_BINDINGS",
    "ACTION_NAMES",
    "BindingTable",
    "collapse_legacy_key",
    "build_binding_table",
]
