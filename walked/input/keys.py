"""Key events and binding-spec parsing.

A binding spec is ``[modifiers]-base``: zero or more of ``C``/``S``/``A``
(any case, any order) before a dash, then the key. A spec without a dash
is a bare key. Literal characters are case-sensitive and an uppercase
letter implies Shift. Special keys use fixed names such as ``Enter`` or
``PageUp``; function keys are ``F1``..``F24``; a single space is the
Space key.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntFlag

from ..errors import InvalidBinding


class Modifier(IntFlag):
    NONE = 0
    SHIFT = 1
    CONTROL = 2
    ALT = 4


SPECIAL_KEYS: frozenset[str] = frozenset(
    {
        "Backspace",
        "Enter",
        "Left",
        "Right",
        "Up",
        "Down",
        "Home",
        "End",
        "PageUp",
        "PageDown",
        "Tab",
        "BackTab",
        "Delete",
        "Insert",
        "Esc",
    }
)
SPACE = " "
MAX_FUNCTION_KEY = 24

_MODIFIER_LETTERS = {"C": Modifier.CONTROL, "S": Modifier.SHIFT, "A": Modifier.ALT}
_FUNCTION_KEY_RE = re.compile(r"F([1-9][0-9]?)")


@dataclass(frozen=True)
class KeyEvent:
    """One decoded key press: a key code plus modifier mask.

    ``code`` is either a single character or one of the special/function
    key names, so the pair is directly usable as a lookup key.
    """

    code: str
    modifiers: Modifier = Modifier.NONE

    @property
    def is_printable(self) -> bool:
        return (
            len(self.code) == 1
            and self.code.isprintable()
            and not self.modifiers & (Modifier.CONTROL | Modifier.ALT)
        )


def is_function_key(code: str) -> bool:
    match = _FUNCTION_KEY_RE.fullmatch(code)
    return match is not None and 1 <= int(match.group(1)) <= MAX_FUNCTION_KEY


def normalize_key(code: str, modifiers: Modifier) -> KeyEvent:
    """Fold equivalent spellings onto one canonical ``KeyEvent``.

    Uppercase letters always carry Shift, and Shift on a lowercase letter
    upgrades it to uppercase, matching what a terminal reports.
    """
    if len(code) == 1 and code.isalpha():
        if code.isupper():
            modifiers |= Modifier.SHIFT
        elif modifiers & Modifier.SHIFT and len(code.upper()) == 1:
            code = code.upper()
    return KeyEvent(code, Modifier(modifiers))


def parse_binding(spec: str) -> KeyEvent:
    """Parse one binding spec into a canonical ``KeyEvent``.

    Raises ``InvalidBinding`` for unknown modifier letters, an empty base, or
    a base that is neither a literal character nor a known key name.
    """
    if not isinstance(spec, str):
        raise InvalidBinding(repr(spec), "binding must be a string")
    dash = spec.find("-")
    if dash < 0:
        prefix, base = "", spec
    else:
        prefix, base = spec[:dash], spec[dash + 1 :]

    modifiers = Modifier.NONE
    for letter in prefix:
        flag = _MODIFIER_LETTERS.get(letter.upper())
        if flag is None:
            raise InvalidBinding(spec, f"unknown modifier {letter!r}")
        modifiers |= flag

    if not base:
        raise InvalidBinding(spec, "missing key")
    if len(base) == 1:
        return normalize_key(base, modifiers)
    if base in SPECIAL_KEYS or is_function_key(base):
        return KeyEvent(base, modifiers)
    raise InvalidBinding(spec, f"unknown key {base!r}")


def format_binding(key: KeyEvent) -> str:
    """Format ``key`` back into a spec string that parses to the same key."""
    prefix = ""
    if key.modifiers & Modifier.CONTROL:
        prefix += "C"
    if key.modifiers & Modifier.SHIFT:
        prefix += "S"
    if key.modifiers & Modifier.ALT:
        prefix += "A"
    return f"{prefix}-{key.code}"


def describe_key(key: KeyEvent) -> str:
    """Human-readable label used in status and warning messages."""
    parts = []
    if key.modifiers & Modifier.CONTROL:
        parts.append("Ctrl")
    if key.modifiers & Modifier.ALT:
        parts.append("Alt")
    if key.modifiers & Modifier.SHIFT and not (len(key.code) == 1 and key.code.isalpha()):
        parts.append("Shift")
    parts.append("Space" if key.code == SPACE else key.code)
    return "+".join(parts)


__all__ = [
    "Modifier",
    "KeyEvent",
    "SPECIAL_KEYS",
    "SPACE",
    "is_function_key",
    "normalize_key",
    "parse_binding",
    "format_binding",
    "describe_key",
]
