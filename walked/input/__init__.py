"""Input-layer public API for key decoding, binding specs, and dispatch.

Exports are split between low-level terminal decoding (`read_key`), the
binding-spec grammar, and the compiled binding table used by the session.
"""

from .bindings import (
    ACTION_NAMES,
    DEFAULT_BINDINGS,
    Action,
    BindingTable,
    ModeClass,
    build_binding_table,
    collapse_legacy_key,
)
from .key_registry import ActionBinding, ActionRegistry
from .keys import KeyEvent, Modifier, describe_key, format_binding, normalize_key, parse_binding
from .reader import ESC_SEQUENCE_TIMEOUT_MS, _PENDING_BYTES, read_key

__all__ = [
    "read_key",
    "_PENDING_BYTES",
    "ESC_SEQUENCE_TIMEOUT_MS",
    "KeyEvent",
    "Modifier",
    "parse_binding",
    "format_binding",
    "describe_key",
    "normalize_key",
    "Action",
    "ModeClass",
    "BindingTable",
    "DEFAULT_BINDINGS",
    "ACTION_NAMES",
    "build_binding_table",
    "collapse_legacy_key",
    "ActionBinding",
    "ActionRegistry",
]
