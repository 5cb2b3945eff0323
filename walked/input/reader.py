"""Low-level terminal input decoding.

Reads raw bytes from the tty and translates them into ``KeyEvent`` values.
Handles ESC-sequence timing, xterm modifier parameters, UTF-8 input, and
the kitty and modifyOtherKeys extended key reports.
"""

from __future__ import annotations

import os
import select

from .keys import KeyEvent, Modifier, SPACE, normalize_key

ESC_SEQUENCE_TIMEOUT_MS = 25
_PENDING_BYTES: list[bytes] = []
_MAX_SEQUENCE_BYTES = 32

_CSI_FINAL_KEYS = {
    b"A": "Up",
    b"B": "Down",
    b"C": "Right",
    b"D": "Left",
    b"H": "Home",
    b"F": "End",
    b"P": "F1",
    b"Q": "F2",
    b"R": "F3",
    b"S": "F4",
}
_CSI_TILDE_KEYS = {
    1: "Home",
    2: "Insert",
    3: "Delete",
    4: "End",
    5: "PageUp",
    6: "PageDown",
    7: "Home",
    8: "End",
    11: "F1",
    12: "F2",
    13: "F3",
    14: "F4",
    15: "F5",
    17: "F6",
    18: "F7",
    19: "F8",
    20: "F9",
    21: "F10",
    23: "F11",
    24: "F12",
}
_CODEPOINT_KEYS = {
    9: "Tab",
    13: "Enter",
    27: "Esc",
    127: "Backspace",
}
_SINGLE_BYTE_KEYS = {
    b"\t": KeyEvent("Tab"),
    b"\r": KeyEvent("Enter"),
    b"\n": KeyEvent("Enter"),
    b"\x7f": KeyEvent("Backspace"),
    b"\x08": KeyEvent("Backspace"),
    b"\x00": KeyEvent(SPACE, Modifier.CONTROL),
    b"\x1c": KeyEvent("\\", Modifier.CONTROL),
    b"\x1d": KeyEvent("]", Modifier.CONTROL),
    b"\x1e": KeyEvent("^", Modifier.CONTROL),
    b"\x1f": KeyEvent("_", Modifier.CONTROL),
}


def _next_byte(fd: int, timeout_ms: int | None) -> bytes | None:
    if _PENDING_BYTES:
        return _PENDING_BYTES.pop(0)
    if timeout_ms is not None:
        ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return None
    ch = os.read(fd, 1)
    if not ch:
        return None
    return ch


def _xterm_modifiers(param: int) -> Modifier:
    """Decode the xterm ``1;<param>`` modifier field (value is mask + 1)."""
    bits = max(0, param - 1)
    modifiers = Modifier.NONE
    if bits & 1:
        modifiers |= Modifier.SHIFT
    if bits & 2:
        modifiers |= Modifier.ALT
    if bits & 4:
        modifiers |= Modifier.CONTROL
    return modifiers


def _utf8_length(lead: int) -> int:
    if lead >= 0xF0:
        return 4
    if lead >= 0xE0:
        return 3
    if lead >= 0xC0:
        return 2
    return 1


def _decode_plain(fd: int, ch: bytes) -> KeyEvent | None:
    """Decode a non-ESC leading byte (control byte or UTF-8 character)."""
    special = _SINGLE_BYTE_KEYS.get(ch)
    if special is not None:
        return special
    value = ch[0]
    if value < 0x20:
        return KeyEvent(chr(value + 0x60), Modifier.CONTROL)
    payload = [ch]
    for _ in range(_utf8_length(value) - 1):
        more = _next_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if more is None:
            break
        if not 0x80 <= more[0] <= 0xBF:
            _PENDING_BYTES.insert(0, more)
            break
        payload.append(more)
    try:
        text = b"".join(payload).decode("utf-8")
    except UnicodeDecodeError:
        # Stray continuation or truncated sequence; not a key.
        return None
    return normalize_key(text, Modifier.NONE)


def _csi_field(field: str) -> int:
    """Parse one ``;`` field, keeping only the first ``:`` sub-parameter."""
    head = field.split(":", 1)[0]
    return int(head) if head else 1


def _codepoint_key(code: int, modifiers: Modifier) -> KeyEvent | None:
    """Map a codepoint from an extended key report onto a ``KeyEvent``."""
    name = _CODEPOINT_KEYS.get(code)
    if name is not None:
        return KeyEvent(name, modifiers)
    if not 0x20 <= code <= 0x10FFFF:
        return None
    ch = chr(code)
    if not ch.isprintable():
        return None
    return normalize_key(ch, modifiers)


def _read_csi(fd: int) -> KeyEvent | None:
    """Decode ``ESC [ params final`` after the ``[`` has been consumed."""
    params = bytearray()
    while True:
        part = _next_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
        if part is None:
            return KeyEvent("Esc")
        if 0x40 <= part[0] <= 0x7E:
            final = part
            break
        params.extend(part)
        if len(params) > _MAX_SEQUENCE_BYTES:
            return KeyEvent("Esc")

    if params.startswith(b"<"):
        # SGR mouse reports are not enabled; drop stray ones.
        return None
    try:
        fields = [_csi_field(field) for field in params.decode("ascii").split(";")] if params else []
    except ValueError:
        return KeyEvent("Esc")
    modifiers = _xterm_modifiers(fields[1]) if len(fields) > 1 else Modifier.NONE

    if final == b"Z":
        return KeyEvent("BackTab")
    if final == b"u" and fields:
        # Kitty keyboard protocol: CSI code ; mods u
        return _codepoint_key(fields[0], modifiers)
    if final == b"~" and len(fields) == 3 and fields[0] == 27:
        # xterm modifyOtherKeys: CSI 27 ; mods ; code ~
        return _codepoint_key(fields[2], modifiers)
    if final == b"~":
        name = _CSI_TILDE_KEYS.get(fields[0] if fields else 0)
        return KeyEvent(name, modifiers) if name is not None else None
    name = _CSI_FINAL_KEYS.get(final)
    if name is None:
        return None
    return KeyEvent(name, modifiers)


def _read_ss3(fd: int) -> KeyEvent:
    """Decode ``ESC O final`` (application cursor keys and F1-F4)."""
    final = _next_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if final is None:
        return KeyEvent("O", Modifier.ALT | Modifier.SHIFT)
    name = _CSI_FINAL_KEYS.get(final)
    if name is None:
        _PENDING_BYTES.insert(0, final)
        return KeyEvent("O", Modifier.ALT | Modifier.SHIFT)
    return KeyEvent(name)


def read_key(fd: int, timeout_ms: int | None = None) -> KeyEvent | None:
    """Read one key press from ``fd``.

    Returns ``None`` when nothing arrives within ``timeout_ms`` or when the
    bytes read do not form a key this decoder understands.
    """
    ch = _next_byte(fd, timeout_ms)
    if ch is None:
        return None
    if ch != b"\x1b":
        return _decode_plain(fd, ch)

    seq = _next_byte(fd, ESC_SEQUENCE_TIMEOUT_MS)
    if seq is None:
        return KeyEvent("Esc")
    if seq == b"[":
        return _read_csi(fd)
    if seq == b"O":
        return _read_ss3(fd)
    if seq == b"\x1b" or (seq[0] < 0x20 and seq not in _SINGLE_BYTE_KEYS):
        _PENDING_BYTES.insert(0, seq)
        return KeyEvent("Esc")
    key = _decode_plain(fd, seq)
    if key is None:
        return KeyEvent("Esc")
    return KeyEvent(key.code, key.modifiers | Modifier.ALT)


__all__ = [
    "ESC_SEQUENCE_TIMEOUT_MS",
    "read_key",
]
