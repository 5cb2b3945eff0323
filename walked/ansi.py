"""ANSI-aware text measurement and line shaping utilities.

Provides width measurement, clipping, and padding that skip escape
sequences and count wide characters as two columns, so pane columns stay
aligned when names contain color codes or East Asian text.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
TAB_STOP = 8

RESET = "\x1b[0m"
REVERSE = "\x1b[7m"
BOLD = "\x1b[1m"
DIM = "\x1b[2m"
SELECTED = "\x1b[30;43m"
MATCH = "\x1b[4m"
ERROR = "\x1b[31m"


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Return the number of terminal columns ``text`` occupies."""
    col = 0
    i = 0
    while i < len(text):
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                i = match.end()
                continue
        col += char_display_width(text[i], col)
        i += 1
    return col


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are preserved verbatim and do not count toward width.
    Control characters are shown as ``?`` so file names cannot move the cursor.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n and col < max_cols:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        ch = text[i]
        if ch == "\t":
            w = char_display_width(ch, col)
            if col + w > max_cols:
                break
            out.append(" " * w)
            col += w
            i += 1
            continue
        if not ch.isprintable():
            ch = "?"
        w = char_display_width(ch, col)
        if col + w > max_cols:
            break
        out.append(ch)
        col += w
        i += 1

    return "".join(out)


def fit_ansi_line(text: str, width: int) -> str:
    """Clip ``text`` to ``width`` columns and pad the rest with spaces."""
    clipped = clip_ansi_line(text, width)
    return clipped + " " * max(0, width - display_width(clipped))
