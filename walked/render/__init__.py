"""Frame composition for the pane layout and status line.

Turns a ``SessionSnapshot`` into one full-screen ANSI frame. Pane
rectangles from the layout are scaled to terminal cells; each pane gets a
title row with its directory and one row per visible entry. The last row
is the status line (mode, text buffer or search query, messages).
"""

from __future__ import annotations

from dataclasses import dataclass

from ..ansi import BOLD, DIM, ERROR, MATCH, RESET, REVERSE, SELECTED, display_width, fit_ansi_line
from ..pane import Rect
from ..runtime.config import Settings
from ..runtime.state import InsertMode, PaneView, SearchMode, SessionSnapshot

BORDER = "│"


@dataclass(frozen=True)
class CellRect:
    col: int
    row: int
    width: int
    height: int


def cell_rect(rect: Rect, columns: int, rows: int) -> CellRect:
    """Scale a unit-square rectangle to terminal cells without gaps."""
    left = round(rect.x * columns)
    right = round(rect.right * columns)
    top = round(rect.y * rows)
    bottom = round(rect.bottom * rows)
    return CellRect(left, top, max(0, right - left), max(0, bottom - top))


def layout_rows(rows: int) -> int:
    """Rows available to panes once the status line is reserved."""
    return max(1, rows - 1)


def pane_body_rows(rect: Rect, columns: int, rows: int) -> int:
    """Entry rows a pane can show: its cell height minus the title row."""
    return max(1, cell_rect(rect, columns, layout_rows(rows)).height - 1)


def sanitize(name: str) -> str:
    return "".join(ch if ch.isprintable() else "?" for ch in name)


def _kind_text(kind: str, settings: Settings) -> str:
    return {
        "directory": settings.directory_text,
        "file": settings.file_text,
        "symlink": settings.symlink_text,
    }.get(kind, settings.other_text)


def pane_title(view: PaneView, settings: Settings) -> str:
    if not settings.show_working_directory:
        return ""
    if settings.simple_working_directory:
        return view.directory.name or str(view.directory)
    return str(view.directory)


def entry_row(view: PaneView, idx: int, settings: Settings) -> str:
    """Return the plain text of listing row ``idx`` (``[number:type] name``)."""
    header_parts = []
    if settings.show_entry_number:
        header_parts.append(f"{idx:>{len(str(len(view.names)))}}")
    if settings.show_entry_type:
        header_parts.append(_kind_text(view.kinds[idx], settings))
    name = sanitize(view.names[idx])
    if header_parts:
        return f"{':'.join(header_parts)} {name}"
    return name


def render_pane_lines(view: PaneView, settings: Settings, width: int, height: int, border: bool = False) -> list[str]:
    """Render one pane into exactly ``height`` lines of ``width`` columns."""
    if width <= 0 or height <= 0:
        return []
    inner = width - 1 if border else width
    title_style = REVERSE if view.active else BOLD
    lines = [f"{title_style}{fit_ansi_line(sanitize(pane_title(view, settings)), inner)}{RESET}"]
    matches = set(view.search.matches) if view.search is not None and view.search.query else set()
    for row in range(height - 1):
        idx = view.scroll_offset + row
        if idx >= len(view.names):
            text = fit_ansi_line("", inner)
            if row == 0 and not view.names:
                text = f"{DIM}{fit_ansi_line('(empty)', inner)}{RESET}"
            lines.append(text)
            continue
        style = ""
        if idx in view.selected:
            style += SELECTED
        if idx in matches:
            style += MATCH
        if idx == view.cursor_index:
            style += REVERSE if view.active else BOLD
        lines.append(f"{style}{fit_ansi_line(entry_row(view, idx, settings), inner)}{RESET}")
    if border:
        lines = [f"{line}{DIM}{BORDER}{RESET}" for line in lines]
    return lines


def status_line(snapshot: SessionSnapshot, settings: Settings) -> tuple[str, int | None]:
    """Return the status text and the text-cursor column, if one is shown."""
    mode = snapshot.mode
    cursor_col: int | None = None
    if isinstance(mode, InsertMode):
        prefix = f"{settings.insert_mode_text} {mode.purpose.value.replace('_', ' ')}: "
        text = prefix + sanitize(mode.buffer)
        cursor_col = display_width(prefix + sanitize(mode.buffer[: mode.cursor]))
    elif isinstance(mode, SearchMode):
        active = next((view for view in snapshot.panes if view.active), None)
        state = active.search if active is not None else None
        query = sanitize(state.query) if state is not None else ""
        prefix = f"{settings.search_mode_text} /"
        count = len(state.matches) if state is not None else 0
        text = f"{prefix}{query}  [{count} match{'es' if count != 1 else ''}]"
        cursor_col = display_width(prefix + query)
    else:
        text = settings.normal_mode_text
        if snapshot.clipboard_size:
            text += f"  [clipboard: {snapshot.clipboard_size}]"
    if snapshot.messages:
        text += f"  {ERROR}{' | '.join(sanitize(message) for message in snapshot.messages)}{RESET}"
    return text, cursor_col


def render_frame(snapshot: SessionSnapshot, settings: Settings, columns: int, rows: int) -> str:
    """Compose one full frame, ending with cursor placement."""
    columns = max(1, columns)
    pane_rows = layout_rows(rows)
    row_segments: list[list[tuple[int, str]]] = [[] for _ in range(pane_rows)]
    for view in snapshot.panes:
        cells = cell_rect(view.rect, columns, pane_rows)
        border = cells.col + cells.width < columns and cells.width > 1
        for offset, line in enumerate(render_pane_lines(view, settings, cells.width, cells.height, border)):
            row_segments[cells.row + offset].append((cells.col, line))

    out = ["\x1b[?25l\x1b[H"]
    for y, segments in enumerate(row_segments):
        out.append(f"\x1b[{y + 1};1H")
        out.extend(line for _col, line in sorted(segments))
    status, cursor_col = status_line(snapshot, settings)
    out.append(f"\x1b[{pane_rows + 1};1H\x1b[2K{fit_ansi_line(status, columns)}{RESET}")
    if cursor_col is not None:
        out.append(f"\x1b[{pane_rows + 1};{min(columns, cursor_col + 1)}H\x1b[?25h")
    return "".join(out)


__all__ = [
    "CellRect",
    "cell_rect",
    "layout_rows",
    "pane_body_rows",
    "pane_title",
    "entry_row",
    "render_pane_lines",
    "status_line",
    "render_frame",
]
