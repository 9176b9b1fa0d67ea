"""Frame assembly helpers shared by the list view and the dialogs."""

from __future__ import annotations

from ..ansi import display_width, truncate_line
from ..ui_theme import UITheme

HOME = "\x1b[H"
CLEAR_EOL = "\x1b[K"
SHOW_CURSOR = "\x1b[?25h"
RULE_CHAR = "─"


def rule(width: int, theme: UITheme) -> str:
    return theme.dim(RULE_CHAR * max(0, width - 1))


def center_text(text: str, width: int) -> str:
    padding = max(0, (width - display_width(text)) // 2)
    return " " * padding + text


def render_input(text: str, cursor: int, theme: UITheme) -> str:
    """Render an edit buffer with the cursor cell in reverse video."""
    if not text:
        return ""
    cursor = max(0, min(cursor, len(text)))
    cursor_char = text[cursor] if cursor < len(text) else " "
    return text[:cursor] + theme.reversed(cursor_char) + text[cursor + 1 :]


def compose_frame(
    lines: list[str],
    width: int,
    theme: UITheme,
    cursor: tuple[int, int] | None = None,
) -> str:
    """Join rows into one redraw payload.

    Every row is cleared before it is written and truncated to ``width``. The
    last row has no newline so the screen never scrolls. ``cursor`` is a
    1-based ``(row, column)`` where the terminal cursor is parked.
    """
    out: list[str] = [HOME]
    for idx, line in enumerate(lines):
        out.append("\r" + CLEAR_EOL)
        out.append(truncate_line(line, width))
        if idx < len(lines) - 1:
            out.append("\n")
    if cursor is not None:
        row, col = cursor
        out.append(f"\x1b[{row};{col}H")
    out.append(SHOW_CURSOR)
    out.append(theme.reset)
    return "".join(out)
