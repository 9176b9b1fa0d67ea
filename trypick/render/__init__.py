"""Rendering engine for the directory selector.

Defines render context data and builds fully composed ANSI frames for the
list view. Rendering never mutates selector state; the caller writes the frame.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ..ansi import ELLIPSIS, clip_ansi_line, display_width
from ..search import ScoredMatch
from ..tries import DATE_PREFIX_RE
from ..ui_theme import PLAIN_THEME, UITheme
from .dialogs import render_delete_dialog, render_rename_dialog
from .frame import center_text, compose_frame, render_input, rule

HEADER_LINES = 4
FOOTER_LINES = 2
MIN_BODY_ROWS = 3
SEARCH_ROW = 3
SEARCH_PROMPT = "Search: "
TITLE = " Try Directory Selection"
HELP_TEXT = "↑/↓: Navigate  Enter: Select  ^R: Rename  ^D: Delete  Esc: Cancel"
# Arrow (2) + icon (2) + space (1).
ENTRY_PREFIX_WIDTH = 5
_DATE_LEN = 10


@dataclass
class RenderContext:
    width: int
    height: int
    matches: list[ScoredMatch]
    input_buffer: str
    input_cursor: int
    today: str
    now: float
    list_cursor: int = 0
    scroll_offset: int = 0
    delete_mode: bool = False
    marked: list[str] = field(default_factory=list)
    status_message: str = ""
    theme: UITheme = PLAIN_THEME


def visible_body_rows(height: int) -> int:
    return max(MIN_BODY_ROWS, height - HEADER_LINES - FOOTER_LINES)


def adjust_scroll(cursor: int, scroll_offset: int, visible_rows: int) -> int:
    """Return the smallest scroll change that keeps ``cursor`` on screen."""
    if cursor < scroll_offset:
        return cursor
    if cursor >= scroll_offset + visible_rows:
        return cursor - visible_rows + 1
    return max(0, scroll_offset)


def format_relative_time(modified_at: float, now: float) -> str:
    if not modified_at:
        return "?"
    seconds = max(0.0, now - modified_at)
    minutes = seconds / 60
    hours = minutes / 60
    days = hours / 24
    if seconds < 60:
        return "just now"
    if minutes < 60:
        return f"{int(minutes)}m ago"
    if hours < 24:
        return f"{int(hours)}h ago"
    if days < 7:
        return f"{int(days)}d ago"
    return f"{int(days / 7)}w ago"


def highlight_positions(text: str, positions: set[int], offset: int, theme: UITheme) -> str:
    out: list[str] = []
    for idx, ch in enumerate(text):
        if idx + offset in positions:
            out.append(theme.highlighted(ch))
        else:
            out.append(ch)
    return "".join(out)


def format_entry_name(basename: str, positions: tuple[int, ...], theme: UITheme) -> str:
    """Style a directory name: dim date prefix, highlighted matched characters."""
    matched = set(positions)
    if DATE_PREFIX_RE.match(basename):
        hyphen = basename[_DATE_LEN]
        return (
            theme.dim(basename[:_DATE_LEN])
            + (theme.highlighted(hyphen) if _DATE_LEN in matched else hyphen)
            + highlight_positions(basename[_DATE_LEN + 1 :], matched, _DATE_LEN + 1, theme)
        )
    return highlight_positions(basename, matched, 0, theme)


def render_entry_line(
    match: ScoredMatch,
    *,
    selected: bool,
    marked: bool,
    width: int,
    now: float,
    theme: UITheme,
) -> str:
    entry = match.entry
    parts: list[str] = []
    if marked:
        parts.append(theme.danger_bg)
    elif selected:
        parts.append(theme.selected_bg)
    parts.append(theme.highlighted("→ ") if selected else "  ")
    parts.append("🗑️ " if marked else "📁 ")

    name = format_entry_name(entry.basename, match.positions, theme)
    meta = f"{format_relative_time(entry.modified_at, now)}, {match.score:.1f}"
    max_content = width - 1
    max_name = max_content - ENTRY_PREFIX_WIDTH - display_width(meta) - 1
    if display_width(entry.basename) > max_name and max_name > 2:
        name = clip_ansi_line(name, max_name - 1, keep_trailing_escapes=True) + ELLIPSIS
    parts.append(name)

    gap = max_content - display_width(meta) - ENTRY_PREFIX_WIDTH - display_width(name)
    if gap > 0:
        parts.append(" " * gap)
    parts.append(theme.dim(meta))
    parts.append(theme.reset)
    return "".join(parts)


def render_create_line(input_buffer: str, *, selected: bool, today: str, theme: UITheme) -> str:
    prefix = theme.selected_bg if selected else ""
    arrow = theme.highlighted("→ ") if selected else "  "
    return f"{prefix}{arrow}📂 Create new: {today}-{input_buffer}{theme.reset}"


def render_delete_mode_footer(count: int, theme: UITheme) -> str:
    label = " DELETE MODE "
    if theme.colors_enabled:
        label = f"{theme.bold_on}{theme.danger_bg}{label}{theme.reset}"
    return f"{label} {count} marked  |  Ctrl-D: Toggle  Enter: Confirm  Esc: Cancel"


def _body_lines(ctx: RenderContext) -> list[str]:
    rows = visible_body_rows(ctx.height)
    total = len(ctx.matches)
    lines: list[str] = []
    end = min(total, ctx.scroll_offset + rows)
    for idx in range(ctx.scroll_offset, end):
        match = ctx.matches[idx]
        lines.append(
            render_entry_line(
                match,
                selected=idx == ctx.list_cursor,
                marked=match.entry.path in ctx.marked,
                width=ctx.width,
                now=ctx.now,
                theme=ctx.theme,
            )
        )

    if ctx.input_buffer:
        create_index = total
        if ctx.scroll_offset <= create_index < ctx.scroll_offset + rows:
            remaining = rows - len(lines)
            if remaining >= 2 and lines:
                lines.append("")
            lines.append(
                render_create_line(
                    ctx.input_buffer,
                    selected=ctx.list_cursor == create_index,
                    today=ctx.today,
                    theme=ctx.theme,
                )
            )

    while len(lines) < rows:
        lines.append("")
    return lines[:rows]


def _footer_line(ctx: RenderContext) -> str:
    if ctx.status_message:
        return ctx.theme.bold(ctx.status_message)
    if ctx.delete_mode:
        return render_delete_mode_footer(len(ctx.marked), ctx.theme)
    return center_text(ctx.theme.dim(HELP_TEXT), ctx.width)


def render_main_frame(ctx: RenderContext) -> str:
    """Compose the list view: header, scrolled body, footer."""
    theme = ctx.theme
    lines = [
        "🏠" + theme.accented(TITLE),
        rule(ctx.width, theme),
        theme.dim(SEARCH_PROMPT) + render_input(ctx.input_buffer, ctx.input_cursor, theme),
        rule(ctx.width, theme),
    ]
    lines.extend(_body_lines(ctx))
    lines.append(rule(ctx.width, theme))
    lines.append(_footer_line(ctx))

    cursor_col = len(SEARCH_PROMPT) + display_width(ctx.input_buffer[: ctx.input_cursor]) + 1
    return compose_frame(lines, ctx.width, theme, cursor=(SEARCH_ROW, cursor_col))


__all__ = [
    "RenderContext",
    "adjust_scroll",
    "format_entry_name",
    "format_relative_time",
    "render_create_line",
    "render_delete_dialog",
    "render_delete_mode_footer",
    "render_entry_line",
    "render_main_frame",
    "render_rename_dialog",
    "visible_body_rows",
]
