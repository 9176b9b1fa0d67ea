"""Full-screen confirmation and rename dialogs."""

from __future__ import annotations

from ..ui_theme import UITheme
from .frame import center_text, compose_frame, render_input, rule

DIALOG_FOOTER = "Enter: Confirm  Esc: Cancel"
DELETE_PROMPT = "Type YES to confirm: "
RENAME_PROMPT = "New name: "


def _fill(lines: list[str], height: int) -> None:
    while len(lines) < height - 2:
        lines.append("")


def _footer(lines: list[str], width: int, theme: UITheme) -> None:
    lines.append(rule(width, theme))
    lines.append(center_text(theme.dim(DIALOG_FOOTER), width))


def render_delete_dialog(
    basenames: list[str],
    confirm_buffer: str,
    confirm_cursor: int,
    *,
    width: int,
    height: int,
    theme: UITheme,
) -> str:
    """Render the delete confirmation listing every marked directory."""
    noun = "directory" if len(basenames) == 1 else "directories"
    lines = [
        center_text(f"🗑️  Delete {len(basenames)} {noun}?", width),
        rule(width, theme),
    ]
    for name in basenames:
        lines.append(f"{theme.danger_bg}🗑️ {name}{theme.reset}")
    lines.extend(["", ""])
    prompt = theme.dim(DELETE_PROMPT) + render_input(confirm_buffer, confirm_cursor, theme)
    lines.append(center_text(prompt, width))
    _fill(lines, height)
    _footer(lines, width, theme)
    return compose_frame(lines, width, theme)


def render_rename_dialog(
    current_name: str,
    buffer: str,
    cursor: int,
    *,
    width: int,
    height: int,
    theme: UITheme,
    error: str = "",
) -> str:
    lines = [
        center_text("✏️" + theme.accented("  Rename directory"), width),
        rule(width, theme),
        f"📁 {current_name}",
        "",
        "",
        center_text(theme.dim(RENAME_PROMPT) + render_input(buffer, cursor, theme), width),
    ]
    if error:
        lines.append("")
        lines.append(center_text(theme.bold(error), width))
    _fill(lines, height)
    _footer(lines, width, theme)
    return compose_frame(lines, width, theme)
