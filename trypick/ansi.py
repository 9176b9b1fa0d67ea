"""ANSI-aware text measurement and line shaping utilities.

Provides width measurement, clipping, and ellipsis truncation that preserve
escape sequences. These helpers keep rows aligned when colour codes, emoji, and
wide characters are present.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
ELLIPSIS = "…"


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Variation selectors and combining marks consume no columns; emoji and East
    Asian wide/fullwidth characters consume two.
    """
    code = ord(ch)
    if 0xFE00 <= code <= 0xFE0F:
        return 0
    if 0x1F300 <= code <= 0x1FAFF:
        return 2
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def display_width(text: str) -> int:
    """Return the visible width of ``text``, ignoring escape sequences."""
    return sum(char_display_width(ch) for ch in strip_ansi(text))


def clip_ansi_line(text: str, max_cols: int, keep_trailing_escapes: bool = False) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    ANSI escape sequences are copied whole and do not count toward width. With
    ``keep_trailing_escapes`` the sequences found after the cut point are still
    appended, so trailing resets are not lost.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    clipped = False
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                if not clipped or keep_trailing_escapes:
                    out.append(match.group(0))
                i = match.end()
                continue
        if clipped:
            i += 1
            continue
        ch = text[i]
        w = char_display_width(ch)
        if col + w > max_cols:
            clipped = True
            if not keep_trailing_escapes:
                break
            i += 1
            continue
        out.append(ch)
        col += w
        i += 1

    return "".join(out)


def truncate_line(text: str, width: int) -> str:
    """Fit a styled line into a ``width``-column terminal row.

    Lines wider than ``width - 1`` columns are cut to ``width - 2`` columns and
    get a trailing ellipsis. The last column stays free to avoid auto-wrap.
    """
    if display_width(text) <= width - 1:
        return text
    clipped = clip_ansi_line(text, max(0, width - 2), keep_trailing_escapes=True)
    return _insert_before_trailing_escapes(clipped, ELLIPSIS)


def _insert_before_trailing_escapes(text: str, suffix: str) -> str:
    end = len(text)
    while True:
        for match in ANSI_ESCAPE_RE.finditer(text, 0, end):
            if match.end() == end:
                end = match.start()
                break
        else:
            break
    return text[:end] + suffix + text[end:]


__all__ = [
    "ANSI_ESCAPE_RE",
    "ELLIPSIS",
    "char_display_width",
    "clip_ansi_line",
    "display_width",
    "strip_ansi",
    "truncate_line",
]
