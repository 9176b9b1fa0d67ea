"""UI theme definitions and selection helpers.

A theme is the colour capability handed to every renderer. The plain theme has
empty sequences, so its formatting helpers return text unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    muted: str
    muted_off: str
    highlight: str
    highlight_off: str
    accent: str
    accent_off: str
    bold_on: str
    reverse_on: str
    reverse_off: str
    selected_bg: str
    danger_bg: str
    reset: str

    @property
    def colors_enabled(self) -> bool:
        return bool(self.reset)

    @staticmethod
    def _wrap(text: str, prefix: str, suffix: str) -> str:
        if not text or not prefix:
            return text
        return f"{prefix}{text}{suffix}"

    def dim(self, text: str) -> str:
        return self._wrap(text, self.muted, self.muted_off)

    def bold(self, text: str) -> str:
        return self._wrap(text, self.bold_on, self.reset)

    def highlighted(self, text: str) -> str:
        return self._wrap(text, self.highlight, self.highlight_off)

    def accented(self, text: str) -> str:
        return self._wrap(text, self.accent, self.accent_off)

    def reversed(self, text: str) -> str:
        return self._wrap(text, self.reverse_on, self.reverse_off)


DEFAULT_THEME = UITheme(
    name="default",
    muted="\033[38;5;245m",
    muted_off="\033[39m",
    highlight="\033[1m\033[33m",
    highlight_off="\033[39m\033[22m",
    accent="\033[1m\033[38;5;214m",
    accent_off="\033[39m\033[22m",
    bold_on="\033[1m",
    reverse_on="\033[7m",
    reverse_off="\033[27m",
    selected_bg="\033[48;5;238m",
    danger_bg="\033[48;5;52m",
    reset="\033[0m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    muted="\033[38;5;110m",
    muted_off="\033[39m",
    highlight="\033[1m\033[38;5;45m",
    highlight_off="\033[39m\033[22m",
    accent="\033[1m\033[38;5;39m",
    accent_off="\033[39m\033[22m",
    bold_on="\033[1m",
    reverse_on="\033[7m",
    reverse_off="\033[27m",
    selected_bg="\033[48;5;24m",
    danger_bg="\033[48;5;52m",
    reset="\033[0m",
)

PLAIN_THEME = UITheme(
    name="plain",
    muted="",
    muted_off="",
    highlight="",
    highlight_off="",
    accent="",
    accent_off="",
    bold_on="",
    reverse_on="",
    reverse_off="",
    selected_bg="",
    danger_bg="",
    reset="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and colour mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
