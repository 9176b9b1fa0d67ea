from __future__ import annotations

from dataclasses import dataclass, field

from .input.line_edit import LineBuffer


@dataclass
class SelectorState:
    """Mutable state of one selector session."""

    search: LineBuffer = field(default_factory=LineBuffer)
    list_cursor: int = 0
    scroll_offset: int = 0
    delete_mode: bool = False
    marked_for_delete: list[str] = field(default_factory=list)
    width: int = 80
    height: int = 24
    status_message: str = ""

    @property
    def input_buffer(self) -> str:
        return self.search.text

    @property
    def input_cursor(self) -> int:
        return self.search.cursor

    def clamp_cursor(self, total_items: int) -> None:
        self.list_cursor = max(0, min(self.list_cursor, max(0, total_items - 1)))

    def move_cursor(self, delta: int, total_items: int) -> None:
        self.list_cursor += delta
        self.clamp_cursor(total_items)

    def toggle_mark(self, path: str) -> None:
        """Toggle ``path`` and keep ``delete_mode`` equal to "any marks"."""
        if path in self.marked_for_delete:
            self.marked_for_delete.remove(path)
        else:
            self.marked_for_delete.append(path)
        self.delete_mode = bool(self.marked_for_delete)

    def clear_marks(self) -> None:
        self.marked_for_delete = []
        self.delete_mode = False
