"""Single-line edit buffer shared by the search field and the dialogs."""

from __future__ import annotations

from dataclasses import dataclass

from . import keys
from .key_registry import KeyComboBinding, KeyComboRegistry


def is_word_char(ch: str) -> bool:
    return ch.isascii() and ch.isalnum()


@dataclass
class LineBuffer:
    """Editable text with an insertion cursor in ``[0, len(text)]``."""

    text: str = ""
    cursor: int = 0

    def __post_init__(self) -> None:
        self.cursor = max(0, min(self.cursor, len(self.text)))

    @classmethod
    def at_end(cls, text: str) -> LineBuffer:
        return cls(text=text, cursor=len(text))

    def insert(self, chars: str) -> None:
        self.text = self.text[: self.cursor] + chars + self.text[self.cursor :]
        self.cursor += len(chars)

    def backspace(self) -> None:
        if self.cursor == 0:
            return
        self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
        self.cursor -= 1

    def move_home(self) -> None:
        self.cursor = 0

    def move_end(self) -> None:
        self.cursor = len(self.text)

    def move_left(self) -> None:
        self.cursor = max(0, self.cursor - 1)

    def move_right(self) -> None:
        self.cursor = min(len(self.text), self.cursor + 1)

    def kill_to_end(self) -> None:
        self.text = self.text[: self.cursor]

    def delete_word(self) -> None:
        """Delete trailing non-word characters, then the word before the cursor."""
        pos = self.cursor
        while pos > 0 and not is_word_char(self.text[pos - 1]):
            pos -= 1
        while pos > 0 and is_word_char(self.text[pos - 1]):
            pos -= 1
        self.text = self.text[:pos] + self.text[self.cursor :]
        self.cursor = pos


def line_edit_registry(buffer: LineBuffer) -> KeyComboRegistry:
    """Return bindings for the editing keys common to every text field.

    Handlers return ``True`` when they changed the text.
    """

    def edit(action):
        def handler() -> bool:
            before = buffer.text
            action()
            return buffer.text != before

        return handler

    return KeyComboRegistry().register_bindings(
        KeyComboBinding((keys.BACKSPACE,), edit(buffer.backspace)),
        KeyComboBinding((keys.CTRL_A,), edit(buffer.move_home)),
        KeyComboBinding((keys.CTRL_E,), edit(buffer.move_end)),
        KeyComboBinding((keys.CTRL_B,), edit(buffer.move_left)),
        KeyComboBinding((keys.CTRL_F,), edit(buffer.move_right)),
        KeyComboBinding((keys.CTRL_K,), edit(buffer.kill_to_end)),
        KeyComboBinding((keys.CTRL_W,), edit(buffer.delete_word)),
    )
