"""Modal delete-confirmation and rename dialogs.

Each dialog owns its edit buffer and reads keys until it resolves. Dialogs
return a selection result, ``None`` when the user backs out, or raise a
validation error the caller reports inline.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from dataclasses import dataclass

from ..errors import DeleteSafetyError, RenameValidationError
from ..input import KeySource, LineBuffer, is_printable_key, line_edit_registry
from ..input import keys
from ..render import render_delete_dialog, render_rename_dialog
from ..search import CandidateEntry
from ..selection import Delete, DeletePath, Rename
from ..ui_theme import UITheme

logger = logging.getLogger(__name__)

CONFIRM_TOKEN = "YES"


@dataclass(frozen=True)
class DialogContext:
    """Terminal-facing operations shared by the dialogs."""

    key_source: KeySource
    write: Callable[[str], None]
    viewport: Callable[[], tuple[int, int]]
    theme: UITheme


def resolve_delete_targets(base_path: str, entries: list[CandidateEntry]) -> tuple[DeletePath, ...]:
    """Resolve symlinks and require every target to sit strictly inside ``base_path``.

    Raises ``DeleteSafetyError`` for the first target that escapes; nothing is
    returned for a partially valid batch.
    """
    base_real = os.path.realpath(base_path)
    resolved: list[DeletePath] = []
    for entry in entries:
        target = os.path.realpath(entry.path)
        if not target.startswith(base_real + os.sep):
            raise DeleteSafetyError(f"Safety check failed: {target} not in {base_real}")
        resolved.append(DeletePath(path=target, basename=entry.basename))
    return tuple(resolved)


def validate_rename(base_path: str, old_name: str, raw: str) -> str | None:
    """Return the cleaned new name, or ``None`` when it equals ``old_name``."""
    new_name = raw.strip().replace(" ", "-")
    if not new_name:
        raise RenameValidationError("Name cannot be empty")
    if "/" in new_name or os.sep in new_name:
        raise RenameValidationError("Name cannot contain /")
    if new_name == old_name:
        return None
    if os.path.exists(os.path.join(base_path, new_name)):
        raise RenameValidationError(f"Directory exists: {new_name}")
    return new_name


def _edit_buffer(buffer: LineBuffer, registry, key: str) -> bool:
    if key in registry:
        return bool(registry.dispatch(key))
    if is_printable_key(key):
        buffer.insert(key)
        return True
    return False


class DeleteConfirmDialog:
    """Ask the user to type ``YES`` before deleting the marked entries."""

    def __init__(
        self,
        base_path: str,
        entries: list[CandidateEntry],
        context: DialogContext,
        *,
        confirm_text: str | None = None,
    ) -> None:
        self.base_path = base_path
        self.entries = entries
        self.context = context
        self.confirm_text = confirm_text
        self.buffer = LineBuffer()
        self._registry = line_edit_registry(self.buffer)

    def _draw(self) -> None:
        width, height = self.context.viewport()
        self.context.write(
            render_delete_dialog(
                [entry.basename for entry in self.entries],
                self.buffer.text,
                self.buffer.cursor,
                width=width,
                height=height,
                theme=self.context.theme,
            )
        )

    def _read_confirmation(self) -> str | None:
        if self.confirm_text is not None and not self.context.key_source.has_pending():
            self._draw()
            logger.debug("using preset delete confirmation")
            return self.confirm_text
        while True:
            self._draw()
            key = self.context.key_source.read_key()
            if key == keys.ENTER:
                return self.buffer.text
            if key in (keys.ESC, keys.CTRL_C):
                return None
            _edit_buffer(self.buffer, self._registry, key)

    def run(self) -> Delete | None:
        """Return a ``Delete`` result, or ``None`` when not confirmed."""
        answer = self._read_confirmation()
        if answer != CONFIRM_TOKEN:
            logger.info("delete of %d entries cancelled", len(self.entries))
            return None
        paths = resolve_delete_targets(self.base_path, self.entries)
        logger.info("delete confirmed for %s", ", ".join(p.basename for p in paths))
        return Delete(base_path=os.path.realpath(self.base_path), paths=paths)


class RenameDialog:
    def __init__(self, base_path: str, entry: CandidateEntry, context: DialogContext) -> None:
        self.base_path = base_path
        self.entry = entry
        self.context = context
        self.buffer = LineBuffer.at_end(entry.basename)
        self.error = ""
        self._registry = line_edit_registry(self.buffer)

    def _draw(self) -> None:
        width, height = self.context.viewport()
        self.context.write(
            render_rename_dialog(
                self.entry.basename,
                self.buffer.text,
                self.buffer.cursor,
                width=width,
                height=height,
                theme=self.context.theme,
                error=self.error,
            )
        )

    def run(self) -> Rename | None:
        """Read keys until the rename resolves; ``None`` when unchanged or backed out."""
        while True:
            self._draw()
            key = self.context.key_source.read_key()
            if key in (keys.ESC, keys.CTRL_C):
                logger.info("rename of %s cancelled", self.entry.basename)
                return None
            if key == keys.ENTER:
                try:
                    new_name = validate_rename(self.base_path, self.entry.basename, self.buffer.text)
                except RenameValidationError as exc:
                    self.error = str(exc)
                    logger.debug("rename rejected: %s", exc)
                    continue
                if new_name is None:
                    logger.debug("rename of %s left unchanged", self.entry.basename)
                    return None
                logger.info("rename %s -> %s", self.entry.basename, new_name)
                return Rename(base_path=self.base_path, old_name=self.entry.basename, new_name=new_name)
            if _edit_buffer(self.buffer, self._registry, key):
                self.error = ""
