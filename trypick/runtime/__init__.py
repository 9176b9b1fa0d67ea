"""Public runtime entry points: the selector session and its dialogs."""

from __future__ import annotations

from .dialogs import (
    DeleteConfirmDialog,
    DialogContext,
    RenameDialog,
    resolve_delete_targets,
    validate_rename,
)
from .selector import NO_TTY_MESSAGE, SessionOptions, Selector, sanitize_new_name


def run_selector(base_path: str, terminal, options: SessionOptions | None = None):
    """Run one selector session and return its ``SelectionResult``."""
    return Selector(base_path, terminal, options).run()


__all__ = [
    "DeleteConfirmDialog",
    "DialogContext",
    "NO_TTY_MESSAGE",
    "RenameDialog",
    "Selector",
    "SessionOptions",
    "resolve_delete_targets",
    "run_selector",
    "sanitize_new_name",
    "validate_rename",
]
