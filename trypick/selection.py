"""Selection results handed from the selector to the action executor.

Each session produces exactly one of these values. The selector never touches
the filesystem itself; it only describes what should happen.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Cd:
    path: str


@dataclass(frozen=True)
class Mkdir:
    path: str


@dataclass(frozen=True)
class Rename:
    base_path: str
    old_name: str
    new_name: str


@dataclass(frozen=True)
class DeletePath:
    """One resolved delete target."""

    path: str
    basename: str


@dataclass(frozen=True)
class Delete:
    base_path: str
    paths: tuple[DeletePath, ...]


@dataclass(frozen=True)
class Cancelled:
    """User cancellation, or an aborted session when ``reason`` is set."""

    reason: str | None = None


SelectionResult = Cd | Mkdir | Rename | Delete | Cancelled


__all__ = [
    "Cd",
    "Mkdir",
    "Rename",
    "DeletePath",
    "Delete",
    "Cancelled",
    "SelectionResult",
]
