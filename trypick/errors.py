"""Exception types shared by the selector, its dialogs, and the terminal layer."""

from __future__ import annotations


class TrypickError(Exception):
    """Base class for errors raised by trypick."""


class TerminalUnavailableError(TrypickError):
    """Raised when the session cannot drive an interactive terminal."""


class DeleteSafetyError(TrypickError):
    """Raised when a delete target resolves outside the base directory."""


class RenameValidationError(TrypickError):
    """Raised when a proposed directory name is rejected.

    The message is shown inline in the rename dialog.
    """
