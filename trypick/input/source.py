"""Interchangeable key sources for the selector loop.

``TerminalKeySource`` blocks on the live terminal; ``ScriptedKeySource`` replays
a recorded key list and answers ``ESC`` once it runs dry so scripted sessions
always terminate.
"""

from __future__ import annotations

import codecs
from collections import deque
from collections.abc import Iterable
from typing import Protocol

from .keys import CTRL_C, ESC, decode_key, split_keys


class KeySource(Protocol):
    def read_key(self) -> str:
        """Return the next key token, or ``""`` when a resize interrupted the read."""
        ...

    def has_pending(self) -> bool:
        """Return whether keys are queued and can be read without blocking."""
        ...


class ChunkReader(Protocol):
    def read_chunk(self) -> bytes: ...


class TerminalKeySource:
    """Read keys from the terminal adapter, buffering multi-key chunks."""

    def __init__(self, terminal: ChunkReader) -> None:
        self._terminal = terminal
        self._pending: deque[str] = deque()
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def read_key(self) -> str:
        if not self._pending:
            try:
                chunk = self._terminal.read_chunk()
            except EOFError:
                return CTRL_C
            if not chunk:
                return ""
            self._pending.extend(split_keys(self._decoder.decode(chunk)))
            if not self._pending:
                return ""
        return decode_key(self._pending.popleft())

    def has_pending(self) -> bool:
        return bool(self._pending)


class ScriptedKeySource:
    """Replay a fixed sequence of raw key strings."""

    def __init__(self, keys: Iterable[str]) -> None:
        self._keys: deque[str] = deque(keys)

    def read_key(self) -> str:
        if not self._keys:
            return ESC
        return decode_key(self._keys.popleft())

    def has_pending(self) -> bool:
        return bool(self._keys)
