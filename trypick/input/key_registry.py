"""Reusable key-combo registry primitives."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: Callable[[], Any]


class KeyComboRegistry:
    """Small key-dispatch table keyed by exact key tokens."""

    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[], Any]] = {}

    def __contains__(self, key: str) -> bool:
        return key in self._handlers

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[combo] = binding.handler
        return self

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Register multiple bindings and return ``self`` for fluent usage."""
        for binding in bindings:
            self.register_binding(binding)
        return self

    def dispatch(self, key: str) -> Any:
        """Invoke the handler bound to ``key`` and return its result.

        Unbound keys return ``None`` without side effects.
        """
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return handler()
