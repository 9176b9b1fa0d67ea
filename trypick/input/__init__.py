"""Input-layer public API: key decoding, key sources and line editing."""

from .key_registry import KeyComboBinding, KeyComboRegistry
from .keys import decode_key, is_printable_key, parse_key_script, split_keys
from .line_edit import LineBuffer, line_edit_registry
from .source import KeySource, ScriptedKeySource, TerminalKeySource

__all__ = [
    "KeyComboBinding",
    "KeyComboRegistry",
    "KeySource",
    "LineBuffer",
    "ScriptedKeySource",
    "TerminalKeySource",
    "decode_key",
    "is_printable_key",
    "line_edit_registry",
    "parse_key_script",
    "split_keys",
]
