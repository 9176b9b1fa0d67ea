"""Key decoding and key-script parsing.

Raw terminal input is split into key strings, then normalized to symbolic
tokens (``"UP"``, ``"CTRL_W"`` ...). Printable characters decode to
themselves. Key scripts use the same literal bytes a terminal would send, so
scripted and live sessions share one decoding path.
"""

from __future__ import annotations

import re

ENTER = "ENTER"
ESC = "ESC"
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
BACKSPACE = "BACKSPACE"
CTRL_A = "CTRL_A"
CTRL_B = "CTRL_B"
CTRL_C = "CTRL_C"
CTRL_D = "CTRL_D"
CTRL_E = "CTRL_E"
CTRL_F = "CTRL_F"
CTRL_K = "CTRL_K"
CTRL_N = "CTRL_N"
CTRL_P = "CTRL_P"
CTRL_R = "CTRL_R"
CTRL_T = "CTRL_T"
CTRL_W = "CTRL_W"

_RAW_KEYS: dict[str, str] = {
    "\r": ENTER,
    "\n": ENTER,
    "\x1b": ESC,
    "\x1b[A": UP,
    "\x1b[B": DOWN,
    "\x1b[C": RIGHT,
    "\x1b[D": LEFT,
    "\x1bOA": UP,
    "\x1bOB": DOWN,
    "\x1bOC": RIGHT,
    "\x1bOD": LEFT,
    "\x7f": BACKSPACE,
    "\x08": BACKSPACE,
    "\x01": CTRL_A,
    "\x02": CTRL_B,
    "\x03": CTRL_C,
    "\x04": CTRL_D,
    "\x05": CTRL_E,
    "\x06": CTRL_F,
    "\x0b": CTRL_K,
    "\x0e": CTRL_N,
    "\x10": CTRL_P,
    "\x12": CTRL_R,
    "\x14": CTRL_T,
    "\x17": CTRL_W,
}

_ESCAPE_SEQUENCE_RE = re.compile(r"\x1b(?:\[[0-9;?]*[ -/]*[@-~]|O[A-Za-z])")

_SCRIPT_TOKENS: dict[str, str] = {
    "UP": "\x1b[A",
    "DOWN": "\x1b[B",
    "LEFT": "\x1b[D",
    "RIGHT": "\x1b[C",
    "ENTER": "\r",
    "RETURN": "\r",
    "ESC": "\x1b",
    "ESCAPE": "\x1b",
    "BACKSPACE": "\x7f",
    "BS": "\x7f",
}
for _letter, _byte in (
    ("A", "\x01"),
    ("B", "\x02"),
    ("C", "\x03"),
    ("D", "\x04"),
    ("E", "\x05"),
    ("F", "\x06"),
    ("H", "\x08"),
    ("K", "\x0b"),
    ("N", "\x0e"),
    ("P", "\x10"),
    ("R", "\x12"),
    ("T", "\x14"),
    ("W", "\x17"),
):
    _SCRIPT_TOKENS[f"CTRL-{_letter}"] = _byte
    _SCRIPT_TOKENS[f"CTRL{_letter}"] = _byte

_TOKEN_MODE_RE = re.compile(r"^[A-Z\-]+$")


def split_keys(text: str) -> list[str]:
    """Split one chunk of raw input into individual key strings."""
    keys: list[str] = []
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = _ESCAPE_SEQUENCE_RE.match(text, i)
            if match:
                keys.append(match.group(0))
                i = match.end()
                continue
        keys.append(text[i])
        i += 1
    return keys


def decode_key(raw: str) -> str:
    """Return the symbolic token for ``raw``, or ``raw`` itself when unmapped."""
    return _RAW_KEYS.get(raw, raw)


def is_printable_key(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


def parse_key_script(script: str | None) -> list[str]:
    """Turn a recorded key script into raw key strings.

    Comma-separated specs (or a bare upper-case token such as ``ENTER``) are
    read as named tokens; ``TYPE=text`` expands to one key per character.
    Anything else is taken literally, keeping ``ESC [ X`` triples together.
    """
    if not script:
        return []

    if "," in script or _TOKEN_MODE_RE.match(script):
        keys: list[str] = []
        for token in (part.strip() for part in script.split(",")):
            if not token:
                continue
            upper = token.upper()
            if upper in _SCRIPT_TOKENS:
                keys.append(_SCRIPT_TOKENS[upper])
            elif upper.startswith("TYPE="):
                keys.extend(token[5:])
            elif len(token) == 1:
                keys.append(token)
        return keys

    keys = []
    i = 0
    while i < len(script):
        if script[i] == "\x1b" and i + 2 < len(script) and script[i + 1] == "[":
            keys.append(script[i : i + 3])
            i += 3
        else:
            keys.append(script[i])
            i += 1
    return keys
