"""Read-only JSON config and environment lookups.

The config file supplies defaults for the tries directory and the UI theme.
Missing or malformed config falls back to an empty mapping.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from platformdirs import user_config_dir

logger = logging.getLogger(__name__)

APP_NAME = "trypick"
CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
TRY_PATH_ENV = "TRY_PATH"
NO_COLOR_ENV = "NO_COLOR"
DEFAULT_TRIES_PATH = "~/src/tries"


def load_config() -> dict[str, object]:
    """Load the JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as exc:
        logger.warning("ignoring config %s: %s", CONFIG_PATH, exc)
        return {}
    return data if isinstance(data, dict) else {}


def _config_string(key: str) -> str | None:
    value = load_config().get(key)
    if isinstance(value, str) and value.strip():
        return value
    return None


def expand_path(path: str) -> str:
    return os.path.abspath(os.path.expanduser(path))


def resolve_tries_path(cli_value: str | None = None) -> str:
    """Pick the base directory: CLI flag, then ``TRY_PATH``, then config, then default."""
    for candidate in (cli_value, os.environ.get(TRY_PATH_ENV), _config_string("tries_path")):
        if candidate:
            return expand_path(candidate)
    return expand_path(DEFAULT_TRIES_PATH)


def load_theme_name(cli_value: str | None = None) -> str | None:
    return cli_value or _config_string("theme")


def colors_disabled(no_colors_flag: bool, stream_is_tty: bool) -> bool:
    if no_colors_flag or not stream_is_tty:
        return True
    return bool(os.environ.get(NO_COLOR_ENV))
