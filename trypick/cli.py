"""Command-line front door for trypick.

Parses CLI options, resolves the tries directory and colour mode, runs one
selector session, and prints the resulting shell script on stdout.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys

from . import __version__
from .config import colors_disabled, load_theme_name, resolve_tries_path
from .input import parse_key_script
from .runtime import SessionOptions, run_selector
from .script import build_script, format_script
from .selection import Cancelled
from .terminal import TerminalController
from .ui_theme import available_theme_names, resolve_theme

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="trypick",
        description="Fuzzy-pick, create, rename or delete trial directories.",
    )
    parser.add_argument("query", nargs="*", help="Initial search text.")
    parser.add_argument("--path", default=None, help="Tries directory (default: $TRY_PATH or ~/src/tries).")
    parser.add_argument("--and-type", default=None, metavar="TEXT", help="Pre-fill the search input.")
    parser.add_argument("--and-exit", action="store_true", help="Render one frame and exit.")
    parser.add_argument("--and-keys", default=None, metavar="KEYS", help="Replay a key script instead of reading the terminal.")
    parser.add_argument("--and-confirm", default=None, metavar="TEXT", help="Answer the delete confirmation with TEXT.")
    parser.add_argument("--no-colors", action="store_true", help="Disable colour output.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--log-file", default=None, metavar="PATH", help="Write debug logs to PATH.")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def configure_logging(log_file: str | None) -> None:
    if not log_file:
        return
    handler = logging.FileHandler(log_file, encoding="utf-8")
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger = logging.getLogger("trypick")
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG)


def main(argv: list[str] | None = None) -> int:
    """Run the picker and print the shell script for the chosen action.

    Returns 0 when a script was printed and 1 when the session was cancelled.
    """
    args = build_parser().parse_args(argv)
    configure_logging(args.log_file)

    base_path = resolve_tries_path(args.path)
    output_fd = sys.stderr.fileno()
    terminal = TerminalController(sys.stdin.fileno(), output_fd)
    theme = resolve_theme(
        load_theme_name(args.theme),
        no_color=colors_disabled(args.no_colors, os.isatty(output_fd)),
    )
    options = SessionOptions(
        query=" ".join(args.query),
        initial_type=args.and_type,
        render_once=args.and_exit,
        key_script=parse_key_script(args.and_keys) if args.and_keys else None,
        confirm_text=args.and_confirm,
        theme=theme,
    )
    logger.debug("starting session in %s", base_path)

    result = run_selector(base_path, terminal, options)
    if isinstance(result, Cancelled):
        if result.reason:
            sys.stderr.write(f"Error: {result.reason}\n")
        sys.stdout.write("Cancelled.\n")
        return 1

    sys.stdout.write(format_script(build_script(result)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
