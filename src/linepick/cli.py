# linepick/cli.py
"""
linepick command line
=====================

Entry point of the `linepick` command. It:
1) Parses arguments (sources, initial mode, config path, log level).
2) Loads the configuration and initializes logging before anything else.
3) Loads every source into one document; a source that cannot be read ends
   the program before the terminal is touched.
4) Attaches the controlling terminal when stdin/stdout are redirected and
   runs the picker inside `curses.wrapper`.
5) Prints the selected line to stdout and maps the outcome to an exit status.
"""

from __future__ import annotations

import argparse
import curses
import locale
import logging
import os
import sys
from importlib import metadata
from typing import Any, Optional, Sequence

from linepick.core.Matcher import Mode
from linepick.core.Picker import Picker
from linepick.ui.TerminalAppMode import TerminalAppMode
from linepick.utils.logging_config import setup_logging
from linepick.utils.sources import SourceError, load_document
from linepick.utils.utils import load_config

logger = logging.getLogger("linepick")

EXIT_SELECTED = 0
EXIT_NO_SELECTION = 1
EXIT_USAGE = 2
EXIT_TERMINAL = 3

KEY_HELP = """\
keys:
  Enter           print the selected line and exit
  Esc             exit without a selection
  Up / Ctrl+P     move the selection up
  Down / Ctrl+N   move the selection down
  Ctrl+R          toggle literal / regular expression matching
  Backspace       delete the last query character
  any other key   append to the query

exit status: 0 selected, 1 nothing selected, 2 usage or input error,
3 terminal error
"""


def _version() -> str:
    try:
        return metadata.version("linepick")
    except metadata.PackageNotFoundError:
        return "unknown"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="linepick",
        description="Interactively filter lines of text and print the one you pick.",
        epilog=KEY_HELP,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "files",
        nargs="*",
        metavar="FILE",
        help="files to read, concatenated in order; '-' or none reads standard input",
    )
    parser.add_argument(
        "-r",
        "--regex",
        action="store_true",
        help="start in regular expression mode instead of literal mode",
    )
    parser.add_argument(
        "-c",
        "--config",
        metavar="PATH",
        help="TOML config file (default: $LINEPICK_CONFIG or ~/.config/linepick/config.toml)",
    )
    parser.add_argument(
        "--log-level",
        metavar="LEVEL",
        help="log file level, overriding the config (DEBUG, INFO, ...)",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {_version()}")
    return parser


def initial_mode(args: argparse.Namespace, config: dict[str, Any]) -> Mode:
    """`--regex` wins; otherwise `picker.initial_mode` from the config."""
    if args.regex:
        return Mode.PATTERN
    configured = config.get("picker", {}).get("initial_mode", "literal")
    try:
        return Mode.parse(configured)
    except ValueError:
        logger.warning("Unknown initial_mode %r in config, using literal.", configured)
        return Mode.LITERAL


def _curses_main(stdscr: "curses.window", document: str, config: dict[str, Any], mode: Mode) -> Optional[str]:
    """Target for `curses.wrapper`."""
    try:
        curses.set_escdelay(25)
    except (AttributeError, curses.error):
        pass
    return Picker.for_window(stdscr, document, config, mode).run()


def run_picker(document: str, config: dict[str, Any], mode: Mode) -> Optional[str]:
    """Runs one interactive session on the terminal; returns the selection."""
    os.environ.setdefault("ESCDELAY", "25")
    with TerminalAppMode():
        return curses.wrapper(_curses_main, document, config, mode)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    config = load_config(args.config)
    if args.log_level:
        config.setdefault("logging", {})["file_level"] = args.log_level
    setup_logging(config)
    mode = initial_mode(args, config)

    try:
        document = load_document(args.files)
    except SourceError as e:
        print(f"linepick: {e}", file=sys.stderr)
        return EXIT_USAGE

    try:
        locale.setlocale(locale.LC_ALL, "")
    except locale.Error:
        logger.warning("Could not set system locale. Character rendering may be affected.")

    try:
        result = run_picker(document, config, mode)
    except (OSError, curses.error) as e:
        logger.critical("Terminal could not be used: %s", e, exc_info=True)
        print(f"linepick: cannot use the terminal: {e}", file=sys.stderr)
        return EXIT_TERMINAL

    if result is None:
        return EXIT_NO_SELECTION
    sys.stdout.write(result + "\n")
    sys.stdout.flush()
    return EXIT_SELECTED


def start() -> None:
    """Console script entry point."""
    sys.exit(main())
