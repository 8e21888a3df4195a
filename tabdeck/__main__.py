"""Entry point for the tabdeck CLI."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from . import __version__
from .log import logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tabdeck",
        description="Multi-tab workspace with back/forward history",
    )
    parser.add_argument(
        "--version",
        "-V",
        action="version",
        version=f"tabdeck {__version__}",
    )
    parser.add_argument(
        "--location",
        "-l",
        default="/",
        help="Initial location, e.g. '/app#tab=orders' (default: /)",
    )
    parser.add_argument(
        "--open",
        "-o",
        action="append",
        default=[],
        metavar="ID",
        dest="open_tabs",
        help="Open a menu entry at startup (repeatable)",
    )
    parser.add_argument(
        "--prefs",
        type=Path,
        default=None,
        help="Preferences file (default: ~/.tabdeck/preferences.yaml)",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """Run tabdeck."""
    args = build_parser().parse_args(argv)

    try:
        from .app import run_app
        from .preferences import load_preferences

        run_app(
            initial_location=args.location,
            initial_tabs=args.open_tabs,
            prefs=load_preferences(args.prefs),
        )
    except (KeyboardInterrupt, SystemExit):
        pass
    except Exception:
        logger.debug("Fatal error in tabdeck", exc_info=True)
        import traceback

        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
