"""CLI/bootstrap helpers for the CalcHub application."""

from __future__ import annotations

import argparse
import logging
import logging.handlers
import os
import sys
from collections.abc import Callable
from typing import Any

from calchub.action_messages import build_actionable_error, build_no_results_message
from calchub.catalog import DEFAULT_CATALOG, Catalog
from calchub.config import FileStorage, KeyValueStorage, MemoryStorage, get_config_dir
from calchub.models import THEME_NAMES
from calchub.search import SearchIndex

logger = logging.getLogger(__name__)


def _configure_logging(debug: bool) -> None:
    """Configure logging. When debug=True, logs to file at DEBUG level."""
    if not debug:
        # Default: suppress all logging (TUI captures stderr)
        logging.disable(logging.CRITICAL)
        return

    log_dir = get_config_dir()
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / "debug.log"

    handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=5 * 1024 * 1024,
        backupCount=3,
        encoding="utf-8",
    )
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s",
            datefmt="%H:%M:%S",
        )
    )
    logging.root.addHandler(handler)
    logging.root.setLevel(logging.DEBUG)


def _configure_color_mode(color_mode: str) -> None:
    """Configure environment hints for terminal color behavior."""
    if color_mode == "never":
        os.environ["NO_COLOR"] = "1"
        os.environ.pop("FORCE_COLOR", None)
        return
    if color_mode == "always":
        os.environ["FORCE_COLOR"] = "1"
        os.environ.pop("NO_COLOR", None)
        return
    # auto
    os.environ.pop("FORCE_COLOR", None)


def _validate_interactive_tty() -> bool:
    """Return True when stdin/stdout are interactive terminals."""
    return bool(sys.stdin.isatty() and sys.stdout.isatty())


def _default_storage(no_persist: bool) -> KeyValueStorage:
    if no_persist:
        return MemoryStorage()
    return FileStorage()


def _print_catalog(catalog: Catalog) -> int:
    """Print every category and its calculators. Returns exit code."""
    for category in catalog.list_categories():
        print(f"{category.icon} {category.title} ({len(category.calculators)})")
        for calc in category.calculators:
            print(f"  {calc.id:<24} {calc.title}  [{calc.complexity}]")
    print(f"{len(catalog)} calculators in {len(catalog.list_categories())} categories")
    return 0


def _print_search_results(catalog: Catalog, query: str) -> int:
    """Print ranked matches for query. Returns exit code."""
    results = SearchIndex.build(catalog).search(query)
    if not results:
        print(
            build_actionable_error(
                "find calculators",
                why=build_no_results_message(query.strip()).rstrip("."),
                next_step="try a shorter query or run calchub --list",
            ),
            file=sys.stderr,
        )
        return 1
    for result in results:
        print(f"{result.score:.3f}  {result.calculator.id:<24} {result.calculator.title}")
    return 0


def main(
    argv: list[str] | None = None,
    *,
    catalog: Catalog = DEFAULT_CATALOG,
    storage_factory: Callable[[bool], KeyValueStorage] = _default_storage,
    configure_logging_fn: Callable[[bool], None] = _configure_logging,
    configure_color_mode_fn: Callable[[str], None] = _configure_color_mode,
    validate_interactive_tty_fn: Callable[[], bool] = _validate_interactive_tty,
    app_factory: Callable[..., Any] | None = None,
) -> int:
    """Main entry point. Returns exit code."""
    parser = argparse.ArgumentParser(description="Find, favorite, and revisit calculators in a TUI")
    parser.add_argument(
        "--theme",
        choices=THEME_NAMES,
        default=None,
        help="Start in this theme (saved like any theme change)",
    )
    parser.add_argument(
        "--search",
        type=str,
        default=None,
        metavar="QUERY",
        help="Start with the search overlay open on QUERY",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        help="Print the calculator catalog and exit",
    )
    parser.add_argument(
        "--find",
        type=str,
        default=None,
        metavar="QUERY",
        help="Print ranked search results for QUERY and exit",
    )
    parser.add_argument(
        "--no-persist",
        action="store_true",
        help="Keep favorites, recents, and theme in memory only",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to file (~/.config/calchub/debug.log)",
    )
    parser.add_argument(
        "--color",
        choices=["auto", "always", "never"],
        default="auto",
        help="Color output mode for terminal UI (default: auto)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable terminal colors (equivalent to --color never)",
    )
    args = parser.parse_args(argv)
    if args.list and args.find is not None:
        print("Error: --list cannot be combined with --find", file=sys.stderr)
        return 1
    if args.find is not None and not args.find.strip():
        print(
            "Error: --find needs a non-empty QUERY (use --list to see everything)",
            file=sys.stderr,
        )
        return 1

    color_mode = "never" if args.no_color else args.color
    configure_color_mode_fn(color_mode)
    configure_logging_fn(args.debug)
    logger.debug("calchub starting, %d calculators", len(catalog))

    if args.list:
        return _print_catalog(catalog)
    if args.find is not None:
        return _print_search_results(catalog, args.find)

    if not validate_interactive_tty_fn():
        print(
            "Error: calchub requires an interactive TTY for the full UI.",
            file=sys.stderr,
        )
        print("Next steps:", file=sys.stderr)
        print("  - Run calchub directly in a terminal session", file=sys.stderr)
        print("  - Use --list or --find QUERY for non-interactive output", file=sys.stderr)
        print("  - Use --help for command documentation", file=sys.stderr)
        return 2

    storage = storage_factory(args.no_persist)

    if app_factory is None:
        from calchub.app import CalcHub as _CalcHub

        app_factory = _CalcHub

    app = app_factory(
        catalog,
        storage,
        initial_query=args.search or "",
        initial_theme=args.theme,
    )
    app.run()
    return 0


__all__ = [
    "_configure_color_mode",
    "_configure_logging",
    "_default_storage",
    "_print_catalog",
    "_print_search_results",
    "_validate_interactive_tty",
    "main",
]
