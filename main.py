# main.py

"""Entry point for catalog_client (TUI or headless CLI)."""

import argparse
import asyncio
import logging
import sys

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("catalog_client.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    sorts = ", ".join(opt["value"] for opt in Settings.SORT_OPTIONS)

    parser = argparse.ArgumentParser(
        prog="catalog_client",
        description="Browse and edit a product catalog REST backend.",
        epilog=f"Sort options: {sorts}",
    )
    parser.add_argument(
        "--api-base",
        default=None,
        dest="api_base",
        help=f"Backend base URL (default: {Settings.API_BASE}).",
    )
    parser.add_argument(
        "--list",
        action="store_true",
        default=False,
        dest="list_only",
        help="Print one page of products and exit instead of the TUI.",
    )
    parser.add_argument(
        "-q",
        "--query",
        default=None,
        help="Name search text (with --list).",
    )
    parser.add_argument(
        "--page",
        type=int,
        default=0,
        help="Zero-based page index (with --list).",
    )
    parser.add_argument(
        "--size",
        type=int,
        default=Settings.DEFAULT_PAGE_SIZE,
        choices=Settings.PAGE_SIZES,
        help="Page size (with --list).",
    )
    parser.add_argument(
        "--sort",
        default=Settings.DEFAULT_SORT,
        help="Sort as field,direction (with --list).",
    )
    parser.add_argument(
        "-f",
        "--format",
        choices=["json", "table"],
        default="table",
        dest="output_format",
        help="Output format for --list (default: table).",
    )
    parser.add_argument(
        "--health",
        action="store_true",
        default=False,
        help="Run a connectivity health check against the backend.",
    )
    return parser


def _run_tui() -> None:
    """Launch the interactive Textual TUI."""
    from src.ui.app import CatalogApp

    try:
        app = CatalogApp()
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("catalog_client TUI shutting down")


def _run_list(args: argparse.Namespace) -> None:
    """Print one page headlessly and exit."""
    from src.cli.runner import build_params, cli_list

    params = build_params(args.query, args.page, args.size, args.sort)
    exit_code = asyncio.run(cli_list(params, args.output_format))
    sys.exit(exit_code)


def _run_health_check() -> None:
    """Run backend connectivity health check."""
    from src.cli.runner import run_health_check

    exit_code = asyncio.run(run_health_check())
    sys.exit(exit_code)


def main() -> None:
    """Route to TUI (default) or a headless command."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.api_base:
        Settings.API_BASE = args.api_base

    headless = args.list_only or args.health
    log_file = setup_logging(console=headless)
    logger.info(
        "catalog_client starting against %s (log file: %s)",
        Settings.API_BASE,
        log_file,
    )

    if args.health:
        _run_health_check()
    elif args.list_only:
        _run_list(args)
    else:
        _run_tui()


if __name__ == "__main__":
    main()
