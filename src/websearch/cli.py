"""Command-line interface for websearch."""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from websearch.config import SearchOptions, settings
from websearch.exceptions import WebSearchError
from websearch.logging_config import setup_logging
from websearch.reporting import ConsoleReporter
from websearch.searcher import run_search

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _non_negative_int(value: str) -> int:
    number = int(value)
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative, got {number}")
    return number


def _positive_float(value: str) -> float:
    number = float(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive, got {number}")
    return number


def search_command(args) -> int:
    """Run one or more queries and print a record per query.

    Returns:
        Process exit code
    """
    options = SearchOptions(
        concurrency=args.concurrency,
        max_results=args.max_results,
        show=args.show,
        browser=args.browser,
        navigation_timeout=args.timeout,
        search_url=args.search_url,
    )
    reporter = ConsoleReporter(include_failures=args.include_failures)

    asyncio.run(run_search(args.query, options, reporter))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="websearch",
        description="Web search - run queries in a headless browser and extract readable articles",
    )

    # Global flags (before subcommands)
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=settings.LOG_LEVEL.upper(),
        help="Set logging verbosity (default: INFO)",
    )
    parser.add_argument(
        "--log-file",
        help="Write logs to file in addition to stderr",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    search_parser = subparsers.add_parser(
        "search", help="Search the web and extract the content of each result."
    )
    search_parser.add_argument(
        "--query",
        "-q",
        action="append",
        required=True,
        help="Search query; repeat for several queries",
    )
    search_parser.add_argument(
        "--concurrency",
        "-c",
        type=_positive_int,
        default=settings.CONCURRENCY,
        help="Maximum pages visited at once across all queries (default: 15)",
    )
    search_parser.add_argument(
        "--show",
        action="store_true",
        help="Show the browser window",
    )
    search_parser.add_argument(
        "--max-results",
        type=_non_negative_int,
        default=None,
        help="Total results across all queries (default: 10 per query)",
    )
    search_parser.add_argument(
        "--browser",
        default=settings.BROWSER,
        help="Browser name (chrome, chromium, edge, brave) or executable path",
    )
    search_parser.add_argument(
        "--timeout",
        type=_positive_float,
        default=settings.NAVIGATION_TIMEOUT,
        help="Navigation timeout in seconds (default: none)",
    )
    search_parser.add_argument(
        "--search-url",
        default=settings.SEARCH_URL,
        help="Search endpoint (default: https://www.google.com/search)",
    )
    search_parser.add_argument(
        "--include-failures",
        action="store_true",
        help="Add filtered links and their failure reason to each record",
    )
    search_parser.set_defaults(func=search_command)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    try:
        parser = build_parser()
    except WebSearchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    args = parser.parse_args(argv)

    # Configure logging based on flags
    setup_logging(
        level=args.log_level,
        log_file=getattr(args, 'log_file', None),
    )

    if not hasattr(args, "func"):
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except WebSearchError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted", file=sys.stderr)
        return 130
    except Exception:
        logger.exception("Unexpected error")
        return 1


if __name__ == "__main__":
    sys.exit(main())
