"""
Command line interface for fetching daily draw results.

Usage:
    drawfetcher --state ny                  # Latest New York results
    drawfetcher --state ct --state nj       # Several states
    drawfetcher --state all --json          # Every configured state as JSON
    drawfetcher --state ga --verbose        # Enable debug logging
"""

import argparse
import asyncio
import json
import sys
from typing import List, Optional

import structlog

from .config import load_config
from .exceptions import ConfigError, UnknownStateError
from .fetcher import DrawFetcher
from .logging_config import setup_logging
from .models import DailyReport

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_UNKNOWN_STATE = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drawfetcher",
        description="DrawFetcher - Fetch latest daily Pick 3 / Pick 4 results",
    )
    parser.add_argument(
        "--state",
        action="append",
        required=True,
        help="State code (repeatable), or 'all' for every configured state",
    )
    parser.add_argument(
        "--config",
        help="Path to config file (default: bundled settings.yaml)",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output results as JSON",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--log-format",
        choices=["console", "json"],
        help="Log output format (default: from config)",
    )
    return parser


def format_report(report: DailyReport) -> str:
    """Human-readable report block."""
    lines = [
        "=" * 40,
        f"State:    {report.state.upper()}",
        f"Date:     {report.date_iso.isoformat()}",
        f"Midday:   {report.midday or '-'}",
        f"Evening:  {report.evening or '-'}",
    ]
    if report.has_night:
        lines.append(f"Night:    {report.night or '-'}")
    lines.append("=" * 40)
    return "\n".join(lines)


async def main(argv: Optional[List[str]] = None) -> int:
    """Main execution function."""
    args = build_parser().parse_args(argv)

    try:
        config = load_config(args.config)
    except ConfigError as e:
        setup_logging()
        structlog.get_logger().error("config_load_failed", error=str(e))
        return EXIT_ERROR

    setup_logging(
        level=config["logging"].get("level", "INFO"),
        log_format=args.log_format or config["logging"].get("format", "console"),
        verbose=args.verbose,
    )
    logger = structlog.get_logger()

    try:
        fetcher = DrawFetcher.from_config(config)
    except ConfigError as e:
        logger.error("fetcher_init_failed", error=str(e))
        return EXIT_ERROR

    states = []
    for state in args.state:
        if state.lower() == "all":
            states.extend(sorted(fetcher.states))
        else:
            states.append(state)

    reports: List[DailyReport] = []
    try:
        for state in states:
            reports.append(await fetcher.resolve(state))
    except UnknownStateError as e:
        logger.error("unsupported_state", state=e.state, supported=sorted(fetcher.states))
        print(json.dumps({"error": "unsupported_state", "state": e.state}), file=sys.stderr)
        return EXIT_UNKNOWN_STATE

    if args.json:
        payload = [r.to_payload() for r in reports]
        print(json.dumps(payload[0] if len(payload) == 1 else payload, indent=2))
    else:
        for report in reports:
            print(format_report(report))

    return EXIT_OK


def run() -> None:
    """Console script entry point."""
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(130)
