"""
Structlog configuration for DrawFetcher.

Configured once by the CLI; library code only calls structlog.get_logger().
"""

import logging
import sys

import structlog
from structlog.types import EventDict


def add_app_context(logger: logging.Logger, method_name: str, event_dict: EventDict) -> EventDict:
    """Add application context to log events."""
    event_dict["app"] = "drawfetcher"
    return event_dict


def setup_logging(level: str = "INFO", log_format: str = "console", verbose: bool = False) -> None:
    """
    Configure structured logging.

    Args:
        level: Log level name (ignored when verbose)
        log_format: "console" for human-readable output, "json" for log shipping
        verbose: Force DEBUG level
    """
    log_level = "DEBUG" if verbose else str(level).upper()

    processors = [
        structlog.contextvars.merge_contextvars,
        add_app_context,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.add_log_level,
        structlog.processors.CallsiteParameterAdder(
            [structlog.processors.CallsiteParameter.FILENAME]
        ),
    ]

    if log_format == "json":
        # JSON output for parsing and storage
        processors += [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        # Console output for human readability
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
