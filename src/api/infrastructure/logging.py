"""Structlog configuration shared by the HTTP app and the CLI.

Logs go to stderr so the CLI can print plans and reports on stdout.
Console rendering is used on a TTY, JSON everywhere else.
"""

import logging
import os
import sys

import structlog


def _use_colors() -> bool:
    # FORCE_COLOR=1 keeps colors in non-TTY environments (like containers)
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    return force_color or sys.stderr.isatty()


def configure_logging(level: str = "INFO", json_output: bool | None = None) -> None:
    """Configure structlog processors and the minimum level.

    Args:
        level: Minimum log level name (e.g. "DEBUG", "INFO")
        json_output: Force JSON (True) or console (False) rendering;
            detected from the terminal when None
    """
    min_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)
    if json_output is None:
        json_output = not _use_colors()

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_output:
        processors: list[structlog.types.Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(min_level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )
