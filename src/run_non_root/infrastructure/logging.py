"""Structlog configuration for run-non-root.

Configures structlog with colored console output on a terminal and JSON
output otherwise. Everything goes to standard error so that standard
output belongs to the command that replaces this process.
"""

import logging
import os
import sys

import structlog


def log_level(debug: bool = False, quiet: bool = False) -> int:
    """Return the level filter for the given output flags.

    Quiet silences warnings and notes but never debug output.
    """
    if debug:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.INFO


def configure_logging(debug: bool = False, quiet: bool = False) -> None:
    """Configure structlog with appropriate processors.

    Uses colored console output when FORCE_COLOR is set or standard error
    is a TTY, otherwise JSON output.
    """
    # FORCE_COLOR=1 enables colors even in non-TTY environments (like Docker)
    force_color = os.environ.get("FORCE_COLOR", "").lower() in ("1", "true", "yes")
    is_tty = sys.stderr.isatty()
    use_colors = force_color or is_tty

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
    ]

    if use_colors:
        processors: list[structlog.types.Processor] = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level(debug, quiet)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
