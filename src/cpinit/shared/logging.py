"""Logging configuration for cpinit.

Configures structlog on top of standard logging. Output is human-readable on
a terminal and JSON when written to a log file, unless the caller picks a
format explicitly. Values bound with ``bind_run_context`` (the control plane
being initialized) are attached to every event until ``clear_run_context``.
"""

import logging
import sys
from pathlib import Path
from typing import Any

import structlog

# -v raises the level one step per flag
_VERBOSITY_LEVELS = ["warning", "info", "debug"]


def level_from_verbosity(verbose: int, default: str = "warning") -> str:
    """Map a -v count onto a log level name.

    Args:
        verbose: Number of -v flags given on the command line
        default: Level to use when no -v flag was given

    Returns:
        Log level name
    """
    if verbose <= 0:
        return default
    return _VERBOSITY_LEVELS[min(verbose, len(_VERBOSITY_LEVELS) - 1)]


def _renderer(json_output: bool, stream: Any) -> structlog.types.Processor:
    if json_output:
        return structlog.processors.JSONRenderer()
    colors = bool(getattr(stream, "isatty", lambda: False)())
    return structlog.dev.ConsoleRenderer(colors=colors)


def configure_logging(
    level: str = "warning",
    log_file: str | Path | None = None,
    json_output: bool | None = None,
) -> None:
    """Configure logging for the application.

    Called once per CLI invocation.

    Args:
        level: Log level (debug, info, warning, error, critical). Unknown
            names fall back to warning.
        log_file: Write to this file instead of stderr.
        json_output: Force JSON (True) or console (False) output. ``None``
            picks JSON for a log file and console output for stderr.
    """
    log_level = getattr(logging, level.upper(), logging.WARNING)
    if json_output is None:
        json_output = log_file is not None

    if log_file:
        handler: logging.Handler = logging.FileHandler(str(log_file))
        stream = None
    else:
        handler = logging.StreamHandler(sys.stderr)
        stream = sys.stderr
    handler.setLevel(log_level)

    logging.basicConfig(
        level=log_level,
        handlers=[handler],
        format="%(message)s",
        force=True,
    )

    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.format_exc_info,
        _renderer(json_output, stream),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def bind_run_context(**values: Any) -> None:
    """Attach values to every event logged from the current context."""
    structlog.contextvars.bind_contextvars(**values)


def clear_run_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structlog logger instance.

    Args:
        name: Logger name (typically __name__)
    """
    return structlog.get_logger(name)
