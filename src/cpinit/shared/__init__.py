"""Shared modules for cpinit.

This module provides functionality used by every command:
- Paths (~/.cpinit layout)
- Logging (structlog configuration)
"""

from .logging import (
    bind_run_context,
    clear_run_context,
    configure_logging,
    get_logger,
    level_from_verbosity,
)
from .paths import CONFIG_FILE, CPINIT_DIR

__all__ = [
    # Paths
    "CPINIT_DIR",
    "CONFIG_FILE",
    # Logging
    "bind_run_context",
    "clear_run_context",
    "configure_logging",
    "get_logger",
    "level_from_verbosity",
]
