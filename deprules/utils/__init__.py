"""
Utility helpers for deprules.

This package provides reusable utilities used across deprules, including:

- Console output helpers (Rich-based)
- Logging configuration and retrieval
- Filesystem safety helpers

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Logging utilities
# ---------------------------------------------------------------------------

from deprules.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    level_for_severity,
    level_for_verbosity,
    setup_logging,
)

# ---------------------------------------------------------------------------
# Filesystem utilities
# ---------------------------------------------------------------------------

from deprules.utils.filesystem import safe_read_file

# ---------------------------------------------------------------------------
# Console utilities
# ---------------------------------------------------------------------------

from deprules.utils.console import (
    colorize_severity,
    get_raw_console,
    print_error,
    print_success,
    print_table,
    print_warning,
    reconfigure_console,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    # Console
    "print_error",
    "print_table",
    "print_success",
    "print_warning",
    "get_raw_console",
    "reconfigure_console",
    "colorize_severity",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    "level_for_severity",
    "level_for_verbosity",
    # Filesystem
    "safe_read_file",
]
