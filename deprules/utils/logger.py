"""
Logging utilities for deprules.

This module centralizes logger configuration, formatting, and retrieval
for the deprules package. Library code only ever calls
:func:`get_logger`; the CLI calls :func:`setup_logging` once with the
level picked from ``-v`` flags.

Findings are reported through :mod:`deprules.utils.console`. They are
also echoed to the log at a level derived from their severity so that
``-vv`` runs show the full inspection trace in one stream.
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Mapping, Optional

from deprules.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

_ROOT_NAME = "deprules"

_logging_configured: bool = False
_lock = threading.Lock()

#: Log level used when echoing a finding of the given severity.
SEVERITY_LOG_LEVELS: Mapping[str, int] = {
    "OK": logging.DEBUG,
    "INFO": logging.DEBUG,
    "VERIFY": logging.INFO,
    "BAD": logging.WARNING,
}


class ColoredFormatter(logging.Formatter):
    """Logging formatter that colors the level name on terminals."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(
        self,
        fmt: str,
        *,
        datefmt: Optional[str] = None,
        use_color: bool = True,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        if not (self.use_color and self._should_use_color()):
            return super().format(record)

        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)

        # color a copy so other handlers see the plain level name
        original = record.levelname
        record.levelname = f"{color}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original

    @staticmethod
    def _should_use_color() -> bool:
        """Determine whether ANSI colors should be emitted."""
        if os.environ.get("NO_COLOR") or os.environ.get("CI"):
            return False
        try:
            return sys.stderr.isatty()
        except (AttributeError, OSError):
            return False


def level_for_verbosity(verbose: int) -> int:
    """Map a ``-v`` count to a logging level.

    0 is WARNING, 1 is INFO, 2 or more is DEBUG.
    """
    if verbose <= 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG


def level_for_severity(severity: str) -> int:
    """Log level for echoing a finding with severity label ``severity``."""
    return SEVERITY_LOG_LEVELS.get(severity.upper(), logging.INFO)


def setup_logging(
    *,
    level: int = logging.INFO,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """Configure the ``deprules`` logger hierarchy.

    Safe to call more than once: existing handlers are replaced.

    Args:
        level: Logging level (e.g., ``logging.INFO``, ``logging.DEBUG``).
        verbose: Use the verbose format with timestamps and logger names.
        stream: Output stream; defaults to ``sys.stderr``.
    """
    global _logging_configured

    with _lock:
        root_logger = logging.getLogger(_ROOT_NAME)
        root_logger.handlers.clear()
        root_logger.setLevel(level)

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setLevel(level)
        handler.setFormatter(
            ColoredFormatter(
                LOG_VERBOSE_FORMAT if verbose else LOG_DEFAULT_FORMAT,
                datefmt=LOG_DATE_FORMAT,
                use_color=not os.environ.get("NO_COLOR"),
            )
        )

        root_logger.addHandler(handler)
        root_logger.propagate = False
        _logging_configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return a logger within the deprules namespace.

    Args:
        name: Logger name, relative (``"core.macros"``) or absolute
            (``"deprules.core.macros"``).

    Returns:
        A logger instance under the ``deprules`` hierarchy.
    """
    if not name or name == _ROOT_NAME:
        logger = logging.getLogger(_ROOT_NAME)
    elif name.startswith(f"{_ROOT_NAME}."):
        logger = logging.getLogger(name)
    else:
        logger = logging.getLogger(f"{_ROOT_NAME}.{name}")

    # Stay silent until the application configures logging
    if not logger.handlers and (not logger.parent or not logger.parent.handlers):
        logger.addHandler(logging.NullHandler())

    return logger


def is_logging_configured() -> bool:
    """Return True if deprules logging has been configured."""
    return _logging_configured


def disable_logging() -> None:
    """Disable all deprules logging output."""
    global _logging_configured

    with _lock:
        root_logger = logging.getLogger(_ROOT_NAME)
        root_logger.handlers.clear()
        root_logger.addHandler(logging.NullHandler())
        root_logger.setLevel(logging.NOTSET)
        _logging_configured = False
