"""
Logging utilities for arcwatch.

All diagnostics go to stderr under the ``arcwatch`` logger namespace so
that stdout carries nothing but report lines. Lookups run on worker
threads, so the verbose format includes the thread name.
"""

from __future__ import annotations

import os
import sys
import logging
import threading
from typing import IO, Optional

from arcwatch.constants import (
    LOG_DATE_FORMAT,
    LOG_DEFAULT_FORMAT,
    LOG_VERBOSE_FORMAT,
)

ROOT_LOGGER_NAME = "arcwatch"

_logging_configured: bool = False
_lock = threading.Lock()


class ColoredFormatter(logging.Formatter):
    """Formatter that colours the level name when stderr is a terminal."""

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
        if not color:
            return super().format(record)

        # Records are shared between handlers; restore the plain name after.
        original = record.levelname
        record.levelname = f"{color}{original}{self.RESET}"
        try:
            return super().format(record)
        finally:
            record.levelname = original

    @staticmethod
    def _should_use_color() -> bool:
        if os.environ.get("NO_COLOR") or os.environ.get("CI"):
            return False
        try:
            return sys.stderr.isatty()
        except (AttributeError, OSError):
            return False


def level_for_verbosity(verbose: int, debug: bool = False) -> int:
    """Map ``-v`` repetitions and ``--debug`` onto a logging level.

    ``--debug`` always wins; otherwise no flag means WARNING, ``-v`` INFO
    and ``-vv`` or more DEBUG.
    """
    if debug or verbose >= 2:
        return logging.DEBUG
    if verbose == 1:
        return logging.INFO
    return logging.WARNING


def setup_logging(
    *,
    level: int = logging.WARNING,
    verbose: bool = False,
    stream: Optional[IO[str]] = None,
) -> None:
    """Configure the ``arcwatch`` logger.

    Safe to call repeatedly; any previously installed handler is replaced.

    Args:
        level: Logging level (e.g. ``logging.DEBUG``).
        verbose: Use the timestamped format that includes the thread name.
        stream: Output stream; defaults to ``sys.stderr``.
    """
    global _logging_configured

    with _lock:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
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
    """Return a logger inside the ``arcwatch`` hierarchy.

    ``get_logger("resolver")`` and ``get_logger("arcwatch.resolver")`` name
    the same logger.
    """
    if not name or name == ROOT_LOGGER_NAME:
        logger = logging.getLogger(ROOT_LOGGER_NAME)
    elif name.startswith(ROOT_LOGGER_NAME + "."):
        logger = logging.getLogger(name)
    else:
        logger = logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")

    if not logger.handlers and (not logger.parent or not logger.parent.handlers):
        logger.addHandler(logging.NullHandler())

    return logger


def is_logging_configured() -> bool:
    """Return True once :func:`setup_logging` has run."""
    return _logging_configured


def disable_logging() -> None:
    """Silence all arcwatch logging output."""
    global _logging_configured

    with _lock:
        root_logger = logging.getLogger(ROOT_LOGGER_NAME)
        root_logger.handlers.clear()
        root_logger.addHandler(logging.NullHandler())
        root_logger.setLevel(logging.NOTSET)
        _logging_configured = False
