"""
Console output utilities for arcwatch using Rich.

Status messages are user-facing but are not part of the report, so the
console writes to stderr; stdout is reserved for report lines. For
diagnostic output use :mod:`arcwatch.utils.logger`.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import Optional

from rich.theme import Theme
from rich.console import Console

ARCWATCH_THEME = Theme(
    {
        "success": "bold green",
        "error": "bold red",
        "warning": "bold yellow",
        "info": "bold cyan",
    }
)

_console: Optional[Console] = None
_console_lock = threading.Lock()


def _should_use_color() -> bool:
    """Return True if colored output should be enabled."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("CI"):
        return False
    try:
        return sys.stderr.isatty()
    except (AttributeError, OSError):
        return False


def _get_console() -> Console:
    """Return the shared stderr Console, creating it on first use."""
    global _console

    if _console is None:
        with _console_lock:
            if _console is None:
                use_color = _should_use_color()
                _console = Console(
                    stderr=True,
                    theme=ARCWATCH_THEME,
                    no_color=not use_color,
                    highlight=False,
                )
    return _console


def reconfigure_console() -> None:
    """Drop the shared console so the next call re-reads the environment."""
    global _console
    with _console_lock:
        _console = None


def print_success(message: str, *, prefix: str = "[OK]") -> None:
    _get_console().print(f"{prefix} {message}", style="success", markup=False)


def print_error(message: str, *, prefix: str = "[ERROR]") -> None:
    _get_console().print(f"{prefix} {message}", style="error", markup=False)


def print_warning(message: str, *, prefix: str = "[WARNING]") -> None:
    _get_console().print(f"{prefix} {message}", style="warning", markup=False)
