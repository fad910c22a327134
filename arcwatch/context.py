"""
Shared context object for arcwatch CLI commands.

Created once per invocation by the top-level group and handed to
subcommands through Click's context mechanism.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click

from arcwatch.config import ArcwatchConfig


class ArcwatchContext:
    """Global context object for arcwatch CLI commands.

    Attributes:
        config_path: Path to the configuration file, if one was loaded.
        config: Effective configuration.
        verbose: Verbosity level (0=WARNING, 1=INFO, 2+=DEBUG).
        debug: Whether ``--debug`` was given.
        color: Whether colored terminal output is enabled.
    """

    __slots__ = ("config_path", "config", "verbose", "debug", "color")

    def __init__(self) -> None:
        self.config_path: Optional[Path] = None
        self.config: ArcwatchConfig = ArcwatchConfig()
        self.verbose: int = 0
        self.debug: bool = False
        self.color: bool = True


#: Click decorator for injecting :class:`ArcwatchContext` into commands.
pass_context = click.make_pass_decorator(ArcwatchContext, ensure=True)
