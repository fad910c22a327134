"""CLI subcommands for arcwatch."""

from __future__ import annotations

from arcwatch.commands.gomod import gomod

__all__ = ["gomod"]
