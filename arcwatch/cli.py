"""
Command-line interface for arcwatch.

This module provides the main CLI entry point and handles global options,
configuration loading, and command registration.
"""

from __future__ import annotations

import os
import sys
import logging
from pathlib import Path
from typing import Optional

import click

from arcwatch.config import load_config
from arcwatch.__version__ import __version__
from arcwatch.context import ArcwatchContext
from arcwatch.commands.gomod import gomod
from arcwatch.exceptions import ConfigError, ArcwatchError
from arcwatch.utils import (
    get_logger,
    level_for_verbosity,
    print_error,
    print_warning,
    reconfigure_console,
    setup_logging,
)

logger = get_logger("cli")


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--config",
    "-c",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to configuration file.",
    envvar="ARCWATCH_CONFIG",
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase verbosity (can be repeated: -v, -vv).",
)
@click.option(
    "--debug",
    is_flag=True,
    default=False,
    help="Print debug logs.",
)
@click.option(
    "--color/--no-color",
    default=True,
    help="Enable or disable colored output.",
    envvar="ARCWATCH_COLOR",
)
@click.version_option(
    version=__version__,
    prog_name="arcwatch",
    message="%(prog)s %(version)s",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config: Optional[Path],
    verbose: int,
    debug: bool,
    color: bool,
) -> None:
    """arcwatch: list archived dependencies.

    \b
    Available commands:
      arcwatch gomod               List archived go modules

    \b
    Examples:
      arcwatch gomod
      arcwatch gomod --indirect
      arcwatch --debug gomod ./services

    Set GH_TOKEN or GITHUB_TOKEN to raise the GitHub API rate limit.
    """
    # Respect NO_COLOR for downstream libraries
    if color:
        os.environ.pop("NO_COLOR", None)
    else:
        os.environ["NO_COLOR"] = "1"
    reconfigure_console()

    _configure_logging(verbose, debug)

    try:
        loaded_config = load_config(config)
    except ConfigError as exc:
        print_error(str(exc))
        ctx.exit(1)

    arcwatch_ctx = ArcwatchContext()
    arcwatch_ctx.config_path = loaded_config.source_path
    arcwatch_ctx.config = loaded_config
    arcwatch_ctx.color = color
    arcwatch_ctx.verbose = verbose
    arcwatch_ctx.debug = debug
    ctx.obj = arcwatch_ctx

    logger.debug("arcwatch v%s", __version__)
    logger.debug("Config path: %s", arcwatch_ctx.config_path)
    logger.debug("Effective configuration: %s", loaded_config.to_log_dict())


def _configure_logging(verbose: int, debug: bool) -> None:
    """Configure logging level based on ``-v`` and ``--debug``."""
    level = level_for_verbosity(verbose, debug)
    setup_logging(level=level, verbose=verbose >= 2)
    logger.debug("Logging initialized at %s level", logging.getLevelName(level))


cli.add_command(gomod)


def main() -> int:
    """Main entry point for the arcwatch CLI.

    Returns:
        Exit code:
            0   No archived dependencies found
            1   Archived dependencies found, or an application error
            2   Usage error (Click)
            130 Interrupted by user (Ctrl+C)
    """
    try:
        result = cli(standalone_mode=False)
        return result if isinstance(result, int) else 0

    except click.ClickException as exc:
        exc.show()
        return exc.exit_code

    except ArcwatchError as exc:
        print_error(str(exc))
        logger.debug("%s raised", type(exc).__name__, exc_info=True)
        return 1

    # click turns Ctrl+C into Abort when not in standalone mode
    except (click.exceptions.Abort, KeyboardInterrupt):
        print_warning("Interrupted")
        return 130

    except Exception as exc:
        print_error(f"Unexpected error: {exc}")
        logger.exception("Unhandled exception in CLI")
        return 1


if __name__ == "__main__":
    sys.exit(main())
