"""``gomod`` command implementation for arcwatch.

Scans a directory tree for ``go.mod`` files and lists every GitHub
repository they depend on that has been archived.

The command wires together:

1. **GitHubRESTClient**: authenticated HTTP transport to the REST API.
2. **StatusCache** / **StatusClient**: cached ``archived``/``pushed_at``
   lookups.
3. **ResolutionEngine**: manifest discovery, dependency extraction,
   indirect filtering and concurrent lookups.

Typical usage::

    # Direct dependencies of every module below the current directory
    $ arcwatch gomod

    # Include // indirect requirements
    $ arcwatch gomod --indirect

    # Machine-readable output
    $ arcwatch gomod --format json services/

Exits with status 1 when at least one archived dependency is reported.
"""

from __future__ import annotations

import json
import click
from pathlib import Path
from typing import Optional

from arcwatch.exceptions import ArcwatchError
from arcwatch.context import pass_context, ArcwatchContext
from arcwatch.core import ResolutionEngine, StatusCache, StatusClient
from arcwatch.utils import (
    GitHubRESTClient,
    get_logger,
    print_error,
    print_success,
    print_warning,
    token_from_env,
)

logger = get_logger("commands.gomod")


@click.command()
@click.argument(
    "path",
    type=click.Path(exists=True, file_okay=False, path_type=Path),
    default=".",
)
@click.option(
    "--indirect/--no-indirect",
    default=None,
    help="Include indirect go modules.",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice(["text", "json"], case_sensitive=False),
    default="text",
    help="Output format.",
)
@click.option(
    "--max-workers",
    type=click.IntRange(min=1),
    default=None,
    help="Maximum number of concurrent repository lookups.",
)
@pass_context
@click.pass_context
def gomod(
    click_ctx: click.Context,
    ctx: ArcwatchContext,
    path: Path,
    indirect: Optional[bool],
    output_format: str,
    max_workers: Optional[int],
) -> None:
    """List archived go modules.

    Walks PATH (default: the current directory) for go.mod files, looks up
    every github.com module they require or replace, and prints one line
    per archived repository and referencing manifest.

    Modules that are only required as ``// indirect`` are skipped unless
    --indirect is given.
    """
    config = ctx.config
    include_indirect = config.include_indirect if indirect is None else indirect
    workers = max_workers if max_workers is not None else config.max_workers

    logger.debug(
        "Scanning %s (include_indirect=%s, max_workers=%s)",
        path,
        include_indirect,
        workers or "default",
    )

    try:
        count = _list_archived(
            path,
            include_indirect=include_indirect,
            output_format=output_format.lower(),
            api_url=config.api_url,
            cache_ttl=config.cache_ttl,
            cache_cleanup_interval=config.cache_cleanup_interval,
            max_workers=workers,
            request_delay=config.request_delay,
        )
    except ArcwatchError as exc:
        print_error(f"failed to list archived go modules: {exc}")
        click_ctx.exit(1)

    if output_format.lower() == "text":
        if count:
            print_warning(f"{count} archived dependency reference(s) found")
        else:
            print_success("No archived dependencies found")

    click_ctx.exit(1 if count > 0 else 0)


def _list_archived(
    path: Path,
    *,
    include_indirect: bool,
    output_format: str,
    api_url: str,
    cache_ttl: int,
    cache_cleanup_interval: int,
    max_workers: Optional[int],
    request_delay: float,
) -> int:
    """Run the resolution engine and render the report.

    Returns:
        Number of archived matches reported.

    Raises:
        ArcwatchError: The directory tree could not be walked.
    """
    token = token_from_env()
    if token is None:
        logger.debug("GH_TOKEN/GITHUB_TOKEN not set, using unauthenticated requests")

    with GitHubRESTClient(
        base_url=api_url,
        token=token,
        rate_limit_delay=request_delay,
    ) as http, StatusCache(
        ttl=cache_ttl,
        cleanup_interval=cache_cleanup_interval,
    ) as cache:
        engine = ResolutionEngine(
            StatusClient(http, cache),
            max_workers=max_workers,
            quiet=output_format == "json",
        )
        report = engine.run(path, include_indirect)

    if output_format == "json":
        matches = sorted(
            report.matches,
            key=lambda m: (str(m.manifest_path), m.repository),
        )
        click.echo(json.dumps([m.to_json() for m in matches], indent=2))

    return report.count
