"""
Utility helpers for arcwatch.

- Console output helpers (Rich-based, stderr)
- Logging configuration and retrieval
- Manifest discovery and reading
- GitHub REST client

Only symbols listed in ``__all__`` are considered part of the public API.
"""

from __future__ import annotations

from arcwatch.utils.filesystem import find_manifest_files, safe_read_file

from arcwatch.utils.logger import (
    disable_logging,
    get_logger,
    is_logging_configured,
    level_for_verbosity,
    setup_logging,
)

from arcwatch.utils.console import (
    print_error,
    print_success,
    print_warning,
    reconfigure_console,
)

from arcwatch.utils.http import GitHubRESTClient, token_from_env

__all__ = [
    # Console
    "print_error",
    "print_success",
    "print_warning",
    "reconfigure_console",
    # Logging
    "get_logger",
    "setup_logging",
    "disable_logging",
    "is_logging_configured",
    "level_for_verbosity",
    # Filesystem
    "find_manifest_files",
    "safe_read_file",
    # HTTP
    "GitHubRESTClient",
    "token_from_env",
]
