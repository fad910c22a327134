"""
Centralized constants for arcwatch.

This module defines immutable configuration values used across arcwatch,
including GitHub endpoints, HTTP settings, cache lifetimes, and logging
formats. All values are intended to be treated as read-only.
"""

from typing import Final, Optional

# ---------------------------------------------------------------------------
# Project metadata
# ---------------------------------------------------------------------------

#: HTTP User-Agent template used for outbound requests.
USER_AGENT_TEMPLATE: Final[str] = "arcwatch/{version}"

# ---------------------------------------------------------------------------
# GitHub
# ---------------------------------------------------------------------------

#: Host prefix identifying GitHub-hosted module paths.
GITHUB_MODULE_PREFIX: Final[str] = "github.com/"

#: Base URL for browsing a repository, formatted with ``owner/name``.
GITHUB_REPO_URL: Final[str] = "https://github.com/{repository}"

#: Default base URL of the GitHub REST API.
DEFAULT_API_URL: Final[str] = "https://api.github.com"

#: REST API path for repository metadata.
REPO_API_PATH: Final[str] = "repos/{owner}/{name}"

#: Media type requested from the REST API.
GITHUB_ACCEPT_HEADER: Final[str] = "application/vnd.github+json"

#: Pinned REST API version.
GITHUB_API_VERSION: Final[str] = "2022-11-28"

#: Environment variables consulted for an API token, in priority order.
TOKEN_ENV_VARS: Final[tuple] = ("GH_TOKEN", "GITHUB_TOKEN")

# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------

#: File name of a Go module manifest.
GOMOD_FILENAME: Final[str] = "go.mod"

#: Maximum allowed file size (in bytes) when reading manifests.
MAX_FILE_SIZE: Final[int] = 10 * 1024 * 1024  # 10 MB

# ---------------------------------------------------------------------------
# HTTP configuration
# ---------------------------------------------------------------------------

#: Default network timeout in seconds.
DEFAULT_TIMEOUT: Final[int] = 30

#: Maximum number of retries for failed HTTP requests.
DEFAULT_MAX_RETRIES: Final[int] = 3

#: Minimum delay between GitHub API requests, in seconds (0 disables spacing).
DEFAULT_REQUEST_DELAY: Final[float] = 0.0

# ---------------------------------------------------------------------------
# Status cache
# ---------------------------------------------------------------------------

#: Lifetime of a cached repository status, in seconds.
DEFAULT_CACHE_TTL: Final[int] = 60 * 60

#: Interval between sweeps of expired cache entries, in seconds.
DEFAULT_CACHE_CLEANUP_INTERVAL: Final[int] = 2 * 60 * 60

# ---------------------------------------------------------------------------
# Configuration defaults
# ---------------------------------------------------------------------------

#: Whether indirect requirements are reported by default.
DEFAULT_INCLUDE_INDIRECT: Final[bool] = False

#: Worker pool size; ``None`` lets the executor pick the host default.
DEFAULT_MAX_WORKERS: Final[Optional[int]] = None

# ---------------------------------------------------------------------------
# Logging configuration
# ---------------------------------------------------------------------------

#: Timestamp format for verbose logging.
LOG_DATE_FORMAT: Final[str] = "%Y-%m-%d %H:%M:%S"

#: Default log format (non-verbose).
LOG_DEFAULT_FORMAT: Final[str] = "%(levelname)s: %(message)s"

#: Verbose log format including timestamp, logger and thread name.
LOG_VERBOSE_FORMAT: Final[str] = (
    "%(asctime)s - %(name)s [%(threadName)s] - %(levelname)s - %(message)s"
)
