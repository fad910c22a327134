"""Cached GitHub repository status lookups.

:class:`StatusClient` answers "is this repository archived, and when was
it last pushed to?" for an ``owner/name`` identity. Answers are served
from a :class:`StatusCache` when possible; otherwise the repository is
fetched through a :class:`RESTClient` and the decoded result is cached.
Failures are never cached, so a later lookup retries the request.

The client is safe to share between threads. Concurrent misses for the
same repository may each fetch it; the last write to the cache wins.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Union

from arcwatch.core.cache import StatusCache
from arcwatch.utils import get_logger
from arcwatch.constants import REPO_API_PATH
from arcwatch.exceptions import FetchError
from arcwatch.models import RepoStatus, RepositoryIdentity

logger = get_logger("status_client")


class RESTClient(Protocol):
    """The part of a GitHub REST client that :class:`StatusClient` uses."""

    def get(self, path: str) -> Dict[str, Any]:
        ...


class StatusClient:
    """Repository status lookups backed by a TTL cache.

    Args:
        rest_client: Transport used on cache misses.
        cache: Cache to consult and populate; a default
            :class:`StatusCache` is created when omitted.

    Example::

        >>> with GitHubRESTClient() as http:
        ...     client = StatusClient(http)
        ...     client.get_repo_result("golang/mock").archived
        True
    """

    def __init__(
        self,
        rest_client: RESTClient,
        cache: Optional[StatusCache] = None,
    ) -> None:
        self.rest_client = rest_client
        self.cache = cache if cache is not None else StatusCache()

    def get_repo_result(
        self,
        repository: Union[str, RepositoryIdentity],
    ) -> RepoStatus:
        """Return the archived flag and last push time of *repository*.

        Args:
            repository: ``owner/name`` string or identity.

        Raises:
            InvalidIdentityError: *repository* is not ``owner/name``.
            FetchError: The request failed or the response could not be
                decoded. Nothing is cached in that case.
        """
        identity = (
            repository
            if isinstance(repository, RepositoryIdentity)
            else RepositoryIdentity.parse(repository)
        )

        cached = self.cache.get(identity)
        if cached is not None:
            logger.debug("using cache for %s", identity)
            return cached

        path = REPO_API_PATH.format(owner=identity.owner, name=identity.name)

        try:
            payload = self.rest_client.get(path)
            status = RepoStatus.from_api(payload)
        except Exception as exc:  # noqa: BLE001 - any transport or decode failure
            raise FetchError(
                f"failed to fetch repo {identity}",
                repository=str(identity),
                original_error=exc,
            ) from exc

        self.cache.set(identity, status)
        return status

    def close(self) -> None:
        """Stop the cache sweeper."""
        self.cache.close()
