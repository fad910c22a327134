"""
HTTP client utilities for arcwatch.

This module provides a synchronous GitHub REST client with retry logic,
request spacing and GitHub-specific headers. A single instance is shared
by every lookup thread; ``httpx.Client`` is safe for that.
"""

from __future__ import annotations

import os
import math
import time
import httpx
import random
import threading
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, Optional, cast

from arcwatch.utils.logger import get_logger
from arcwatch.__version__ import __version__
from arcwatch.exceptions import NetworkError
from arcwatch.constants import (
    DEFAULT_API_URL,
    DEFAULT_TIMEOUT,
    TOKEN_ENV_VARS,
    GITHUB_API_VERSION,
    DEFAULT_MAX_RETRIES,
    USER_AGENT_TEMPLATE,
    GITHUB_ACCEPT_HEADER,
)

logger = get_logger("http")


def token_from_env() -> Optional[str]:
    """Return the first non-empty token from ``GH_TOKEN``/``GITHUB_TOKEN``."""
    for var in TOKEN_ENV_VARS:
        value = os.environ.get(var, "").strip()
        if value:
            return value
    return None


def retry_after_seconds(value: Optional[str], now: Optional[datetime] = None) -> int:
    """Convert a ``Retry-After`` header into whole seconds to wait.

    Both the delay-seconds and the HTTP-date forms are accepted. Missing,
    malformed or already elapsed values fall back to one second.

    Args:
        value: Raw header value, or ``None`` when the header is absent.
        now: Reference time for the HTTP-date form (defaults to UTC now).

    Returns:
        Seconds to sleep, never less than 1.
    """
    if value is None:
        return 1

    value = value.strip()
    if value.isdigit():
        return max(int(value), 1)

    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        logger.debug("Ignoring malformed Retry-After header: %r", value)
        return 1

    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return max(math.ceil((retry_at - now).total_seconds()), 1)


class GitHubRESTClient:
    """GitHub REST API client with retries and rate limiting.

    Args:
        base_url: API root, e.g. ``https://api.github.com``.
        token: Bearer token; anonymous requests are made when ``None``.
        timeout: Request timeout in seconds.
        max_retries: Maximum number of retry attempts.
        rate_limit_delay: Minimum delay (seconds) between requests.
        user_agent: Custom User-Agent header value.
        transport: Optional httpx transport (used by tests).

    Example:
        >>> with GitHubRESTClient(token=token_from_env()) as client:
        ...     repo = client.get("repos/octocat/hello-world")
    """

    def __init__(
        self,
        *,
        base_url: str = DEFAULT_API_URL,
        token: Optional[str] = None,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        rate_limit_delay: float = 0.0,
        user_agent: Optional[str] = None,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.rate_limit_delay = rate_limit_delay
        self.user_agent = user_agent or USER_AGENT_TEMPLATE.format(version=__version__)

        self._token = token
        self._transport = transport
        self._client: Optional[httpx.Client] = None
        self._client_lock = threading.Lock()
        self._last_request_time: float = 0.0
        self._rate_limit_lock = threading.Lock()
        self._max_429_retries: int = 5

    def __enter__(self) -> "GitHubRESTClient":
        self._ensure_client()
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    @property
    def authenticated(self) -> bool:
        return self._token is not None

    def _headers(self) -> Dict[str, str]:
        headers = {
            "Accept": GITHUB_ACCEPT_HEADER,
            "User-Agent": self.user_agent,
            "X-GitHub-Api-Version": GITHUB_API_VERSION,
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    def _ensure_client(self) -> httpx.Client:
        """Create the underlying httpx client on first use."""
        with self._client_lock:
            if self._client is None:
                kwargs: Dict[str, Any] = {
                    "base_url": self.base_url,
                    "timeout": httpx.Timeout(self.timeout),
                    "follow_redirects": True,
                    "headers": self._headers(),
                }
                if self._transport is not None:
                    kwargs["transport"] = self._transport
                else:
                    kwargs["http2"] = True
                self._client = httpx.Client(**kwargs)
            return self._client

    def close(self) -> None:
        """Close the underlying HTTP client."""
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None

    def _rate_limit(self) -> None:
        """Enforce a minimum delay between outgoing requests."""
        if self.rate_limit_delay <= 0:
            return

        with self._rate_limit_lock:
            now = time.monotonic()
            elapsed = now - self._last_request_time

            if elapsed < self.rate_limit_delay:
                delay = self.rate_limit_delay - elapsed
                self._last_request_time = now + delay
            else:
                delay = 0.0
                self._last_request_time = now

        if delay > 0:
            time.sleep(delay)

    def _request_with_retry(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        """Execute a request, retrying timeouts, network errors and 5xx."""
        client = self._ensure_client()
        url = path.lstrip("/")
        last_exc: Optional[Exception] = None
        retry_429_count = 0
        attempt = 0

        while attempt <= self.max_retries:
            try:
                self._rate_limit()
                response = client.request(method, url, **kwargs)

                if response.status_code == 429:
                    retry_429_count += 1
                    if retry_429_count > self._max_429_retries:
                        raise NetworkError(
                            f"Rate limit exceeded after {self._max_429_retries} retries",
                            url=url,
                            status_code=429,
                        )
                    retry_after = retry_after_seconds(response.headers.get("Retry-After"))
                    logger.warning(
                        "Rate limited (429), retrying after %ds (%d/%d)",
                        retry_after,
                        retry_429_count,
                        self._max_429_retries,
                    )
                    time.sleep(retry_after)
                    continue

                if response.status_code >= 400:
                    response.raise_for_status()

                return response

            except httpx.TimeoutException as exc:
                last_exc = exc
                logger.debug(
                    "Request timeout (%d/%d): %s",
                    attempt + 1,
                    self.max_retries + 1,
                    url,
                )

            except httpx.TransportError as exc:
                last_exc = exc
                logger.debug(
                    "Network error (%d/%d): %s",
                    attempt + 1,
                    self.max_retries + 1,
                    exc,
                )

            except httpx.HTTPStatusError as exc:
                if 400 <= exc.response.status_code < 500:
                    raise NetworkError(
                        f"HTTP {exc.response.status_code} error for {url}",
                        url=url,
                        status_code=exc.response.status_code,
                        response_body=exc.response.text,
                    ) from exc
                last_exc = exc
                logger.debug(
                    "HTTP %d error (%d/%d): %s",
                    exc.response.status_code,
                    attempt + 1,
                    self.max_retries + 1,
                    url,
                )

            if attempt < self.max_retries:
                delay = (2**attempt) + random.uniform(0.0, 0.3)
                logger.debug("Retrying in %.2fs", delay)
                time.sleep(delay)
            attempt += 1

        raise NetworkError(
            f"Request failed after {self.max_retries + 1} attempts: {url}",
            url=url,
        ) from last_exc

    def get(self, path: str) -> Dict[str, Any]:
        """GET *path* relative to the API root and decode the JSON object.

        Raises:
            NetworkError: The request failed or the body is not a JSON object.
        """
        response = self._request_with_retry("GET", path)

        try:
            data = response.json()
        except ValueError as exc:
            raise NetworkError(
                f"Invalid JSON response from {path}",
                url=path,
                response_body=response.text,
            ) from exc

        if not isinstance(data, dict):
            raise NetworkError(
                f"Expected JSON object from {path}",
                url=path,
                response_body=response.text,
            )

        return cast(Dict[str, Any], data)
