"""Thread-safe TTL cache for repository status.

:class:`StatusCache` maps :class:`RepositoryIdentity` to
:class:`RepoStatus`. Entries expire ``ttl`` seconds after they were last
written; a daemon sweeper thread removes expired entries every
``cleanup_interval`` seconds so that memory stays bounded. Reads never
wait for a sweep: an expired entry that has not yet been swept is simply
reported as missing.

The sweeper holds only a weak reference to its cache and stops once the
cache is closed or garbage collected.

Typical usage::

    with StatusCache(ttl=3600, cleanup_interval=7200) as cache:
        cache.set(identity, status)
        cache.get(identity)          # -> status, until it expires
"""

from __future__ import annotations

import time
import weakref
import threading
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

from arcwatch.models import RepoStatus, RepositoryIdentity
from arcwatch.utils import get_logger
from arcwatch.constants import DEFAULT_CACHE_CLEANUP_INTERVAL, DEFAULT_CACHE_TTL

logger = get_logger("cache")

Clock = Callable[[], float]


@dataclass(frozen=True)
class CacheEntry:
    """A cached status and the clock reading at which it expires."""

    value: RepoStatus
    expires_at: float

    def is_expired(self, now: float) -> bool:
        return now > self.expires_at


def _sweep_periodically(
    cache_ref: "weakref.ReferenceType[StatusCache]",
    interval: float,
    stop: threading.Event,
) -> None:
    while not stop.wait(interval):
        cache = cache_ref()
        if cache is None:
            return
        cache.delete_expired()
        # Drop the strong reference before sleeping again.
        del cache


class StatusCache:
    """Expiring, lock-protected store of repository status snapshots.

    Args:
        ttl: Seconds an entry stays valid after it is written.
        cleanup_interval: Seconds between sweeps of expired entries;
            ``0`` or less disables the sweeper thread.
        clock: Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        ttl: float = DEFAULT_CACHE_TTL,
        cleanup_interval: float = DEFAULT_CACHE_CLEANUP_INTERVAL,
        *,
        clock: Clock = time.monotonic,
    ) -> None:
        if ttl <= 0:
            raise ValueError("ttl must be positive")

        self.ttl = ttl
        self.cleanup_interval = cleanup_interval
        self._clock = clock
        self._entries: Dict[RepositoryIdentity, CacheEntry] = {}
        self._lock = threading.Lock()
        self._stop = threading.Event()
        self._sweeper: Optional[threading.Thread] = None

        if cleanup_interval > 0:
            self._sweeper = threading.Thread(
                target=_sweep_periodically,
                args=(weakref.ref(self), cleanup_interval, self._stop),
                name="arcwatch-cache-sweeper",
                daemon=True,
            )
            self._sweeper.start()
            weakref.finalize(self, self._stop.set)

    def __enter__(self) -> "StatusCache":
        return self

    def __exit__(self, exc_type: Any, exc: Any, tb: Any) -> None:
        self.close()

    def get(self, identity: RepositoryIdentity) -> Optional[RepoStatus]:
        """Return the cached status, or ``None`` if absent or expired."""
        with self._lock:
            entry = self._entries.get(identity)
        if entry is None or entry.is_expired(self._clock()):
            return None
        return entry.value

    def set(self, identity: RepositoryIdentity, status: RepoStatus) -> None:
        """Store *status*, replacing any entry and restarting its TTL."""
        entry = CacheEntry(value=status, expires_at=self._clock() + self.ttl)
        with self._lock:
            self._entries[identity] = entry

    def delete_expired(self) -> int:
        """Remove every expired entry and return how many were removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Evicted %d expired cache entries", len(expired))
        return len(expired)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def close(self) -> None:
        """Stop the sweeper thread. The cache stays readable."""
        self._stop.set()
        if self._sweeper is not None and self._sweeper is not threading.current_thread():
            self._sweeper.join(timeout=1.0)

    @property
    def sweeper_alive(self) -> bool:
        return self._sweeper is not None and self._sweeper.is_alive()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, identity: object) -> bool:
        return isinstance(identity, RepositoryIdentity) and self.get(identity) is not None
