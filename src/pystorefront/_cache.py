"""In-process TTL cache for API responses."""

from __future__ import annotations

import asyncio
import contextlib
import hashlib
import json
import logging
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from pystorefront._constants import CACHE_KEY_PREFIX_LENGTH, DEFAULT_CACHE_TTL, DEFAULT_SWEEP_INTERVAL

_logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(slots=True)
class CacheEntry:
    """A cached response and the moment it was stored."""

    key: str
    data: Any
    stored_at: float
    ttl: float

    def is_expired(self, now: float) -> bool:
        return now - self.stored_at > self.ttl


def create_key(query: str, variables: Any = None) -> str:
    """Build a deterministic cache key for ``(query, variables)``.

    The readable prefix keeps keys greppable in debug logs; the digest of the
    full document keeps queries that share a prefix apart.
    """
    variables_str = json.dumps(variables, sort_keys=True, separators=(",", ":"), default=str) if variables else ""
    digest = hashlib.sha256(query.encode("utf-8")).hexdigest()[:16]
    return f"{query[:CACHE_KEY_PREFIX_LENGTH]}#{digest}:{variables_str}"


class ResponseCache:
    """Keyed response cache with per-entry time-to-live.

    Entries are returned as stored (no copy); callers treat them as
    read-only. Expired entries are evicted lazily by :meth:`get` or in bulk
    by :meth:`cleanup`.
    """

    def __init__(
        self,
        *,
        default_ttl: float = DEFAULT_CACHE_TTL,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._default_ttl = default_ttl
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries

    @property
    def default_ttl(self) -> float:
        return self._default_ttl

    def set(self, key: str, data: Any, ttl: float | None = None) -> None:
        """Store *data* under *key*, replacing any existing entry."""
        effective_ttl = self._default_ttl if ttl is None else ttl
        entry = CacheEntry(key=key, data=data, stored_at=self._clock(), ttl=effective_ttl)
        with self._lock:
            self._entries[key] = entry

    def get(self, key: str) -> Any | None:
        """Return cached data for *key*, or ``None`` if missing or expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return None
            return entry.data

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def cleanup(self) -> int:
        """Evict every expired entry and return how many were dropped."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if entry.is_expired(now)]
            for key in expired:
                del self._entries[key]
        return len(expired)

    @staticmethod
    def create_key(query: str, variables: Any = None) -> str:
        return create_key(query, variables)


async def memoize(
    cache: ResponseCache,
    key: str,
    fn: Callable[[], Awaitable[T]],
    ttl: float | None = None,
) -> T:
    """Return the cached value for *key*, computing and storing it on a miss."""
    cached = cache.get(key)
    if cached is not None:
        return cached  # type: ignore[no-any-return]
    result = await fn()
    cache.set(key, result, ttl)
    return result


class CacheSweeper:
    """Periodic :meth:`ResponseCache.cleanup` for long-lived hosts.

    Started and stopped explicitly by the composition root; nothing here
    inspects the runtime environment.
    """

    def __init__(self, cache: ResponseCache, *, interval: float = DEFAULT_SWEEP_INTERVAL) -> None:
        if interval <= 0:
            raise ValueError(f"interval must be > 0, got {interval}")
        self._cache = cache
        self._interval = interval
        self._task: asyncio.Task[None] | None = None

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Begin sweeping on the running event loop. No-op if already started."""
        if self.is_running:
            return
        self._task = asyncio.get_running_loop().create_task(self._run(), name="pystorefront-cache-sweeper")

    async def stop(self) -> None:
        task = self._task
        self._task = None
        if task is None:
            return
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            evicted = self._cache.cleanup()
            if evicted:
                _logger.debug("Evicted %d expired cache entries", evicted)
