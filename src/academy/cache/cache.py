"""In-memory, time-bounded memoization of API read responses.

:class:`ResponseCache` sits in front of the HTTP client and holds decoded
JSON payloads keyed by resource path and query parameters. Entries are
stamped with the time they were stored and a TTL chosen from a small set of
policy tiers (:class:`~academy.models.CacheTier`); an entry is served only
while ``now - stored_at < ttl``.

Expiry is lazy. Nothing runs in the background: a stale entry is dropped
the next time somebody asks for it. The store lives exactly as long as the
``ResponseCache`` instance and holds nothing that cannot be fetched again,
so it is safe to throw away at any point.

Cache keys are built by :func:`make_key`, which serialises parameters with
sorted keys so that identical queries always resolve to the same entry
regardless of parameter ordering.

Only :class:`~academy.api.ApiService` should call the mutating operations
(:meth:`ResponseCache.put`, :meth:`ResponseCache.invalidate`,
:meth:`ResponseCache.invalidate_all`), which keeps the invalidation rules for
writes in one place.

See Also:
    :class:`~academy.models.CacheConfig` -- the Pydantic model that
    controls ``enabled`` and the tier durations.
"""

from __future__ import annotations

import json
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from academy.models import CacheConfig, CacheTier

logger = logging.getLogger(__name__)

Loader = Callable[[], Awaitable[Any]]
TTL = Union[CacheTier, float, int]


def make_key(resource: str, params: Optional[Mapping[str, Any]] = None) -> str:
    """Derive the cache key for a logical request.

    The key is a pure function of *resource* and *params*. Parameters are
    serialised as compact JSON with sorted keys, so ``{"a": 1, "b": 2}`` and
    ``{"b": 2, "a": 1}`` produce the same key while any differing value
    produces a different one. Parameter names are compared as strings, the
    way they travel in a query string, so ``{1: "a"}`` and ``{"1": "a"}``
    share a key. ``None`` and an empty mapping both yield the bare resource
    path.

    Args:
        resource: Logical resource identifier, e.g. ``"/api/courses"``.
        params: Optional flat query parameters.

    Returns:
        The cache key string.

    Example::

        >>> make_key("/api/blogs", {"category": "python"})
        '/api/blogs?{"category":"python"}'
    """
    if not params:
        return resource
    encoded = json.dumps(
        {str(name): value for name, value in params.items()},
        sort_keys=True,
        separators=(",", ":"),
        default=str,
    )
    return f"{resource}?{encoded}"


@dataclass(frozen=True)
class CacheEntry:
    """A single cached payload.

    Entries are immutable: updating a key replaces the whole entry with a
    fresh ``stored_at``.

    Attributes:
        key: The key produced by :func:`make_key`.
        value: The decoded response body, stored as-is.
        stored_at: Clock reading (seconds) at insertion.
        ttl: Freshness window in seconds, fixed at insertion.
    """

    key: str
    value: Any
    stored_at: float
    ttl: float

    def is_valid(self, now: float) -> bool:
        return now - self.stored_at < self.ttl


class ResponseCache:
    """Process-local TTL cache for API read responses.

    Args:
        config: Cache configuration (``enabled`` flag and tier durations).
            Defaults to :class:`~academy.models.CacheConfig` defaults.
        clock: Zero-argument callable returning the current time in seconds.
            Defaults to :func:`time.monotonic`; tests inject a fake clock.

    Example::

        cache = ResponseCache()
        cache.put("/api/courses", {"success": True, "data": []}, CacheTier.MEDIUM)
        cache.get("/api/courses")
    """

    def __init__(
        self,
        config: Optional[CacheConfig] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or CacheConfig()
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._hits = 0
        self._misses = 0

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def get(self, key: str) -> Optional[Any]:
        """Return the value stored under *key* if it is still fresh.

        An entry whose TTL has elapsed is removed and reported as a miss.
        Never performs I/O.

        Args:
            key: Cache key, usually from :func:`make_key`.

        Returns:
            The stored value, or ``None`` on a miss.
        """
        entry = self._entries.get(key)
        if entry is None:
            self._misses += 1
            return None
        if not entry.is_valid(self._clock()):
            del self._entries[key]
            self._misses += 1
            logger.debug("Cache entry expired: %s", key)
            return None
        self._hits += 1
        return entry.value

    def put(self, key: str, value: Any, ttl: TTL) -> None:
        """Store *value* under *key*, replacing any existing entry.

        Last write wins; there is no version check. Does nothing when the
        cache is disabled. A ``None`` *value* is the absent marker and can
        never be served back, so it only drops any existing entry.

        Args:
            key: Cache key, usually from :func:`make_key`.
            value: Payload to store. It is kept by reference and not copied.
            ttl: A :class:`~academy.models.CacheTier` or a duration in seconds.
        """
        if not self._config.enabled:
            return
        if value is None:
            self._entries.pop(key, None)
            logger.debug("Not caching empty payload for %s", key)
            return
        seconds = self._resolve_ttl(ttl)
        self._entries[key] = CacheEntry(
            key=key, value=value, stored_at=self._clock(), ttl=seconds
        )
        logger.debug("Cached %s for %ss", key, seconds)

    def invalidate(self, key: str) -> None:
        """Remove the entry for *key*. Missing keys are ignored."""
        if self._entries.pop(key, None) is not None:
            logger.debug("Invalidated %s", key)

    def invalidate_all(self) -> None:
        """Remove every entry."""
        count = len(self._entries)
        self._entries.clear()
        if count:
            logger.debug("Invalidated all %d cache entries", count)

    async def fetch_with_cache(self, key: str, ttl: TTL, loader: Loader) -> Any:
        """Return the cached value for *key*, loading and storing it on a miss.

        If *loader* raises, the exception propagates unchanged and nothing is
        stored, so the next call retries the load. A ``None`` result is not
        stored either. Two concurrent misses for the same key both invoke
        their loader; the one that finishes last wins.

        Args:
            key: Cache key, usually from :func:`make_key`.
            ttl: A :class:`~academy.models.CacheTier` or a duration in seconds.
            loader: Zero-argument coroutine function producing the value.

        Returns:
            The cached or freshly loaded value.
        """
        cached = self.get(key)
        if cached is not None:
            return cached
        value = await loader()
        self.put(key, value, ttl)
        return value

    def stats(self) -> dict[str, Any]:
        """Return cache statistics.

        Expired entries are purged first so that ``size`` counts only entries
        that would be served.

        Returns:
            A ``dict`` with ``enabled`` (bool), ``size``, ``hits``,
            ``misses``, and ``ttl_seconds`` (tier name to seconds).
        """
        self._purge_expired()
        return {
            "enabled": self._config.enabled,
            "size": len(self._entries),
            "hits": self._hits,
            "misses": self._misses,
            "ttl_seconds": {tier.value: self._config.ttl_for(tier) for tier in CacheTier},
        }

    def keys(self) -> list[str]:
        """Return the keys of all fresh entries."""
        self._purge_expired()
        return list(self._entries)

    def __len__(self) -> int:
        self._purge_expired()
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        entry = self._entries.get(key) if isinstance(key, str) else None
        return entry is not None and entry.is_valid(self._clock())

    # ------------------------------------------------------------------ #
    # Private helpers
    # ------------------------------------------------------------------ #

    def _resolve_ttl(self, ttl: TTL) -> float:
        if isinstance(ttl, CacheTier):
            return self._config.ttl_for(ttl)
        return float(ttl)

    def _purge_expired(self) -> None:
        now = self._clock()
        for key in [k for k, e in self._entries.items() if not e.is_valid(now)]:
            del self._entries[key]
