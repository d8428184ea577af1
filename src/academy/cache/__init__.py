"""In-memory response caching for academy.

This package provides :class:`ResponseCache`, a best-effort, time-bounded
memoization layer for API reads, and :func:`make_key`, the deterministic
key derivation it relies on. Entries are held in process memory only and
expire lazily according to the tier durations in the ``cache`` section of
the global configuration (:class:`~academy.models.CacheConfig`).

The cache is owned by :class:`~academy.api.ApiService`, which decides the
tier for each read and evicts entries after writes.
"""

from academy.cache.cache import CacheEntry, ResponseCache, make_key

__all__ = ["CacheEntry", "ResponseCache", "make_key"]
