"""
collatz_cache: memoized Collatz step counts in a bounded cache.

Quick start:
    >>> from collatz_cache import CollatzCache
    >>> cache = CollatzCache(max_entries=100, policy="FIFO")
    >>> result = cache.get_or_compute(27)
    >>> result.steps, result.hit
    (111, False)
"""

from collatz_cache.core import (
    CacheEntry,
    CacheStats,
    CollatzCache,
    EvictionPolicy,
    FIFOEvictionPolicy,
    LookupResult,
    LRUEvictionPolicy,
    RandomEvictionPolicy,
    collatz_steps,
    create_policy,
    get_or_compute,
)

__version__ = "0.1.0"

__all__ = [
    "CacheEntry",
    "CacheStats",
    "CollatzCache",
    "EvictionPolicy",
    "FIFOEvictionPolicy",
    "LookupResult",
    "LRUEvictionPolicy",
    "RandomEvictionPolicy",
    "collatz_steps",
    "create_policy",
    "get_or_compute",
    "__version__",
]
