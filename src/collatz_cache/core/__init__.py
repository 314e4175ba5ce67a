"""Core cache, eviction policies and the Collatz evaluator."""

from collatz_cache.core.cache import (
    CacheEntry,
    CacheStats,
    CollatzCache,
    LookupResult,
    get_or_compute,
)
from collatz_cache.core.collatz import collatz_steps
from collatz_cache.core.eviction import (
    POLICIES,
    EvictionPolicy,
    FIFOEvictionPolicy,
    LRUEvictionPolicy,
    RandomEvictionPolicy,
    create_policy,
)
from collatz_cache.core.storage import NIL, SlotStorage

__all__ = [
    "CacheEntry",
    "CacheStats",
    "CollatzCache",
    "LookupResult",
    "get_or_compute",
    "collatz_steps",
    "POLICIES",
    "EvictionPolicy",
    "FIFOEvictionPolicy",
    "LRUEvictionPolicy",
    "RandomEvictionPolicy",
    "create_policy",
    "NIL",
    "SlotStorage",
]
