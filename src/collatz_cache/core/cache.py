"""
Bounded Collatz step cache.

Maps an input integer to its precomputed Collatz step count and holds at
most ``max_entries`` of them. When the cache is full, an insert first evicts
exactly one entry chosen by the configured eviction policy.

Thread-safe: every public method runs under one re-entrant lock per cache,
and :meth:`CollatzCache.get_or_compute` holds it across lookup, evaluation
and insert.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Iterator, List, Optional, Union

from collatz_cache.core.collatz import collatz_steps
from collatz_cache.core.eviction import EvictionPolicy, SeedLike, create_policy
from collatz_cache.core.storage import SlotStorage

logger = logging.getLogger(__name__)

Evaluator = Callable[[int], int]


@dataclass(frozen=True)
class CacheEntry:
    """One cached (input, step count) pair."""

    key: int
    steps: int


@dataclass(frozen=True)
class LookupResult:
    """Outcome of a lookup-or-compute call."""

    steps: int
    hit: bool


@dataclass
class CacheStats:
    """Cache counters at the time :meth:`CollatzCache.stats` was called."""

    hits: int
    misses: int
    evictions: int
    size: int
    max_size: int
    memory_bytes: int

    @property
    def lookups(self) -> int:
        return self.hits + self.misses

    @property
    def hit_rate(self) -> float:
        """Fraction of lookups that hit, in ``[0, 1]``."""
        total = self.lookups
        return self.hits / total if total > 0 else 0.0

    @property
    def memory_mb(self) -> float:
        return self.memory_bytes / (1024 * 1024)


class CollatzCache:
    """Fixed-capacity cache of Collatz step counts.

    Args:
        max_entries: Capacity. Must be positive and never changes.
        policy: Eviction policy name ("LRU", "FIFO", "RR") or an
            :class:`EvictionPolicy` instance.
        seed: Seed for the random replacement policy. Ignored by the others.

    Example:
        >>> cache = CollatzCache(max_entries=2, policy="LRU")
        >>> cache.get_or_compute(27)
        LookupResult(steps=111, hit=False)
        >>> cache.get_or_compute(27)
        LookupResult(steps=111, hit=True)
    """

    def __init__(
        self,
        max_entries: int = 1000,
        policy: Union[str, EvictionPolicy] = "LRU",
        seed: SeedLike = None,
    ) -> None:
        if max_entries <= 0:
            raise ValueError(f"max_entries must be positive, got {max_entries}")

        self._max_entries = int(max_entries)
        self._policy = create_policy(policy, seed=seed)
        self._storage = SlotStorage(self._max_entries)
        self._lock = threading.RLock()

        self._hits = 0
        self._misses = 0
        self._evictions = 0

        logger.debug(
            "Created cache: max_entries=%d, policy=%s", self._max_entries, self._policy.name
        )

    @property
    def max_entries(self) -> int:
        return self._max_entries

    @property
    def policy(self) -> EvictionPolicy:
        return self._policy

    def lookup(self, key: int) -> Optional[int]:
        """Return the cached step count for ``key``, or None on a miss.

        A hit is reported to the policy, so under LRU the entry becomes the
        most recently used one.
        """
        with self._lock:
            slot = self._storage.find(key)
            if slot is None:
                self._misses += 1
                return None

            self._hits += 1
            self._policy.record_access(self._storage, slot)
            return self._storage.get_steps(slot)

    def insert(self, key: int, steps: int) -> None:
        """Add ``key`` with its step count, evicting one entry if full.

        Both values are checked before anything is evicted, so a rejected
        insert leaves the cache unchanged.

        Raises:
            ValueError: If ``key`` is already cached. Use
                :meth:`get_or_compute` to avoid this.
            OverflowError: If ``key`` or ``steps`` does not fit in int64.
        """
        key, steps = SlotStorage.coerce_entry(key, steps)
        with self._lock:
            if key in self._storage:
                raise ValueError(f"key {key} is already cached")
            if self._storage.is_full():
                self.evict_one()
            self._storage.add(key, steps)

    def evict_one(self) -> Optional[CacheEntry]:
        """Remove one entry chosen by the policy.

        Returns:
            The evicted entry, or None when the cache is empty.
        """
        with self._lock:
            slot = self._policy.select_for_eviction(self._storage)
            if slot is None:
                return None

            key, steps = self._storage.remove(slot)
            self._evictions += 1
            logger.debug("Evicted key=%d (policy=%s)", key, self._policy.name)
            return CacheEntry(key=key, steps=steps)

    def get_or_compute(
        self, key: int, evaluate_fn: Evaluator = collatz_steps
    ) -> LookupResult:
        """Return the step count for ``key``, computing and caching on a miss."""
        with self._lock:
            cached = self.lookup(key)
            if cached is not None:
                return LookupResult(steps=cached, hit=True)

            steps = int(evaluate_fn(key))
            self.insert(key, steps)
            return LookupResult(steps=steps, hit=False)

    def keys(self) -> List[int]:
        """Cached keys in eviction order, oldest first."""
        with self._lock:
            return [self._storage.get_key(slot) for slot in self._storage.iter_slots()]

    def entries(self) -> List[CacheEntry]:
        """Cached entries in eviction order, oldest first."""
        with self._lock:
            return [
                CacheEntry(
                    key=self._storage.get_key(slot),
                    steps=self._storage.get_steps(slot),
                )
                for slot in self._storage.iter_slots()
            ]

    def clear(self) -> None:
        """Drop every entry. Counters are kept."""
        with self._lock:
            self._storage.clear()

    def memory_bytes(self) -> int:
        with self._lock:
            return self._storage.memory_usage()

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                size=len(self._storage),
                max_size=self._max_entries,
                memory_bytes=self._storage.memory_usage(),
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._storage)

    def __contains__(self, key: object) -> bool:
        # Membership test only; never touches recency
        with self._lock:
            return key in self._storage

    def __iter__(self) -> Iterator[int]:
        return iter(self.keys())

    def __repr__(self) -> str:
        return (
            f"CollatzCache(size={len(self)}, max_entries={self._max_entries}, "
            f"policy={self._policy.name})"
        )


def get_or_compute(
    cache: CollatzCache, key: int, evaluate_fn: Evaluator = collatz_steps
) -> LookupResult:
    """Module-level form of :meth:`CollatzCache.get_or_compute`."""
    return cache.get_or_compute(key, evaluate_fn)
