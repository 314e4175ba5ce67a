"""
Eviction policies for the bounded cache.

A policy decides two things: which slot to give up when the cache is full,
and whether a cache hit repositions the entry in the order list. Policies
never mutate storage on their own during selection; the cache removes the
chosen slot through :meth:`SlotStorage.remove`.

Policies:
- LRU: evict the least recently used entry; hits refresh recency.
- FIFO: evict the earliest inserted entry; hits change nothing.
- RR (random replacement): evict a uniformly chosen entry; hits change nothing.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Optional, Type, Union

import numpy as np

from collatz_cache.core.storage import NIL, SlotStorage

SeedLike = Union[int, np.random.SeedSequence, None]


class EvictionPolicy(ABC):
    """Strategy that picks a victim slot from a :class:`SlotStorage`."""

    name: str = ""

    @abstractmethod
    def select_for_eviction(self, storage: SlotStorage) -> Optional[int]:
        """Return the slot to evict, or None if the storage is empty."""

    def record_access(self, storage: SlotStorage, slot: int) -> None:
        """Hook called on every cache hit. No-op by default."""

    @staticmethod
    def _oldest(storage: SlotStorage) -> Optional[int]:
        """Head of the order list, or None when the storage is empty."""
        return None if storage.head == NIL else storage.head

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class LRUEvictionPolicy(EvictionPolicy):
    """Least-recently-used: the head of the order list is the coldest entry."""

    name = "LRU"

    def select_for_eviction(self, storage: SlotStorage) -> Optional[int]:
        return self._oldest(storage)

    def record_access(self, storage: SlotStorage, slot: int) -> None:
        storage.move_to_tail(slot)


class FIFOEvictionPolicy(EvictionPolicy):
    """First-in-first-out: the head of the order list was inserted first."""

    name = "FIFO"

    def select_for_eviction(self, storage: SlotStorage) -> Optional[int]:
        return self._oldest(storage)


class RandomEvictionPolicy(EvictionPolicy):
    """Random replacement over all live entries.

    Args:
        seed: Seed or ``SeedSequence`` for the policy's private ``numpy``
            generator. ``None`` draws fresh entropy from the OS.
    """

    name = "RR"

    def __init__(self, seed: SeedLike = None) -> None:
        self._seed = seed
        self._rng = np.random.default_rng(seed)

    def select_for_eviction(self, storage: SlotStorage) -> Optional[int]:
        size = len(storage)
        if size == 0:
            return None
        position = int(self._rng.integers(0, size))
        return storage.slot_at(position)

    def __repr__(self) -> str:
        return f"RandomEvictionPolicy(seed={self._seed})"


POLICIES: Dict[str, Type[EvictionPolicy]] = {
    LRUEvictionPolicy.name: LRUEvictionPolicy,
    FIFOEvictionPolicy.name: FIFOEvictionPolicy,
    RandomEvictionPolicy.name: RandomEvictionPolicy,
}


def create_policy(
    policy: Union[str, EvictionPolicy], seed: SeedLike = None
) -> EvictionPolicy:
    """Resolve a policy from its name ("LRU", "FIFO", "RR") or pass one through.

    Names are matched case-insensitively. ``seed`` is only used by the random
    policy.

    Raises:
        ValueError: If the name is not a supported policy.
    """
    if isinstance(policy, EvictionPolicy):
        return policy

    key = str(policy).strip().upper()
    policy_cls = POLICIES.get(key)
    if policy_cls is None:
        supported = ", ".join(POLICIES)
        raise ValueError(f"Unsupported cache policy '{policy}' (use {supported})")
    if policy_cls is RandomEvictionPolicy:
        return RandomEvictionPolicy(seed=seed)
    return policy_cls()
