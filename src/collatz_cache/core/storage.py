"""
Slot storage for the bounded cache.

Entries live in a dense arena of fixed capacity: parallel ``int64`` arrays
hold the key, the step count and the prev/next links of every slot. Slot
indices are stable for as long as an entry lives, and freed slots are reused
by later inserts. A doubly-linked list threaded through ``_prev``/``_next``
keeps the order sequence (oldest at ``head``, newest at ``tail``), and a dict
maps each key to its slot.

Every mutation goes through :meth:`SlotStorage.add`, :meth:`SlotStorage.remove`
or :meth:`SlotStorage.move_to_tail`, which keep the order list and the key
index consistent with each other.
"""

from __future__ import annotations

import sys
from typing import Dict, Iterator, List, Optional, Tuple

import numpy as np

NIL = -1
"""Link value meaning "no slot"."""

# keys, steps, prev, next
_BYTES_PER_SLOT = 4 * np.dtype(np.int64).itemsize


class SlotStorage:
    """Fixed-capacity arena of (key, steps) slots with an ordered link list.

    Args:
        capacity: Maximum number of live slots. Must be positive.
    """

    def __init__(self, capacity: int) -> None:
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")

        self._capacity = int(capacity)
        self._keys = np.zeros(self._capacity, dtype=np.int64)
        self._steps = np.zeros(self._capacity, dtype=np.int64)
        self._prev = np.full(self._capacity, NIL, dtype=np.int64)
        self._next = np.full(self._capacity, NIL, dtype=np.int64)

        self._index: Dict[int, int] = {}
        # Popped from the end, so slot 0 is handed out first
        self._free: List[int] = list(range(self._capacity - 1, -1, -1))
        self._head = NIL
        self._tail = NIL

    @property
    def capacity(self) -> int:
        """Maximum number of live slots."""
        return self._capacity

    @property
    def head(self) -> int:
        """Slot at the oldest end of the order list, or ``NIL``."""
        return self._head

    @property
    def tail(self) -> int:
        """Slot at the newest end of the order list, or ``NIL``."""
        return self._tail

    def is_full(self) -> bool:
        return len(self._index) >= self._capacity

    def find(self, key: int) -> Optional[int]:
        """Return the slot holding ``key``, or None."""
        return self._index.get(int(key))

    def get_key(self, slot: int) -> int:
        self._check_live(slot)
        return int(self._keys[slot])

    def get_steps(self, slot: int) -> int:
        self._check_live(slot)
        return int(self._steps[slot])

    @staticmethod
    def coerce_entry(key: int, steps: int) -> Tuple[int, int]:
        """Convert a (key, steps) pair to the int64 range the arrays hold.

        Raises:
            OverflowError: If either value does not fit in int64.
            ValueError, TypeError: If either value is not an integer.
        """
        return int(np.int64(key)), int(np.int64(steps))

    def add(self, key: int, steps: int) -> int:
        """Store a new entry at the newest end of the order list.

        Args:
            key: Input value. Must not already be stored.
            steps: Step count to store for ``key``.

        Returns:
            The slot index assigned to the entry.

        Raises:
            ValueError: If the storage is full or ``key`` is already stored.
            OverflowError: If ``key`` or ``steps`` does not fit in int64.
        """
        key, steps = self.coerce_entry(key, steps)
        if key in self._index:
            raise ValueError(f"key {key} is already cached")
        if not self._free:
            raise ValueError(f"Storage is full (capacity={self._capacity})")

        slot = self._free.pop()
        self._keys[slot] = key
        self._steps[slot] = steps
        self._link_at_tail(slot)
        self._index[key] = slot
        return slot

    def remove(self, slot: int) -> Tuple[int, int]:
        """Unlink ``slot`` from wherever it sits and release it.

        Head, tail and interior slots are all handled here, so callers never
        special-case the list boundaries.

        Returns:
            The ``(key, steps)`` pair that was stored in the slot.
        """
        self._check_live(slot)
        key = int(self._keys[slot])
        steps = int(self._steps[slot])

        self._unlink(slot)
        del self._index[key]
        self._free.append(slot)
        return key, steps

    def move_to_tail(self, slot: int) -> None:
        """Reposition ``slot`` as the newest entry in the order list."""
        self._check_live(slot)
        if slot == self._tail:
            return
        self._unlink(slot)
        self._link_at_tail(slot)

    def slot_at(self, position: int) -> int:
        """Return the slot at ``position`` in the order list (0 is the head)."""
        size = len(self._index)
        if position < 0 or position >= size:
            raise IndexError(f"position {position} out of bounds for size {size}")

        # Walk from whichever end is closer
        if position <= size // 2:
            slot = self._head
            for _ in range(position):
                slot = int(self._next[slot])
        else:
            slot = self._tail
            for _ in range(size - 1 - position):
                slot = int(self._prev[slot])
        return slot

    def iter_slots(self) -> Iterator[int]:
        """Yield live slots from oldest to newest."""
        slot = self._head
        while slot != NIL:
            yield slot
            slot = int(self._next[slot])

    def clear(self) -> None:
        self._prev.fill(NIL)
        self._next.fill(NIL)
        self._index.clear()
        self._free = list(range(self._capacity - 1, -1, -1))
        self._head = NIL
        self._tail = NIL

    def memory_usage(self) -> int:
        """Bytes held by the slot arrays plus the key index."""
        return self._capacity * _BYTES_PER_SLOT + sys.getsizeof(self._index)

    def _check_live(self, slot: int) -> None:
        if slot < 0 or slot >= self._capacity:
            raise IndexError(f"slot {slot} out of bounds for capacity {self._capacity}")
        if self._index.get(int(self._keys[slot])) != slot:
            raise IndexError(f"slot {slot} is not in use")

    def _link_at_tail(self, slot: int) -> None:
        # Both links are always written; freed slots may hold stale values
        self._prev[slot] = self._tail
        self._next[slot] = NIL
        if self._tail == NIL:
            self._head = slot
        else:
            self._next[self._tail] = slot
        self._tail = slot

    def _unlink(self, slot: int) -> None:
        prev_slot = int(self._prev[slot])
        next_slot = int(self._next[slot])

        if prev_slot == NIL:
            self._head = next_slot
        else:
            self._next[prev_slot] = next_slot

        if next_slot == NIL:
            self._tail = prev_slot
        else:
            self._prev[next_slot] = prev_slot

        self._prev[slot] = NIL
        self._next[slot] = NIL

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, key: object) -> bool:
        return key in self._index

    def __repr__(self) -> str:
        return f"SlotStorage(capacity={self._capacity}, len={len(self)})"
