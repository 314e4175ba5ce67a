"""Unit tests for eviction policies.

Tests:
- LRU ordering
- Access updates order (LRU only)
- FIFO ignores access
- Random replacement coverage and boundary victims
- Policy resolution by name
"""

import sys
from collections import Counter
from pathlib import Path

import pytest
from scipy import stats

# Add src to path
_SRC_PATH = Path(__file__).resolve().parents[2] / "src"
if str(_SRC_PATH) not in sys.path:
    sys.path.insert(0, str(_SRC_PATH))

from collatz_cache.core.eviction import (
    POLICIES,
    EvictionPolicy,
    FIFOEvictionPolicy,
    LRUEvictionPolicy,
    RandomEvictionPolicy,
    create_policy,
)
from collatz_cache.core.storage import NIL, SlotStorage


def make_storage(*keys: int) -> SlotStorage:
    storage = SlotStorage(capacity=max(len(keys), 1))
    for key in keys:
        storage.add(key, 0)
    return storage


def victim_key(policy: EvictionPolicy, storage: SlotStorage) -> int:
    slot = policy.select_for_eviction(storage)
    assert slot is not None
    return storage.get_key(slot)


class TestLRUEvictionPolicy:
    """Test LRU eviction policy."""

    def test_empty_returns_none(self) -> None:
        """Eviction on empty storage is a no-op."""
        policy = LRUEvictionPolicy()
        assert policy.select_for_eviction(make_storage()) is None

    def test_lru_order_insert(self) -> None:
        """First inserted should be evicted first."""
        storage = make_storage(1, 2, 3)
        assert victim_key(LRUEvictionPolicy(), storage) == 1

    def test_access_updates_order(self) -> None:
        """Accessing an item should move it to end."""
        policy = LRUEvictionPolicy()
        storage = make_storage(1, 2, 3)

        policy.record_access(storage, storage.find(1))

        assert victim_key(policy, storage) == 2
        assert storage.get_key(storage.tail) == 1

    def test_access_tail_keeps_order(self) -> None:
        policy = LRUEvictionPolicy()
        storage = make_storage(1, 2, 3)
        policy.record_access(storage, storage.find(3))
        assert victim_key(policy, storage) == 1

    def test_selection_does_not_mutate(self) -> None:
        policy = LRUEvictionPolicy()
        storage = make_storage(1, 2, 3)
        policy.select_for_eviction(storage)
        policy.select_for_eviction(storage)
        assert len(storage) == 3
        assert victim_key(policy, storage) == 1


class TestFIFOEvictionPolicy:
    """Test FIFO eviction policy."""

    def test_empty_returns_none(self) -> None:
        assert FIFOEvictionPolicy().select_for_eviction(make_storage()) is None

    def test_fifo_order_insert(self) -> None:
        storage = make_storage(4, 7, 27)
        assert victim_key(FIFOEvictionPolicy(), storage) == 4

    def test_access_does_not_change_order(self) -> None:
        """Hits never change the FIFO victim."""
        policy = FIFOEvictionPolicy()
        storage = make_storage(4, 7, 27)

        for _ in range(3):
            policy.record_access(storage, storage.find(4))

        assert victim_key(policy, storage) == 4
        assert storage.get_key(storage.tail) == 27


class TestRandomEvictionPolicy:
    """Test random replacement policy."""

    def test_empty_returns_none(self) -> None:
        assert RandomEvictionPolicy(seed=0).select_for_eviction(make_storage()) is None

    def test_single_entry_always_evicted(self) -> None:
        """Size 1 must always pick the sole entry."""
        policy = RandomEvictionPolicy(seed=7)
        storage = make_storage(42)
        for _ in range(50):
            assert victim_key(policy, storage) == 42

    def test_access_does_not_change_order(self) -> None:
        policy = RandomEvictionPolicy(seed=0)
        storage = make_storage(1, 2, 3)
        policy.record_access(storage, storage.find(1))
        assert [storage.get_key(s) for s in storage.iter_slots()] == [1, 2, 3]

    def test_seeded_selection_is_reproducible(self) -> None:
        storage = make_storage(*range(10))
        policy_a = RandomEvictionPolicy(seed=123)
        policy_b = RandomEvictionPolicy(seed=123)
        picks_a = [victim_key(policy_a, storage) for _ in range(20)]
        picks_b = [victim_key(policy_b, storage) for _ in range(20)]
        assert picks_a == picks_b

    def test_victim_always_live(self) -> None:
        """Draining by random eviction must hit head, tail and interior safely."""
        policy = RandomEvictionPolicy(seed=2024)
        storage = make_storage(*range(20))
        evicted = []

        while len(storage):
            slot = policy.select_for_eviction(storage)
            assert slot is not None
            key, _ = storage.remove(slot)
            evicted.append(key)
            if len(storage):
                assert int(storage._prev[storage.head]) == NIL
                assert int(storage._next[storage.tail]) == NIL

        assert sorted(evicted) == list(range(20))
        assert storage.head == NIL
        assert storage.tail == NIL

    def test_uniform_coverage(self) -> None:
        """Every position is chosen with roughly equal probability."""
        capacity = 5
        trials = 5000
        policy = RandomEvictionPolicy(seed=31337)
        storage = make_storage(*range(capacity))

        counts = Counter(victim_key(policy, storage) for _ in range(trials))

        assert set(counts) == set(range(capacity))
        expected = trials / capacity
        for key in range(capacity):
            assert abs(counts[key] - expected) < 0.2 * expected

        observed = [counts[key] for key in range(capacity)]
        _, p_value = stats.chisquare(observed)
        assert p_value > 1e-4

    def test_repr(self) -> None:
        assert "seed=5" in repr(RandomEvictionPolicy(seed=5))


class TestCreatePolicy:
    """Test policy resolution."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("LRU", LRUEvictionPolicy),
            ("FIFO", FIFOEvictionPolicy),
            ("RR", RandomEvictionPolicy),
            ("lru", LRUEvictionPolicy),
            (" fifo ", FIFOEvictionPolicy),
        ],
    )
    def test_resolve_by_name(self, name: str, expected: type) -> None:
        assert isinstance(create_policy(name), expected)

    def test_instance_passthrough(self) -> None:
        policy = FIFOEvictionPolicy()
        assert create_policy(policy) is policy

    def test_unknown_name_raises(self) -> None:
        with pytest.raises(ValueError, match="Unsupported cache policy"):
            create_policy("LFU")

    def test_registry_names(self) -> None:
        assert set(POLICIES) == {"LRU", "FIFO", "RR"}

    def test_base_is_abstract(self) -> None:
        with pytest.raises(TypeError):
            EvictionPolicy()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
