"""Run configuration for the Collatz cache driver."""

from __future__ import annotations

import argparse
from dataclasses import asdict, dataclass
from typing import Any, Dict, Optional

from collatz_cache.core.eviction import POLICIES

MIN_RANDOM_VALUE = 1
MAX_RANDOM_VALUE = 1_000_000

SUPPORTED_POLICIES = tuple(POLICIES)


@dataclass(frozen=True)
class RunConfig:
    """Parameters of one driver run.

    Attributes:
        number_of_tests: How many random inputs to evaluate (N).
        min_value: Smallest random input, inclusive (MIN).
        max_value: Largest random input, inclusive (MAX).
        policy: Eviction policy name, normalized to upper case.
        cache_size: Cache capacity.
        seed: RNG seed for inputs and random replacement. None is
            nondeterministic.
    """

    number_of_tests: int
    min_value: int
    max_value: int
    policy: str
    cache_size: int
    seed: Optional[int] = None

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "RunConfig":
        return cls(
            number_of_tests=args.number_of_tests,
            min_value=args.min_value,
            max_value=args.max_value,
            policy=args.policy.strip().upper(),
            cache_size=args.cache_size,
            seed=args.seed,
        )

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ValueError: With a user-facing message on the first violation.
        """
        if (
            self.number_of_tests <= 0
            or self.min_value < MIN_RANDOM_VALUE
            or self.max_value <= self.min_value
        ):
            raise ValueError(
                f"Invalid values. Ensure N > 0, MIN >= {MIN_RANDOM_VALUE}, and MAX > MIN."
            )
        if self.policy not in SUPPORTED_POLICIES:
            raise ValueError("Unsupported cache policy! Use LRU, FIFO, or RR.")
        if self.cache_size <= 0:
            raise ValueError("Invalid cache size. Ensure CACHE_SIZE > 0.")

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
