"""Collatz step counting."""

from __future__ import annotations


def collatz_steps(n: int) -> int:
    """Return how many Collatz steps it takes ``n`` to reach 1.

    Even values are halved, odd values become ``3n + 1``.

    Raises:
        ValueError: If ``n`` is less than 1.
    """
    n = int(n)
    if n < 1:
        raise ValueError(f"Collatz input must be >= 1, got {n}")

    steps = 0
    while n != 1:
        if n % 2 == 0:
            n //= 2
        else:
            n = 3 * n + 1
        steps += 1
    return steps
