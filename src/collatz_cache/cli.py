"""
Command-line driver.

Draws N random inputs in [MIN, MAX], asks the cache for each input's Collatz
step count, prints one table row per input and finishes with the cache hit
percentage.

Usage:
    collatz-cache <N> <MIN> <MAX> <CACHE_POLICY> <CACHE_SIZE> [--seed S]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, NoReturn, Optional, TextIO, Tuple

import numpy as np

from collatz_cache.config import RunConfig
from collatz_cache.core.cache import CollatzCache
from collatz_cache.reporting import RunSummary, format_header, format_row, format_summary

logger = logging.getLogger(__name__)


INPUT_FORMAT_ERROR = (
    "Invalid input format. Please provide integers for N, MIN, MAX, "
    "a string for CACHE_POLICY, and CACHE_SIZE."
)


class DriverArgumentParser(argparse.ArgumentParser):
    """Reports malformed arguments as ``Error: ...`` with exit status 1."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(1, f"Error: {INPUT_FORMAT_ERROR} ({message})\n")


def build_parser() -> argparse.ArgumentParser:
    parser = DriverArgumentParser(
        prog="collatz-cache",
        description="Compute Collatz step counts for random inputs through a bounded cache.",
    )
    parser.add_argument("number_of_tests", metavar="N", type=int, help="Number of random inputs")
    parser.add_argument("min_value", metavar="MIN", type=int, help="Smallest input (>= 1)")
    parser.add_argument("max_value", metavar="MAX", type=int, help="Largest input (> MIN)")
    parser.add_argument(
        "policy", metavar="CACHE_POLICY", help="Eviction policy: LRU, FIFO or RR"
    )
    parser.add_argument("cache_size", metavar="CACHE_SIZE", type=int, help="Cache capacity")
    parser.add_argument(
        "--seed", type=int, default=None, help="Run seed; inputs and random replacement draw from independent child streams"
    )
    parser.add_argument(
        "--json", type=Path, default=None, metavar="PATH", help="Write a run summary as JSON"
    )
    parser.add_argument(
        "--quiet", "-q", action="store_true", help="Only print the hit percentage"
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (DEBUG traces every eviction)",
    )
    return parser


def seed_streams(seed: Optional[int]) -> Tuple[np.random.SeedSequence, np.random.SeedSequence]:
    """Independent (input, policy) seed streams derived from one run seed."""
    input_seq, policy_seq = np.random.SeedSequence(seed).spawn(2)
    return input_seq, policy_seq


def generate_inputs(
    config: RunConfig, seed: Optional[np.random.SeedSequence] = None
) -> np.ndarray:
    """Uniform random inputs in ``[min_value, max_value]``.

    Without an explicit ``seed`` the input stream of :func:`seed_streams` is used.
    """
    if seed is None:
        seed, _ = seed_streams(config.seed)
    rng = np.random.default_rng(seed)
    return rng.integers(
        config.min_value, config.max_value, size=config.number_of_tests, endpoint=True
    )


def run(config: RunConfig, out: Optional[TextIO] = None, quiet: bool = False) -> RunSummary:
    """Evaluate every generated input through a fresh cache."""
    out = out if out is not None else sys.stdout
    input_seed, policy_seed = seed_streams(config.seed)
    cache = CollatzCache(max_entries=config.cache_size, policy=config.policy, seed=policy_seed)
    logger.info("Running %d tests with %r", config.number_of_tests, cache)

    if not quiet:
        for line in format_header():
            print(line, file=out)

    hits = 0
    for number in generate_inputs(config, input_seed):
        result = cache.get_or_compute(int(number))
        hits += int(result.hit)
        if not quiet:
            print(format_row(int(number), result.steps, result.hit), file=out)

    summary = RunSummary(
        config=config.to_dict(),
        total=config.number_of_tests,
        hits=hits,
        evictions=cache.stats().evictions,
    )
    print(format_summary(summary.hit_percentage), file=out)
    return summary


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format="%(message)s")

    config = RunConfig.from_args(args)
    try:
        config.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    summary = run(config, quiet=args.quiet)

    if args.json is not None:
        args.json.parent.mkdir(parents=True, exist_ok=True)
        with open(args.json, "w") as f:
            json.dump(summary.to_dict(), f, indent=2)
        logger.info("Summary saved to: %s", args.json)

    return 0


if __name__ == "__main__":
    sys.exit(main())
