#!/usr/bin/env python3
"""
Validate Eviction Logic

Validates that the production cache handles the reference scenarios:
- LRU, capacity 2: insert 4, 7; lookup 4; insert 27 -> 7 evicted
- FIFO, capacity 2: same steps -> 4 evicted (lookup ignored)
- RR: eviction frequencies are uniform (chi-square)

Requirements:
- Uses ONLY production code from src/
"""

from __future__ import annotations

import json
import logging
import sys
from collections import Counter
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List

from scipy import stats

# Add src to path
_ROOT = Path(__file__).resolve().parents[2]
_SRC_PATH = _ROOT / "src"
sys.path.insert(0, str(_SRC_PATH))

from collatz_cache.core.cache import CollatzCache

logging.basicConfig(level=logging.INFO, format="%(message)s")
logger = logging.getLogger(__name__)

# RR uniformity check
RR_CAPACITY = 8
RR_TRIALS = 20_000
RR_P_VALUE_FLOOR = 0.001


def run_scenario(policy: str) -> Dict[str, Any]:
    """Run the capacity-2 reference scenario for one policy."""
    cache = CollatzCache(max_entries=2, policy=policy)
    cache.insert(4, 5)
    cache.insert(7, 11)
    lookup_4 = cache.lookup(4)
    cache.insert(27, 111)
    lookup_7 = cache.lookup(7)
    return {
        "lookup_4": lookup_4,
        "held": sorted(cache.keys()),
        "lookup_7": lookup_7,
    }


def validate_rr_uniformity() -> Dict[str, Any]:
    """Count which key random replacement evicts over many refills."""
    cache = CollatzCache(max_entries=RR_CAPACITY, policy="RR", seed=42)
    counts: Counter = Counter()

    for key in range(RR_CAPACITY):
        cache.insert(key + 1, 0)
    for _ in range(RR_TRIALS):
        victim = cache.evict_one()
        counts[victim.key] += 1
        cache.insert(victim.key, victim.steps)

    observed = [counts[key + 1] for key in range(RR_CAPACITY)]
    chi2, p_value = stats.chisquare(observed)
    return {
        "observed": observed,
        "chi2": float(chi2),
        "p_value": float(p_value),
        "pass": bool(p_value > RR_P_VALUE_FLOOR),
    }


def validate_eviction_logic() -> Dict[str, Any]:
    """Run eviction validation."""
    logger.info("=" * 60)
    logger.info("EVICTION LOGIC VALIDATION")
    logger.info("=" * 60)

    results: List[Dict[str, Any]] = []
    all_passed = True

    expectations = {
        "LRU": {"lookup_4": 5, "held": [4, 27], "lookup_7": None},
        "FIFO": {"lookup_4": 5, "held": [7, 27], "lookup_7": 11},
    }

    for i, (policy, expected) in enumerate(expectations.items(), start=1):
        logger.info(f"\n[Test {i}] {policy} scenario (capacity 2)")
        logger.info("-" * 40)

        actual = run_scenario(policy)
        passed = actual == expected

        results.append({
            "test": f"{policy.lower()}_scenario",
            "expected": expected,
            "actual": actual,
            "pass": passed,
        })

        if passed:
            logger.info(f"  Result: ✓ holds {actual['held']}")
        else:
            logger.error(f"  Result: ✗ expected {expected}, got {actual}")
            all_passed = False

    logger.info(f"\n[Test {len(expectations) + 1}] RR uniformity ({RR_TRIALS:,} evictions)")
    logger.info("-" * 40)

    rr = validate_rr_uniformity()
    results.append({"test": "rr_uniformity", **rr})
    logger.info(f"  Observed: {rr['observed']}")
    logger.info(f"  chi2={rr['chi2']:.2f}, p={rr['p_value']:.4f}")
    if rr["pass"]:
        logger.info("  Result: ✓ uniform")
    else:
        logger.error(f"  Result: ✗ p <= {RR_P_VALUE_FLOOR}")
        all_passed = False

    # Summary
    passed_count = sum(1 for r in results if r["pass"])
    total_count = len(results)

    logger.info("\n" + "=" * 60)
    logger.info(f"SUMMARY: {passed_count}/{total_count} tests passed")
    if all_passed:
        logger.info("OVERALL: ✓ PASS")
    else:
        logger.error("OVERALL: ✗ FAIL")
    logger.info("=" * 60)

    output = {
        "timestamp": datetime.now().isoformat(),
        "tests": results,
        "passed": passed_count,
        "total": total_count,
        "pass": all_passed,
    }

    # Save results
    output_path = _ROOT / "validation" / "results" / "eviction_logic.json"
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w") as f:
        json.dump(output, f, indent=2)

    logger.info(f"\nResults saved to: {output_path}")

    return output


def main() -> int:
    """Run validation and return exit code."""
    try:
        result = validate_eviction_logic()
        return 0 if result["pass"] else 1
    except Exception as e:
        logger.error(f"Validation failed with exception: {e}")
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())
