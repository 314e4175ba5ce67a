"""Table and summary formatting for driver runs."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Dict, List

HEADER_COLUMNS = ("Random Number", "Steps", "Cache Hit")
HEADER_RULES = ("-------------", "------", "---------")


def hit_percentage(hits: int, total: int) -> float:
    """Percentage of ``total`` lookups that hit. 0.0 when nothing was run."""
    if total <= 0:
        return 0.0
    # Multiply first so whole-number percentages come out exact
    return 100 * hits / total


def _columns(first: object, second: object, third: object) -> str:
    return f"{first:>15} {second:>10} {third:>10}"


def format_header() -> List[str]:
    return [_columns(*HEADER_COLUMNS), _columns(*HEADER_RULES)]


def format_row(number: int, steps: int, hit: bool) -> str:
    return _columns(number, steps, "Yes" if hit else "No")


def format_summary(percentage: float) -> str:
    return f"\nCache Hit Percentage: {percentage:.2f}%"


@dataclass
class RunSummary:
    """Aggregated outcome of one driver run."""

    config: Dict[str, Any]
    total: int
    hits: int
    evictions: int
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

    @property
    def misses(self) -> int:
        return self.total - self.hits

    @property
    def hit_percentage(self) -> float:
        return hit_percentage(self.hits, self.total)

    def to_dict(self) -> Dict[str, Any]:
        row = asdict(self)
        row["misses"] = self.misses
        row["hit_percentage"] = self.hit_percentage
        return row
