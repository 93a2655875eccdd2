"""
Hit/miss counters for a single cache instance.
Why: cheap visibility into cache effectiveness without an external backend.
"""

from typing import Dict


def _rate(part: int, total: int) -> float:
    if total == 0:
        return 0.0
    return part / total * 100


class CacheMetrics:
    def __init__(self) -> None:
        self.hits = 0
        self.misses = 0

    def record_hit(self) -> None:
        self.hits += 1

    def record_miss(self) -> None:
        self.misses += 1

    def reset(self) -> None:
        self.hits = 0
        self.misses = 0

    @property
    def lookups(self) -> int:
        return self.hits + self.misses

    def hit_rate(self) -> float:
        return _rate(self.hits, self.lookups)

    def miss_rate(self) -> float:
        return _rate(self.misses, self.lookups)

    def snapshot(self) -> Dict[str, int]:
        return {"hits": self.hits, "misses": self.misses}
