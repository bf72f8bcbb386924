"""Eviction policies used when a cache namespace outgrows its budget."""

from abc import ABC, abstractmethod
from typing import Dict, List

from ..models import CacheEntry


class EvictionPolicy(ABC):
    """Choose which entries to drop from an over-budget namespace."""

    @abstractmethod
    def select(self, entries: Dict[str, CacheEntry], at_least: int = 1) -> List[str]:
        """Return the keys to evict, at least `at_least` of them when available."""
        pass


class OldestFractionEviction(EvictionPolicy):
    """Drop the oldest `fraction` of entries by storage time, at least one."""

    def __init__(self, fraction: float = 0.25) -> None:
        if not 0.0 < fraction <= 1.0:
            raise ValueError(f"Eviction fraction must be in (0, 1], got {fraction}")
        self.fraction = fraction

    def select(self, entries: Dict[str, CacheEntry], at_least: int = 1) -> List[str]:
        if not entries:
            return []
        count = max(1, at_least, int(len(entries) * self.fraction))
        # sorted() is stable, so ties keep insertion order
        oldest = sorted(entries.items(), key=lambda kv: kv[1].stored_at)
        return [key for key, _ in oldest[:count]]
