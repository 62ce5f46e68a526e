"""Bounded query -> results cache with bulk eviction and hit/miss counters."""

import threading
from collections import OrderedDict
from dataclasses import dataclass
from typing import List, Optional, Sequence

from loguru import logger

from config.settings import config

from .models import SearchResult

MIN_KEY_LENGTH = 2


@dataclass(frozen=True)
class CacheStats:
    """Cache hit/miss counters."""
    hits: int
    misses: int
    ratio: float
    size: int = 0
    capacity: int = 0

    def to_dict(self) -> dict:
        return {
            "hits": self.hits,
            "misses": self.misses,
            "ratio": self.ratio,
            "size": self.size,
            "capacity": self.capacity,
        }


class ResultCache:
    """
    Caches ranked result lists by normalized query.

    Keys are the stripped, lowercased query. Queries shorter than two
    characters and empty result lists are never stored. When a new key arrives
    at capacity, the oldest ``eviction_batch`` insertions are dropped first.
    """

    def __init__(self, capacity: Optional[int] = None, eviction_batch: Optional[int] = None):
        self.capacity = capacity or config.CACHE_MAX_SIZE
        self.eviction_batch = min(eviction_batch or config.CACHE_EVICTION_BATCH, self.capacity)
        self._entries: "OrderedDict[str, List[SearchResult]]" = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._lock = threading.RLock()

    @staticmethod
    def normalize(query: str) -> str:
        return query.strip().lower()

    def get(self, query: str) -> Optional[List[SearchResult]]:
        """Return a copy of the cached results, or None on a miss."""
        key = self.normalize(query)
        with self._lock:
            cached = self._entries.get(key)
            if cached is None:
                self._misses += 1
                logger.debug(f"Cache miss for '{key}'")
                return None
            self._hits += 1
            logger.debug(f"Cache hit for '{key}'")
            return list(cached)

    def put(self, query: str, results: Sequence[SearchResult]) -> bool:
        """Store results for a query; returns False when the entry is refused."""
        key = self.normalize(query)
        if len(key) < MIN_KEY_LENGTH or not results:
            return False

        with self._lock:
            if key not in self._entries and len(self._entries) >= self.capacity:
                for _ in range(self.eviction_batch):
                    self._entries.popitem(last=False)
                logger.debug(f"Cache full, evicted {self.eviction_batch} oldest entries")
            self._entries[key] = list(results)
        return True

    def clear(self) -> None:
        """Drop every entry; hit/miss counters are kept."""
        with self._lock:
            self._entries.clear()

    def stats(self) -> CacheStats:
        with self._lock:
            total = self._hits + self._misses
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                ratio=self._hits / total if total > 0 else 0.0,
                size=len(self._entries),
                capacity=self.capacity,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, query: str) -> bool:
        with self._lock:
            return self.normalize(query) in self._entries
