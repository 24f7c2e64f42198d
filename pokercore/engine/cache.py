"""Bounded, thread-safe result caches."""

from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Hashable, Optional
import logging
import threading
import time

logger = logging.getLogger(__name__)


@dataclass
class CacheStats:
    """Counters for one cache."""
    hits: int = 0
    misses: int = 0
    evictions: int = 0
    size: int = 0

    @property
    def hit_rate(self) -> float:
        total = self.hits + self.misses
        return self.hits / total if total else 0.0


class LRUCache:
    """
    Least-recently-used cache with an optional maximum age.

    Reads and writes are guarded by a lock, since results can be stored
    from worker completion callbacks as well as from the caller's thread.
    """

    def __init__(
        self,
        max_entries: int = 512,
        max_age: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        name: str = "cache",
    ):
        if max_entries < 1:
            raise ValueError(f"max_entries must be positive, got {max_entries}")
        self.max_entries = max_entries
        self.max_age = max_age
        self.name = name
        self._clock = clock
        self._lock = threading.RLock()
        self._entries: "OrderedDict[Hashable, tuple[Any, float]]" = OrderedDict()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def get(self, key: Hashable) -> Optional[Any]:
        """Return the cached value, or None on a miss or expired entry."""
        with self._lock:
            item = self._entries.get(key)
            if item is None:
                self._misses += 1
                return None

            value, stored_at = item
            if self.max_age is not None and self._clock() - stored_at > self.max_age:
                del self._entries[key]
                self._misses += 1
                logger.debug("%s: expired %r", self.name, key)
                return None

            self._entries.move_to_end(key)
            self._hits += 1
            return value

    def put(self, key: Hashable, value: Any) -> None:
        """Store a value, evicting the least recently used entry when full."""
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
            elif len(self._entries) >= self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                self._evictions += 1
                logger.debug("%s: evicted %r", self.name, evicted)
            self._entries[key] = (value, self._clock())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)

    def __len__(self) -> int:
        return self.size()

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def values(self) -> list[Any]:
        with self._lock:
            return [value for value, _ in self._entries.values()]

    def average_confidence(self) -> float:
        """Mean `confidence` over cached values that carry one."""
        scores = [
            v.confidence for v in self.values()
            if getattr(v, "confidence", None) is not None
        ]
        if not scores:
            return 0.0
        return sum(scores) / len(scores)

    def stats(self) -> CacheStats:
        with self._lock:
            return CacheStats(
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                size=len(self._entries),
            )
