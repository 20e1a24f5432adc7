"""
In-memory request cache with a fixed TTL.

Entries go stale ``ttl_seconds`` after they were written.  A stale entry
reads as a miss but stays in place until it is overwritten, the cache is
cleared, or it is pushed out by ``max_entries`` (oldest write first).
There is no background eviction.

The clock is injectable so tests can move time without sleeping.
"""

from __future__ import annotations

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Callable, Generic, Optional, TypeVar

V = TypeVar("V")


@dataclass(frozen=True)
class CacheEntry(Generic[V]):
    data: V
    timestamp: float  # seconds since epoch, from the cache clock


class TTLCache(Generic[V]):
    def __init__(
        self,
        ttl_seconds: float = 180.0,
        max_entries: int = 128,
        clock: Callable[[], float] = time.time,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl = ttl_seconds
        self.max_entries = max_entries
        self.clock = clock
        self._entries: OrderedDict[str, CacheEntry[V]] = OrderedDict()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def is_fresh(self, entry: CacheEntry[V]) -> bool:
        return (self.clock() - entry.timestamp) < self.ttl

    def get(self, key: str) -> Optional[V]:
        """Return the cached value, or ``None`` when missing or stale."""
        entry = self._entries.get(key)
        if entry is None or not self.is_fresh(entry):
            return None
        return entry.data

    def set(self, key: str, value: V) -> None:
        self._entries.pop(key, None)
        self._entries[key] = CacheEntry(data=value, timestamp=self.clock())
        while len(self._entries) > self.max_entries:
            self._entries.popitem(last=False)

    def clear(self) -> None:
        self._entries.clear()
