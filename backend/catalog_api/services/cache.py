"""In-process TTL cache shared by the outbound service clients."""
from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Generic, Hashable, TypeVar

T = TypeVar("T")


@dataclass(slots=True)
class CacheEntry(Generic[T]):
    value: T
    expires_at: float


class TTLCache(Generic[T]):
    """Key/value store with a per-entry expiry checked lazily on read.

    Each service owns its own instance. Concurrent misses on the same key are
    not coalesced: every caller that misses performs its own upstream call.
    """

    def __init__(self, time_func: Callable[[], float] = time.monotonic) -> None:
        self._time_func = time_func
        self._storage: dict[Hashable, CacheEntry[T]] = {}

    def get(self, key: Hashable) -> T | None:
        entry = self._storage.get(key)
        if entry is None:
            return None
        if entry.expires_at <= self._time_func():
            self._storage.pop(key, None)
            return None
        return entry.value

    def set(self, key: Hashable, value: T, ttl: float) -> None:
        self._storage[key] = CacheEntry(value=value, expires_at=self._time_func() + ttl)

    def clear(self) -> None:
        self._storage.clear()

    def __len__(self) -> int:
        return len(self._storage)


__all__ = ["CacheEntry", "TTLCache"]
