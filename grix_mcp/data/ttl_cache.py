from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Generic, TypeVar


T = TypeVar("T")


def now_ms() -> float:
    return time.time() * 1000.0


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    last_update_ms: float = 0.0
    payload: T | None = None

    @property
    def populated(self) -> bool:
        return self.payload is not None


def is_stale(entry: CacheEntry, ttl_ms: float, now: float) -> bool:
    return now - entry.last_update_ms > ttl_ms


class TTLCache(Generic[T]):
    """Per-key time-bounded cache. Entries are replaced whole, never mutated.

    Callers pass ``now`` explicitly so staleness checks stay deterministic.
    Concurrent refreshes of the same key are not serialized; the last store wins.
    """

    def __init__(self, ttl_ms: float):
        if ttl_ms < 0:
            raise ValueError("ttl_ms must be >= 0")
        self.ttl_ms = float(ttl_ms)
        self._entries: dict[str, CacheEntry[T]] = {}

    def get(self, key: str) -> CacheEntry[T]:
        return self._entries.get(key) or CacheEntry()

    def is_stale(self, key: str, now: float) -> bool:
        return is_stale(self.get(key), self.ttl_ms, now)

    def store(self, key: str, payload: T, now: float) -> CacheEntry[T]:
        entry = CacheEntry(last_update_ms=float(now), payload=payload)
        self._entries[key] = entry
        return entry

    def __len__(self) -> int:
        return len(self._entries)
