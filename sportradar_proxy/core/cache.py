from __future__ import annotations
import json
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

DEFAULT_TTL = 60.0
SOFT_CAPACITY = 100

Scalar = str | int | float | bool | None


def stringify(value: Scalar) -> str:
    """Query-string form of a scalar; booleans as true/false."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def normalize_params(params: Optional[Mapping[str, Scalar]]) -> Dict[str, str]:
    """Stringified params in sorted key order, ``None`` values dropped."""
    return {str(k): stringify(v) for k, v in sorted((params or {}).items()) if v is not None}


def cache_key(endpoint: str, params: Optional[Mapping[str, Scalar]]) -> str:
    query = normalize_params(params)
    return f"{endpoint}?{json.dumps(query, sort_keys=True, separators=(',', ':'))}"


@dataclass(frozen=True)
class CacheEntry:
    key: str
    payload: Any
    stored_at: float

    def age(self, now: float) -> float:
        return now - self.stored_at


class ResponseCache:
    """
    Process-local cache of successful upstream payloads.

    An entry is fresh while its age is below ``ttl``. Entries are replaced,
    never mutated. Once the map grows past ``soft_capacity``, ``sweep`` drops
    entries older than ``2 * ttl``; younger entries always survive.
    """
    def __init__(self, ttl_seconds: float = DEFAULT_TTL, soft_capacity: int = SOFT_CAPACITY,
                 clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl_seconds
        self.soft_capacity = soft_capacity
        self._clock = clock
        self._store: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def __len__(self) -> int:
        return len(self._store)

    def __contains__(self, key: str) -> bool:
        return key in self._store

    def get(self, key: str, *, record: bool = True) -> Optional[CacheEntry]:
        """Fresh entry for ``key``, or None. Stale entries are left for ``sweep``."""
        with self._lock:
            entry = self._store.get(key)
            fresh = entry is not None and entry.age(self._clock()) < self.ttl
            if record:
                if fresh:
                    self._hits += 1
                else:
                    self._misses += 1
            return entry if fresh else None

    def put(self, key: str, payload: Any) -> CacheEntry:
        entry = CacheEntry(key=key, payload=payload, stored_at=self._clock())
        with self._lock:
            self._store[key] = entry
        return entry

    def sweep(self) -> int:
        """Drop entries older than twice the TTL if over capacity. Returns how many went."""
        with self._lock:
            if len(self._store) <= self.soft_capacity:
                return 0
            now = self._clock()
            stale = [k for k, e in self._store.items() if e.age(now) > 2 * self.ttl]
            for k in stale:
                del self._store[k]
            self._evictions += len(stale)
            return len(stale)

    def stats(self) -> Dict[str, Any]:
        with self._lock:
            return {
                "entries": len(self._store),
                "ttl_seconds": self.ttl,
                "soft_capacity": self.soft_capacity,
                "hits": self._hits,
                "misses": self._misses,
                "evictions": self._evictions,
            }
