"""
In-memory TTL cache fronting every search read path.

Entries carry their own expiry, so different reports can share one bounded
store while living for different lengths of time. Capacity is bounded with
LRU eviction; expiry is lazy, checked when an entry is read.
"""
import json
import logging
import threading
import time
from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable

from cachetools import LRUCache

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CacheEntry:
    value: Any
    expires_at: float


class _CountingLRUCache(LRUCache):
    def __init__(self, maxsize: int, on_evict: Callable[[str], None]):
        super().__init__(maxsize=maxsize)
        self._on_evict = on_evict

    def popitem(self):
        key, entry = super().popitem()
        self._on_evict(key)
        return key, entry


def make_cache_key(prefix: str, params: dict | None = None) -> str:
    """Build a deterministic key: identical params in any field order map to the same key."""
    if not params:
        return prefix
    payload = json.dumps(params, sort_keys=True, separators=(",", ":"), default=str)
    return f"{prefix}:{payload}"


def _key_prefix(key: str) -> str:
    return key.partition(":")[0]


class CacheService:
    def __init__(self, maxsize: int = 1024, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._lock = threading.Lock()
        self._entries = _CountingLRUCache(maxsize, self._record_eviction)
        self._hits = 0
        self._misses = 0
        self._sets = 0
        self._evictions = 0
        self._expirations = 0
        self._hits_by_prefix: Counter[str] = Counter()
        self._misses_by_prefix: Counter[str] = Counter()

    def _record_eviction(self, key: str) -> None:
        self._evictions += 1
        logger.debug("Cache EVICT: %s", key)

    def get(self, key: str) -> Any | None:
        prefix = _key_prefix(key)
        with self._lock:
            entry = self._entries.get(key)
            if entry is not None and self._clock() > entry.expires_at:
                del self._entries[key]
                self._expirations += 1
                entry = None
            if entry is None:
                self._misses += 1
                self._misses_by_prefix[prefix] += 1
                logger.debug("Cache MISS: %s", key)
                return None
            self._hits += 1
            self._hits_by_prefix[prefix] += 1
        logger.debug("Cache HIT: %s", key)
        return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        entry = CacheEntry(value=value, expires_at=self._clock() + ttl_seconds)
        with self._lock:
            self._entries[key] = entry
            self._sets += 1
        logger.debug("Cache SET: %s (ttl=%ss)", key, ttl_seconds)

    def get_or_set(self, key: str, factory: Callable[[], Any], ttl_seconds: float) -> Any:
        value = self.get(key)
        if value is None:
            value = factory()
            self.set(key, value, ttl_seconds)
        return value

    def delete(self, key: str) -> bool:
        with self._lock:
            try:
                del self._entries[key]
            except KeyError:
                return False
        logger.debug("Cache DELETE: %s", key)
        return True

    def delete_prefix(self, prefix: str) -> int:
        """Drop every entry whose key starts with ``prefix``. Returns the number removed."""
        with self._lock:
            doomed = [k for k in self._entries if k.startswith(prefix)]
            for k in doomed:
                del self._entries[k]
        if doomed:
            logger.info("Cache cleared %d entries with prefix %r", len(doomed), prefix)
        return len(doomed)

    def expire(self) -> int:
        """Eagerly drop expired entries. Returns the number removed."""
        now = self._clock()
        with self._lock:
            doomed = [k for k, e in self._entries.items() if now > e.expires_at]
            for k in doomed:
                del self._entries[k]
            self._expirations += len(doomed)
        return len(doomed)

    def clear(self) -> None:
        # MutableMapping.clear() goes through popitem(), which would count as evictions.
        with self._lock:
            self._entries = _CountingLRUCache(self._entries.maxsize, self._record_eviction)
        logger.info("Cache cleared")

    def __len__(self) -> int:
        return len(self._entries)

    def get_stats(self) -> dict:
        with self._lock:
            lookups = self._hits + self._misses
            return {
                "size": len(self._entries),
                "maxsize": self._entries.maxsize,
                "hits": self._hits,
                "misses": self._misses,
                "sets": self._sets,
                "evictions": self._evictions,
                "expirations": self._expirations,
                "hit_rate": round(self._hits / lookups * 100, 1) if lookups else 0.0,
                "hits_by_prefix": dict(self._hits_by_prefix),
                "misses_by_prefix": dict(self._misses_by_prefix),
            }
