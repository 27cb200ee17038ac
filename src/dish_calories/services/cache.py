"""TTL cache for calorie results, search lists and food details."""

import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Protocol


class Cache(Protocol):
    """Cache interface for simple key-value data."""

    def get(self, key: str) -> object | None:
        """Return a cached value if present and not expired."""

    def set(self, key: str, value: object, ttl_seconds: int | None = None) -> None:
        """Store a cached value with a TTL in seconds."""

    def keys(self) -> list[str]:
        """Return the keys of live entries."""

    def flush_all(self) -> int:
        """Drop every entry and return how many were removed."""

    def flush_by_pattern(self, pattern: str) -> int:
        """Drop entries whose key contains ``pattern``."""

    def stats(self) -> "CacheStats":
        """Return hit, miss and key counters."""


@dataclass(frozen=True)
class CacheTiers:
    """Default lifetimes, in seconds, per kind of cached value."""

    calories_seconds: int = 3600
    search_seconds: int = 900
    details_seconds: int = 86400


@dataclass(frozen=True)
class CacheStats:
    """Counters describing cache usage."""

    hits: int
    misses: int
    keys: int


@dataclass
class _CacheEntry:
    value: object
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass
class InMemoryCache(Cache):
    """Process-local cache with per-entry expiry.

    Entries expire strictly by TTL. Reads never extend a lifetime and
    expired entries are discarded the first time they are seen.
    """

    tiers: CacheTiers = field(default_factory=CacheTiers)
    clock: Callable[[], datetime] = _utcnow
    _entries: dict[str, _CacheEntry] = field(default_factory=dict, init=False)
    _hits: int = field(default=0, init=False)
    _misses: int = field(default=0, init=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, init=False)

    def get(self, key: str) -> object | None:
        """Return a cached value if it hasn't expired."""
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self._misses += 1
                return None
            if self.clock() >= entry.expires_at:
                del self._entries[key]
                self._misses += 1
                return None
            self._hits += 1
            return entry.value

    def set(self, key: str, value: object, ttl_seconds: int | None = None) -> None:
        """Store a cached value; without a TTL the calories tier applies."""
        ttl = self.tiers.calories_seconds if ttl_seconds is None else ttl_seconds
        expires_at = self.clock() + timedelta(seconds=ttl)
        with self._lock:
            self._entries[key] = _CacheEntry(value=value, expires_at=expires_at)

    def keys(self) -> list[str]:
        """Return keys of entries that are still live."""
        with self._lock:
            self._evict_expired()
            return list(self._entries)

    def flush_all(self) -> int:
        """Remove every entry."""
        with self._lock:
            count = len(self._entries)
            self._entries.clear()
            return count

    def flush_by_pattern(self, pattern: str) -> int:
        """Remove entries whose key contains the substring."""
        with self._lock:
            matched = [key for key in self._entries if pattern in key]
            for key in matched:
                del self._entries[key]
            return len(matched)

    def stats(self) -> CacheStats:
        """Return hit/miss counters and the live key count."""
        with self._lock:
            self._evict_expired()
            return CacheStats(
                hits=self._hits, misses=self._misses, keys=len(self._entries)
            )

    def _evict_expired(self) -> None:
        now = self.clock()
        expired = [
            key for key, entry in self._entries.items() if now >= entry.expires_at
        ]
        for key in expired:
            del self._entries[key]
