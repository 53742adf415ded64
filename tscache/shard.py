"""A single lock-guarded partition of the cache."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from datetime import timedelta

from tscache.compression import Compressor, NoCompressor
from tscache.eviction import EvictionPolicy, create_eviction_list
from tscache.item import CacheItem, KeyNotFoundError


@dataclass(frozen=True)
class ShardStats:
    """A snapshot of one shard's counters and usage."""

    hits: int = 0
    misses: int = 0
    evictions: int = 0
    current_count: int = 0
    current_size: int = 0


def _ttl_seconds(ttl: float | timedelta | None) -> float:
    if ttl is None:
        return 0.0
    if isinstance(ttl, timedelta):
        return ttl.total_seconds()
    return float(ttl)


class CacheShard:
    """Holds a subset of keys with its own size limit, eviction list and stats.

    ``max_size`` is in bytes; 0 or less means unlimited. Values longer than
    ``compress_size`` bytes are compressed when that makes them smaller.
    """

    def __init__(
        self,
        max_size: int,
        eviction_policy: EvictionPolicy | str = EvictionPolicy.LRU,
        compressor: Compressor | None = None,
        compress_size: int = 1024 * 1024,
    ) -> None:
        self.max_size = max_size
        self.eviction_policy = EvictionPolicy(eviction_policy)
        self.compressor = compressor if compressor is not None else NoCompressor()
        self.compress_size = compress_size
        self._data: dict[str, CacheItem] = {}
        self._eviction_list = create_eviction_list(self.eviction_policy)
        self._lock = threading.RLock()
        self._current_size = 0
        self._hits = 0
        self._misses = 0
        self._evictions = 0

    def set(
        self, key: str, value: bytes | None, ttl: float | timedelta | None = None
    ) -> None:
        """Store ``value`` under ``key``; a positive ``ttl`` (seconds) sets an expiry."""
        now = time.monotonic()
        final_value = bytes(value) if value is not None else None
        size = len(final_value) if final_value is not None else 0
        compressed = False
        if final_value is not None and size > self.compress_size:
            try:
                packed = self.compressor.compress(final_value)
            except Exception:
                packed = None
            if packed is not None and len(packed) < size:
                final_value, size, compressed = packed, len(packed), True

        seconds = _ttl_seconds(ttl)
        expire_at = now + seconds if seconds > 0 else None

        with self._lock:
            item = self._data.get(key)
            if item is not None:
                self._current_size -= item.size
                self._eviction_list.remove(key)
                item.value = final_value
                item.size = size
                item.expire_at = expire_at
                item.access_at = now
                item.compressed = compressed
            else:
                item = CacheItem(
                    key=key,
                    value=final_value,
                    size=size,
                    expire_at=expire_at,
                    created_at=now,
                    access_at=now,
                    compressed=compressed,
                )
                self._data[key] = item
            self._current_size += size
            self._eviction_list.add(key, item)
            self._evict_if_needed()

    def get(self, key: str) -> bytes | None:
        """Return the value for ``key``; raise KeyNotFoundError if absent or expired."""
        with self._lock:
            item = self._data.get(key)
            if item is None:
                self._misses += 1
                raise KeyNotFoundError(key)
            now = time.monotonic()
            if item.is_expired(now):
                self._remove(key)
                self._misses += 1
                raise KeyNotFoundError(key)
            item.access_at = now
            item.access_count += 1
            self._eviction_list.update(key, item)
            self._hits += 1
            value, compressed = item.value, item.compressed

        if compressed and value is not None:
            return self.compressor.decompress(value)
        return value

    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        with self._lock:
            self._remove(key)

    def clear(self) -> None:
        """Drop every entry and reset the counters."""
        with self._lock:
            self._data.clear()
            self._current_size = 0
            self._eviction_list.clear()
            self._hits = 0
            self._misses = 0
            self._evictions = 0

    def stats(self) -> ShardStats:
        """Return a snapshot of the shard's counters and usage."""
        with self._lock:
            return ShardStats(
                hits=self._hits,
                misses=self._misses,
                evictions=self._evictions,
                current_count=len(self._data),
                current_size=self._current_size,
            )

    def __len__(self) -> int:
        with self._lock:
            return len(self._data)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._data

    def _remove(self, key: str) -> None:
        item = self._data.pop(key, None)
        if item is None:
            return
        self._current_size -= item.size
        self._eviction_list.remove(key)

    def _evict_if_needed(self) -> None:
        while self.max_size > 0 and self._current_size > self.max_size:
            if not self._evict_one():
                break

    def _evict_one(self) -> bool:
        key = self._eviction_list.remove_least()
        if key is None:
            return False
        item = self._data.pop(key, None)
        if item is None:
            return False
        self._current_size -= item.size
        self._evictions += 1
        return True