"""The sharded, thread-safe in-memory cache."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta

from tscache.compression import Compressor, NoCompressor
from tscache.eviction import EvictionPolicy
from tscache.shard import CacheShard
from tscache.utils import fnv1a, optimal_shard_count

DEFAULT_MAX_SIZE = 100 * 1024 * 1024
DEFAULT_COMPRESS_SIZE = 1024 * 1024


@dataclass(frozen=True)
class Stats:
    """A snapshot of the cache's counters and usage, summed over all shards."""

    hits: int
    misses: int
    evictions: int
    current_count: int
    current_size: int
    max_size: int
    eviction_policy: EvictionPolicy
    shard_count: int


class Cache:
    """An in-memory byte cache split into independently locked shards.

    ``max_size`` is the memory budget in bytes, shared evenly between the
    shards; 0 means unlimited. Unknown eviction policies fall back to LRU.
    Values longer than ``compress_size`` bytes go through ``compressor``
    and are kept compressed when that makes them smaller.
    """

    def __init__(
        self,
        *,
        max_size: int = DEFAULT_MAX_SIZE,
        eviction_policy: EvictionPolicy | str = EvictionPolicy.LRU,
        compressor: Compressor | None = None,
        compress_size: int = DEFAULT_COMPRESS_SIZE,
    ) -> None:
        self.max_size = max_size
        self.eviction_policy = EvictionPolicy(eviction_policy)
        compressor = compressor if compressor is not None else NoCompressor()

        shard_count = optimal_shard_count()
        shard_max_size = max_size // shard_count
        if shard_max_size == 0 and max_size > 0:
            shard_max_size = 1

        self.shards: tuple[CacheShard, ...] = tuple(
            CacheShard(shard_max_size, self.eviction_policy, compressor, compress_size)
            for _ in range(shard_count)
        )

    @property
    def shard_count(self) -> int:
        """Number of shards the keys are spread over."""
        return len(self.shards)

    def set(
        self, key: str, value: bytes | None, ttl: float | timedelta | None = None
    ) -> None:
        """Store ``value`` under ``key``; a positive ``ttl`` (seconds) sets an expiry."""
        self._shard_for(key).set(key, value, ttl)

    def get(self, key: str) -> bytes | None:
        """Return the value for ``key``; raise KeyNotFoundError if absent or expired."""
        return self._shard_for(key).get(key)

    def delete(self, key: str) -> None:
        """Remove ``key`` if present."""
        self._shard_for(key).delete(key)

    def clear(self) -> None:
        """Drop every entry from every shard and reset the counters."""
        for shard in self.shards:
            shard.clear()

    def stats(self) -> Stats:
        """Return the counters and usage summed over all shards."""
        snapshots = [shard.stats() for shard in self.shards]
        return Stats(
            hits=sum(s.hits for s in snapshots),
            misses=sum(s.misses for s in snapshots),
            evictions=sum(s.evictions for s in snapshots),
            current_count=sum(s.current_count for s in snapshots),
            current_size=sum(s.current_size for s in snapshots),
            max_size=self.max_size,
            eviction_policy=self.eviction_policy,
            shard_count=self.shard_count,
        )

    def __len__(self) -> int:
        return sum(len(shard) for shard in self.shards)

    def _shard_for(self, key: str) -> CacheShard:
        return self.shards[fnv1a(key) % len(self.shards)]