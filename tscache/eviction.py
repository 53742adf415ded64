"""Eviction policies that decide which cache entry to drop when a shard is full.

None of the lists here are thread-safe; the shard that owns a list guards it
with its own lock.
"""

from __future__ import annotations

import itertools
from abc import ABC, abstractmethod
from collections import OrderedDict
from dataclasses import dataclass
from enum import Enum

from tscache.item import CacheItem


class EvictionPolicy(str, Enum):
    """Names of the supported eviction policies.

    Looking up an unknown name yields ``LRU``, the default policy.
    """

    LRU = "LRU"
    LFU = "LFU"
    FIFO = "FIFO"

    @classmethod
    def _missing_(cls, value: object) -> EvictionPolicy:
        return cls.LRU


class EvictionList(ABC):
    """Ordering of cache keys by how expendable they are."""

    @abstractmethod
    def add(self, key: str, item: CacheItem) -> None:
        """Insert ``key`` or refresh it if it is already tracked."""

    @abstractmethod
    def remove(self, key: str) -> None:
        """Stop tracking ``key``; unknown keys are ignored."""

    @abstractmethod
    def update(self, key: str, item: CacheItem) -> None:
        """Record an access to ``key``; unknown keys are ignored."""

    @abstractmethod
    def remove_least(self) -> str | None:
        """Drop and return the most expendable key, or None if empty."""

    @abstractmethod
    def clear(self) -> None:
        """Forget every tracked key."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of tracked keys."""

    @abstractmethod
    def __contains__(self, key: object) -> bool:
        """Whether ``key`` is tracked."""


class LRUList(EvictionList):
    """Least recently used: the key touched longest ago goes first."""

    def __init__(self) -> None:
        # Oldest access first, most recent last.
        self._entries: OrderedDict[str, CacheItem] = OrderedDict()

    def add(self, key: str, item: CacheItem) -> None:
        self._entries[key] = item
        self._entries.move_to_end(key)

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)

    def update(self, key: str, item: CacheItem) -> None:
        if key in self._entries:
            self._entries[key] = item
            self._entries.move_to_end(key)

    def remove_least(self) -> str | None:
        if not self._entries:
            return None
        key, _ = self._entries.popitem(last=False)
        return key

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


@dataclass
class _LFUNode:
    key: str
    item: CacheItem
    frequency: int
    last_used: int


class LFUList(EvictionList):
    """Least frequently used, with the least recently used key breaking ties.

    A key's frequency is the ``access_count`` of its item; new keys start at
    no less than 1.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, _LFUNode] = {}
        self._buckets: dict[int, OrderedDict[str, _LFUNode]] = {}
        self._min_freq = 1
        self._clock = itertools.count()

    def add(self, key: str, item: CacheItem) -> None:
        node = self._nodes.get(key)
        if node is not None:
            self._touch(node, item)
            return
        frequency = item.access_count or 1
        node = _LFUNode(key, item, frequency, next(self._clock))
        self._nodes[key] = node
        self._bucket_add(node)
        if frequency < self._min_freq or self._min_freq not in self._buckets:
            self._min_freq = frequency

    def remove(self, key: str) -> None:
        node = self._nodes.pop(key, None)
        if node is not None:
            self._bucket_discard(node)
            self._refresh_min()

    def update(self, key: str, item: CacheItem) -> None:
        node = self._nodes.get(key)
        if node is not None:
            self._touch(node, item)

    def remove_least(self) -> str | None:
        if not self._nodes:
            return None
        bucket = self._buckets.get(self._min_freq)
        if not bucket:
            return None
        victim = min(bucket.values(), key=lambda node: node.last_used)
        self._bucket_discard(victim)
        del self._nodes[victim.key]
        self._refresh_min()
        return victim.key

    def clear(self) -> None:
        self._nodes.clear()
        self._buckets.clear()
        self._min_freq = 1

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, key: object) -> bool:
        return key in self._nodes

    def _touch(self, node: _LFUNode, item: CacheItem) -> None:
        new_freq = item.access_count
        node.item = item
        node.last_used = next(self._clock)
        if new_freq == node.frequency:
            return
        self._bucket_discard(node)
        node.frequency = new_freq
        self._bucket_add(node)
        if new_freq < self._min_freq:
            self._min_freq = new_freq
        self._refresh_min()

    def _bucket_add(self, node: _LFUNode) -> None:
        self._buckets.setdefault(node.frequency, OrderedDict())[node.key] = node

    def _bucket_discard(self, node: _LFUNode) -> None:
        bucket = self._buckets.get(node.frequency)
        if bucket is None:
            return
        bucket.pop(node.key, None)
        if not bucket:
            del self._buckets[node.frequency]

    def _refresh_min(self) -> None:
        if self._min_freq not in self._buckets:
            self._min_freq = min(self._buckets, default=1)


class FIFOList(EvictionList):
    """First in, first out: keys leave in the order they were first added."""

    def __init__(self) -> None:
        self._entries: OrderedDict[str, CacheItem] = OrderedDict()

    def add(self, key: str, item: CacheItem) -> None:
        # Re-adding a known key keeps its place in the queue.
        self._entries[key] = item

    def remove(self, key: str) -> None:
        self._entries.pop(key, None)

    def update(self, key: str, item: CacheItem) -> None:
        if key in self._entries:
            self._entries[key] = item

    def remove_least(self) -> str | None:
        if not self._entries:
            return None
        key, _ = self._entries.popitem(last=False)
        return key

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


_LIST_TYPES: dict[EvictionPolicy, type[EvictionList]] = {
    EvictionPolicy.LRU: LRUList,
    EvictionPolicy.LFU: LFUList,
    EvictionPolicy.FIFO: FIFOList,
}


def create_eviction_list(policy: EvictionPolicy | str) -> EvictionList:
    """Build an empty eviction list for ``policy``; unknown names give LRU."""
    return _LIST_TYPES[EvictionPolicy(policy)]()