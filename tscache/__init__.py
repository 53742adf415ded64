"""Thread-safe, sharded in-memory byte cache with LRU, LFU and FIFO eviction, TTLs and optional compression."""

__version__ = "0.1.0"