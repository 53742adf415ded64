# tscache

A thread-safe, in-memory cache for byte values. Its features:

- LRU, LFU and FIFO eviction policies
- a memory limit in bytes, with automatic eviction
- an optional time to live for each entry
- optional gzip or zstd compression for large values
- keys spread over independently locked shards
- hit, miss and eviction counters

## Installation

```
pip install tscache
```

## Usage

```python
from tscache.cache import Cache
from tscache.item import KeyNotFoundError

cache = Cache(max_size=1024 * 1024, eviction_policy="LRU")

cache.set("greeting", b"Hello, tscache!", 0)   # a ttl of 0 means no expiry
print(cache.get("greeting"))                    # b'Hello, tscache!'

cache.set("temp", b"short-lived", 3.0)          # expires after 3 seconds

cache.delete("greeting")                        # deleting a missing key is not an error
try:
    cache.get("greeting")
except KeyNotFoundError:                        # a subclass of KeyError
    print("gone")

stats = cache.stats()
print(stats.hits, stats.misses, stats.evictions, stats.current_count, stats.current_size)

cache.clear()                                   # drops all entries and resets the counters
```

`ttl` is a number of seconds or a `datetime.timedelta`. If it is `None` or not
positive, the entry never expires. An expired entry is removed when it is next
looked up. Until then it still counts towards the memory in use.

### Options

`Cache` takes only keyword arguments:

- `max_size`: the memory budget in bytes. The default is 100 MB. It is divided
  evenly among the shards, so each shard gets `max_size // shard_count` bytes,
  with a minimum of 1 byte. A value of 0 means no limit. When a shard goes over
  its share, it evicts entries until it is back within it. A value larger than
  a shard's share is evicted as soon as it is stored.
- `eviction_policy`: `"LRU"`, `"LFU"`, `"FIFO"`, or an `EvictionPolicy` from
  `tscache.eviction`. Any other name falls back to LRU.
- `compressor`: a `Compressor` from `tscache.compression`. The choices are
  `NoCompressor` (the default), `GzipCompressor` and `ZstdCompressor`.
- `compress_size`: the size threshold in bytes, 1 MB by default. A value longer
  than this is passed through the compressor. The compressed form is kept only
  if it is smaller.

```python
from tscache.cache import Cache
from tscache.compression import GzipCompressor, ZstdCompressor

cache = Cache(compressor=GzipCompressor(), compress_size=128)

with ZstdCompressor() as zstd:          # closes the compressor on exit
    cache = Cache(compressor=zstd, compress_size=128)
    cache.set("doc", b"x" * 1000, 0)
```

The number of shards is twice the CPU count, kept between 4 and 256 and
rounded up to a power of two. Each key goes to a shard chosen by its FNV-1a
hash. `cache.shard_count` and `cache.stats().shard_count` report the number of
shards. `len(cache)` gives the number of stored entries.

### Eviction policies

- **LRU** evicts the entry that was read or written longest ago.
- **LFU** evicts the entry that has been read the fewest times. When several
  entries tie, it evicts the one that was touched longest ago.
- **FIFO** evicts entries in the order they were first stored. Reading an entry
  or overwriting it does not change its place in the queue.

### Helpers

`tscache.utils` has these helpers:

- `fnv1a(key)`: the 32-bit FNV-1a hash.
- `format_bytes(size)`: formats a byte count, for example `"1.5 KB"`.
- `calculate_size(value)`: a rough memory estimate for a Python value.
- `round_to_power_of_two(n)`.
- `optimal_shard_count()`.

## Demo

A demo command walks through basic usage, the eviction policies and
compression:

```
tscache-demo basic
tscache-demo eviction
tscache-demo compression
tscache-demo all
```

The same demo runs with `python -m tscache.demo <name>`. The basic example
waits a few seconds to show a TTL expiring.

## Limitations

The cache lives only in the process that creates it. Nothing is written to
disk, and the cache cannot be shared between processes or over a network.
No background task removes expired entries.

## Running the tests

```
pip install -e ".[test]"
pytest
```