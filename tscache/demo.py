"""Walk-through demonstrations of the cache, runnable as a command."""

from __future__ import annotations

import json
import sys
import time
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass
from datetime import datetime

from tscache.cache import Cache, Stats
from tscache.compression import (
    Compressor,
    GzipCompressor,
    NoCompressor,
    ZstdCompressor,
)
from tscache.eviction import EvictionPolicy
from tscache.item import KeyNotFoundError

_RULE = "=" * 50
_DEMO_MAX_SIZE = 1024 * 1024
_SMALL_MAX_SIZE = 200


@dataclass
class _User:
    id: int
    name: str
    email: str


def _format_duration(seconds: float) -> str:
    if seconds < 1e-3:
        return f"{seconds * 1e6:.1f}µs"
    if seconds < 1:
        return f"{seconds * 1e3:.3f}ms"
    return f"{seconds:.3f}s"


def _hit_rate(stats: Stats) -> float:
    total = stats.hits + stats.misses
    return 100.0 * stats.hits / total if total else 0.0


def demonstrate_basic_usage() -> Stats:
    """Show set/get, JSON values, TTL, delete, stats and clear.

    Returns the statistics snapshot taken just before the cache is cleared.
    """
    print("=== TSCache basic usage ===")
    cache = Cache(max_size=_DEMO_MAX_SIZE, eviction_policy=EvictionPolicy.LRU)

    print("\n1. Basic set/get:")
    key, value = "greeting", "Hello, TSCache!"
    cache.set(key, value.encode("utf-8"), 0)
    print(f"Stored: {key} = {value}")
    try:
        retrieved = cache.get(key) or b""
    except KeyNotFoundError as exc:
        print(f"Fetch failed: {exc}")
    else:
        print(f"Fetched: {key} = {retrieved.decode('utf-8')}")

    print("\n2. JSON values:")
    user = _User(id=1, name="Zhang San", email="zhangsan@example.com")
    user_key = "user:1"
    cache.set(user_key, json.dumps(asdict(user)).encode("utf-8"), 0)
    print(f"Stored user: {user}")
    try:
        raw = cache.get(user_key) or b""
    except KeyNotFoundError as exc:
        print(f"Fetching user failed: {exc}")
    else:
        try:
            restored = _User(**json.loads(raw))
        except (ValueError, TypeError) as exc:
            print(f"Decoding user failed: {exc}")
        else:
            print(f"Fetched user: {restored}")

    print("\n3. TTL expiry:")
    temp_key = "temp_data"
    temp_value = "this value expires after 3 seconds"
    ttl = 3.0
    cache.set(temp_key, temp_value.encode("utf-8"), ttl)
    print(f"Stored temporary value (TTL: {ttl:g}s): {temp_value}")
    try:
        data = cache.get(temp_key) or b""
        print(f"Fetched immediately: {data.decode('utf-8')}")
    except KeyNotFoundError:
        pass

    print("Waiting 2 seconds...")
    time.sleep(2)
    try:
        data = cache.get(temp_key) or b""
        print(f"Fetched after 2 seconds: {data.decode('utf-8')}")
    except KeyNotFoundError:
        pass

    print("Waiting another 2 seconds...")
    time.sleep(2)
    try:
        cache.get(temp_key)
    except KeyNotFoundError as exc:
        print(f"Fetch after 4 seconds failed: {exc} (expired)")

    print("\n4. Delete:")
    delete_key = "to_be_deleted"
    cache.set(delete_key, b"this value will be deleted", 0)
    print(f"Stored: {delete_key}")
    try:
        cache.get(delete_key)
        print("Before delete: present")
    except KeyNotFoundError:
        pass
    cache.delete(delete_key)
    print("Deleted")
    try:
        cache.get(delete_key)
    except KeyNotFoundError as exc:
        print(f"After delete: {exc}")

    print("\n5. Statistics:")
    for i in range(10):
        cache.set(f"test_key_{i}", f"test_value_{i}".encode("utf-8"), 0)
    for i in range(15):
        try:
            cache.get(f"test_key_{i}")
        except KeyNotFoundError:
            pass

    stats = cache.stats()
    print("Cache statistics:")
    print(f"  hits: {stats.hits}")
    print(f"  misses: {stats.misses}")
    print(f"  hit rate: {_hit_rate(stats):.2f}%")
    print(f"  items: {stats.current_count}")
    print(f"  memory used: {stats.current_size} bytes")
    print(f"  memory limit: {stats.max_size} bytes")
    print(f"  evictions: {stats.evictions}")
    print(f"  eviction policy: {stats.eviction_policy.value}")
    print(f"  shards: {stats.shard_count}")

    print("\n6. Clear:")
    print(f"Items before clear: {cache.stats().current_count}")
    cache.clear()
    print("Cleared")
    final = cache.stats()
    print(f"Items after clear: {final.current_count}")
    print(f"Memory after clear: {final.current_size} bytes")
    return stats


def _policy_value(policy: EvictionPolicy, i: int) -> bytes:
    return f"a fairly long value for testing the {policy.value} policy_{i}".encode(
        "utf-8"
    )


def _fill(
    cache: Cache, policy: EvictionPolicy, numbers: range, pause: float = 0.0
) -> None:
    for i in numbers:
        key = f"key{i}"
        cache.set(key, _policy_value(policy, i), 0)
        if pause:
            stamp = datetime.now().strftime("%H:%M:%S.%f")[:-3]
            print(f"  set {key} (at {stamp})")
            time.sleep(pause)
        else:
            print(f"  set {key}")


def _touch(cache: Cache, key: str) -> None:
    try:
        cache.get(key)
    except KeyNotFoundError:
        pass


def _report_survivors(cache: Cache, evicted_note: str = "") -> None:
    print("\nRemaining keys:")
    for i in range(1, 9):
        key = f"key{i}"
        try:
            cache.get(key)
        except KeyNotFoundError:
            print(f"  {key}: evicted{evicted_note}")
        else:
            print(f"  {key}: present")


def _print_final(stats: Stats) -> None:
    print(f"Final stats: items={stats.current_count}, evictions={stats.evictions}")


def _demonstrate_lru() -> Stats:
    print("\n=== LRU (least recently used) ===")
    policy = EvictionPolicy.LRU
    cache = Cache(max_size=_SMALL_MAX_SIZE, eviction_policy=policy)

    print("Adding data:")
    _fill(cache, policy, range(1, 6))
    stats = cache.stats()
    print(f"Items: {stats.current_count}, evictions: {stats.evictions}")

    print("\nAccessing key1 and key2 (making them most recently used):")
    _touch(cache, "key1")
    _touch(cache, "key2")

    print("\nAdding more data to trigger eviction:")
    _fill(cache, policy, range(6, 9))

    _report_survivors(cache)
    final = cache.stats()
    _print_final(final)
    return final


def _demonstrate_lfu() -> Stats:
    print("\n=== LFU (least frequently used) ===")
    policy = EvictionPolicy.LFU
    cache = Cache(max_size=_SMALL_MAX_SIZE, eviction_policy=policy)

    print("Adding data:")
    _fill(cache, policy, range(1, 6))

    print("\nAccessing key1 and key2 repeatedly (raising their frequency):")
    for _ in range(5):
        _touch(cache, "key1")
        _touch(cache, "key2")
    print("  key1 and key2 accessed 5 times each")
    _touch(cache, "key3")
    print("  key3 accessed once")

    print("\nAdding more data to trigger eviction:")
    _fill(cache, policy, range(6, 9))

    _report_survivors(cache)
    final = cache.stats()
    _print_final(final)
    return final


def _demonstrate_fifo() -> Stats:
    print("\n=== FIFO (first in, first out) ===")
    policy = EvictionPolicy.FIFO
    cache = Cache(max_size=_SMALL_MAX_SIZE, eviction_policy=policy)

    print("Adding data:")
    _fill(cache, policy, range(1, 6), pause=0.01)

    print("\nAccessing every key (FIFO ignores access patterns):")
    for i in range(1, 6):
        key = f"key{i}"
        _touch(cache, key)
        print(f"  accessed {key}")

    print("\nAdding more data to trigger eviction:")
    _fill(cache, policy, range(6, 9), pause=0.01)

    _report_survivors(cache, " (added earliest)")
    final = cache.stats()
    _print_final(final)
    return final


def _compare_eviction_policies() -> None:
    print("\n=== Eviction policy comparison ===")
    for policy in EvictionPolicy:
        print(f"\nTesting {policy.value}:")
        cache = Cache(max_size=_DEMO_MAX_SIZE, eviction_policy=policy)
        start = time.perf_counter()
        for i in range(10000):
            key = f"key_{i % 1000}"
            cache.set(key, f"value_{i}".encode("utf-8"), 0)
            if i % 2 == 0:
                _touch(cache, key)
        elapsed = time.perf_counter() - start
        stats = cache.stats()
        print(f"  time: {_format_duration(elapsed)}")
        print(f"  hit rate: {_hit_rate(stats):.2f}%")
        print(f"  evictions: {stats.evictions}")
        print(f"  final items: {stats.current_count}")


def demonstrate_eviction_policies() -> dict[str, Stats]:
    """Show how LRU, LFU and FIFO choose what to evict from a tiny cache.

    Returns the final statistics of each policy's demonstration, keyed by name.
    """
    print("=== TSCache eviction policies ===")
    reports = {
        EvictionPolicy.LRU.value: _demonstrate_lru(),
        EvictionPolicy.LFU.value: _demonstrate_lfu(),
        EvictionPolicy.FIFO.value: _demonstrate_fifo(),
    }
    _compare_eviction_policies()
    return reports


def _demonstrate_gzip(results: dict[str, bool]) -> None:
    print("\n=== Gzip compression ===")
    cache = Cache(compressor=GzipCompressor(), max_size=_DEMO_MAX_SIZE)
    large_data = "a repeated sentence used to test compression. " * 100
    encoded = large_data.encode("utf-8")
    print(f"Original size: {len(encoded)} bytes")

    start = time.perf_counter()
    cache.set("large_data", encoded, 0)
    set_time = time.perf_counter() - start

    start = time.perf_counter()
    try:
        retrieved = cache.get("large_data")
    except KeyNotFoundError as exc:
        print(f"Fetch failed: {exc}")
        results["gzip/large_data"] = False
        return
    get_time = time.perf_counter() - start

    intact = retrieved == encoded
    results["gzip/large_data"] = intact
    print(f"Store time: {_format_duration(set_time)}")
    print(f"Fetch time: {_format_duration(get_time)}")
    print(f"Data intact: {intact}")
    stats = cache.stats()
    print(f"Cache stats: items={stats.current_count}, size={stats.current_size} bytes")


def _demonstrate_zstd(results: dict[str, bool]) -> None:
    print("\n=== Zstd compression ===")
    samples = {
        "json_data": json.dumps(
            {
                "users": [
                    {"id": 1, "name": "Zhang San", "email": "zhangsan@example.com"},
                    {"id": 2, "name": "Li Si", "email": "lisi@example.com"},
                    {"id": 3, "name": "Wang Wu", "email": "wangwu@example.com"},
                ]
            },
            separators=(",", ":"),
        ),
        "text_data": "Zstd is an efficient compression algorithm. " * 50,
        "mixed_data": "digits 123, letters ABC, symbols !@#, text " + "mixed content" * 30,
    }
    with ZstdCompressor() as compressor:
        cache = Cache(compressor=compressor, max_size=_DEMO_MAX_SIZE)
        print("Compressing different kinds of data:")
        for key, text in samples.items():
            data = text.encode("utf-8")
            start = time.perf_counter()
            cache.set(key, data, 0)
            set_time = time.perf_counter() - start

            start = time.perf_counter()
            try:
                retrieved = cache.get(key)
            except KeyNotFoundError as exc:
                print(f"  {key}: fetch failed - {exc}")
                results[f"zstd/{key}"] = False
                continue
            get_time = time.perf_counter() - start

            intact = retrieved == data
            results[f"zstd/{key}"] = intact
            print(f"  {key}:")
            print(f"    original size: {len(data)} bytes")
            print(f"    store time: {_format_duration(set_time)}")
            print(f"    fetch time: {_format_duration(get_time)}")
            print(f"    data intact: {intact}")


def _demonstrate_no_compression(results: dict[str, bool]) -> None:
    print("\n=== No compression ===")
    cache = Cache(compressor=NoCompressor(), max_size=_DEMO_MAX_SIZE)
    print("Storing many small values:")

    start = time.perf_counter()
    for i in range(1000):
        value = f"test item number {i}, stored without compression."
        cache.set(f"item_{i}", value.encode("utf-8"), 0)
    set_time = time.perf_counter() - start

    start = time.perf_counter()
    found = 0
    for i in range(1000):
        try:
            cache.get(f"item_{i}")
        except KeyNotFoundError:
            continue
        found += 1
    get_time = time.perf_counter() - start

    results["none/items"] = found == 1000
    stats = cache.stats()
    print(f"Storing 1000 items took: {_format_duration(set_time)}")
    print(f"Fetching 1000 items took: {_format_duration(get_time)}")
    print(f"Fetched: {found}/1000")
    print(f"Cache stats: items={stats.current_count}, hit rate={_hit_rate(stats):.2f}%")


def _measure_compressor(name: str, compressor: Compressor, data: bytes) -> None:
    cache = Cache(compressor=compressor, max_size=_DEMO_MAX_SIZE)

    start = time.perf_counter()
    for i in range(100):
        cache.set(f"test_{i}", data, 0)
    set_time = time.perf_counter() - start

    start = time.perf_counter()
    for i in range(100):
        _touch(cache, f"test_{i}")
    get_time = time.perf_counter() - start

    stats = cache.stats()
    print(
        f"  100 stores took: {_format_duration(set_time)} "
        f"(average: {_format_duration(set_time / 100)})"
    )
    print(
        f"  100 fetches took: {_format_duration(get_time)} "
        f"(average: {_format_duration(get_time / 100)})"
    )
    print(f"  cache size: {stats.current_size} bytes")
    if name != "none" and stats.current_size > 0:
        total = len(data) * 100
        ratio = total / stats.current_size
        print(f"  ratio: {ratio:.2f}x (original: {total} -> stored: {stats.current_size})")


def _compare_compression_performance() -> None:
    print("\n=== Compression comparison ===")
    data = ("performance test data with repeated content for compression. " * 200).encode(
        "utf-8"
    )
    print(f"Test data size: {len(data)} bytes")
    print("Results:")

    print("\nNo compression:")
    _measure_compressor("none", NoCompressor(), data)

    print("\nGZIP:")
    _measure_compressor("gzip", GzipCompressor(), data)

    print("\nZSTD:")
    with ZstdCompressor() as compressor:
        _measure_compressor("zstd", compressor, data)


def demonstrate_compression() -> dict[str, bool]:
    """Show gzip, zstd and no compression in use and compare them.

    Returns, for each stored sample, whether it came back unchanged.
    """
    print("=== TSCache compression ===")
    results: dict[str, bool] = {}
    _demonstrate_gzip(results)
    _demonstrate_zstd(results)
    _demonstrate_no_compression(results)
    _compare_compression_performance()
    return results


_EXAMPLES: dict[str, tuple[str, Callable[[], object]]] = {
    "basic": ("Running the basic usage example...", demonstrate_basic_usage),
    "eviction": ("Running the eviction policy example...", demonstrate_eviction_policies),
    "compression": ("Running the compression example...", demonstrate_compression),
}


def _show_usage() -> None:
    print("Usage:")
    print("  python -m tscache.demo basic        - run the basic usage example")
    print("  python -m tscache.demo eviction     - run the eviction policy example")
    print("  python -m tscache.demo compression  - run the compression example")
    print("  python -m tscache.demo all          - run every example")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the example named by the first argument; show usage otherwise."""
    args = list(sys.argv[1:] if argv is None else argv)
    print("TSCache examples")
    print("================")

    if not args:
        _show_usage()
        return 0

    choice = args[0]
    if choice == "all":
        print("Running every example...")
        for _, run in _EXAMPLES.values():
            print("\n" + _RULE)
            run()
    elif choice in _EXAMPLES:
        message, run = _EXAMPLES[choice]
        print(message)
        run()
    else:
        print(f"Unknown example: {choice}")
        _show_usage()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())