"""Size estimation, hashing and formatting helpers used by the cache."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable, Mapping

_FNV_OFFSET_BASIS = 2166136261
_FNV_PRIME = 16777619
_UINT32_MASK = 0xFFFFFFFF

_POINTER_SIZE = 8
_STRING_HEADER = 16
_SLICE_HEADER = 24
_MAP_HEADER = 8

_UNITS = ("KB", "MB", "GB", "TB", "PB")


def calculate_size(value: object) -> int:
    """Estimate the memory footprint of ``value`` in bytes.

    The estimate follows a 64-bit layout: scalars have fixed sizes, strings
    and sequences carry a header plus their contents, and mappings add an
    allowance of half the pair data for bucket overhead.
    """
    if value is None:
        return 0
    if isinstance(value, bool):
        return 1
    if isinstance(value, int):
        return 8
    if isinstance(value, float):
        return 8
    if isinstance(value, complex):
        return 16
    if isinstance(value, str):
        return _STRING_HEADER + len(value.encode("utf-8"))
    if isinstance(value, (bytes, bytearray, memoryview)):
        return _SLICE_HEADER + len(value)
    if isinstance(value, (list, set, frozenset)):
        return _SLICE_HEADER + sum(_type_size(element) for element in value)
    if isinstance(value, tuple):
        return sum(_type_size(element) for element in value)
    if isinstance(value, Mapping):
        if not value:
            return _MAP_HEADER
        pair_size = sum(_type_size(k) + _type_size(v) for k, v in value.items())
        return _MAP_HEADER + pair_size + pair_size // 2
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return sum(
            calculate_size(getattr(value, field.name))
            for field in dataclasses.fields(value)
        )
    if isinstance(value, Callable):
        return _POINTER_SIZE
    return _POINTER_SIZE


def _type_size(value: object) -> int:
    """Estimate the size of a value from its type alone."""
    if isinstance(value, bool):
        return 1
    if isinstance(value, (int, float)):
        return 8
    if isinstance(value, complex):
        return 16
    if isinstance(value, str):
        return 24
    if isinstance(value, (bytes, bytearray, memoryview)):
        return _SLICE_HEADER + 4
    if isinstance(value, (list, set, frozenset)):
        sample = next(iter(value), None)
        element = _type_size(sample) if sample is not None else _POINTER_SIZE
        return _SLICE_HEADER + element * 4
    if isinstance(value, tuple):
        return sum(_type_size(element) for element in value)
    if isinstance(value, Mapping):
        sample = next(iter(value.items()), None)
        if sample is None:
            return _MAP_HEADER + (_POINTER_SIZE * 2) * 4
        key, item = sample
        return _MAP_HEADER + (_type_size(key) + _type_size(item)) * 4
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return sum(
            _type_size(getattr(value, field.name))
            for field in dataclasses.fields(value)
        )
    return _POINTER_SIZE


def fnv1a(key: str | bytes) -> int:
    """Return the 32-bit FNV-1a hash of ``key`` (strings are hashed as UTF-8)."""
    data = key.encode("utf-8") if isinstance(key, str) else bytes(key)
    result = _FNV_OFFSET_BASIS
    for byte in data:
        result ^= byte
        result = (result * _FNV_PRIME) & _UINT32_MASK
    return result


def round_to_power_of_two(n: int) -> int:
    """Round ``n`` up to the nearest power of two (at least 1)."""
    if n <= 1:
        return 1
    if n & (n - 1) == 0:
        return n
    return 1 << (n - 1).bit_length()


def optimal_shard_count() -> int:
    """Pick a shard count from the CPU count: twice the cores, 4 to 256, a power of two."""
    cpus = os.cpu_count() or 1
    count = min(max(cpus * 2, 4), 256)
    return round_to_power_of_two(count)


def format_bytes(size: int) -> str:
    """Format a byte count with binary units, e.g. ``"1.5 KB"``."""
    unit = 1024
    if size < 0:
        return f"-{format_bytes(-size)}"
    if size < unit:
        return f"{size} B"
    div, exp = unit, 0
    n = size // unit
    while n >= unit:
        div *= unit
        exp += 1
        n //= unit
    if exp >= len(_UNITS):
        raise OverflowError(f"byte count {size} is too large to format")
    return f"{size / div:.1f} {_UNITS[exp]}"