import dataclasses
from collections import Counter
from unittest import mock

import pytest

from tscache.utils import (
    calculate_size,
    fnv1a,
    format_bytes,
    optimal_shard_count,
    round_to_power_of_two,
)


@pytest.mark.parametrize(
    "value",
    ["hello world", 42, 3.14, True, [1, 2, 3, 4, 5], {"a": 1, "b": 2}],
)
def test_calculate_size_non_negative(value):
    assert calculate_size(value) >= 0


def test_calculate_size_none_is_zero():
    assert calculate_size(None) == 0


def test_calculate_size_scalars():
    assert calculate_size(True) == 1
    assert calculate_size(42) == 8
    assert calculate_size(3.14) == 8


def test_calculate_size_string_includes_data():
    assert calculate_size("hello world") >= len("hello world")


@dataclasses.dataclass
class _Named:
    name: str


@pytest.mark.parametrize(
    "value",
    [
        "test",
        123,
        1.23,
        True,
        b"\x01\x02\x03",
        {"test": 1},
        _Named("test"),
        (1, 2, 3, 4, 5),
        lambda: None,
        object(),
    ],
)
def test_calculate_size_positive(value):
    assert calculate_size(value) > 0


def test_calculate_size_edge_cases():
    assert calculate_size("\x00" * 1000000) > 1000000
    assert calculate_size([]) >= 0
    assert calculate_size({}) >= 0


def test_calculate_size_grows_with_content():
    assert calculate_size(b"abcdef") > calculate_size(b"abc")
    assert calculate_size([1, 2, 3]) > calculate_size([1])


def test_fnv1a_empty_is_offset_basis():
    assert fnv1a("") == 2166136261


@pytest.mark.parametrize(
    "text", ["hello", "world", "this is a very long string for testing hash function"]
)
def test_fnv1a_consistent(text):
    assert fnv1a(text) == fnv1a(text)
    assert 0 <= fnv1a(text) <= 0xFFFFFFFF


def test_fnv1a_known_vector():
    assert fnv1a("a") == 0xE40C292C


def test_fnv1a_different_inputs():
    assert fnv1a("test1") != fnv1a("test2")


def test_fnv1a_str_matches_utf8_bytes():
    assert fnv1a("héllo") == fnv1a("héllo".encode("utf-8"))


def test_fnv1a_distribution():
    hashes = [fnv1a("test_key_" + chr(i)) for i in range(1000)]
    most_common_count = Counter(hashes).most_common(1)[0][1]
    assert most_common_count <= 5
    assert len(set(hashes)) >= 995


@pytest.mark.parametrize("n,expected", [(0, 1), (1, 1), (2, 2), (5, 8), (8, 8), (9, 16)])
def test_round_to_power_of_two(n, expected):
    assert round_to_power_of_two(n) == expected


def test_optimal_shard_count_current_system():
    count = optimal_shard_count()
    assert 4 <= count <= 256
    assert count & (count - 1) == 0


@pytest.mark.parametrize(
    "cpus,expected", [(1, 4), (2, 4), (4, 8), (16, 32), (200, 256), (None, 4)]
)
def test_optimal_shard_count_by_cpus(cpus, expected):
    with mock.patch("os.cpu_count", return_value=cpus):
        assert optimal_shard_count() == expected


@pytest.mark.parametrize(
    "size,expected",
    [
        (0, "0 B"),
        (500, "500 B"),
        (1536, "1.5 KB"),
        (1572864, "1.5 MB"),
        (1610612736, "1.5 GB"),
        (1649267441664, "1.5 TB"),
        (1688849860263936, "1.5 PB"),
        (1024, "1.0 KB"),
        (1048576, "1.0 MB"),
    ],
)
def test_format_bytes(size, expected):
    assert format_bytes(size) == expected


def test_format_bytes_negative():
    assert format_bytes(-1536) == "-1.5 KB"