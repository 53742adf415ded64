import sys
from unittest import mock

import pytest

from tscache.demo import (
    demonstrate_basic_usage,
    demonstrate_compression,
    demonstrate_eviction_policies,
    main,
)


class _FakeClock:
    def __init__(self) -> None:
        self.start = 1000.0
        self.now = self.start

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock():
    clock = _FakeClock()
    with mock.patch("time.monotonic", clock.monotonic), mock.patch(
        "time.sleep", clock.sleep
    ):
        yield clock


def test_basic_usage_prints_stored_values(fake_clock, capsys):
    demonstrate_basic_usage()
    out = capsys.readouterr().out
    assert "Hello, TSCache!" in out
    assert "zhangsan@example.com" in out


def test_basic_usage_reports_expiry_and_delete(fake_clock, capsys):
    demonstrate_basic_usage()
    out = capsys.readouterr().out
    assert out.count("key not found") >= 2
    assert fake_clock.now - fake_clock.start >= 3


def test_basic_usage_stats_snapshot(fake_clock):
    stats = demonstrate_basic_usage()
    assert stats.max_size == 1024 * 1024
    assert stats.eviction_policy == "LRU"
    assert stats.hits >= 10
    assert stats.misses >= 5
    assert stats.current_count >= 10
    assert stats.evictions == 0


def test_eviction_policies_counts_are_consistent():
    reports = demonstrate_eviction_policies()
    assert set(reports) == {"LRU", "LFU", "FIFO"}
    for name, stats in reports.items():
        assert stats.eviction_policy == name
        assert stats.current_count + stats.evictions == 8
        assert stats.current_size <= 200
        assert stats.evictions >= 1


def test_eviction_output_covers_every_key(capsys):
    demonstrate_eviction_policies()
    out = capsys.readouterr().out
    for i in range(1, 9):
        assert f"key{i}" in out
    for policy in ("LRU", "LFU", "FIFO"):
        assert policy in out


def test_compression_samples_round_trip():
    results = demonstrate_compression()
    assert len(results) >= 3
    assert all(results.values())


def test_main_without_arguments_shows_usage(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    for name in ("basic", "eviction", "compression", "all"):
        assert name in out


def test_main_reads_sys_argv_when_none(capsys):
    with mock.patch.object(sys, "argv", ["tscache-demo"]):
        assert main() == 0
    out = capsys.readouterr().out
    assert "compression" in out


def test_main_unknown_example_names_it(capsys):
    assert main(["bogus"]) == 0
    out = capsys.readouterr().out
    assert "bogus" in out
    assert "eviction" in out


def test_main_runs_basic_example(fake_clock, capsys):
    assert main(["basic"]) == 0
    out = capsys.readouterr().out
    assert "Hello, TSCache!" in out


def test_main_runs_every_example(fake_clock, capsys):
    assert main(["all"]) == 0
    out = capsys.readouterr().out
    assert "Hello, TSCache!" in out
    assert "FIFO" in out
    assert "zstd" in out.lower()