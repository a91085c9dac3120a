# tests/numbering/test_partitioning.py
from __future__ import annotations

import pytest

from rownum.errors import ConfigurationError, PartitionRangeError
from rownum.numbering.partitioning import (
    FunctionPartitioner,
    HashPartitioner,
    KeyRangePartitioner,
    make_partitioner,
)
from rownum.numbering.types import CountToken, DataToken


@pytest.mark.parametrize("k", [0, -1, -10])
def test_rejects_non_positive_partition_count(k):
    with pytest.raises(ConfigurationError):
        HashPartitioner(k)


@pytest.mark.parametrize("k", [1.5, "3", None, True])
def test_rejects_non_integer_partition_count(k):
    with pytest.raises(ConfigurationError):
        HashPartitioner(k)


def test_hash_partitioner_is_deterministic_and_in_range():
    a = HashPartitioner(7)
    b = HashPartitioner(7)
    records = [f"line {i}" for i in range(500)]
    first = [a.partition(r) for r in records]
    assert first == [b.partition(r) for r in reversed(records)][::-1]
    assert all(0 <= p < 7 for p in first)
    # A few hundred records should touch every partition
    assert set(first) == set(range(7))


def test_hash_partitioner_str_and_bytes_agree():
    p = HashPartitioner(13)
    assert p.partition("héllo") == p.partition("héllo".encode("utf-8"))


def test_single_partition_routes_everything_to_zero():
    p = HashPartitioner(1)
    assert {p.partition(s) for s in ("a", "b", "", "zzz")} == {0}


def test_key_range_partitioner_preserves_byte_order():
    p = KeyRangePartitioner(4)
    records = sorted(["\x00", "\x3f", "\x40", "A", "a", "\x7f", "~~"])
    parts = [p.partition(r) for r in records]
    assert parts == sorted(parts)
    assert p.partition("") == 0
    assert p.partition("\x00") == 0
    assert p.partition("\x40") == 1


def test_key_range_partitioner_uses_two_bytes_above_256():
    p = KeyRangePartitioner(512)
    assert p.partition(b"\x00\x00") == 0
    assert p.partition(b"\x00\xff") == 1
    assert p.partition(b"\xff\xff") == 511


def test_key_range_partitioner_limit():
    with pytest.raises(ConfigurationError):
        KeyRangePartitioner(65537)


def test_checked_partition_rejects_out_of_range():
    p = FunctionPartitioner(3, lambda r: 3)
    with pytest.raises(PartitionRangeError) as ei:
        p.checked_partition("x")
    assert ei.value.partition == 3
    assert ei.value.num_partitions == 3

    with pytest.raises(PartitionRangeError):
        FunctionPartitioner(3, lambda r: -1).checked_partition("x")


def test_route_uses_explicit_target_for_count_tokens():
    calls = []

    def fn(record):
        calls.append(record)
        return 0

    p = FunctionPartitioner(4, fn)
    assert p.route(CountToken(target_partition=3, count=10)) == 3
    assert calls == []  # never content-routed
    assert p.route(DataToken("abc")) == 0
    assert calls == ["abc"]


def test_route_rejects_count_token_outside_range():
    p = HashPartitioner(2)
    with pytest.raises(PartitionRangeError):
        p.route(CountToken(target_partition=2, count=1))


def test_make_partitioner_by_name():
    assert isinstance(make_partitioner("hash", 3), HashPartitioner)
    assert isinstance(make_partitioner("range", 3), KeyRangePartitioner)
    with pytest.raises(ConfigurationError):
        make_partitioner("roundrobin", 3)
