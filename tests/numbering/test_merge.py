# tests/numbering/test_merge.py
from __future__ import annotations

import pytest

from rownum.errors import PartitionRangeError
from rownum.numbering.merge import (
    is_ordered,
    merge_streams,
    shuffle,
    sort_spill,
    spill_by_partition,
)
from rownum.numbering.types import CountToken, DataToken, Marker, token_sort_key


def test_count_marker_sorts_before_data_marker():
    assert Marker.COUNT < Marker.DATA
    # Payload content never affects the key
    assert token_sort_key(CountToken(1, 10**12)) < token_sort_key(DataToken(""))
    assert token_sort_key(DataToken("\x00")) == token_sort_key(DataToken("\uffff"))


def test_sort_spill_moves_counts_first_and_is_stable():
    tokens = [DataToken("b"), DataToken("a"), CountToken(1, 4), DataToken("c"), CountToken(1, 2)]
    assert sort_spill(tokens) == [
        CountToken(1, 4),
        CountToken(1, 2),
        DataToken("b"),
        DataToken("a"),
        DataToken("c"),
    ]


def test_spill_by_partition_buckets_and_sorts():
    routed = [(0, DataToken("x")), (1, DataToken("y")), (1, CountToken(1, 1))]
    assert spill_by_partition(routed, 3) == [
        [DataToken("x")],
        [CountToken(1, 1), DataToken("y")],
        [],
    ]


def test_spill_by_partition_rejects_bad_partition():
    with pytest.raises(PartitionRangeError):
        spill_by_partition([(3, DataToken("x"))], 3)


def test_merge_streams_keeps_stream_order_for_ties():
    s0 = [CountToken(1, 1), DataToken("a0"), DataToken("a1")]
    s1 = [CountToken(1, 5), DataToken("b0")]
    s2 = [DataToken("c0")]
    merged = list(merge_streams([s0, s1, s2]))
    assert merged == [
        CountToken(1, 1),
        CountToken(1, 5),
        DataToken("a0"),
        DataToken("a1"),
        DataToken("b0"),
        DataToken("c0"),
    ]
    assert is_ordered(merged)


def test_shuffle_groups_each_partition_across_shards():
    spill_a = [[DataToken("a")], [CountToken(1, 1), DataToken("b")]]
    spill_b = [[DataToken("c")], [CountToken(1, 1)]]
    groups = shuffle([spill_a, spill_b], 2)
    assert groups == [
        [DataToken("a"), DataToken("c")],
        [CountToken(1, 1), CountToken(1, 1), DataToken("b")],
    ]


def test_shuffle_with_no_shards_gives_empty_groups():
    assert shuffle([], 3) == [[], [], []]


def test_is_ordered_detects_late_count():
    assert is_ordered([])
    assert is_ordered([CountToken(1, 1), DataToken("x")])
    assert not is_ordered([DataToken("x"), CountToken(1, 1)])
