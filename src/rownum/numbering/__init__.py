"""Two-phase dense numbering: local counting, shuffle, per-partition aggregation."""

from .types import CountToken, DataToken, Marker, Output, Token, token_sort_key
from .partitioning import (
    FunctionPartitioner,
    HashPartitioner,
    KeyRangePartitioner,
    Partitioner,
    make_partitioner,
)
from .counter import LocalCounter, count_shard
from .merge import is_ordered, merge_streams, shuffle, sort_spill, spill_by_partition
from .aggregator import Aggregator, AggregatorState, consume_group

__all__ = [
    "CountToken",
    "DataToken",
    "Marker",
    "Output",
    "Token",
    "token_sort_key",
    "Partitioner",
    "HashPartitioner",
    "KeyRangePartitioner",
    "FunctionPartitioner",
    "make_partitioner",
    "LocalCounter",
    "count_shard",
    "sort_spill",
    "spill_by_partition",
    "merge_streams",
    "shuffle",
    "is_ordered",
    "Aggregator",
    "AggregatorState",
    "consume_group",
]
