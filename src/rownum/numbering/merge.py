# numbering/merge.py
"""
Shuffle and merge of tokens between the counting and aggregation phases.

Aggregation is only correct if each partition sees its tokens as a single
ordered group in which every count token precedes every data token. That
property comes from the sort key alone (count marker < data marker); all
sorts and merges here are stable so data tokens keep shard order and then
intra-shard order.
"""

from __future__ import annotations

import heapq
from typing import Iterable, Iterator, List, Sequence, Tuple

from rownum.errors import PartitionRangeError
from .types import Marker, Token, token_sort_key

__all__ = [
    "sort_spill",
    "spill_by_partition",
    "merge_streams",
    "shuffle",
    "is_ordered",
]


def sort_spill(tokens: Iterable[Token]) -> List[Token]:
    """Stable sort of one shard's tokens for a single partition."""
    return sorted(tokens, key=token_sort_key)


def spill_by_partition(
    routed: Iterable[Tuple[int, Token]], num_partitions: int
) -> List[List[Token]]:
    """
    Bucket ``(partition, token)`` pairs into K sorted per-partition lists.

    This is the map-side half of the shuffle: one shard's output, ready to
    be merged with every other shard's list for the same partition.
    """
    buckets: List[List[Token]] = [[] for _ in range(num_partitions)]
    for partition, token in routed:
        if not 0 <= partition < num_partitions:
            raise PartitionRangeError(partition, num_partitions)
        buckets[partition].append(token)
    return [sort_spill(bucket) for bucket in buckets]


def merge_streams(streams: Iterable[Iterable[Token]]) -> Iterator[Token]:
    """
    Merge pre-sorted token streams into one ordered stream.

    ``heapq.merge`` resolves ties in favour of the earlier stream, so equal
    markers keep stream order.
    """
    return heapq.merge(*streams, key=token_sort_key)


def shuffle(
    spills: Sequence[Sequence[Sequence[Token]]], num_partitions: int
) -> List[List[Token]]:
    """
    Redistribute every shard's spill into one ordered group per partition.

    Args:
        spills: Per-shard outputs in shard order; ``spills[s][p]`` is shard
            ``s``'s sorted token list for partition ``p``.
        num_partitions: K

    Returns:
        ``groups[p]``: all tokens for partition ``p``, counts first, data
        in shard order then record order.
    """
    groups: List[List[Token]] = []
    for p in range(num_partitions):
        groups.append(list(merge_streams(spill[p] for spill in spills)))
    return groups


def is_ordered(tokens: Iterable[Token]) -> bool:
    """True if no count token follows a data token."""
    seen_data = False
    for token in tokens:
        if token.marker is Marker.DATA:
            seen_data = True
        elif seen_data:
            return False
    return True
