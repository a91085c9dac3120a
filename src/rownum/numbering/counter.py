# numbering/counter.py
"""Per-shard counting phase: data tokens out, boundary count tokens at the end."""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Tuple

import numpy as np

from .partitioning import Partitioner
from .types import CountToken, DataToken, Token

__all__ = ["LocalCounter", "count_shard"]

logger = logging.getLogger(__name__)


class LocalCounter:
    """
    Counts one shard's records per partition without any shared state.

    Each record becomes a data token immediately. When the shard is
    exhausted, ``finalize_shard`` turns the private per-partition counts
    into at most K-1 count tokens, one per partition boundary, carrying
    this shard's cumulative count of records before that boundary.
    """

    def __init__(self, partitioner: Partitioner):
        self.partitioner = partitioner
        self.num_partitions = partitioner.num_partitions
        self.counts = np.zeros(self.num_partitions, dtype=np.int64)
        self.records_seen = 0
        self._finalized = False

    def process_record(self, record: Any) -> DataToken:
        """Route ``record``, count it, and wrap it in a data token."""
        return self.route_record(record)[1]

    def route_record(self, record: Any) -> Tuple[int, DataToken]:
        """Like ``process_record`` but also return the partition it went to."""
        if self._finalized:
            raise RuntimeError("process_record() called after finalize_shard()")
        p = self.partitioner.checked_partition(record)
        self.counts[p] += 1
        self.records_seen += 1
        return p, DataToken(record)

    def finalize_shard(self) -> List[CountToken]:
        """
        Emit this shard's boundary counts.

        Forward scan over c = 0..K-2: while the running total of records in
        partitions [0, c] is nonzero, partition c+1 is told that total.
        Partition 0 never receives a count token and the grand total for
        partition K-1 is never emitted.
        """
        if self._finalized:
            raise RuntimeError("finalize_shard() called more than once")
        self._finalized = True

        counts = self.counts
        tokens: List[CountToken] = []
        for c in range(self.num_partitions - 1):
            if counts[c] > 0:
                tokens.append(CountToken(target_partition=c + 1, count=int(counts[c])))
            counts[c + 1] += counts[c]

        logger.debug(
            "Shard finalized: %d records, %d count tokens",
            self.records_seen,
            len(tokens),
        )
        return tokens


def count_shard(
    records: Iterable[Any], partitioner: Partitioner
) -> List[Tuple[int, Token]]:
    """
    Run a whole shard through a fresh ``LocalCounter``.

    Returns every emitted token addressed to its partition, data tokens in
    record order followed by the count tokens.
    """
    counter = LocalCounter(partitioner)
    routed: List[Tuple[int, Token]] = []
    append = routed.append
    for record in records:
        append(counter.route_record(record))
    for token in counter.finalize_shard():
        append((partitioner.route(token), token))
    return routed
