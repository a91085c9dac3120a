# numbering/aggregator.py
"""Per-partition aggregation: sum count tokens, then number data tokens."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Iterable, Iterator, List

from rownum.errors import MisroutedTokenError, OrderViolation
from .types import CountToken, Output, Token

__all__ = ["AggregatorState", "Aggregator", "consume_group"]

logger = logging.getLogger(__name__)


class AggregatorState(Enum):
    SUMMING_COUNTS = "summing_counts"
    EMITTING_DATA = "emitting_data"
    DONE = "done"


class Aggregator:
    """
    Numbers the records of one partition.

    Count tokens from every shard are summed into a base offset, which is
    the number of records all shards routed to lower partitions. Data
    tokens that follow are numbered consecutively from that offset.
    """

    def __init__(self, partition: int):
        self.partition = partition
        self.state = AggregatorState.SUMMING_COUNTS
        self.offset = 0
        self.base_offset = 0
        self.emitted = 0

    def consume(self, tokens: Iterable[Token]) -> Iterator[Output]:
        """
        Yield ``Output(index, payload)`` for every data token in ``tokens``.

        Raises:
            OrderViolation: a count token arrived after numbering began.
            MisroutedTokenError: a count token addressed another partition.
        """
        if self.state is not AggregatorState.SUMMING_COUNTS:
            raise RuntimeError(f"Aggregator for partition {self.partition} already used")

        for token in tokens:
            if isinstance(token, CountToken):
                if self.state is AggregatorState.EMITTING_DATA:
                    logger.error(
                        "Partition %d: count token after %d data tokens",
                        self.partition,
                        self.emitted,
                    )
                    raise OrderViolation(self.partition, self.offset)
                if token.target_partition != self.partition:
                    raise MisroutedTokenError(self.partition, token.target_partition)
                self.offset += token.count
                continue

            if self.state is AggregatorState.SUMMING_COUNTS:
                self.state = AggregatorState.EMITTING_DATA
                self.base_offset = self.offset
            yield Output(self.offset, token.payload)
            self.offset += 1
            self.emitted += 1

        self.state = AggregatorState.DONE
        if self.emitted:
            logger.debug(
                "Partition %d: numbered %d records from offset %d",
                self.partition,
                self.emitted,
                self.base_offset,
            )
        else:
            logger.debug("Partition %d: empty", self.partition)


def consume_group(partition_index: int, tokens: Iterable[Token]) -> List[Output]:
    """Aggregate one partition's ordered token group into final outputs."""
    return list(Aggregator(partition_index).consume(tokens))
