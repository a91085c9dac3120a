# rownum/pipeline/worker.py
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Iterable, List

import setproctitle

from rownum.config import NumberingConfig
from rownum.io.shards import Shard, read_shard
from rownum.numbering.counter import count_shard
from rownum.numbering.merge import spill_by_partition
from rownum.numbering.partitioning import Partitioner
from rownum.numbering.types import CountToken, Token

logger = logging.getLogger(__name__)


@dataclass
class ShardSpill:
    """Everything one shard contributes to the shuffle."""

    index: int
    """Shard position in the global input order"""

    shard_id: str

    partitions: List[List[Token]] = field(default_factory=list)
    """``partitions[p]``: sorted tokens addressed to partition p"""

    records: int = 0
    count_tokens: int = 0


def spill_records(
    index: int,
    shard_id: str,
    records: Iterable[Any],
    partitioner: Partitioner,
) -> ShardSpill:
    """Count an in-memory shard and bucket its tokens by partition."""
    routed = count_shard(records, partitioner)
    partitions = spill_by_partition(routed, partitioner.num_partitions)
    count_tokens = sum(1 for _, tok in routed if isinstance(tok, CountToken))
    return ShardSpill(
        index=index,
        shard_id=shard_id,
        partitions=partitions,
        records=len(routed) - count_tokens,
        count_tokens=count_tokens,
    )


def count_shard_worker(
    shard: Shard,
    numbering: NumberingConfig,
    encoding: str = "utf-8",
    set_title: bool = True,
) -> ShardSpill:
    """
    Read one input shard, count it, and return its spill.

    Runs inside a pool worker. State is private to the call, so a failed
    shard is replayed by simply calling this again.
    """
    if set_title:
        setproctitle.setproctitle(f"ROWNUM_COUNT {shard.shard_id}")

    pid = os.getpid()
    logger.info("Worker PID %s: counting %s", pid, shard.shard_id)

    spill = spill_records(
        shard.index,
        shard.shard_id,
        read_shard(shard, encoding),
        numbering.make_partitioner(),
    )

    logger.info(
        "Worker PID %s: %s - %s records, %s count tokens",
        pid,
        shard.shard_id,
        f"{spill.records:,}",
        spill.count_tokens,
    )
    return spill
