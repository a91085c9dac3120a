# rownum/pipeline/runner.py
from __future__ import annotations

import logging
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, as_completed, wait
from typing import Dict, List, Optional, Sequence, Tuple, Type

from tqdm import tqdm

from rownum.config import NumberingConfig
from rownum.errors import NumberingError, ShardFailedError
from rownum.io.shards import Shard
from rownum.numbering.aggregator import consume_group
from rownum.numbering.merge import is_ordered
from rownum.numbering.types import Output, Token
from rownum.pipeline.worker import ShardSpill, count_shard_worker

logger = logging.getLogger(__name__)


def _cancel_all(futures) -> None:
    for fut in futures:
        fut.cancel()


def run_counting_phase(
    shards: Sequence[Shard],
    numbering: NumberingConfig,
    *,
    executor_class: Type = ThreadPoolExecutor,  # ThreadPoolExecutor | ProcessPoolExecutor
    workers: int = 4,
    encoding: str = "utf-8",
    max_attempts: int = 2,
    show_progress: bool = True,
) -> List[ShardSpill]:
    """
    Count every shard concurrently and return their spills in shard order.

    Returning is the barrier: no spill is handed back until every shard has
    finished, so aggregation never starts while a count token is in flight.

    Notes
    -----
    - A shard that raises anything other than a ``NumberingError`` is
      replayed from its first line; its earlier attempt left nothing behind
      because spills are only kept on success.
    - ``NumberingError`` (e.g. ``PartitionRangeError``) is deterministic, so
      it aborts the run immediately instead of being retried.
    """
    spills: List[Optional[ShardSpill]] = [None] * len(shards)
    set_title = executor_class is not ThreadPoolExecutor

    with tqdm(total=len(shards), desc="Counting Shards", unit="shards",
              colour="blue", disable=not show_progress) as pbar:
        with executor_class(max_workers=workers) as executor:

            def submit(shard: Shard) -> Future:
                return executor.submit(
                    count_shard_worker, shard, numbering, encoding, set_title
                )

            pending: Dict[Future, Tuple[Shard, int]] = {
                submit(shard): (shard, 1) for shard in shards
            }

            while pending:
                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                for fut in done:
                    shard, attempt = pending.pop(fut)
                    try:
                        spill = fut.result()
                    except NumberingError as exc:
                        logger.error("Shard %s aborted: %s", shard.shard_id, exc)
                        _cancel_all(pending)
                        raise
                    except Exception as exc:
                        if attempt < max_attempts:
                            logger.warning(
                                "Shard %s failed (attempt %d/%d): %s; replaying",
                                shard.shard_id,
                                attempt,
                                max_attempts,
                                exc,
                            )
                            pending[submit(shard)] = (shard, attempt + 1)
                            continue
                        logger.error(
                            "Shard %s failed after %d attempts: %s",
                            shard.shard_id,
                            attempt,
                            exc,
                        )
                        _cancel_all(pending)
                        raise ShardFailedError(shard.shard_id, attempt, exc) from exc
                    spills[spill.index] = spill
                    pbar.update(1)

    logger.info("Counting phase complete: %d shards", len(shards))
    return [s for s in spills if s is not None]


def run_aggregation_phase(
    groups: Sequence[Sequence[Token]],
    *,
    executor_class: Type = ThreadPoolExecutor,
    workers: int = 4,
    show_progress: bool = True,
) -> List[List[Output]]:
    """
    Aggregate every partition's ordered group independently.

    Returns ``outputs[p]`` for each partition. Any ``OrderViolation`` is
    fatal for the run and propagates.
    """
    outputs: List[List[Output]] = [[] for _ in groups]

    if logger.isEnabledFor(logging.DEBUG):
        unordered = [p for p, group in enumerate(groups) if not is_ordered(group)]
        if unordered:
            logger.debug("Count tokens after data in partitions %s", unordered)

    with tqdm(total=len(groups), desc="Numbering Partitions", unit="partitions",
              colour="green", disable=not show_progress) as pbar:
        with executor_class(max_workers=workers) as executor:
            futures = {
                executor.submit(consume_group, p, list(group)): p
                for p, group in enumerate(groups)
            }
            for fut in as_completed(futures):
                p = futures[fut]
                try:
                    outputs[p] = fut.result()
                except NumberingError as exc:
                    logger.error("Partition %d aborted: %s", p, exc)
                    _cancel_all(futures)
                    raise
                pbar.update(1)

    logger.info("Aggregation phase complete: %d partitions", len(groups))
    return outputs
