# rownum/pipeline/orchestrate.py
from __future__ import annotations

import logging
import os
from concurrent.futures import ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, List, Sequence, Type

import setproctitle

from rownum.config import PipelineConfig
from rownum.io.shards import discover_inputs, plan_shards
from rownum.io.write import mark_success, prepare_output_dir, write_partition
from rownum.numbering.aggregator import consume_group
from rownum.numbering.merge import shuffle
from rownum.numbering.partitioning import Partitioner
from rownum.numbering.types import Output
from rownum.pipeline.report import log_run_summary, print_run_summary
from rownum.pipeline.runner import run_aggregation_phase, run_counting_phase
from rownum.pipeline.verify import check_dense
from rownum.pipeline.worker import spill_records

logger = logging.getLogger(__name__)


@dataclass
class NumberingResult:
    """Outcome of a file-based numbering run."""

    output_dir: Path
    total_records: int
    num_shards: int
    records_per_partition: List[int] = field(default_factory=list)
    count_tokens: int = 0
    runtime: timedelta = timedelta(0)


def number_in_memory(
    shards: Sequence[Sequence[Any]],
    partitioner: Partitioner,
) -> List[List[Output]]:
    """
    Number in-memory shards sequentially in the calling process.

    Runs the same protocol as ``number_records``: every shard is counted
    independently, all spills are shuffled once every shard is done, then
    each partition is aggregated. Returns ``outputs[p]`` per partition.
    """
    spills = [
        spill_records(i, f"shard-{i}", records, partitioner)
        for i, records in enumerate(shards)
    ]
    groups = shuffle([s.partitions for s in spills], partitioner.num_partitions)
    return [consume_group(p, group) for p, group in enumerate(groups)]


def number_records(config: PipelineConfig) -> NumberingResult:
    """
    Assign dense row numbers to every line of the configured inputs.

    Process
    -------
    1. Prepare the output directory (optionally overwriting)
    2. Discover input files and cut them into shards
    3. Count shards concurrently (the barrier is the end of this phase)
    4. Shuffle tokens into one ordered group per partition
    5. Aggregate partitions concurrently into (index, line) pairs
    6. Optionally verify density, then write part files and ``_SUCCESS``
    """
    setproctitle.setproctitle("ROWNUM_MAIN")
    start_time = datetime.now()

    workers = config.num_workers
    if workers is None:
        workers = min(32, os.cpu_count() or 4)

    executor_class: Type = ThreadPoolExecutor if config.use_threads else ProcessPoolExecutor
    executor_name = "threads" if config.use_threads else "processes"

    # Inputs are checked before the output is touched
    files = discover_inputs(config.input_paths)
    output_dir = prepare_output_dir(config.output_dir, overwrite=config.overwrite)
    shards = plan_shards(files, config.lines_per_shard, config.encoding)
    numbering = config.numbering

    summary = dict(
        input_files=files,
        output_dir=output_dir,
        num_shards=len(shards),
        num_partitions=numbering.num_partitions,
        partitioner=numbering.partitioner,
        workers=workers,
        executor_name=executor_name,
        start_time=start_time,
        lines_per_shard=config.lines_per_shard,
        overwrite=config.overwrite,
        validate=config.validate,
    )
    if config.show_progress:
        print_run_summary(**summary)
    else:
        log_run_summary(**summary)

    spills = run_counting_phase(
        shards,
        numbering,
        executor_class=executor_class,
        workers=workers,
        encoding=config.encoding,
        max_attempts=config.max_shard_attempts,
        show_progress=config.show_progress,
    )

    groups = shuffle([s.partitions for s in spills], numbering.num_partitions)
    del spills

    outputs = run_aggregation_phase(
        groups,
        executor_class=executor_class,
        workers=workers,
        show_progress=config.show_progress,
    )
    count_tokens = sum(len(g) for g in groups) - sum(len(o) for o in outputs)
    del groups

    if config.validate:
        check_dense(outputs)

    records_per_partition = [
        write_partition(output_dir, p, part, config.encoding)
        for p, part in enumerate(outputs)
    ]
    mark_success(output_dir)

    total = sum(records_per_partition)
    runtime = datetime.now() - start_time
    logger.info(
        "Numbered %d records across %d partitions in %s",
        total,
        numbering.num_partitions,
        runtime,
    )

    if config.show_progress:
        print("\033[32m\nNumbering completed!\033[0m")
        print(f"Records numbered: {total:,}")
        print(f"Count tokens exchanged: {count_tokens:,}")
        print(f"\033[34mTotal Runtime: {runtime}\033[0m")

    return NumberingResult(
        output_dir=output_dir,
        total_records=total,
        num_shards=len(shards),
        records_per_partition=records_per_partition,
        count_tokens=count_tokens,
        runtime=runtime,
    )
