# rownum/pipeline/report.py
from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Sequence

logger = logging.getLogger(__name__)


def _abbrev(s: str, width: int = 96) -> str:
    """Return s truncated with an ellipsis if it exceeds width."""
    return s if len(s) <= width else (s[: max(0, width - 1)] + "…")


def format_run_summary(
    *,
    input_files: Sequence[Path],
    output_dir: Path,
    num_shards: int,
    num_partitions: int,
    partitioner: str,
    workers: int,
    executor_name: str,
    start_time: datetime,
    lines_per_shard: int | None = None,
    overwrite: bool = True,
    validate: bool = True,
    color: bool = True,
) -> str:
    """
    Build a formatted, human-readable summary of the planned run.
    """
    heading = f"Start Time: {start_time:%Y-%m-%d %H:%M:%S}"
    if color:
        heading = f"\033[31m{heading}\033[0m"

    first = str(input_files[0]) if input_files else "None"
    last = str(input_files[-1]) if input_files else "None"
    sharding = (
        f"{lines_per_shard:,} lines per shard" if lines_per_shard else "one shard per file"
    )

    lines = [
        heading,
        ("\033[4mRow Numbering Configuration\033[0m" if color
         else "Row Numbering Configuration"),
        f"Input files:                {len(input_files)}",
        f"First input file:           {_abbrev(first)}",
        f"Last input file:            {_abbrev(last)}",
        f"Output directory:           {output_dir}",
        f"Shards:                     {num_shards} ({sharding})",
        f"Partitions:                 {num_partitions} ({partitioner})",
        f"Overwrite mode:             {overwrite}",
        f"Validate numbering:         {validate}",
        f"Worker processes/threads:   {workers} ({executor_name})",
    ]
    return "\n".join(lines) + "\n"


def print_run_summary(**kwargs) -> None:
    """Print the run summary to stdout (CLI usage)."""
    print(format_run_summary(**kwargs), end="")


def log_run_summary(*, color: bool = False, **kwargs) -> None:
    """Log the run summary at INFO level (pipelines using logging)."""
    summary = format_run_summary(color=color, **kwargs)
    for line in summary.rstrip("\n").splitlines():
        logger.info(line)
