# rownum/config.py
"""Configuration for numbering runs."""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal, Optional, Tuple

from rownum.errors import ConfigurationError
from rownum.numbering.partitioning import (
    PARTITIONER_NAMES,
    Partitioner,
    make_partitioner,
    validate_num_partitions,
)

__all__ = ["NumberingConfig", "PipelineConfig", "configure", "DEFAULT_NUM_PARTITIONS"]

DEFAULT_NUM_PARTITIONS = 10


@dataclass(frozen=True)
class NumberingConfig:
    """Partition count and partition function shared by every phase."""

    num_partitions: int = DEFAULT_NUM_PARTITIONS
    partitioner: Literal["hash", "range"] = "hash"

    def __post_init__(self) -> None:
        validate_num_partitions(self.num_partitions)
        if self.partitioner not in PARTITIONER_NAMES:
            raise ConfigurationError(
                f"Unknown partitioner {self.partitioner!r}; expected one of "
                f"{sorted(PARTITIONER_NAMES)}"
            )

    def make_partitioner(self) -> Partitioner:
        return make_partitioner(self.partitioner, self.num_partitions)


def configure(num_partitions: int, partitioner: str = "hash") -> NumberingConfig:
    """
    Validate the partition count and partition function name.

    Raises ConfigurationError if ``num_partitions < 1``; nothing is
    processed until this succeeds.
    """
    return NumberingConfig(num_partitions=num_partitions, partitioner=partitioner)


@dataclass(frozen=True)
class PipelineConfig:
    """Orchestration settings for numbering text files with a local pool."""

    # I/O
    input_paths: Tuple[Path, ...]
    output_dir: Path
    encoding: str = "utf-8"

    # Numbering
    numbering: NumberingConfig = field(default_factory=NumberingConfig)

    # Parallelism
    num_workers: Optional[int] = None  # If None, defaults to min(32, cpu_count)
    use_threads: bool = False  # Threads instead of processes for shard counting
    lines_per_shard: Optional[int] = None  # If None, one shard per input file

    # Failure handling
    max_shard_attempts: int = 2  # Full replays allowed per shard, first run included

    # Pipeline control
    overwrite: bool = True  # Remove an existing output directory first
    validate: bool = True  # Check dense 0..N-1 numbering before writing
    show_progress: bool = True

    def __post_init__(self) -> None:
        # Normalise paths; frozen, so bypass __setattr__
        object.__setattr__(
            self, "input_paths", tuple(Path(p) for p in self.input_paths)
        )
        object.__setattr__(self, "output_dir", Path(self.output_dir))

        if not self.input_paths:
            raise ConfigurationError("At least one input path is required")
        # The output directory is wiped on overwrite; it must not overlap any input
        out = self.output_dir.expanduser().resolve()
        for p in self.input_paths:
            resolved = p.expanduser().resolve()
            if resolved == out or out in resolved.parents:
                raise ConfigurationError(
                    f"Output directory {out} contains input path {resolved}"
                )
            if resolved in out.parents:
                raise ConfigurationError(
                    f"Output directory {out} is inside input path {resolved}"
                )
        if self.num_workers is not None and self.num_workers < 1:
            raise ConfigurationError(f"num_workers must be >= 1, got {self.num_workers}")
        if self.lines_per_shard is not None and self.lines_per_shard < 1:
            raise ConfigurationError(
                f"lines_per_shard must be >= 1, got {self.lines_per_shard}"
            )
        if self.max_shard_attempts < 1:
            raise ConfigurationError(
                f"max_shard_attempts must be >= 1, got {self.max_shard_attempts}"
            )

    @property
    def num_partitions(self) -> int:
        return self.numbering.num_partitions
