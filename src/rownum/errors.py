# rownum/errors.py
"""Exception types raised by the numbering protocol and its host pipeline."""

from __future__ import annotations

from typing import Optional

__all__ = [
    "NumberingError",
    "ConfigurationError",
    "PartitionRangeError",
    "OrderViolation",
    "MisroutedTokenError",
    "ShardFailedError",
    "NumberingGapError",
]


class NumberingError(Exception):
    """Base class for every error raised by rownum."""


class ConfigurationError(NumberingError, ValueError):
    """Invalid settings, rejected before any record is processed."""


class PartitionRangeError(NumberingError, ValueError):
    """A partition function returned a value outside ``[0, num_partitions)``."""

    def __init__(self, partition: object, num_partitions: int):
        self.partition = partition
        self.num_partitions = num_partitions
        super().__init__(
            f"Partition {partition!r} is outside [0, {num_partitions})"
        )


class OrderViolation(NumberingError, RuntimeError):
    """
    A count token arrived after data tokens had already been numbered.

    The partition's base offset is unrecoverably wrong once this happens;
    the merge step delivering the group broke its ordering contract.
    """

    def __init__(self, partition: int, offset: int):
        self.partition = partition
        self.offset = offset
        super().__init__(
            f"Count token received by partition {partition} after data "
            f"tokens were numbered (offset reached {offset})"
        )


class MisroutedTokenError(NumberingError, RuntimeError):
    """A count token was delivered to a partition it does not address."""

    def __init__(self, partition: int, target_partition: int):
        self.partition = partition
        self.target_partition = target_partition
        super().__init__(
            f"Count token for partition {target_partition} delivered to "
            f"partition {partition}"
        )


class ShardFailedError(NumberingError, RuntimeError):
    """A shard kept failing after every allowed replay."""

    def __init__(self, shard_id: str, attempts: int, cause: Optional[BaseException] = None):
        self.shard_id = shard_id
        self.attempts = attempts
        msg = f"Shard {shard_id} failed after {attempts} attempt(s)"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)


class NumberingGapError(NumberingError, RuntimeError):
    """Final indices are not exactly ``0..N-1`` in partition order."""
