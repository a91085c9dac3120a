# numbering/partitioning.py
"""Deterministic routing of records and count tokens to output partitions."""

from __future__ import annotations

import hashlib
import numbers
from typing import Any, Callable

from rownum.errors import ConfigurationError, PartitionRangeError
from .types import CountToken, Token

__all__ = [
    "Partitioner",
    "HashPartitioner",
    "KeyRangePartitioner",
    "FunctionPartitioner",
    "make_partitioner",
    "validate_num_partitions",
    "PARTITIONER_NAMES",
]


def validate_num_partitions(num_partitions: Any) -> int:
    """Return ``num_partitions`` if it is an integer >= 1, else raise."""
    if isinstance(num_partitions, bool) or not isinstance(num_partitions, int):
        raise ConfigurationError(
            f"num_partitions must be an integer, got {num_partitions!r}"
        )
    if num_partitions < 1:
        raise ConfigurationError(
            f"num_partitions must be >= 1, got {num_partitions}"
        )
    return num_partitions


def _as_bytes(record: Any) -> bytes:
    if isinstance(record, (bytes, bytearray, memoryview)):
        return bytes(record)
    return str(record).encode("utf-8")


class Partitioner:
    """
    Base class for partition functions.

    ``partition`` must be pure: the same record always maps to the same
    partition, independent of call order or process. Subclasses implement
    ``partition``; ``route`` and ``checked_partition`` are shared.
    """

    def __init__(self, num_partitions: int):
        self.num_partitions = validate_num_partitions(num_partitions)

    def partition(self, record: Any) -> int:
        raise NotImplementedError

    def checked_partition(self, record: Any) -> int:
        """``partition(record)``, rejecting values outside ``[0, K)``."""
        p = self.partition(record)
        if isinstance(p, bool) or not isinstance(p, numbers.Integral) or not 0 <= p < self.num_partitions:
            raise PartitionRangeError(p, self.num_partitions)
        return int(p)

    def route(self, token: Token) -> int:
        """
        Partition a token is delivered to.

        Count tokens go straight to their explicit target; they are never
        routed by content.
        """
        if isinstance(token, CountToken):
            target = token.target_partition
            if not 0 <= target < self.num_partitions:
                raise PartitionRangeError(target, self.num_partitions)
            return target
        return self.checked_partition(token.payload)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(num_partitions={self.num_partitions})"


class HashPartitioner(Partitioner):
    """Route by a stable digest of the record's UTF-8 bytes."""

    def partition(self, record: Any) -> int:
        if self.num_partitions == 1:
            return 0
        digest = hashlib.blake2b(_as_bytes(record), digest_size=8).digest()
        return int.from_bytes(digest, "big") % self.num_partitions


class KeyRangePartitioner(Partitioner):
    """
    Route by the record's leading bytes over a uniformly divided keyspace.

    The keyspace is split into equal slices:
    - For <=256 partitions: 1-byte boundaries (0x00 to 0xFF)
    - For >256 partitions: 2-byte boundaries (0x0000 to 0xFFFF)

    Records that sort lower by bytes land in lower partitions, so numbering
    with this partitioner follows byte order across partitions.

    Example:
        >>> p = KeyRangePartitioner(4)
        >>> [p.partition(s) for s in ("\\x00", "A", "a", "\\x7f\\x7f")]
        [0, 1, 1, 1]
    """

    def __init__(self, num_partitions: int):
        super().__init__(num_partitions)
        if self.num_partitions > 65536:
            raise ConfigurationError(
                f"KeyRangePartitioner supports at most 65536 partitions, "
                f"got {self.num_partitions}"
            )
        if self.num_partitions <= 256:
            self._keyspace_size = 256
            self._key_bytes = 1
        else:
            self._keyspace_size = 65536
            self._key_bytes = 2

    def partition(self, record: Any) -> int:
        prefix = _as_bytes(record)[: self._key_bytes].ljust(self._key_bytes, b"\x00")
        key = int.from_bytes(prefix, "big")
        return key * self.num_partitions // self._keyspace_size


class FunctionPartitioner(Partitioner):
    """Adapt a plain callable ``fn(record) -> int`` to the partitioner API."""

    def __init__(self, num_partitions: int, fn: Callable[[Any], int]):
        super().__init__(num_partitions)
        self.fn = fn

    def partition(self, record: Any) -> int:
        return self.fn(record)


PARTITIONER_NAMES = {
    "hash": HashPartitioner,
    "range": KeyRangePartitioner,
}


def make_partitioner(name: str, num_partitions: int) -> Partitioner:
    """Build a named partitioner (``"hash"`` or ``"range"``)."""
    try:
        cls = PARTITIONER_NAMES[name]
    except KeyError:
        raise ConfigurationError(
            f"Unknown partitioner {name!r}; expected one of "
            f"{sorted(PARTITIONER_NAMES)}"
        ) from None
    return cls(num_partitions)
