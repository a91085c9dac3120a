# numbering/types.py
"""Tokens exchanged between the counting and aggregation phases."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any, ClassVar, Union

__all__ = ["Marker", "CountToken", "DataToken", "Token", "Output", "token_sort_key"]


class Marker(IntEnum):
    """Sort marker carried by every token; counts order before data."""

    COUNT = ord("T")
    DATA = ord("W")


@dataclass(frozen=True)
class CountToken:
    """Records routed by one shard to partitions before ``target_partition``."""

    target_partition: int
    """Partition this count is addressed to (never 0)"""

    count: int
    """Cumulative count of this shard's records in partitions [0, target_partition)"""

    marker: ClassVar[Marker] = Marker.COUNT


@dataclass(frozen=True)
class DataToken:
    """One input record travelling to its content-determined partition."""

    payload: Any

    marker: ClassVar[Marker] = Marker.DATA


Token = Union[CountToken, DataToken]


def token_sort_key(token: Token) -> int:
    """Sort key placing every count token strictly before every data token."""
    return int(token.marker)


@dataclass(frozen=True)
class Output:
    """A payload paired with its final global index."""

    index: int
    payload: Any

    def to_line(self) -> str:
        """Render as ``index<TAB>payload`` for text output."""
        return f"{self.index}\t{self.payload}"
