# rownum/pipeline/verify.py
"""Post-aggregation checks on the final numbering."""

from __future__ import annotations

import logging
from typing import Sequence

from rownum.errors import NumberingGapError
from rownum.numbering.types import Output

__all__ = ["check_dense"]

logger = logging.getLogger(__name__)


def check_dense(outputs_by_partition: Sequence[Sequence[Output]]) -> int:
    """
    Verify that partition outputs form one gapless run ``0..N-1``.

    Every partition must step by exactly 1, and each non-empty partition
    must start right after the last index of the nearest non-empty
    partition before it. Returns N.

    Raises:
        NumberingGapError: on the first gap, overlap, or reordering found.
    """
    expected = 0
    for p, outputs in enumerate(outputs_by_partition):
        for out in outputs:
            if out.index != expected:
                raise NumberingGapError(
                    f"Partition {p}: expected index {expected}, found {out.index}"
                )
            expected += 1
    logger.info("Verified dense numbering 0..%d", expected - 1)
    return expected
