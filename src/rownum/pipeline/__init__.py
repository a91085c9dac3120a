"""Local host for the numbering protocol: worker pool, shuffle, part files."""

from .orchestrate import NumberingResult, number_in_memory, number_records
from .verify import check_dense

__all__ = ["NumberingResult", "number_in_memory", "number_records", "check_dense"]
