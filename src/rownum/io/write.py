# rownum/io/write.py
"""Output directory handling and part-file writing."""

from __future__ import annotations

import logging
import shutil
import time
from pathlib import Path
from typing import Iterable, Union

from rownum.numbering.types import Output

__all__ = [
    "SUCCESS_MARKER",
    "part_path",
    "safe_output_cleanup",
    "prepare_output_dir",
    "write_partition",
    "mark_success",
]

logger = logging.getLogger(__name__)

SUCCESS_MARKER = "_SUCCESS"


def part_path(output_dir: Union[str, Path], partition: int) -> Path:
    """Path of the part file holding one partition's output."""
    return Path(output_dir) / f"part-r-{partition:05d}"


def safe_output_cleanup(
    output_dir: Union[str, Path],
    max_retries: int = 5,
    delay_seconds: float = 1.0,
    backoff: float = 1.5,
) -> bool:
    """
    Remove an output directory, retrying transient filesystem errors.

    Behavior
    --------
    - If the path doesn't exist: returns True (idempotent no-op).
    - If the path exists but isn't a directory: raises ValueError.
    - Returns False if the directory still could not be removed.
    """
    path = Path(output_dir).expanduser()

    if not path.exists():
        return True
    if not path.is_dir():
        raise ValueError(f"{path!s} exists but is not a directory")

    delay = delay_seconds
    for attempt in range(1, max_retries + 1):
        try:
            shutil.rmtree(path)
            logger.info("Removed existing output %s (attempt %d)", path, attempt)
            return True
        except OSError as exc:
            logger.warning(
                "Attempt %d/%d to remove %s failed: %s",
                attempt,
                max_retries,
                path,
                exc,
            )
            if attempt < max_retries:
                time.sleep(delay)
                delay *= backoff

    return False


def prepare_output_dir(output_dir: Union[str, Path], overwrite: bool = True) -> Path:
    """
    Create an empty output directory.

    An existing directory is removed when ``overwrite`` is set and rejected
    otherwise, so part files from an older run never mix with new ones.
    """
    path = Path(output_dir).expanduser()
    if path.exists():
        if not overwrite:
            raise FileExistsError(f"Output directory already exists: {path}")
        logger.info("Removing existing output for fresh start…")
        if not safe_output_cleanup(path):
            raise RuntimeError(
                f"Failed to remove existing output at {path}. "
                "Close open handles or remove it manually."
            )
    path.mkdir(parents=True)
    return path


def write_partition(
    output_dir: Union[str, Path],
    partition: int,
    outputs: Iterable[Output],
    encoding: str = "utf-8",
) -> int:
    """Write ``index<TAB>payload`` lines for one partition; return the line count."""
    path = part_path(output_dir, partition)
    written = 0
    with open(path, "w", encoding=encoding, newline="\n") as fh:
        for out in outputs:
            fh.write(out.to_line())
            fh.write("\n")
            written += 1
    logger.debug("Wrote %d lines to %s", written, path.name)
    return written


def mark_success(output_dir: Union[str, Path]) -> Path:
    """Drop an empty ``_SUCCESS`` marker once every part file is written."""
    marker = Path(output_dir) / SUCCESS_MARKER
    marker.touch()
    return marker
