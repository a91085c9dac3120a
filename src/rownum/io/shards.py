# rownum/io/shards.py
"""Input discovery, shard planning, and shard reading for line-oriented files."""

from __future__ import annotations

import gzip
import io
import logging
from dataclasses import dataclass
from itertools import islice
from pathlib import Path
from typing import IO, Iterable, Iterator, List, Optional, Union

from rownum.errors import ConfigurationError

__all__ = ["Shard", "discover_inputs", "plan_shards", "read_shard", "count_lines"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Shard:
    """A contiguous run of lines from one input file, read by one worker."""

    shard_id: str
    """Readable identifier, e.g. ``part-0003.txt:0-5000``"""

    index: int
    """Position of this shard in the global input order"""

    path: Path

    start_line: int = 0
    """First line (inclusive, 0-based)"""

    end_line: Optional[int] = None
    """Last line (exclusive), None for end of file"""


def _is_hidden(path: Path) -> bool:
    return path.name.startswith((".", "_"))


def discover_inputs(paths: Iterable[Union[str, Path]]) -> List[Path]:
    """
    Expand input paths into a list of files.

    Directories contribute their regular files (non-recursive, sorted by
    name); names starting with ``.`` or ``_`` are skipped, so a previous
    run's ``_SUCCESS`` marker is never read as data. Explicit file paths are
    kept in the order given.
    """
    files: List[Path] = []
    for raw in paths:
        p = Path(raw).expanduser()
        if p.is_dir():
            children = sorted(c for c in p.iterdir() if c.is_file() and not _is_hidden(c))
            if not children:
                logger.warning("Input directory %s contains no files", p)
            files.extend(children)
        elif p.is_file():
            files.append(p)
        else:
            raise ConfigurationError(f"Input path does not exist: {p}")
    return files


def _open_text(path: Path, encoding: str) -> IO[str]:
    if path.suffix == ".gz":
        return io.TextIOWrapper(gzip.open(path, "rb"), encoding=encoding, newline="")
    return open(path, "r", encoding=encoding, newline="")


def count_lines(path: Path, encoding: str = "utf-8") -> int:
    """Number of lines in ``path`` (gzip-aware)."""
    with _open_text(path, encoding) as fh:
        return sum(1 for _ in fh)


def plan_shards(
    files: Iterable[Path],
    lines_per_shard: Optional[int] = None,
    encoding: str = "utf-8",
) -> List[Shard]:
    """
    Split input files into shards.

    With ``lines_per_shard=None`` each file is one shard. Otherwise every
    file is cut into consecutive line ranges of at most ``lines_per_shard``
    lines (an empty file still yields one empty shard). Shard indices follow
    file order, then line order.
    """
    shards: List[Shard] = []
    for path in files:
        if lines_per_shard is None:
            shards.append(Shard(shard_id=path.name, index=len(shards), path=path))
            continue

        total = count_lines(path, encoding)
        start = 0
        while True:
            end = min(start + lines_per_shard, total)
            shards.append(
                Shard(
                    shard_id=f"{path.name}:{start}-{end}",
                    index=len(shards),
                    path=path,
                    start_line=start,
                    end_line=end,
                )
            )
            start = end
            if start >= total:
                break
    return shards


def read_shard(shard: Shard, encoding: str = "utf-8") -> Iterator[str]:
    """Yield the shard's lines with the trailing line terminator removed."""
    with _open_text(shard.path, encoding) as fh:
        for line in islice(fh, shard.start_line, shard.end_line):
            yield line.rstrip("\r\n")
