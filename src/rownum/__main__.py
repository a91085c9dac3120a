"""
python -m rownum

Number every line of the input files with a dense, gapless global index.

Examples:
  python -m rownum data/ out/
  python -m rownum a.txt b.txt.gz out/ --partitions 4 --lines-per-shard 100000
  python -m rownum data/ out/ --partitioner range --threads --log-dir logs/
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from rownum.config import DEFAULT_NUM_PARTITIONS, PipelineConfig, configure
from rownum.errors import NumberingError
from rownum.numbering.partitioning import PARTITIONER_NAMES
from rownum.pipeline.logger import setup_logger
from rownum.pipeline.orchestrate import number_records

logger = logging.getLogger("rownum")


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="rownum",
        description="Assign dense 0..N-1 row numbers to lines of text files.",
    )
    ap.add_argument("inputs", nargs="+", help="Input files or directories")
    ap.add_argument("output", help="Output directory for part-r-NNNNN files")
    ap.add_argument("--partitions", type=int, default=DEFAULT_NUM_PARTITIONS,
                    help="Number of output partitions (default: %(default)s)")
    ap.add_argument("--partitioner", choices=sorted(PARTITIONER_NAMES), default="hash",
                    help="Partition function (default: %(default)s)")
    ap.add_argument("--workers", type=int, default=None,
                    help="Worker count (default: min(32, cpu count))")
    ap.add_argument("--threads", action="store_true",
                    help="Use threads instead of processes")
    ap.add_argument("--lines-per-shard", type=int, default=None,
                    help="Split files into shards of this many lines")
    ap.add_argument("--max-shard-attempts", type=int, default=2,
                    help="Attempts per shard before giving up (default: %(default)s)")
    ap.add_argument("--encoding", default="utf-8")
    ap.add_argument("--no-overwrite", action="store_true",
                    help="Fail if the output directory exists")
    ap.add_argument("--no-validate", action="store_true",
                    help="Skip the dense-numbering check")
    ap.add_argument("--quiet", action="store_true",
                    help="No progress bars or summaries")
    ap.add_argument("--log-dir", default=None,
                    help="Write a timestamped log file here")
    ap.add_argument("--verbose", "-v", action="store_true",
                    help="Debug-level logging")
    return ap


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    level = logging.DEBUG if args.verbose else logging.INFO

    if args.log_dir:
        setup_logger(args.log_dir, level=level, console=args.verbose)
    else:
        logging.basicConfig(
            level=level if args.verbose else logging.WARNING,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

    try:
        config = PipelineConfig(
            input_paths=tuple(args.inputs),
            output_dir=args.output,
            numbering=configure(args.partitions, args.partitioner),
            num_workers=args.workers,
            use_threads=args.threads,
            lines_per_shard=args.lines_per_shard,
            max_shard_attempts=args.max_shard_attempts,
            encoding=args.encoding,
            overwrite=not args.no_overwrite,
            validate=not args.no_validate,
            show_progress=not args.quiet,
        )
        number_records(config)
    except NumberingError as exc:
        logger.error("%s", exc)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    except (OSError, RuntimeError) as exc:
        # Output directory conflicts and I/O failures
        logger.error("%s", exc)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
