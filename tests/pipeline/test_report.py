# tests/pipeline/test_report.py
from datetime import datetime
from pathlib import Path

from rownum.pipeline.report import (
    format_run_summary,
    log_run_summary,
    print_run_summary,
)


def _demo_kwargs():
    return dict(
        input_files=[Path("/data/in/a.txt"), Path("/data/in/b.txt.gz")],
        output_dir=Path("/data/out"),
        num_shards=5,
        num_partitions=10,
        partitioner="hash",
        workers=8,
        executor_name="processes",
        start_time=datetime(2025, 8, 18, 12, 34, 56),
        lines_per_shard=1000,
        overwrite=True,
        validate=False,
    )


def test_format_run_summary_no_color_contains_key_fields():
    s = format_run_summary(color=False, **_demo_kwargs())
    assert "Start Time: 2025-08-18 12:34:56" in s
    assert "Input files:                2" in s
    assert "First input file:           /data/in/a.txt" in s
    assert "Last input file:            /data/in/b.txt.gz" in s
    assert "Output directory:           /data/out" in s
    assert "Shards:                     5 (1,000 lines per shard)" in s
    assert "Partitions:                 10 (hash)" in s
    assert "Validate numbering:         False" in s
    assert "Worker processes/threads:   8 (processes)" in s
    assert "\x1b[" not in s


def test_format_run_summary_one_shard_per_file():
    kw = _demo_kwargs()
    kw["lines_per_shard"] = None
    s = format_run_summary(color=False, **kw)
    assert "(one shard per file)" in s


def test_format_run_summary_color_includes_ansi():
    s = format_run_summary(color=True, **_demo_kwargs())
    assert "\x1b[31m" in s
    assert "\x1b[4mRow Numbering Configuration\x1b[0m" in s


def test_long_paths_are_abbreviated():
    kw = _demo_kwargs()
    kw["input_files"] = [Path("/" + "x" * 200)]
    s = format_run_summary(color=False, **kw)
    assert "…" in s


def test_print_and_log(capsys, caplog):
    print_run_summary(color=False, **_demo_kwargs())
    assert "Row Numbering Configuration" in capsys.readouterr().out

    with caplog.at_level("INFO", logger="rownum.pipeline.report"):
        log_run_summary(**_demo_kwargs())
    assert any("Partitions:" in r.getMessage() for r in caplog.records)
