# tests/io/test_shards.py
from __future__ import annotations

import gzip
from pathlib import Path

import pytest

from rownum.errors import ConfigurationError
from rownum.io.shards import Shard, count_lines, discover_inputs, plan_shards, read_shard


def _write(path: Path, lines) -> Path:
    path.write_text("".join(f"{l}\n" for l in lines), encoding="utf-8")
    return path


def test_discover_expands_directories_and_skips_hidden(tmp_path):
    d = tmp_path / "in"
    d.mkdir()
    _write(d / "b.txt", ["1"])
    _write(d / "a.txt", ["2"])
    _write(d / "_SUCCESS", [])
    _write(d / ".crc", ["x"])
    (d / "sub").mkdir()
    extra = _write(tmp_path / "extra.txt", ["3"])

    files = discover_inputs([d, extra])
    assert [f.name for f in files] == ["a.txt", "b.txt", "extra.txt"]


def test_discover_missing_path_raises(tmp_path):
    with pytest.raises(ConfigurationError):
        discover_inputs([tmp_path / "nope.txt"])


def test_plan_one_shard_per_file(tmp_path):
    a = _write(tmp_path / "a.txt", ["1", "2"])
    b = _write(tmp_path / "b.txt", ["3"])
    shards = plan_shards([a, b])
    assert shards == [
        Shard(shard_id="a.txt", index=0, path=a),
        Shard(shard_id="b.txt", index=1, path=b),
    ]


def test_plan_line_ranges(tmp_path):
    a = _write(tmp_path / "a.txt", [str(i) for i in range(5)])
    e = _write(tmp_path / "empty.txt", [])
    shards = plan_shards([a, e], lines_per_shard=2)
    assert [(s.shard_id, s.index, s.start_line, s.end_line) for s in shards] == [
        ("a.txt:0-2", 0, 0, 2),
        ("a.txt:2-4", 1, 2, 4),
        ("a.txt:4-5", 2, 4, 5),
        ("empty.txt:0-0", 3, 0, 0),
    ]


def test_read_shard_strips_newlines_and_respects_range(tmp_path):
    p = tmp_path / "crlf.txt"
    p.write_bytes(b"one\r\ntwo\r\nthree\nfour")
    assert list(read_shard(Shard("x", 0, p))) == ["one", "two", "three", "four"]
    assert list(read_shard(Shard("x", 0, p, start_line=1, end_line=3))) == ["two", "three"]


def test_read_gzip_shard(tmp_path):
    p = tmp_path / "data.txt.gz"
    with gzip.open(p, "wt", encoding="utf-8") as fh:
        fh.write("alpha\nbeta\n")
    assert count_lines(p) == 2
    assert list(read_shard(Shard("gz", 0, p))) == ["alpha", "beta"]


def test_lines_across_shards_cover_file_once(tmp_path):
    lines = [f"row {i}" for i in range(11)]
    p = _write(tmp_path / "rows.txt", lines)
    shards = plan_shards([p], lines_per_shard=3)
    got = [line for s in shards for line in read_shard(s)]
    assert got == lines
