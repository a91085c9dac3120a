"""Line-oriented input shards and part-file output."""

from .shards import Shard, count_lines, discover_inputs, plan_shards, read_shard
from .write import mark_success, part_path, prepare_output_dir, write_partition

__all__ = [
    "Shard",
    "count_lines",
    "discover_inputs",
    "plan_shards",
    "read_shard",
    "mark_success",
    "part_path",
    "prepare_output_dir",
    "write_partition",
]
