"""Dense, gapless row numbering for records produced by independent shards."""

__version__ = "0.1.0"
