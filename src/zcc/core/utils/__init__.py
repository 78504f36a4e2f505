"""Shared utilities for zcc (I/O, paths, merging, checksums, time)."""
from __future__ import annotations

from .checksum import checksum, checksum_file
from .merge import deep_merge, merge_arrays
from .time import utc_now, utc_timestamp

__all__ = [
    "checksum",
    "checksum_file",
    "deep_merge",
    "merge_arrays",
    "utc_now",
    "utc_timestamp",
]
