"""File I/O for zcc state and config.

- core: atomic writes, directory helpers, text files
- json: ``packs.json``, ``file-registry.json``, snapshots
- yaml: ``config.yaml``
"""
from __future__ import annotations

from .core import (
    PathLike,
    atomic_write,
    ensure_directory,
    ensure_parent_dir,
    read_text,
    write_text,
)
from .json import read_json, write_json_atomic
from .yaml import read_yaml, write_yaml

__all__ = [
    "PathLike",
    "ensure_parent_dir",
    "ensure_directory",
    "atomic_write",
    "read_text",
    "write_text",
    "read_json",
    "write_json_atomic",
    "read_yaml",
    "write_yaml",
]
