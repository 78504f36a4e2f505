"""JSON state files: ``packs.json``, ``file-registry.json`` and pack snapshots.

Files are written with sorted keys and a trailing newline so they diff
cleanly under version control.
"""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from .core import atomic_write

JSON_INDENT = 2

_MISSING = object()


def read_json(file_path: Path | str, *, default: Any = _MISSING) -> Any:
    """Load ``file_path``; return ``default`` instead when the file is absent.

    Raises:
        FileNotFoundError: If the file is missing and no ``default`` was given
        json.JSONDecodeError: If the file exists but is not valid JSON
    """
    path = Path(file_path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        if default is _MISSING:
            raise FileNotFoundError(f"JSON file not found: {path}") from None
        return default
    return json.loads(raw)


def write_json_atomic(
    file_path: Path | str,
    data: Any,
    *,
    indent: int = JSON_INDENT,
    sort_keys: bool = True,
) -> None:
    text = json.dumps(data, indent=indent, sort_keys=sort_keys, ensure_ascii=False) + "\n"
    atomic_write(Path(file_path), lambda handle: handle.write(text))


__all__ = [
    "JSON_INDENT",
    "read_json",
    "write_json_atomic",
]
