"""Content digests for installed files.

Digests are rendered as ``sha256:<64 hex chars>`` and are used both when a
file is registered and when it is later compared against disk.
"""
from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Union

PREFIX = "sha256:"
_CHUNK = 65536


def checksum(data: Union[bytes, str]) -> str:
    """Return the digest of ``data``; text is encoded as UTF-8."""
    if isinstance(data, str):
        data = data.encode("utf-8")
    return PREFIX + hashlib.sha256(data).hexdigest()


def checksum_file(path: Union[str, Path]) -> str:
    """Return the digest of a file's bytes.

    Raises:
        FileNotFoundError: If ``path`` does not exist
        OSError: If the file cannot be read
    """
    digest = hashlib.sha256()
    with open(Path(path), "rb") as f:
        for chunk in iter(lambda: f.read(_CHUNK), b""):
            digest.update(chunk)
    return PREFIX + digest.hexdigest()


__all__ = ["PREFIX", "checksum", "checksum_file"]
