from __future__ import annotations

import hashlib
from pathlib import Path

import pytest

from zcc.core.utils.checksum import checksum, checksum_file


def test_checksum_format_and_determinism() -> None:
    digest = checksum(b"hello")
    assert digest == "sha256:" + hashlib.sha256(b"hello").hexdigest()
    assert len(digest) == len("sha256:") + 64
    assert checksum(b"hello") == digest


def test_text_is_hashed_as_utf8() -> None:
    assert checksum("héllo") == checksum("héllo".encode("utf-8"))


def test_checksum_file_matches_bytes(tmp_path: Path) -> None:
    f = tmp_path / "a.md"
    f.write_bytes(b"# mode\n")
    assert checksum_file(f) == checksum(b"# mode\n")


def test_checksum_file_missing_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        checksum_file(tmp_path / "missing.md")
