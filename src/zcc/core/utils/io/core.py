"""File primitives shared by the JSON and YAML helpers.

Every state file zcc owns (``packs.json``, ``file-registry.json``,
``config.yaml``, snapshots) and every installed component goes through
``atomic_write``: a reader never sees a half-written file, even if the
process dies mid-install.
"""
from __future__ import annotations

import os
import tempfile
from pathlib import Path
from typing import Callable, TextIO, Union

PathLike = Union[str, Path]


def ensure_parent_dir(path: Path) -> None:
    Path(path).parent.mkdir(parents=True, exist_ok=True)


def ensure_directory(path: Path, create: bool = True) -> Path:
    """Return ``path`` as a directory, creating it unless ``create`` is False.

    Raises:
        NotADirectoryError: If something other than a directory sits at ``path``
        FileNotFoundError: If the directory is missing and ``create`` is False
    """
    directory = Path(path)
    if directory.is_dir():
        return directory
    if directory.exists():
        raise NotADirectoryError(f"Not a directory: {directory}")
    if not create:
        raise FileNotFoundError(f"Directory does not exist: {directory}")
    directory.mkdir(parents=True, exist_ok=True)
    return directory


def atomic_write(
    path: Path,
    write_fn: Callable[[TextIO], None],
    *,
    encoding: str = "utf-8",
) -> None:
    """Write ``path`` through a sibling temp file that replaces it on success.

    ``write_fn`` receives the open temp file. On any failure the temp file is
    removed and the original ``path`` is left untouched.
    """
    target = Path(path)
    ensure_parent_dir(target)

    fd, tmp_name = tempfile.mkstemp(
        prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent)
    )
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding=encoding, newline="") as handle:
            write_fn(handle)
            handle.flush()
            os.fsync(handle.fileno())
        os.replace(tmp_path, target)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise


def read_text(path: PathLike) -> str:
    """Read a UTF-8 text file.

    Raises:
        FileNotFoundError: If the file does not exist
    """
    source = Path(path)
    if not source.is_file():
        raise FileNotFoundError(f"Text file not found: {source}")
    return source.read_text(encoding="utf-8")


def write_text(path: PathLike, content: str) -> None:
    atomic_write(Path(path), lambda handle: handle.write(content))


__all__ = [
    "PathLike",
    "ensure_parent_dir",
    "ensure_directory",
    "atomic_write",
    "read_text",
    "write_text",
]
