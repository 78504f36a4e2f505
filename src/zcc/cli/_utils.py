"""Shared CLI utility functions."""
from __future__ import annotations

import argparse
from pathlib import Path

from zcc.core.exceptions import ZccError
from zcc.core.utils.paths import resolve_project_root


def get_repo_root(args: argparse.Namespace) -> Path:
    """Get project root from ``--repo-root`` or auto-detect.

    Args:
        args: Parsed arguments with optional repo_root attribute

    Returns:
        Path: Project root path
    """
    if getattr(args, "repo_root", None):
        return Path(args.repo_root).resolve()
    return resolve_project_root()


def error_code_for(exc: BaseException, default: str) -> str:
    """JSON error code: the ``ErrorKind`` of a ``ZccError``, else ``default``."""
    if isinstance(exc, ZccError):
        return exc.kind.value
    return default


__all__ = ["get_repo_root", "error_code_for"]
