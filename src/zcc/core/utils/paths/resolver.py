"""Project root resolution.

Resolution priority:
1. ZCC_PROJECT_ROOT environment variable
2. Git repository root via ``git rev-parse --show-toplevel``
3. The current working directory

The root must never be the ``.zcc`` state directory itself.
"""
from __future__ import annotations

import os
import subprocess
from pathlib import Path
from typing import Optional

from zcc.core.exceptions import ZccPathError

from .project import DEFAULT_PROJECT_STATE_DIR

# Cache for the git-derived root to avoid repeated subprocess calls
_PROJECT_ROOT_CACHE: Optional[Path] = None


def _git_toplevel(cwd: Path) -> Optional[Path]:
    try:
        result = subprocess.run(
            ["git", "rev-parse", "--show-toplevel"],
            cwd=str(cwd),
            text=True,
            capture_output=True,
            check=True,
            timeout=5,
        )
    except (FileNotFoundError, subprocess.CalledProcessError, subprocess.TimeoutExpired):
        return None
    root_str = (result.stdout or "").strip()
    return Path(root_str).resolve() if root_str else None


def resolve_project_root() -> Path:
    """Resolve the project root.

    Raises:
        ZccPathError: If ZCC_PROJECT_ROOT is missing on disk or points at ``.zcc``
    """
    global _PROJECT_ROOT_CACHE

    env_root = os.environ.get("ZCC_PROJECT_ROOT")
    if env_root:
        env_path = Path(env_root).expanduser().resolve()
        if not env_path.exists():
            raise ZccPathError(f"ZCC_PROJECT_ROOT points at missing path: {env_path}")
        if env_path.name == DEFAULT_PROJECT_STATE_DIR:
            raise ZccPathError(
                f"ZCC_PROJECT_ROOT points to the {DEFAULT_PROJECT_STATE_DIR} directory: {env_path}"
            )
        return env_path

    cwd = Path.cwd().resolve()
    if _PROJECT_ROOT_CACHE is not None:
        if cwd == _PROJECT_ROOT_CACHE or _PROJECT_ROOT_CACHE in cwd.parents:
            return _PROJECT_ROOT_CACHE
        _PROJECT_ROOT_CACHE = None

    root = _git_toplevel(cwd)
    if root is None:
        root = cwd.parent if cwd.name == DEFAULT_PROJECT_STATE_DIR else cwd
        return root

    _PROJECT_ROOT_CACHE = root
    return root


__all__ = ["resolve_project_root"]
