"""Centralized configuration caching.

Domain configs share one loaded configuration per project root. The cache
key includes a fingerprint of ZCC_* environment variables and of the user
and project config files, so edits and env changes are picked up without
an explicit clear.
"""
from __future__ import annotations

import hashlib
import os
from pathlib import Path
from typing import Any, Dict, Optional

_config_cache: Dict[str, Dict[str, Any]] = {}


def _normalize_repo_root(repo_root: Optional[Path]) -> Path:
    if repo_root is None:
        from zcc.core.utils.paths import resolve_project_root

        return resolve_project_root()
    return Path(repo_root).expanduser().resolve()


def _file_fingerprint(path: Path) -> tuple[str, int, int]:
    try:
        st = path.stat()
    except OSError:
        return (path.name, 0, 0)
    return (path.name, int(st.st_mtime_ns), int(st.st_size))


def _cache_key(repo_root: Path) -> str:
    env_items = sorted(
        (k, os.environ.get(k, ""))
        for k in os.environ.keys()
        if k.startswith("ZCC_")
    )
    env_fp = hashlib.sha256(repr(env_items).encode("utf-8")).hexdigest()[:12]

    from zcc.core.utils.paths import get_project_config_path, get_user_config_dir

    files = [
        _file_fingerprint(get_user_config_dir(create=False) / "config.yaml"),
        _file_fingerprint(get_project_config_path(repo_root)),
    ]
    cfg_fp = hashlib.sha256(repr(files).encode("utf-8")).hexdigest()[:12]
    return f"{repo_root}:env={env_fp}:cfg={cfg_fp}"


def get_cached_config(repo_root: Optional[Path] = None) -> Dict[str, Any]:
    """Return the merged configuration for ``repo_root`` (cached).

    The returned dict is shared; treat it as read-only.
    """
    normalized_root = _normalize_repo_root(repo_root)
    key = _cache_key(normalized_root)
    if key not in _config_cache:
        from .manager import ConfigManager

        _config_cache[key] = ConfigManager(repo_root=normalized_root).load_config()
    return _config_cache[key]


def clear_all_caches() -> None:
    """Drop every cached configuration."""
    _config_cache.clear()


def is_cached(repo_root: Optional[Path] = None) -> bool:
    return _cache_key(_normalize_repo_root(repo_root)) in _config_cache


__all__ = ["get_cached_config", "clear_all_caches", "is_cached"]
