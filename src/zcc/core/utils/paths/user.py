"""The user-global zcc directory (``~/.zcc`` unless overridden).

``ZCC_paths__user_config_dir`` wins over ``paths.user_config_dir`` from the
bundled defaults. Relative values are taken from the home directory.
"""
from __future__ import annotations

import os
from pathlib import Path

DEFAULT_USER_CONFIG_PRIMARY = ".zcc"
USER_DIR_ENV = "ZCC_paths__user_config_dir"


def _configured_user_dir() -> str:
    from zcc.data import read_yaml

    candidates = (
        os.environ.get(USER_DIR_ENV),
        (read_yaml("config", "defaults.yaml").get("paths") or {}).get("user_config_dir"),
    )
    for candidate in candidates:
        if isinstance(candidate, str) and candidate.strip():
            return candidate.strip()
    return DEFAULT_USER_CONFIG_PRIMARY


def get_user_config_dir(*, create: bool = False) -> Path:
    from zcc.core.utils.io import ensure_directory

    directory = Path(_configured_user_dir()).expanduser()
    if not directory.is_absolute():
        directory = Path.home() / directory
    directory = directory.resolve()
    return ensure_directory(directory) if create else directory


__all__ = ["DEFAULT_USER_CONFIG_PRIMARY", "USER_DIR_ENV", "get_user_config_dir"]
