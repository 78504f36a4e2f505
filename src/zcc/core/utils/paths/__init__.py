"""Path utilities for zcc.

- Resolver: project root resolution
- Project: per-project state directory layout (.zcc, .claude/agents)
- User: global (user-level) directory (~/.zcc)
"""
from __future__ import annotations

from .project import (
    CONFIG_FILE_NAME,
    DEFAULT_AGENTS_DIR,
    DEFAULT_PROJECT_STATE_DIR,
    FILE_REGISTRY_NAME,
    PACKS_LEDGER_NAME,
    get_agents_dir,
    get_file_registry_path,
    get_packs_ledger_path,
    get_project_config_path,
    get_project_state_dir,
    get_snapshot_path,
)
from .resolver import resolve_project_root
from .user import DEFAULT_USER_CONFIG_PRIMARY, get_user_config_dir

__all__ = [
    "CONFIG_FILE_NAME",
    "DEFAULT_AGENTS_DIR",
    "DEFAULT_PROJECT_STATE_DIR",
    "DEFAULT_USER_CONFIG_PRIMARY",
    "FILE_REGISTRY_NAME",
    "PACKS_LEDGER_NAME",
    "get_agents_dir",
    "get_file_registry_path",
    "get_packs_ledger_path",
    "get_project_config_path",
    "get_project_state_dir",
    "get_snapshot_path",
    "get_user_config_dir",
    "resolve_project_root",
]
