"""Project state directory resolution.

zcc keeps its per-project state (file registry, installed-packs ledger,
manifest snapshots, installed modes/workflows/hooks, config.yaml) under
``<project>/.zcc``. Agents are installed where the assistant reads them,
``<project>/.claude/agents``.
"""
from __future__ import annotations

import os
from pathlib import Path

DEFAULT_PROJECT_STATE_DIR = ".zcc"
DEFAULT_AGENTS_DIR = ".claude/agents"

FILE_REGISTRY_NAME = "file-registry.json"
PACKS_LEDGER_NAME = "packs.json"
SNAPSHOTS_DIR_NAME = "packs"
CONFIG_FILE_NAME = "config.yaml"


def _state_dir_name() -> str:
    override = os.environ.get("ZCC_paths__project_state_dir")
    if isinstance(override, str) and override.strip():
        return override.strip()
    return DEFAULT_PROJECT_STATE_DIR


def get_project_state_dir(repo_root: Path, *, create: bool = False) -> Path:
    """Return ``<repo_root>/.zcc`` (or the configured override)."""
    from zcc.core.utils.io import ensure_directory

    path = Path(repo_root) / _state_dir_name()
    if create:
        ensure_directory(path)
    return path


def get_agents_dir(repo_root: Path) -> Path:
    return Path(repo_root) / DEFAULT_AGENTS_DIR


def get_file_registry_path(repo_root: Path) -> Path:
    return get_project_state_dir(repo_root) / FILE_REGISTRY_NAME


def get_packs_ledger_path(repo_root: Path) -> Path:
    return get_project_state_dir(repo_root) / PACKS_LEDGER_NAME


def get_snapshot_path(repo_root: Path, pack_name: str) -> Path:
    return get_project_state_dir(repo_root) / SNAPSHOTS_DIR_NAME / f"{pack_name}.manifest.json"


def get_project_config_path(repo_root: Path) -> Path:
    return get_project_state_dir(repo_root) / CONFIG_FILE_NAME


__all__ = [
    "DEFAULT_PROJECT_STATE_DIR",
    "DEFAULT_AGENTS_DIR",
    "FILE_REGISTRY_NAME",
    "PACKS_LEDGER_NAME",
    "SNAPSHOTS_DIR_NAME",
    "CONFIG_FILE_NAME",
    "get_project_state_dir",
    "get_agents_dir",
    "get_file_registry_path",
    "get_packs_ledger_path",
    "get_snapshot_path",
    "get_project_config_path",
]
