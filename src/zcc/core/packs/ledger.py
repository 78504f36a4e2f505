"""Installed-packs ledger (``.zcc/packs.json``) and per-pack manifest snapshots.

Ledger shape::

    {"packs": {"<name>": {"version": "...", "installedAt": "...", "source": {...}}}}

Snapshots live at ``.zcc/packs/<name>.manifest.json`` and hold the manifest
exactly as it was installed, so uninstall does not depend on the upstream copy.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from zcc.core.exceptions import InvalidManifestError
from zcc.core.utils.io import read_json, write_json_atomic
from zcc.core.utils.paths import get_packs_ledger_path, get_snapshot_path
from zcc.core.utils.time import utc_timestamp

from .model import PackManifest

logger = logging.getLogger(__name__)


class InstalledPacksLedger:
    """Read/write ``packs.json``. A corrupt ledger reads as empty."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = Path(repo_root)
        self.path = get_packs_ledger_path(self.repo_root)

    def load(self) -> Dict[str, Any]:
        try:
            data = read_json(self.path, default={"packs": {}})
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Ignoring unreadable packs ledger %s: %s", self.path, exc)
            return {"packs": {}}
        if not isinstance(data, dict) or not isinstance(data.get("packs"), dict):
            logger.warning("Ignoring malformed packs ledger %s", self.path)
            return {"packs": {}}
        return data

    def save(self, data: Dict[str, Any]) -> None:
        write_json_atomic(self.path, data)

    def installed(self) -> Dict[str, Dict[str, Any]]:
        return dict(self.load()["packs"])

    def get(self, name: str) -> Optional[Dict[str, Any]]:
        return self.load()["packs"].get(name)

    def is_installed(self, name: str) -> bool:
        return name in self.load()["packs"]

    def record(
        self,
        name: str,
        version: str,
        *,
        source: Optional[Dict[str, Any]] = None,
        config_applied: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        data = self.load()
        entry: Dict[str, Any] = {"version": version, "installedAt": utc_timestamp()}
        if source:
            entry["source"] = dict(source)
        if config_applied:
            entry["configApplied"] = dict(config_applied)
        data["packs"][name] = entry
        self.save(data)
        return entry

    def remove(self, name: str) -> bool:
        data = self.load()
        if data["packs"].pop(name, None) is None:
            return False
        self.save(data)
        return True


class SnapshotStore:
    """Per-pack manifest snapshots taken at install time."""

    def __init__(self, repo_root: Path) -> None:
        self.repo_root = Path(repo_root)

    def path_for(self, name: str) -> Path:
        return get_snapshot_path(self.repo_root, name)

    def exists(self, name: str) -> bool:
        return self.path_for(name).is_file()

    def save(self, manifest: PackManifest) -> Path:
        path = self.path_for(manifest.name)
        write_json_atomic(path, manifest.to_dict())
        return path

    def load(self, name: str) -> Optional[PackManifest]:
        """Return the snapshot manifest, or None when absent or unreadable."""
        path = self.path_for(name)
        if not path.is_file():
            return None
        try:
            return PackManifest.from_dict(read_json(path), source=str(path))
        except (json.JSONDecodeError, UnicodeDecodeError, InvalidManifestError) as exc:
            logger.warning("Ignoring unreadable manifest snapshot %s: %s", path, exc)
            return None

    def remove(self, name: str) -> bool:
        path = self.path_for(name)
        if not path.exists():
            return False
        path.unlink()
        return True


__all__ = ["InstalledPacksLedger", "SnapshotStore"]
