"""Content-addressed ledger of every file a pack placed in the project.

Persisted at ``<project>/.zcc/file-registry.json``::

    {
      "version": "1.0.0",
      "files": {"<abs path>": {"pack", "originalPath", "checksum", "installedAt", "modified"}},
      "packs": {"<name>": {"version": "...", "files": ["<abs path>", ...]}}
    }

A ``.backup`` sibling is written before every save. Loading never fails:
primary, then backup, then a rebuild from ``packs.json``, then empty.
"""
from __future__ import annotations

import copy
import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

from zcc.core.utils.checksum import checksum_file
from zcc.core.utils.io import read_json, write_json_atomic
from zcc.core.utils.paths import get_file_registry_path, get_packs_ledger_path
from zcc.core.utils.time import utc_timestamp

logger = logging.getLogger(__name__)

REGISTRY_VERSION = "1.0.0"
BACKUP_SUFFIX = ".backup"

PathArg = Union[str, Path]
RegistryData = Dict[str, Any]


def empty_registry() -> RegistryData:
    return {"version": REGISTRY_VERSION, "files": {}, "packs": {}}


def _is_registry(data: Any) -> bool:
    return (
        isinstance(data, dict)
        and isinstance(data.get("files"), dict)
        and isinstance(data.get("packs"), dict)
    )


def normalize_path(path: PathArg) -> str:
    """Registry keys are absolute, unresolved path strings."""
    return os.path.abspath(os.fspath(path))


class FileRegistry:
    """Track installed files, their owning pack and install-time checksum."""

    def __init__(self, repo_root: Path, *, path: Optional[Path] = None) -> None:
        self.repo_root = Path(repo_root)
        self.path = Path(path) if path is not None else get_file_registry_path(self.repo_root)
        self.backup_path = self.path.with_name(self.path.name + BACKUP_SUFFIX)
        self.ledger_path = get_packs_ledger_path(self.repo_root)
        self._data: Optional[RegistryData] = None

    # ---------- load / save ----------

    def _read(self, path: Path) -> Optional[RegistryData]:
        if not path.exists():
            return None
        try:
            data = read_json(path)
        except (json.JSONDecodeError, UnicodeDecodeError, OSError) as exc:
            logger.warning("Failed to load file registry %s: %s", path, exc)
            return None
        if not _is_registry(data):
            logger.warning("File registry %s has an unexpected shape", path)
            return None
        return data

    def _from_primary(self) -> Optional[RegistryData]:
        return self._read(self.path)

    def _from_backup(self) -> Optional[RegistryData]:
        data = self._read(self.backup_path)
        if data is not None:
            logger.warning("Restored file registry from backup %s", self.backup_path)
            # Persist the restored copy without rotating the bad primary into the backup.
            write_json_atomic(self.path, data)
        return data

    def _from_ledger(self) -> Optional[RegistryData]:
        if not self.ledger_path.exists():
            return None
        data = self._rebuilt_from_ledger()
        logger.warning("Rebuilt file registry from %s (file ownership is lost)", self.ledger_path)
        return data

    def _fresh(self) -> RegistryData:
        if self.path.exists():
            logger.warning("Starting with a fresh file registry")
        return empty_registry()

    def _recovery_strategies(self) -> List[Callable[[], Optional[RegistryData]]]:
        return [self._from_primary, self._from_backup, self._from_ledger]

    def load(self) -> RegistryData:
        """Return the registry, loading and recovering it on first use."""
        if self._data is not None:
            return self._data
        for strategy in self._recovery_strategies():
            data = strategy()
            if data is not None:
                self._data = data
                return data
        self._data = self._fresh()
        return self._data

    def refresh(self) -> RegistryData:
        self._data = None
        return self.load()

    def save(self) -> None:
        data = self.load()
        if self.path.exists():
            shutil.copyfile(self.path, self.backup_path)
        write_json_atomic(self.path, data)

    def snapshot(self) -> RegistryData:
        """Deep copy of the current registry data."""
        return copy.deepcopy(self.load())

    # ---------- rebuild ----------

    def _rebuilt_from_ledger(self) -> RegistryData:
        data = empty_registry()
        try:
            ledger = read_json(self.ledger_path, default={})
        except (json.JSONDecodeError, UnicodeDecodeError) as exc:
            logger.warning("Could not read %s during rebuild: %s", self.ledger_path, exc)
            return data
        packs = ledger.get("packs") if isinstance(ledger, dict) else None
        for name, info in (packs or {}).items():
            version = info.get("version") if isinstance(info, dict) else None
            data["packs"][name] = {"version": version or REGISTRY_VERSION, "files": []}
        return data

    def rebuild(self) -> RegistryData:
        """Reset to pack entries from ``packs.json`` (no file associations) and save."""
        logger.info("Rebuilding file registry from %s", self.ledger_path)
        self._data = self._rebuilt_from_ledger()
        self.save()
        return self._data

    # ---------- packs ----------

    def register_pack(self, name: str, version: str) -> None:
        """Create or overwrite a pack entry with an empty file list.

        File entries previously owned by the pack are dropped with it.
        """
        data = self.load()
        for path in data["packs"].get(name, {}).get("files", []):
            info = data["files"].get(path)
            if info is not None and info.get("pack") == name:
                del data["files"][path]
        data["packs"][name] = {"version": version, "files": []}
        self.save()

    def unregister_pack(self, name: str) -> None:
        data = self.load()
        for path in [p for p, info in data["files"].items() if info.get("pack") == name]:
            del data["files"][path]
        data["packs"].pop(name, None)
        self.save()

    def get_pack_files(self, name: str) -> List[str]:
        return list(self.load()["packs"].get(name, {}).get("files", []))

    def get_all_packs(self) -> Dict[str, Dict[str, Any]]:
        return copy.deepcopy(self.load()["packs"])

    def has_pack(self, name: str) -> bool:
        return name in self.load()["packs"]

    # ---------- files ----------

    def register_file(self, path: PathArg, pack: str, original_path: str) -> Dict[str, Any]:
        """Record ``path`` as owned by ``pack`` with its current checksum.

        A previous owner loses the path.

        Raises:
            FileNotFoundError: If ``path`` does not exist
        """
        key = normalize_path(path)
        digest = checksum_file(key)
        data = self.load()

        previous = data["files"].get(key)
        if previous is not None and previous.get("pack") != pack:
            old = data["packs"].get(previous.get("pack"), {})
            if key in old.get("files", []):
                old["files"].remove(key)

        entry = {
            "pack": pack,
            "originalPath": original_path,
            "checksum": digest,
            "installedAt": utc_timestamp(),
            "modified": False,
        }
        data["files"][key] = entry
        pack_entry = data["packs"].setdefault(pack, {"version": REGISTRY_VERSION, "files": []})
        if key not in pack_entry["files"]:
            pack_entry["files"].append(key)
        self.save()
        logger.debug("Registered %s for pack %s", key, pack)
        return dict(entry)

    def unregister_file(self, path: PathArg) -> bool:
        key = normalize_path(path)
        data = self.load()
        info = data["files"].pop(key, None)
        if info is None:
            return False
        owner = data["packs"].get(info.get("pack"))
        if owner and key in owner.get("files", []):
            owner["files"].remove(key)
        self.save()
        return True

    def is_file_registered(self, path: PathArg) -> bool:
        return normalize_path(path) in self.load()["files"]

    def get_file_info(self, path: PathArg) -> Optional[Dict[str, Any]]:
        info = self.load()["files"].get(normalize_path(path))
        return dict(info) if info is not None else None

    def _check_modified(self, key: str, info: Dict[str, Any]) -> bool:
        try:
            modified = checksum_file(key) != info.get("checksum")
        except OSError as exc:
            logger.debug("Could not check modification status for %s: %s", key, exc)
            modified = True
        info["modified"] = modified
        return modified

    def is_file_modified(self, path: PathArg) -> bool:
        """Compare live bytes against the install-time checksum.

        A missing or unreadable file counts as modified. Unregistered paths
        are never modified. The recomputed flag is persisted.
        """
        key = normalize_path(path)
        info = self.load()["files"].get(key)
        if info is None:
            return False
        before = info.get("modified")
        modified = self._check_modified(key, info)
        if modified != before:
            self.save()
        return modified

    def detect_modifications(self) -> List[str]:
        data = self.load()
        changed = False
        modified: List[str] = []
        for key, info in data["files"].items():
            before = info.get("modified")
            if self._check_modified(key, info):
                modified.append(key)
            changed = changed or info["modified"] != before
        if changed:
            self.save()
        return modified

    def check_conflicts(self, paths: List[PathArg], pack: Optional[str] = None) -> List[Dict[str, str]]:
        """Registered paths owned by a pack other than ``pack``.

        Unregistered paths are never conflicts.
        """
        files = self.load()["files"]
        conflicts: List[Dict[str, str]] = []
        for path in paths:
            key = normalize_path(path)
            info = files.get(key)
            if info is None or (pack is not None and info.get("pack") == pack):
                continue
            conflicts.append({"path": key, "existingPack": info.get("pack", "")})
        return conflicts

    # ---------- stats ----------

    def get_stats(self) -> Dict[str, int]:
        modified = self.detect_modifications()
        data = self.load()
        return {
            "totalFiles": len(data["files"]),
            "totalPacks": len(data["packs"]),
            "modifiedFiles": len(modified),
        }


__all__ = ["FileRegistry", "REGISTRY_VERSION", "empty_registry", "normalize_path"]
