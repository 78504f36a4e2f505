"""Place pack components into a project and take them out again.

Targets:

- agents: ``<project>/.claude/agents/<name>.md``
- modes, workflows, hooks: ``<project>/.zcc/<type>/<name>.<ext>``

Every write is registered in the file registry immediately, so the registry
reflects exactly what reached disk even when an install stops halfway.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from zcc.core.exceptions import NotInstalledError
from zcc.core.utils.checksum import checksum, checksum_file
from zcc.core.utils.io import write_text
from zcc.core.utils.paths import get_agents_dir, get_project_state_dir

from .file_registry import FileRegistry, normalize_path
from .model import (
    COMPONENT_TYPES,
    PackComponent,
    PackInstallationResult,
    PackManifest,
    PackStructure,
    component_filename,
)
from .sources import PackSource

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlannedFile:
    component_type: str
    component: PackComponent
    target: Path
    locator: str

    @property
    def name(self) -> str:
        return self.component.name


class PackInstaller:
    """Write and remove one pack's components, tracked in a ``FileRegistry``."""

    def __init__(self, repo_root: Path, *, file_registry: Optional[FileRegistry] = None) -> None:
        self.repo_root = Path(repo_root)
        self.file_registry = file_registry or FileRegistry(self.repo_root)

    # ---------- targets ----------

    def target_path(self, component_type: str, name: str) -> Path:
        filename = component_filename(component_type, name)
        if component_type == "agents":
            return get_agents_dir(self.repo_root) / filename
        return get_project_state_dir(self.repo_root) / component_type / filename

    def component_for_target(self, path: str) -> Optional[Tuple[str, str]]:
        """Map an installed path back to ``(component_type, name)``."""
        target = Path(path)
        for ctype in COMPONENT_TYPES:
            if normalize_path(self.target_path(ctype, target.stem)) == normalize_path(target):
                return ctype, target.stem
        return None

    def plan(
        self, manifest: PackManifest, source: Optional[PackSource] = None, *, skip_optional: bool = False
    ) -> Tuple[List[PlannedFile], Dict[str, List[str]]]:
        """Return the files to write and, per type, the optional components skipped."""
        planned: List[PlannedFile] = []
        skipped: Dict[str, List[str]] = {ctype: [] for ctype in COMPONENT_TYPES}
        for ctype, component in manifest.components.iter_all():
            if skip_optional and not component.required:
                skipped[ctype].append(component.name)
                continue
            locator = (
                source.get_component_path(manifest.name, ctype, component.name)
                if source is not None
                else f"{ctype}/{component_filename(ctype, component.name)}"
            )
            planned.append(
                PlannedFile(ctype, component, self.target_path(ctype, component.name), locator)
            )
        return planned, skipped

    # ---------- conflicts ----------

    def find_conflicts(
        self,
        pack_name: str,
        planned: List[PlannedFile],
        fetch: "_ContentFetcher",
    ) -> List[Dict[str, Optional[str]]]:
        """Registry conflicts plus untracked or user-modified files in the way.

        An untracked file whose bytes already match the incoming content is
        not a conflict.
        """
        registry = self.file_registry
        conflicts: List[Dict[str, Optional[str]]] = [
            {**c, "reason": "owned"}
            for c in registry.check_conflicts([p.target for p in planned], pack=pack_name)
        ]
        owned_elsewhere = {c["path"] for c in conflicts}

        for item in planned:
            key = normalize_path(item.target)
            if key in owned_elsewhere:
                continue
            info = registry.get_file_info(key)
            if info is not None:
                if info.get("pack") == pack_name and item.target.exists() and registry.is_file_modified(key):
                    conflicts.append({"path": key, "existingPack": pack_name, "reason": "modified"})
                continue
            if item.target.exists():
                if checksum_file(item.target) != checksum(fetch(item)):
                    conflicts.append({"path": key, "existingPack": None, "reason": "untracked"})
        return conflicts

    @staticmethod
    def describe_conflict(conflict: Dict[str, Optional[str]]) -> str:
        reason = conflict.get("reason")
        if reason == "untracked":
            return f"Conflict: {conflict['path']} already exists and is not managed by any pack"
        if reason == "modified":
            return f"Conflict: {conflict['path']} was modified since pack '{conflict['existingPack']}' installed it"
        return f"Conflict: {conflict['path']} is owned by pack '{conflict['existingPack']}'"

    # ---------- install ----------

    def install_pack(
        self,
        pack: PackStructure,
        source: PackSource,
        *,
        force: bool = False,
        skip_optional: bool = False,
        dry_run: bool = False,
    ) -> PackInstallationResult:
        manifest = pack.manifest
        planned, skipped = self.plan(manifest, source, skip_optional=skip_optional)
        fetch = _ContentFetcher(source, manifest.name)

        try:
            conflicts = self.find_conflicts(manifest.name, planned, fetch)
        except Exception as exc:
            return PackInstallationResult.failure(f"Failed to check conflicts for '{manifest.name}': {exc}")

        result = PackInstallationResult(success=True, skipped=skipped, conflicts=conflicts)
        if conflicts and not force:
            result.success = False
            result.errors.extend(self.describe_conflict(c) for c in conflicts)
            logger.info("Install of %s blocked by %d conflict(s)", manifest.name, len(conflicts))
            return result
        for conflict in conflicts:
            result.warnings.append(f"Overwriting {conflict['path']} (--force)")

        if dry_run:
            for item in planned:
                result.installed[item.component_type].append(item.name)
            result.post_install_message = manifest.post_install_message
            return result

        self.file_registry.register_pack(manifest.name, manifest.version)
        for item in planned:
            try:
                write_text(item.target, fetch(item))
                self.file_registry.register_file(item.target, manifest.name, item.locator)
            except Exception as exc:
                result.success = False
                result.errors.append(
                    f"Failed to install {item.component_type[:-1]} '{item.name}': {exc}"
                )
                logger.error("Install of %s stopped at %s: %s", manifest.name, item.target, exc)
                break
            result.installed[item.component_type].append(item.name)
            logger.debug("Installed %s -> %s", item.locator, item.target)

        if result.success:
            result.post_install_message = manifest.post_install_message
        return result

    # ---------- uninstall ----------

    def _expected_files(self, manifest: PackManifest) -> List[str]:
        planned, _ = self.plan(manifest)
        return [normalize_path(p.target) for p in planned if p.target.exists()]

    def _untracked_is_pristine(self, path: str, manifest: Optional[PackManifest], source: Optional[PackSource]) -> bool:
        """True only when ``path`` provably matches the pack's content."""
        mapped = self.component_for_target(path)
        if manifest is None or source is None or mapped is None:
            return False
        try:
            content = source.get_component_content(manifest.name, *mapped)
            return checksum_file(path) == checksum(content)
        except Exception as exc:
            logger.debug("Cannot verify %s against %s: %s", path, source.name, exc)
            return False

    def uninstall_pack(
        self,
        name: str,
        *,
        manifest: Optional[PackManifest] = None,
        source: Optional[PackSource] = None,
        dry_run: bool = False,
    ) -> PackInstallationResult:
        """Remove a pack's files, keeping any the user modified.

        Owned files come from the registry; when it has none, the expected
        set is rebuilt from ``manifest``. Rebuilt files are only deleted when
        ``source`` proves them unmodified.

        Raises:
            NotInstalledError: If neither the registry nor ``manifest`` knows the pack
        """
        registry = self.file_registry
        tracked = registry.get_pack_files(name)
        if not tracked and not registry.has_pack(name) and manifest is None:
            raise NotInstalledError(f"Pack '{name}' is not installed", context={"pack": name})

        files = tracked or (self._expected_files(manifest) if manifest is not None else [])
        result = PackInstallationResult(success=True)
        for path in files:
            ctype, cname = self.component_for_target(path) or (
                Path(path).parent.name if Path(path).parent.name in COMPONENT_TYPES else "agents",
                Path(path).stem,
            )
            info = registry.get_file_info(path)
            owner = (info or {}).get("pack") or ""
            if owner not in (name, ""):
                # Only reachable for manifest-rebuilt lists; the path now belongs to another pack.
                result.skipped[ctype].append(cname)
                result.warnings.append(f"Kept {path}: owned by pack '{owner}'")
                logger.info("Keeping %s owned by %s", path, owner)
                continue
            if info is not None:
                keep = registry.is_file_modified(path)
            else:
                keep = not self._untracked_is_pristine(path, manifest, source)
            if not Path(path).exists():
                result.installed[ctype].append(cname)
                continue
            if keep:
                result.skipped[ctype].append(cname)
                result.warnings.append(f"Preserved modified file: {path}")
                logger.info("Preserving modified %s", path)
                continue
            if not dry_run:
                try:
                    Path(path).unlink(missing_ok=True)
                except OSError as exc:
                    result.success = False
                    result.errors.append(f"Failed to remove {path}: {exc}")
                    continue
                logger.debug("Removed %s", path)
            result.installed[ctype].append(cname)

        if not dry_run:
            registry.unregister_pack(name)
        return result


class _ContentFetcher:
    """Fetch component content once per planned file."""

    def __init__(self, source: PackSource, pack_name: str) -> None:
        self.source = source
        self.pack_name = pack_name
        self._cache: Dict[Path, str] = {}

    def __call__(self, item: PlannedFile) -> str:
        if item.target not in self._cache:
            self._cache[item.target] = self.source.get_component_content(
                self.pack_name, item.component_type, item.name
            )
        return self._cache[item.target]


__all__ = ["PackInstaller", "PlannedFile"]
