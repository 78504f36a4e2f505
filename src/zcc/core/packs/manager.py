"""Starter pack manager: the façade the CLI talks to.

Installing a pack installs its dependencies first (dependency-first order),
applies the pack's configuration block to the project config, snapshots the
manifest and records the pack in ``packs.json``. Uninstall reverses those
steps using the snapshot, not the upstream manifest.

There is no rollback across a dependency chain: when a later install fails,
packs installed earlier in the same call stay installed.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from zcc.core.exceptions import NotInstalledError

from .file_registry import FileRegistry
from .installer import PackInstaller
from .ledger import InstalledPacksLedger, SnapshotStore
from .model import (
    DependencyResult,
    PackInstallationResult,
    PackManifest,
    PackStructure,
    PackValidationResult,
)
from .project_config import ProjectConfigEditor
from .registry import PackRegistry
from .sources import PackSource
from .validator import PackValidator

logger = logging.getLogger(__name__)


class StarterPackManager:
    def __init__(
        self,
        repo_root: Optional[Path] = None,
        *,
        registry: Optional[PackRegistry] = None,
        validator: Optional[PackValidator] = None,
    ) -> None:
        if repo_root is None:
            from zcc.core.utils.paths import resolve_project_root

            repo_root = resolve_project_root()
        self.repo_root = Path(repo_root)
        self.registry = registry or PackRegistry(self.repo_root)
        self.validator = validator or PackValidator()
        self.file_registry = FileRegistry(self.repo_root)
        self.installer = PackInstaller(self.repo_root, file_registry=self.file_registry)
        self.ledger = InstalledPacksLedger(self.repo_root)
        self.snapshots = SnapshotStore(self.repo_root)
        self.project_config = ProjectConfigEditor(self.repo_root)

    # ---------- registry façade ----------

    def list_packs(self) -> List[PackManifest]:
        return self.registry.list_available_packs()

    def load_pack(self, name: str, source: Optional[str] = None) -> PackStructure:
        return self.registry.load_pack(name, source)

    def has_pack(self, name: str) -> bool:
        return self.registry.has_pack(name)

    def resolve_dependencies(self, name: str) -> DependencyResult:
        return self.registry.resolve_dependencies(name)

    def search_packs(self, **criteria: Any) -> List[PackManifest]:
        return self.registry.search_packs(**criteria)

    def get_recommended_packs(self, project_type: str) -> List[PackManifest]:
        return self.registry.get_recommended_packs(project_type)

    def register_pack_source(self, name: str, source: PackSource) -> None:
        self.registry.register_source(name, source)

    def get_registry_stats(self) -> Dict[str, Any]:
        stats = self.registry.get_stats()
        stats["installedPacks"] = len(self.ledger.installed())
        return stats

    def clear_cache(self) -> None:
        self.registry.clear_all_caches()

    # ---------- validation ----------

    def validate_loaded_pack(self, pack: PackStructure, source: PackSource) -> PackValidationResult:
        return self.validator.validate_pack_structure(pack, source)

    def validate_pack(self, name: str, source: Optional[str] = None) -> PackValidationResult:
        """Structure validation plus dependency checks for an available pack."""
        pack, _, pack_source = self.registry.load_pack_with_source(name, source)
        result = self.validate_loaded_pack(pack, pack_source)
        deps = self.registry.validate_dependencies(name)
        if not deps["valid"]:
            result.errors.extend(deps["issues"])
            result.valid = False
        return result

    # ---------- install ----------

    def install_pack(
        self,
        name: str,
        *,
        force: bool = False,
        skip_optional: bool = False,
        dry_run: bool = False,
        source: Optional[str] = None,
    ) -> PackInstallationResult:
        """Install ``name`` and everything it depends on.

        Dependencies already recorded in ``packs.json`` are not reinstalled
        unless ``force`` is set. The first failing pack stops the chain.
        """
        deps = self.registry.resolve_dependencies(name)
        if deps.missing or deps.circular:
            errors = [f"Dependency '{d}' not found" for d in deps.missing]
            errors += [f"Circular dependency: {d}" for d in deps.circular]
            logger.warning("Cannot install %s: %s", name, "; ".join(errors))
            return PackInstallationResult.failure(*errors)

        result = PackInstallationResult(success=True)
        for dep in deps.resolved:
            if not force and self.ledger.is_installed(dep):
                logger.debug("Dependency %s already installed", dep)
                continue
            dep_result = self._install_one(
                dep, force=force, skip_optional=skip_optional, dry_run=dry_run
            )
            result.merge(dep_result)
            if not dep_result.success:
                result.success = False
                result.errors.append(f"Failed to install dependency '{dep}'")
                return result

        own = self._install_one(
            name, source=source, force=force, skip_optional=skip_optional, dry_run=dry_run
        )
        result.merge(own)
        result.success = own.success
        result.post_install_message = own.post_install_message
        return result

    def _install_one(
        self,
        name: str,
        *,
        source: Optional[str] = None,
        force: bool,
        skip_optional: bool,
        dry_run: bool,
    ) -> PackInstallationResult:
        try:
            pack, source_name, pack_source = self.registry.load_pack_with_source(name, source)
        except Exception as exc:
            return PackInstallationResult.failure(f"Failed to load pack '{name}': {exc}")

        validation = self.validate_loaded_pack(pack, pack_source)
        if not validation.valid:
            result = PackInstallationResult.failure(
                *(f"Pack '{name}' failed validation: {e}" for e in validation.errors)
            )
            result.warnings.extend(validation.warnings)
            return result

        result = self.installer.install_pack(
            pack, pack_source, force=force, skip_optional=skip_optional, dry_run=dry_run
        )
        result.warnings.extend(validation.warnings)
        if not result.success or dry_run:
            return result

        manifest = pack.manifest
        applied: Dict[str, Any] = {}
        if manifest.configuration is not None:
            try:
                prior = (self.ledger.get(name) or {}).get("configApplied")
                applied = self.project_config.apply(
                    manifest.configuration.as_settings(), prior=prior
                )
            except Exception as exc:
                result.warnings.append(f"Could not apply configuration for '{name}': {exc}")
        self.snapshots.save(manifest)
        self.ledger.record(
            manifest.name, manifest.version, source=pack_source.source_info(), config_applied=applied
        )
        logger.info("Installed pack %s %s from %s", manifest.name, manifest.version, source_name)
        return result

    # ---------- uninstall ----------

    def _dependents_of(self, name: str) -> List[str]:
        dependents = []
        for other in self.ledger.installed():
            if other == name:
                continue
            manifest = self.snapshots.load(other)
            if manifest is not None and name in manifest.dependencies:
                dependents.append(other)
        return sorted(dependents)

    def _upstream(self, name: str) -> tuple:
        try:
            pack, _, source = self.registry.load_pack_with_source(name)
        except Exception as exc:
            logger.debug("No upstream copy of %s: %s", name, exc)
            return None, None
        return pack.manifest, source

    def uninstall_pack(self, name: str, *, dry_run: bool = False) -> PackInstallationResult:
        """Remove an installed pack, keeping files the user modified.

        Raises:
            NotInstalledError: If the pack is neither in ``packs.json`` nor the file registry
        """
        ledger_entry = self.ledger.get(name)
        if ledger_entry is None and not self.file_registry.has_pack(name):
            raise NotInstalledError(f"Pack '{name}' is not installed", context={"pack": name})

        manifest = self.snapshots.load(name)
        source: Optional[PackSource] = None
        if manifest is None or not self.file_registry.get_pack_files(name):
            upstream, source = self._upstream(name)
            manifest = manifest or upstream

        result = self.installer.uninstall_pack(name, manifest=manifest, source=source, dry_run=dry_run)
        for dependent in self._dependents_of(name):
            result.warnings.append(f"Pack '{dependent}' depends on '{name}'")
        if dry_run:
            return result

        applied = (ledger_entry or {}).get("configApplied") or {}
        try:
            self.project_config.revert(applied)
        except Exception as exc:
            result.warnings.append(f"Could not revert configuration for '{name}': {exc}")
        self.snapshots.remove(name)
        self.ledger.remove(name)
        logger.info("Uninstalled pack %s", name)
        return result

    # ---------- installed state ----------

    def get_installed_packs(self) -> Dict[str, Dict[str, Any]]:
        return self.ledger.installed()

    def is_installed(self, name: str) -> bool:
        return self.ledger.is_installed(name)

    def get_pack_status(self, name: str) -> Dict[str, Any]:
        entry = self.ledger.get(name)
        files = [
            {"path": path, "modified": self.file_registry.is_file_modified(path)}
            for path in self.file_registry.get_pack_files(name)
        ]
        return {
            "name": name,
            "installed": entry is not None,
            "version": (entry or {}).get("version"),
            "installedAt": (entry or {}).get("installedAt"),
            "source": (entry or {}).get("source"),
            "hasSnapshot": self.snapshots.exists(name),
            "files": files,
            "modifiedFiles": sum(1 for f in files if f["modified"]),
        }

    def rebuild_file_registry(self) -> Dict[str, int]:
        self.file_registry.rebuild()
        return self.file_registry.get_stats()


__all__ = ["StarterPackManager"]
