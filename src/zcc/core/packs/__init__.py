"""Starter packs: sources, registry, validation, installation and tracking."""
from __future__ import annotations

from .file_registry import FileRegistry
from .installer import PackInstaller
from .ledger import InstalledPacksLedger, SnapshotStore
from .manager import StarterPackManager
from .model import (
    COMPONENT_TYPES,
    DependencyResult,
    PackComponent,
    PackConfiguration,
    PackInstallationResult,
    PackManifest,
    PackStructure,
    PackValidationResult,
)
from .project_config import ProjectConfigEditor
from .registry import PackRegistry
from .sources import GitHubPackSource, LocalPackSource, PackSource, RemotePackSource
from .validator import PackValidator

__all__ = [
    "COMPONENT_TYPES",
    "DependencyResult",
    "FileRegistry",
    "GitHubPackSource",
    "InstalledPacksLedger",
    "LocalPackSource",
    "PackComponent",
    "PackConfiguration",
    "PackInstallationResult",
    "PackInstaller",
    "PackManifest",
    "PackRegistry",
    "PackSource",
    "PackStructure",
    "PackValidationResult",
    "PackValidator",
    "ProjectConfigEditor",
    "RemotePackSource",
    "SnapshotStore",
    "StarterPackManager",
]
