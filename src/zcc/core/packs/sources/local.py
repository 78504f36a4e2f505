"""Local directory pack source.

Layout::

    <root>/<pack>/manifest.json
    <root>/<pack>/components/<type>/<name>.<ext>
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import List, Optional

from zcc.core.exceptions import (
    ComponentNotFoundError,
    InvalidJsonError,
    InvalidManifestError,
    PackNotFoundError,
    PermissionOrIoError,
)
from zcc.core.utils.io import read_text

from ..model import PackManifest, PackStructure, component_filename
from .base import PackSource

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "manifest.json"
COMPONENTS_DIRNAME = "components"


def is_safe_pack_name(pack_name: str) -> bool:
    if not pack_name or pack_name == ".":
        return False
    if ".." in pack_name or "/" in pack_name or "\\" in pack_name:
        return False
    return not Path(pack_name).is_absolute()


def default_packs_root() -> Path:
    from zcc.data import builtin_packs_dir

    return builtin_packs_dir()


class LocalPackSource(PackSource):
    """Packs read from a directory tree. No manifest cache: disk is cheap."""

    source_type = "local"

    def __init__(self, name: str = "local", root: Optional[Path] = None) -> None:
        super().__init__(name)
        self.root = Path(root) if root is not None else default_packs_root()

    def location(self) -> str:
        return str(self.root)

    def _pack_dir(self, pack_name: str) -> Path:
        """``<root>/<pack_name>``; names that could leave the root are not packs.

        Raises:
            PackNotFoundError: If ``pack_name`` is empty, absolute, or contains ``..`` or a separator
        """
        if not is_safe_pack_name(pack_name):
            raise PackNotFoundError(
                f"Invalid pack name '{pack_name}'",
                context={"pack": pack_name, "source": self.name},
            )
        return self.root / pack_name

    def list_packs(self) -> List[str]:
        if not self.root.is_dir():
            return []
        return sorted(
            p.name
            for p in self.root.iterdir()
            if p.is_dir() and (p / MANIFEST_FILENAME).is_file()
        )

    def load_pack(self, pack_name: str) -> PackStructure:
        pack_dir = self._pack_dir(pack_name)
        if not pack_dir.is_dir():
            raise PackNotFoundError(
                f"Pack '{pack_name}' not found in {self.root}",
                context={"pack": pack_name, "source": self.name},
            )
        manifest_path = pack_dir / MANIFEST_FILENAME
        if not manifest_path.is_file():
            raise InvalidManifestError(
                f"Pack '{pack_name}' manifest not found: {manifest_path}",
                context={"pack": pack_name, "path": str(manifest_path)},
            )
        try:
            data = json.loads(read_text(manifest_path))
        except json.JSONDecodeError as exc:
            raise InvalidJsonError(
                f"Invalid JSON in {manifest_path}: {exc.msg}",
                context={"pack": pack_name, "path": str(manifest_path)},
            ) from exc
        except OSError as exc:
            raise PermissionOrIoError(
                f"Cannot read {manifest_path}: {exc}", context={"path": str(manifest_path)}
            ) from exc

        manifest = PackManifest.from_dict(data, source=str(manifest_path))
        return PackStructure(
            manifest=manifest,
            path=str(pack_dir),
            components_path=str(pack_dir / COMPONENTS_DIRNAME),
        )

    def has_pack(self, pack_name: str) -> bool:
        if not is_safe_pack_name(pack_name):
            return False
        return (self._pack_dir(pack_name) / MANIFEST_FILENAME).is_file()

    def get_component_path(self, pack_name: str, component_type: str, component_name: str) -> str:
        return str(
            self._pack_dir(pack_name)
            / COMPONENTS_DIRNAME
            / component_type
            / component_filename(component_type, component_name)
        )

    def has_component(self, pack_name: str, component_type: str, component_name: str) -> bool:
        if not is_safe_pack_name(pack_name):
            return False
        return Path(self.get_component_path(pack_name, component_type, component_name)).is_file()

    def get_component_content(self, pack_name: str, component_type: str, component_name: str) -> str:
        path = Path(self.get_component_path(pack_name, component_type, component_name))
        if not path.is_file():
            raise ComponentNotFoundError(
                f"Component {component_type}/{component_name} not found in pack '{pack_name}'",
                context={"pack": pack_name, "path": str(path)},
            )
        try:
            return read_text(path)
        except OSError as exc:
            raise PermissionOrIoError(
                f"Cannot read {path}: {exc}", context={"path": str(path)}
            ) from exc


__all__ = ["LocalPackSource", "is_safe_pack_name", "MANIFEST_FILENAME", "COMPONENTS_DIRNAME", "default_packs_root"]
