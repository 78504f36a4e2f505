"""One component scope: a directory with a subdirectory per component type.

Scopes are the builtin templates, the user-global ``~/.zcc`` and the
project ``<project>/.zcc``. Discovery is lazy and cached until
``clear_cache()``.
"""
from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import yaml

from zcc.core.exceptions import ConfigurationError
from zcc.core.utils.io import ensure_directory, read_yaml, write_yaml
from zcc.core.utils.text import parse_frontmatter

from .model import COMPONENT_DIRS, ComponentInfo

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "config.yaml"
DEFAULT_SCOPE_CONFIG: Dict[str, Any] = {"ui": {"colorOutput": True, "verboseLogging": False}}


def extract_metadata(path: Path) -> Dict[str, Any]:
    """Metadata for a component file.

    Markdown: frontmatter. JSON: its ``metadata`` key, else the whole
    object. YAML: the parsed mapping. Anything else: size, mtime and
    extension. Unparseable files yield ``{}``.
    """
    ext = path.suffix.lower()
    try:
        if ext == ".md":
            return parse_frontmatter(path.read_text(encoding="utf-8")).frontmatter
        if ext == ".json":
            data = json.loads(path.read_text(encoding="utf-8"))
            if isinstance(data, dict):
                meta = data.get("metadata")
                return meta if isinstance(meta, dict) else data
            return {}
        if ext in (".yaml", ".yml"):
            data = read_yaml(path, default={}, raise_on_error=True)
            return data if isinstance(data, dict) else {}
        stat = path.stat()
        return {
            "size": stat.st_size,
            "modified": datetime.fromtimestamp(stat.st_mtime, tz=timezone.utc).isoformat(),
            "extension": ext,
        }
    except (OSError, ValueError, yaml.YAMLError) as exc:
        logger.debug("Failed to extract metadata from %s: %s", path, exc)
        return {}


class ComponentScope:
    def __init__(
        self,
        path: Path,
        *,
        name: str,
        extra_dirs: Optional[Mapping[str, Iterable[Path]]] = None,
    ) -> None:
        """
        Args:
            path: Scope root directory
            name: ``project``, ``global`` or ``builtin``
            extra_dirs: Additional directories per component dir name,
                e.g. ``{"agents": [<project>/.claude/agents]}``
        """
        self.path = Path(path)
        self.name = name
        self.config_path = self.path / CONFIG_FILENAME
        self._extra_dirs: Dict[str, List[Path]] = {
            k: [Path(p) for p in v] for k, v in (extra_dirs or {}).items()
        }
        self._components: Optional[List[ComponentInfo]] = None
        self._by_type: Dict[str, List[ComponentInfo]] = {}

    def exists(self) -> bool:
        return self.path.is_dir()

    # ---------- config ----------

    def get_config(self) -> Optional[Dict[str, Any]]:
        """Return ``<scope>/config.yaml`` or None when the scope has none."""
        if not self.config_path.exists():
            return None
        try:
            data = read_yaml(self.config_path, default={}, raise_on_error=True)
        except Exception as exc:
            raise ConfigurationError(
                f"Failed to parse {self.config_path}: {exc}",
                context={"path": str(self.config_path)},
            ) from exc
        return data if isinstance(data, dict) else {}

    def save_config(self, config: Mapping[str, Any]) -> None:
        write_yaml(self.config_path, dict(config))

    def initialize(self) -> None:
        """Create the standard component directories and a default config."""
        ensure_directory(self.path)
        for dirname in COMPONENT_DIRS:
            ensure_directory(self.path / dirname)
        if not self.config_path.exists():
            self.save_config(DEFAULT_SCOPE_CONFIG)
        self.clear_cache()
        logger.info("Initialized %s scope at %s", self.name, self.path)

    # ---------- discovery ----------

    def _dirs_for(self, dirname: str) -> List[Path]:
        return [self.path / dirname, *self._extra_dirs.get(dirname, [])]

    def _scan(self) -> List[ComponentInfo]:
        found: List[ComponentInfo] = []
        seen: set = set()
        for dirname in COMPONENT_DIRS:
            kind = dirname[:-1]
            for directory in self._dirs_for(dirname):
                if not directory.is_dir():
                    continue
                try:
                    entries = sorted(directory.iterdir())
                except OSError as exc:
                    logger.debug("Failed to read %s: %s", directory, exc)
                    continue
                for entry in entries:
                    if not entry.is_file() or entry.name.startswith("."):
                        continue
                    key: Tuple[str, str] = (kind, entry.stem)
                    if key in seen:
                        continue
                    seen.add(key)
                    found.append(
                        ComponentInfo(
                            name=entry.stem,
                            type=kind,
                            path=entry,
                            metadata=extract_metadata(entry),
                        )
                    )
        return found

    def get_components(self) -> List[ComponentInfo]:
        if self._components is None:
            self._components = self._scan() if self.exists() or self._extra_dirs else []
        return list(self._components)

    def get_components_by_type(self, kind: str) -> List[ComponentInfo]:
        if kind not in self._by_type:
            self._by_type[kind] = [c for c in self.get_components() if c.type == kind]
        return list(self._by_type[kind])

    def get_component(self, name: str, kind: str) -> Optional[ComponentInfo]:
        for component in self.get_components_by_type(kind):
            if component.name == name:
                return component
        return None

    def clear_cache(self) -> None:
        self._components = None
        self._by_type.clear()

    def __repr__(self) -> str:
        return f"ComponentScope(name={self.name!r}, path={str(self.path)!r})"


__all__ = ["ComponentScope", "CONFIG_FILENAME", "DEFAULT_SCOPE_CONFIG", "extract_metadata"]
