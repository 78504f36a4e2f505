"""Typed views over one top-level section of the merged configuration."""
from __future__ import annotations

from abc import ABC, abstractmethod
from functools import cached_property
from pathlib import Path
from typing import Any, Dict, Optional

from .cache import get_cached_config


class BaseDomainConfig(ABC):
    """Read-only accessor for the ``_config_section()`` part of the config.

    Subclasses expose settings as ``cached_property`` values built with
    ``setting()``; passing ``config`` bypasses the shared per-root cache.
    """

    def __init__(
        self,
        repo_root: Optional[Path] = None,
        *,
        config: Optional[Dict[str, Any]] = None,
    ) -> None:
        self._repo_root = repo_root
        self._config = get_cached_config(repo_root=repo_root) if config is None else config

    @property
    def repo_root(self) -> Path:
        if self._repo_root is not None:
            return Path(self._repo_root)
        from zcc.core.utils.paths import resolve_project_root

        return resolve_project_root()

    @abstractmethod
    def _config_section(self) -> str:
        ...

    @cached_property
    def section(self) -> Dict[str, Any]:
        value = self._config.get(self._config_section())
        return value if isinstance(value, dict) else {}

    def setting(self, *keys: str, default: Any = None) -> Any:
        """Walk ``keys`` below the section; ``default`` when any step is missing or null."""
        node: Any = self.section
        for key in keys:
            if not isinstance(node, dict) or node.get(key) is None:
                return default
            node = node[key]
        return node


__all__ = ["BaseDomainConfig"]
