"""
zcc configuration management (YAML layers plus environment overrides).
"""
from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from zcc.core.exceptions import ConfigurationError
from zcc.core.utils.merge import deep_merge as _deep_merge
from zcc.data import get_data_path

logger = logging.getLogger(__name__)

ENV_PREFIX = "ZCC_"

# Convenience variables that map onto fixed config paths.
ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "ZCC_DEFAULT_MODE": ("defaultMode",),
    "ZCC_COLOR_OUTPUT": ("ui", "colorOutput"),
    "ZCC_VERBOSE": ("ui", "verboseLogging"),
}

# Variables with the ZCC_ prefix that are not configuration overrides.
ENV_RESERVED = frozenset({"ZCC_PROJECT_ROOT", *ENV_ALIASES})


class ConfigManager:
    """Load and merge zcc configuration.

    Configuration sources (highest to lowest priority):
    1. Environment variables: ZCC_* (``__`` separates path segments)
    2. Project config: <project>/.zcc/config.yaml
    3. User config: ~/.zcc/config.yaml
    4. Bundled defaults: zcc.data/config/*.yaml (alphabetical order)
    """

    def __init__(self, repo_root: Optional[Path] = None) -> None:
        self.repo_root = repo_root or self._find_repo_root()

        from zcc.core.utils.paths import get_project_config_path, get_user_config_dir

        self.core_config_dir = get_data_path("config")
        self.user_config_path = get_user_config_dir(create=False) / "config.yaml"
        self.project_config_path = get_project_config_path(self.repo_root)

    def _find_repo_root(self) -> Path:
        from zcc.core.utils.paths import resolve_project_root

        return resolve_project_root()

    def deep_merge(self, base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Recursively merge dictionaries. Delegates to shared implementation."""
        return _deep_merge(base, override)

    def load_yaml(self, path: Path) -> Dict[str, Any]:
        from zcc.core.utils.io import read_yaml

        # Configuration never silently ignores invalid YAML.
        try:
            data = read_yaml(path, default={}, raise_on_error=True)
        except FileNotFoundError:
            return {}
        except Exception as exc:
            raise ConfigurationError(
                f"Failed to parse {path}: {exc}", context={"path": str(path)}
            ) from exc
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Configuration must be a mapping: {path}", context={"path": str(path)}
            )
        return data

    # ---------- environment overrides ----------

    def _as_bool(self, v: str) -> Optional[bool]:
        low = v.strip().lower()
        if low in {"true", "false"}:
            return low == "true"
        return None

    def _as_int(self, v: str) -> Optional[int]:
        if re.fullmatch(r"[-+]?\d+", v.strip() or " "):
            return int(v)
        return None

    def _as_float(self, v: str) -> Optional[float]:
        s = v.strip()
        if re.fullmatch(r"[-+]?\d*\.\d+", s) or re.fullmatch(r"[-+]?\d+\.\d*", s):
            return float(s)
        return None

    def _as_json(self, v: str) -> Optional[Any]:
        s = v.strip()
        if (s.startswith("{") and s.endswith("}")) or (s.startswith("[") and s.endswith("]")):
            try:
                return json.loads(s)
            except json.JSONDecodeError:
                return None
        return None

    def _coerce_type(self, value: str) -> Any:
        for caster in (self._as_bool, self._as_int, self._as_float, self._as_json):
            result = caster(value)
            if result is not None:
                return result
        return value.strip()

    def _parse_env_key(self, raw: str) -> List[str]:
        if not raw:
            return []
        # Only ``__`` separates segments; single underscores stay inside a key.
        segs = raw.split("__")
        if any(seg == "" for seg in segs):
            logger.warning("Ignoring malformed %s* key: %s", ENV_PREFIX, raw)
            return []
        return segs

    def _iter_env_overrides(self) -> Iterator[Tuple[List[str], Any]]:
        for key in sorted(os.environ.keys()):
            if not key.startswith(ENV_PREFIX) or key in ENV_RESERVED:
                continue
            path = self._parse_env_key(key[len(ENV_PREFIX):])
            if path:
                yield path, self._coerce_type(os.environ[key])
        for key, path in ENV_ALIASES.items():
            if key in os.environ:
                yield list(path), self._coerce_type(os.environ[key])

    def _set_nested(self, root: Dict[str, Any], path: List[Union[str, int]], value: Any) -> None:
        cur = root
        for part in path[:-1]:
            lower_map = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
            use_key = lower_map.get(str(part).lower(), part)
            nxt = cur.get(use_key)
            if not isinstance(nxt, dict):
                nxt = {}
                cur[use_key] = nxt
            cur = nxt
        leaf = path[-1]
        lower_map = {k.lower(): k for k in cur.keys() if isinstance(k, str)}
        cur[lower_map.get(str(leaf).lower(), leaf)] = value

    def apply_env_overrides(self, cfg: Dict[str, Any]) -> None:
        for path, typed_value in self._iter_env_overrides():
            self._set_nested(cfg, path, typed_value)

    # ---------- loading ----------

    def _load_core_defaults(self) -> Dict[str, Any]:
        cfg: Dict[str, Any] = {}
        if not self.core_config_dir.exists():
            return cfg
        for path in sorted(self.core_config_dir.glob("*.yaml")):
            cfg = self.deep_merge(cfg, self.load_yaml(path))
        return cfg

    def load_config(self, *, include_env: bool = True) -> Dict[str, Any]:
        """Return the merged configuration dictionary."""
        cfg = self._load_core_defaults()
        for layer in (self.user_config_path, self.project_config_path):
            if layer.exists():
                logger.debug("Merging config layer %s", layer)
                cfg = self.deep_merge(cfg, self.load_yaml(layer))
        if include_env:
            self.apply_env_overrides(cfg)
        return cfg

    def get(self, key: str, default: Any = None) -> Any:
        """Return a config value by dotted key."""
        from zcc.core.utils.merge import get_dotted

        return get_dotted(self.load_config(), key, default)


__all__ = ["ConfigManager", "ENV_ALIASES", "ENV_PREFIX"]
