"""Pack configuration side effects on ``<project>/.zcc/config.yaml``.

Applying a pack's ``configuration`` block records, per dotted key, the value
the pack set and the value it replaced. Reverting only touches keys whose
current value is still the one the pack set.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from zcc.core.exceptions import ConfigurationError
from zcc.core.utils.io import read_yaml, write_yaml
from zcc.core.utils.merge import get_dotted, has_dotted, iter_leaves, set_dotted, unset_dotted
from zcc.core.utils.paths import get_project_config_path

logger = logging.getLogger(__name__)

AppliedConfig = Dict[str, Dict[str, Any]]


class ProjectConfigEditor:
    def __init__(self, repo_root: Path) -> None:
        self.repo_root = Path(repo_root)
        self.path = get_project_config_path(self.repo_root)

    def load(self) -> Dict[str, Any]:
        # Never rewrite a config file we could not parse.
        try:
            data = read_yaml(self.path, default={}, raise_on_error=True)
        except FileNotFoundError:
            return {}
        except Exception as exc:
            raise ConfigurationError(
                f"Failed to read {self.path}: {exc}", context={"path": str(self.path)}
            ) from exc
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"Project configuration must be a mapping: {self.path}",
                context={"path": str(self.path)},
            )
        return data

    def save(self, data: Dict[str, Any]) -> None:
        write_yaml(self.path, data)
        from zcc.core.config import clear_all_caches

        clear_all_caches()

    def apply(
        self,
        settings: Mapping[str, Any],
        *,
        prior: Optional[Mapping[str, Mapping[str, Any]]] = None,
    ) -> AppliedConfig:
        """Write ``settings`` into project config and return what changed.

        ``prior`` is the record from an earlier install of the same pack; keys
        still holding the value it set keep their original ``previous``.
        """
        if not settings:
            return {}
        data = self.load()
        applied: AppliedConfig = {}
        for key, value in iter_leaves(settings):
            earlier = (prior or {}).get(key)
            record: Dict[str, Any] = {"value": value}
            if earlier is not None and has_dotted(data, key) and get_dotted(data, key) == earlier.get("value"):
                if "previous" in earlier:
                    record["previous"] = earlier["previous"]
            elif has_dotted(data, key):
                record["previous"] = get_dotted(data, key)
            set_dotted(data, key, value)
            applied[key] = record
        self.save(data)
        logger.debug("Applied project settings: %s", ", ".join(applied))
        return applied

    def revert(self, applied: Mapping[str, Mapping[str, Any]]) -> List[str]:
        """Undo ``apply`` for keys still holding the pack's value.

        Returns the dotted keys that were reverted.
        """
        if not applied:
            return []
        data = self.load()
        reverted: List[str] = []
        for key, record in applied.items():
            if not has_dotted(data, key) or get_dotted(data, key) != record.get("value"):
                logger.debug("Leaving %s: changed since install", key)
                continue
            if "previous" in record:
                set_dotted(data, key, record["previous"])
            else:
                unset_dotted(data, key)
            reverted.append(key)
        if reverted:
            self.save(data)
        return reverted


__all__ = ["ProjectConfigEditor", "AppliedConfig"]
