"""Compose the builtin, global and project scopes.

Name collisions resolve project > global > builtin.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from zcc.core.utils.paths import get_agents_dir, get_project_state_dir, get_user_config_dir

from . import fuzzy
from .model import (
    COMPONENT_DIRS,
    SCOPE_ORDER,
    SCOPE_PRECEDENCE,
    ComponentInfo,
    ComponentMatch,
    ComponentResolution,
)
from .scope import ComponentScope

logger = logging.getLogger(__name__)


def builtin_templates_dir() -> Path:
    from zcc.data import builtin_templates_dir as bundled

    return bundled()


class ComponentCore:
    def __init__(
        self,
        repo_root: Optional[Path] = None,
        *,
        builtin_path: Optional[Path] = None,
        global_path: Optional[Path] = None,
    ) -> None:
        if repo_root is None:
            from zcc.core.utils.paths import resolve_project_root

            repo_root = resolve_project_root()
        self.repo_root = Path(repo_root)
        self.builtin = ComponentScope(builtin_path or builtin_templates_dir(), name="builtin")
        self.global_scope = ComponentScope(global_path or get_user_config_dir(), name="global")
        self.project = ComponentScope(
            get_project_state_dir(self.repo_root),
            name="project",
            extra_dirs={"agents": [get_agents_dir(self.repo_root)]},
        )

    @property
    def scopes(self) -> Dict[str, ComponentScope]:
        """Scopes keyed by name, highest precedence first."""
        return {"project": self.project, "global": self.global_scope, "builtin": self.builtin}

    # ---------- resolution ----------

    def resolve_component(self, name: str, kind: str) -> Optional[ComponentResolution]:
        for source, scope in self.scopes.items():
            component = scope.get_component(name, kind)
            if component is not None:
                return ComponentResolution(component, source)
        return None

    def get_component(self, name: str, kind: str) -> Optional[ComponentInfo]:
        resolved = self.resolve_component(name, kind)
        return resolved.component if resolved else None

    def get_components_by_type_with_source(self, kind: str) -> List[ComponentResolution]:
        merged: Dict[str, ComponentResolution] = {}
        # Lowest precedence first so higher scopes overwrite.
        for source in reversed(SCOPE_ORDER):
            for component in self.scopes[source].get_components_by_type(kind):
                merged[component.name] = ComponentResolution(component, source)
        return sorted(merged.values(), key=lambda r: r.component.name)

    def get_components_by_type(self, kind: str) -> List[ComponentInfo]:
        return [r.component for r in self.get_components_by_type_with_source(kind)]

    def list_components(self) -> Dict[str, List[ComponentInfo]]:
        return {dirname: self.get_components_by_type(dirname[:-1]) for dirname in COMPONENT_DIRS}

    def list_components_with_source(self) -> Dict[str, List[ComponentResolution]]:
        return {
            dirname: self.get_components_by_type_with_source(dirname[:-1])
            for dirname in COMPONENT_DIRS
        }

    def get_all_components(self) -> List[ComponentInfo]:
        """Every resolved component, one per type and name, sorted by name."""
        everything = [c for comps in self.list_components().values() for c in comps]
        return sorted(everything, key=lambda c: (c.name, c.type))

    def _all_with_source(self, kind: Optional[str] = None) -> List[fuzzy.Candidate]:
        candidates: List[fuzzy.Candidate] = []
        for source, scope in self.scopes.items():
            for component in scope.get_components():
                if kind is None or component.type == kind:
                    candidates.append((component, source))
        return candidates

    # ---------- search ----------

    def find_components(
        self,
        query: str,
        kind: Optional[str] = None,
        *,
        max_results: int = fuzzy.DEFAULT_MAX_RESULTS,
        min_score: int = fuzzy.DEFAULT_MIN_SCORE,
        **options: Any,
    ) -> List[ComponentMatch]:
        """Fuzzy search, one hit per ``type:name`` from its highest-precedence scope.

        Hits present in more than one scope carry ``conflicts_with``.
        """
        candidates = self._all_with_source(kind)
        matches = fuzzy.find_matches(
            query, candidates, max_results=None, min_score=min_score, **options
        )

        best: Dict[str, ComponentMatch] = {}
        for match in matches:
            key = match.component.key
            current = best.get(key)
            if current is None or SCOPE_PRECEDENCE[match.source] > SCOPE_PRECEDENCE[current.source]:
                best[key] = match

        for key, match in best.items():
            versions = [
                ComponentResolution(c, s) for c, s in candidates if c.key == key
            ]
            match.conflicts_with = versions if len(versions) > 1 else None

        ordered = sorted(
            best.values(),
            key=lambda m: (-m.score, -SCOPE_PRECEDENCE[m.source], m.name),
        )
        return ordered[:max_results]

    def find_best_match(self, query: str, kind: Optional[str] = None, **options: Any) -> Optional[ComponentMatch]:
        matches = self.find_components(query, kind, max_results=1, **options)
        return matches[0] if matches else None

    def generate_suggestions(self, query: str, kind: Optional[str] = None, max_suggestions: int = 3) -> List[str]:
        return fuzzy.generate_suggestions(query, self._all_with_source(kind), max_suggestions)

    def get_component_conflicts(
        self, name: Optional[str] = None, kind: Optional[str] = None
    ) -> List[ComponentResolution]:
        """Copies of a component across scopes.

        With no ``name``, every copy of every name present in more than one
        scope.
        """
        candidates = self._all_with_source(kind)
        if name is not None:
            return [ComponentResolution(c, s) for c, s in candidates if c.name == name]

        by_key: Dict[str, List[ComponentResolution]] = {}
        for component, source in candidates:
            by_key.setdefault(component.key, []).append(ComponentResolution(component, source))
        conflicts = [r for versions in by_key.values() if len(versions) > 1 for r in versions]
        return sorted(
            conflicts,
            key=lambda r: (r.component.type, r.component.name, -SCOPE_PRECEDENCE[r.source]),
        )

    # ---------- config / status ----------

    def get_config(self) -> Dict[str, Any]:
        from zcc.core.config import ConfigManager

        return ConfigManager(self.repo_root).load_config()

    def get_status(self) -> Dict[str, Any]:
        all_with_source = self._all_with_source()
        return {
            "builtin": {
                "available": self.builtin.exists(),
                "path": str(self.builtin.path),
                "components": len(self.builtin.get_components()),
            },
            "global": {
                "exists": self.global_scope.exists(),
                "path": str(self.global_scope.path),
                "components": len(self.global_scope.get_components()),
                "hasConfig": self.global_scope.config_path.exists(),
            },
            "project": {
                "exists": self.project.exists(),
                "path": str(self.project.path),
                "components": len(self.project.get_components()),
                "hasConfig": self.project.config_path.exists(),
            },
            "totalComponents": len(all_with_source),
            "uniqueComponents": len(self.get_all_components()),
        }

    def clear_cache(self) -> None:
        for scope in self.scopes.values():
            scope.clear_cache()


__all__ = ["ComponentCore", "builtin_templates_dir"]
