from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

# Scope subdirectories; the component type is the directory name without the trailing "s".
COMPONENT_DIRS: Tuple[str, ...] = (
    "modes",
    "workflows",
    "scripts",
    "hooks",
    "agents",
    "commands",
    "templates",
)
COMPONENT_KINDS: Tuple[str, ...] = tuple(d[:-1] for d in COMPONENT_DIRS)

SCOPE_PRECEDENCE: Dict[str, int] = {"project": 3, "global": 2, "builtin": 1}
SCOPE_ORDER: Tuple[str, ...] = ("project", "global", "builtin")


def normalize_kind(value: str) -> str:
    """Accept ``mode`` or ``modes``; return the singular component type.

    Raises:
        ValueError: If ``value`` names no component type
    """
    kind = value[:-1] if value in COMPONENT_DIRS else value
    if kind not in COMPONENT_KINDS:
        raise ValueError(
            f"Unknown component type '{value}' (expected one of: {', '.join(COMPONENT_KINDS)})"
        )
    return kind


@dataclass(frozen=True)
class ComponentInfo:
    name: str
    type: str
    path: Path
    metadata: Dict[str, Any] = field(default_factory=dict, compare=False)

    @property
    def key(self) -> str:
        return f"{self.type}:{self.name}"

    @property
    def description(self) -> Optional[str]:
        desc = self.metadata.get("description")
        return desc if isinstance(desc, str) else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "path": str(self.path),
            "metadata": _jsonable(self.metadata),
        }


@dataclass(frozen=True)
class ComponentResolution:
    component: ComponentInfo
    source: str

    def to_dict(self) -> Dict[str, Any]:
        return {**self.component.to_dict(), "source": self.source}


@dataclass
class ComponentMatch:
    """A fuzzy search hit."""

    name: str
    score: int
    source: str
    component: ComponentInfo
    match_type: str
    conflicts_with: Optional[List[ComponentResolution]] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "name": self.name,
            "type": self.component.type,
            "score": self.score,
            "source": self.source,
            "matchType": self.match_type,
            "path": str(self.component.path),
        }
        if self.conflicts_with:
            payload["conflictsWith"] = [r.source for r in self.conflicts_with]
        return payload


def _jsonable(value: Any) -> Any:
    # Frontmatter may carry dates and other YAML scalars.
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, (str, int, float, bool)) or value is None:
        return value
    return str(value)


__all__ = [
    "COMPONENT_DIRS",
    "COMPONENT_KINDS",
    "SCOPE_ORDER",
    "SCOPE_PRECEDENCE",
    "ComponentInfo",
    "ComponentMatch",
    "ComponentResolution",
    "normalize_kind",
]
