"""Component discovery across the builtin, global and project scopes."""
from __future__ import annotations

from .core import ComponentCore
from .model import (
    COMPONENT_DIRS,
    COMPONENT_KINDS,
    ComponentInfo,
    ComponentMatch,
    ComponentResolution,
    normalize_kind,
)
from .scope import ComponentScope

__all__ = [
    "COMPONENT_DIRS",
    "COMPONENT_KINDS",
    "ComponentCore",
    "ComponentInfo",
    "ComponentMatch",
    "ComponentResolution",
    "ComponentScope",
    "normalize_kind",
]
