"""Domain-specific configuration accessors."""
from __future__ import annotations

from .packs import PacksConfig
from .ui import UIConfig

__all__ = ["PacksConfig", "UIConfig"]
