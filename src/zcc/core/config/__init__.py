"""Configuration loading for zcc.

- ConfigManager: layered YAML + ZCC_* environment overrides
- cache: shared per-project config cache
- domains: typed accessors (PacksConfig, UIConfig)
"""
from __future__ import annotations

from .base import BaseDomainConfig
from .cache import clear_all_caches, get_cached_config
from .domains import PacksConfig, UIConfig
from .manager import ConfigManager

__all__ = [
    "BaseDomainConfig",
    "ConfigManager",
    "PacksConfig",
    "UIConfig",
    "clear_all_caches",
    "get_cached_config",
]
