"""Bundled zcc resources.

Layout under this package:

- ``config/defaults.yaml``: lowest configuration layer
- ``schemas/pack-manifest.schema.json``: manifest JSON Schema
- ``packs/<name>/``: built-in packs served by the ``local`` source
- ``templates/<type>s/``: built-in components (the ``builtin`` scope)
"""
from __future__ import annotations

import json
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Any

import yaml

PACKS_DIR = "packs"
TEMPLATES_DIR = "templates"
SCHEMAS_DIR = "schemas"


def get_data_path(subpackage: str, filename: str = "") -> Path:
    base = Path(str(resources.files("zcc.data").joinpath(subpackage)))
    return base / filename if filename else base


def builtin_packs_dir() -> Path:
    return get_data_path(PACKS_DIR)


def builtin_templates_dir() -> Path:
    return get_data_path(TEMPLATES_DIR)


@lru_cache(maxsize=64)
def read_yaml(subpackage: str, filename: str) -> dict[str, Any]:
    """Parse a bundled YAML file; an empty file reads as ``{}``. Cached."""
    text = get_data_path(subpackage, filename).read_text(encoding="utf-8")
    return yaml.safe_load(text) or {}


@lru_cache(maxsize=64)
def read_json(subpackage: str, filename: str) -> dict[str, Any]:
    return json.loads(get_data_path(subpackage, filename).read_text(encoding="utf-8"))


def clear_caches() -> None:
    read_yaml.cache_clear()
    read_json.cache_clear()


__all__ = [
    "get_data_path",
    "builtin_packs_dir",
    "builtin_templates_dir",
    "read_yaml",
    "read_json",
    "clear_caches",
]
