"""YAML config files (``config.yaml`` at user and project scope)."""
from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from .core import atomic_write


class _ConfigDumper(yaml.SafeDumper):
    pass


def _represent_str(dumper: yaml.SafeDumper, data: str) -> yaml.ScalarNode:
    # Multiline values (post-install notes, prompts) stay readable as blocks.
    style = "|" if "\n" in data else None
    return dumper.represent_scalar("tag:yaml.org,2002:str", data, style=style)


_ConfigDumper.add_representer(str, _represent_str)


def read_yaml(path: Path, default: Any = None, raise_on_error: bool = False) -> Any:
    """Load ``path``, falling back to ``default`` for a missing, empty or broken file.

    With ``raise_on_error`` a missing file raises ``FileNotFoundError`` and a
    parse error propagates as ``yaml.YAMLError``; an empty file still yields
    ``default``.
    """
    path = Path(path)
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError):
        if raise_on_error:
            raise
        return default
    return default if data is None else data


def write_yaml(path: Path, data: Any) -> None:
    text = yaml.dump(
        data,
        Dumper=_ConfigDumper,
        default_flow_style=False,
        sort_keys=True,
        allow_unicode=True,
    )
    atomic_write(Path(path), lambda handle: handle.write(text))


__all__ = [
    "read_yaml",
    "write_yaml",
]
