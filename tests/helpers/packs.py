"""Build pack trees on disk for tests."""
from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from zcc.core.packs import PackRegistry, StarterPackManager
from zcc.core.packs.model import component_filename

ComponentSpec = Union[str, Mapping[str, Any]]


def component_body(pack: str, ctype: str, name: str) -> str:
    if ctype == "hooks":
        return json.dumps({"name": name, "event": "PostToolUse", "pack": pack}, indent=2) + "\n"
    return f"---\nname: {name}\ndescription: {name} from {pack}\n---\n\n# {name}\n"


def write_pack(
    root: Path,
    name: str,
    *,
    version: str = "1.0.0",
    components: Optional[Mapping[str, Iterable[ComponentSpec]]] = None,
    dependencies: Iterable[str] = (),
    contents: Optional[Mapping[str, str]] = None,
    write_files: bool = True,
    **extra: Any,
) -> Path:
    """Create ``root/<name>/manifest.json`` and its component files.

    ``components`` maps a type to names or full component dicts; names are
    marked required. ``contents`` overrides file bodies by ``"<type>/<name>"``.
    """
    pack_dir = root / name
    manifest_components: Dict[str, list] = {}
    for ctype, items in (components or {}).items():
        entries = []
        for item in items:
            entry = {"name": item, "required": True} if isinstance(item, str) else dict(item)
            entries.append(entry)
            if write_files:
                body = (contents or {}).get(f"{ctype}/{entry['name']}")
                path = pack_dir / "components" / ctype / component_filename(ctype, entry["name"])
                path.parent.mkdir(parents=True, exist_ok=True)
                path.write_text(body if body is not None else component_body(name, ctype, entry["name"]), encoding="utf-8")
        manifest_components[ctype] = entries

    manifest: Dict[str, Any] = {
        "name": name,
        "version": version,
        "description": f"{name} test pack",
        "author": "tests",
        "components": manifest_components,
    }
    deps = list(dependencies)
    if deps:
        manifest["dependencies"] = deps
    manifest.update(extra)
    pack_dir.mkdir(parents=True, exist_ok=True)
    (pack_dir / "manifest.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    return pack_dir


def make_registry(project: Path, packs_root: Path) -> PackRegistry:
    return PackRegistry(project, local_root=packs_root, load_configured_sources=False)


def make_manager(project: Path, packs_root: Optional[Path] = None) -> StarterPackManager:
    """Manager over ``packs_root`` (default: the built-in packs)."""
    registry = PackRegistry(project, local_root=packs_root, load_configured_sources=False)
    return StarterPackManager(project, registry=registry)
