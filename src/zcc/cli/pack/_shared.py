from __future__ import annotations

import argparse
from typing import Any, Dict, Iterable, List, Mapping

from zcc.cli import OutputFormatter, get_repo_root
from zcc.core.packs import PackInstallationResult, PackManifest, StarterPackManager


def formatter(args: argparse.Namespace) -> OutputFormatter:
    return OutputFormatter(json_mode=bool(getattr(args, "json", False)))


def manager(args: argparse.Namespace) -> StarterPackManager:
    return StarterPackManager(get_repo_root(args))


def manifest_summary(manifest: PackManifest, source: str | None = None) -> Dict[str, Any]:
    payload: Dict[str, Any] = {
        "name": manifest.name,
        "version": manifest.version,
        "description": manifest.description,
        "author": manifest.author,
        "category": manifest.effective_category,
        "tags": list(manifest.tags),
        "dependencies": list(manifest.dependencies),
        "compatibleWith": list(manifest.compatible_with),
        "components": {
            ctype: [c.name for c in manifest.components.of_type(ctype)]
            for ctype in ("modes", "workflows", "agents", "hooks")
        },
    }
    if source is not None:
        payload["source"] = source
    return payload


def print_manifest_rows(out: OutputFormatter, rows: Iterable[Mapping[str, Any]]) -> None:
    for row in rows:
        count = sum(len(v) for v in row["components"].values())
        tail = f" [{row['source']}]" if row.get("source") else ""
        out.text(f"  {row['name']} {row['version']} ({row['category']}, {count} components){tail}")
        out.text(f"      {row['description']}")


def print_buckets(out: OutputFormatter, title: str, buckets: Mapping[str, List[str]]) -> None:
    out.section(title, (f"{ctype}/{name}" for ctype, names in buckets.items() for name in names))


def print_result(out: OutputFormatter, result: PackInstallationResult, *, installed_title: str) -> None:
    """Text rendering of an install/uninstall result."""
    print_buckets(out, installed_title, result.installed)
    print_buckets(out, "Skipped", result.skipped)
    out.issues(result.errors, result.warnings)
