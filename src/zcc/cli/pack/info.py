"""
zcc pack info command.

SUMMARY: Show a pack's manifest, dependencies and install status
"""
from __future__ import annotations

import argparse

from zcc.cli import add_json_flag, add_repo_root_flag, error_code_for
from zcc.core.packs import COMPONENT_TYPES

from ._shared import formatter, manager, manifest_summary

SUMMARY = "Show a pack's manifest, dependencies and install status"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Pack name")
    parser.add_argument("--source", help="Load from this source only")
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        mgr = manager(args)
        pack, source_name, _ = mgr.registry.load_pack_with_source(args.name, args.source)
        manifest = pack.manifest
        deps = mgr.resolve_dependencies(args.name)
        status = mgr.get_pack_status(args.name)

        if out.json_mode:
            out.json_output(
                {
                    **manifest_summary(manifest, source_name),
                    "path": pack.path,
                    "manifest": manifest.to_dict(),
                    "dependencyResolution": deps._asdict(),
                    "status": status,
                }
            )
            return 0

        out.text(f"{manifest.name} {manifest.version}")
        out.text(f"  {manifest.description}")
        out.text_kv("Author", manifest.author)
        out.text_kv("Category", manifest.effective_category)
        out.text_kv("Source", f"{source_name} ({pack.path})")
        if manifest.tags:
            out.text_kv("Tags", ", ".join(manifest.tags))
        if manifest.compatible_with:
            out.text_kv("Compatible with", ", ".join(manifest.compatible_with))
        if manifest.dependencies:
            out.text_kv("Dependencies", ", ".join(manifest.dependencies))
        if deps.missing:
            out.text_kv("Missing dependencies", ", ".join(deps.missing))
        if deps.circular:
            out.text_kv("Circular dependencies", ", ".join(deps.circular))
        out.text("Components:")
        for ctype in COMPONENT_TYPES:
            for comp in manifest.components.of_type(ctype):
                flag = "" if comp.required else " (optional)"
                out.text(f"  {ctype}/{comp.name}{flag}")
        if status["installed"]:
            out.text(
                f"Installed: {status['version']} at {status['installedAt']}"
                f" ({len(status['files'])} files, {status['modifiedFiles']} modified)"
            )
        else:
            out.text("Installed: no")
        return 0
    except Exception as exc:
        out.error(exc, error_code=error_code_for(exc, "pack_info_error"))
        return 1
