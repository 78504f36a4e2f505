"""
zcc pack list command.

SUMMARY: List packs available from all sources
"""
from __future__ import annotations

import argparse

from zcc.cli import add_json_flag, add_repo_root_flag, error_code_for

from ._shared import formatter, manager, manifest_summary, print_manifest_rows

SUMMARY = "List packs available from all sources"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--category", help="Only packs in this category")
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        mgr = manager(args)
        rows = [
            manifest_summary(m, source)
            for m, source in mgr.registry.list_available_packs_with_source()
            if not args.category or m.effective_category == args.category
        ]
        installed = mgr.get_installed_packs()
        for row in rows:
            row["installed"] = row["name"] in installed

        if out.json_mode:
            out.json_output({"packs": rows, "count": len(rows)})
            return 0
        if not rows:
            out.text("No packs available.")
            return 0
        out.text(f"Available packs ({len(rows)}):")
        print_manifest_rows(out, rows)
        return 0
    except Exception as exc:
        out.error(exc, error_code=error_code_for(exc, "pack_list_error"))
        return 1
