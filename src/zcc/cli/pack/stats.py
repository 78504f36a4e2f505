"""
zcc pack stats command.

SUMMARY: Show pack registry and file registry statistics
"""
from __future__ import annotations

import argparse

from zcc.cli import add_json_flag, add_repo_root_flag, error_code_for

from ._shared import formatter, manager

SUMMARY = "Show pack registry and file registry statistics"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        mgr = manager(args)
        registry_stats = mgr.get_registry_stats()
        file_stats = mgr.file_registry.get_stats()

        if out.json_mode:
            out.json_output({"registry": registry_stats, "files": file_stats})
            return 0

        out.text("Pack registry:")
        out.text_kv("Available packs", registry_stats["totalPacks"])
        out.text_kv("Sources", registry_stats["sourceCount"])
        out.text_kv("Installed packs", registry_stats["installedPacks"])
        for category, count in sorted(registry_stats["categoryCounts"].items()):
            out.text_kv(f"Category {category}", count)
        out.text("File registry:")
        out.text_kv("Tracked files", file_stats["totalFiles"])
        out.text_kv("Packs", file_stats["totalPacks"])
        out.text_kv("Modified files", file_stats["modifiedFiles"])
        return 0
    except Exception as exc:
        out.error(exc, error_code=error_code_for(exc, "pack_stats_error"))
        return 1
