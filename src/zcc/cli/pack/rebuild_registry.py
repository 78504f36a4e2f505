"""
zcc pack rebuild-registry command.

SUMMARY: Rebuild the file registry from the installed-packs ledger
"""
from __future__ import annotations

import argparse

from zcc.cli import add_json_flag, add_repo_root_flag, error_code_for

from ._shared import formatter, manager

SUMMARY = "Rebuild the file registry from the installed-packs ledger"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        stats = manager(args).rebuild_file_registry()
        out.success(
            {"files": stats},
            f"File registry rebuilt: {stats['totalPacks']} packs, {stats['totalFiles']} files",
        )
        return 0
    except Exception as exc:
        out.error(exc, error_code=error_code_for(exc, "pack_rebuild_registry_error"))
        return 1
