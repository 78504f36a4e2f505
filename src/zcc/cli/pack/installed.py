"""
zcc pack installed command.

SUMMARY: List packs installed in the project
"""
from __future__ import annotations

import argparse

from zcc.cli import add_json_flag, add_repo_root_flag, error_code_for

from ._shared import formatter, manager

SUMMARY = "List packs installed in the project"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        mgr = manager(args)
        statuses = [mgr.get_pack_status(name) for name in sorted(mgr.get_installed_packs())]

        if out.json_mode:
            out.json_output({"packs": statuses, "count": len(statuses)})
            return 0
        if not statuses:
            out.text("No packs installed.")
            return 0
        out.text(f"Installed packs ({len(statuses)}):")
        for status in statuses:
            modified = f", {status['modifiedFiles']} modified" if status["modifiedFiles"] else ""
            out.text(
                f"  {status['name']} {status['version']}"
                f" ({len(status['files'])} files{modified}) installed {status['installedAt']}"
            )
        return 0
    except Exception as exc:
        out.error(exc, error_code=error_code_for(exc, "pack_installed_error"))
        return 1
