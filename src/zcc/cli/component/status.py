"""
zcc component status command.

SUMMARY: Show the builtin, global and project scopes
"""
from __future__ import annotations

import argparse

from zcc.cli import add_json_flag, add_repo_root_flag, error_code_for

from ._shared import core, formatter

SUMMARY = "Show the builtin, global and project scopes"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--init",
        action="store_true",
        help="Create the project scope directories and config if missing",
    )
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        cc = core(args)
        if args.init:
            cc.project.initialize()
        status = cc.get_status()

        if out.json_mode:
            out.json_output(status)
            return 0

        for scope in ("project", "global", "builtin"):
            info = status[scope]
            present = info.get("exists", info.get("available"))
            out.text(f"{scope}: {info['path']}" + ("" if present else " (missing)"))
            out.text_kv("Components", info["components"])
            if "hasConfig" in info:
                out.text_kv("Config", "yes" if info["hasConfig"] else "no")
        out.text(f"Total: {status['totalComponents']} ({status['uniqueComponents']} unique)")
        return 0
    except Exception as exc:
        out.error(exc, error_code=error_code_for(exc, "component_status_error"))
        return 1
