"""
zcc pack uninstall command.

SUMMARY: Remove an installed pack, keeping files you modified
"""
from __future__ import annotations

import argparse

from zcc.cli import (
    add_dry_run_flag,
    add_json_flag,
    add_repo_root_flag,
    add_yes_flag,
    confirm,
    error_code_for,
)

from ._shared import formatter, manager, print_result

SUMMARY = "Remove an installed pack, keeping files you modified"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Pack name")
    add_yes_flag(parser)
    add_dry_run_flag(parser)
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        mgr = manager(args)
        if not args.dry_run and not args.yes and not out.json_mode:
            if not confirm(f"Uninstall pack '{args.name}'?"):
                out.text("Cancelled.")
                return 1

        result = mgr.uninstall_pack(args.name, dry_run=args.dry_run)
        if out.json_mode:
            payload = result.to_dict()
            payload["removed"] = payload.pop("installed")
            out.json_output({"pack": args.name, "dryRun": args.dry_run, **payload})
            return 0 if result.success else 1

        print_result(out, result, installed_title="Would remove" if args.dry_run else "Removed")
        if not result.success:
            out.text(f"Uninstall of '{args.name}' finished with errors.")
            return 1
        if not args.dry_run:
            out.text(f"Pack '{args.name}' uninstalled.")
        return 0
    except Exception as exc:
        out.error(exc, error_code=error_code_for(exc, "pack_uninstall_error"))
        return 1
