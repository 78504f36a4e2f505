"""
zcc pack install command.

SUMMARY: Install a pack and its dependencies into the project

Conflicting files (owned by another pack, modified since install, or
present but untracked) block the install unless ``--force`` is given.
"""
from __future__ import annotations

import argparse

from zcc.cli import (
    add_dry_run_flag,
    add_force_flag,
    add_json_flag,
    add_repo_root_flag,
    error_code_for,
)

from ._shared import formatter, manager, print_result

SUMMARY = "Install a pack and its dependencies into the project"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", help="Pack name")
    parser.add_argument("--source", help="Install from this source only")
    parser.add_argument(
        "--skip-optional",
        action="store_true",
        help="Do not install components marked required: false",
    )
    add_force_flag(parser)
    add_dry_run_flag(parser)
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        mgr = manager(args)
        result = mgr.install_pack(
            args.name,
            force=args.force,
            skip_optional=args.skip_optional,
            dry_run=args.dry_run,
            source=args.source,
        )
        if out.json_mode:
            out.json_output({"pack": args.name, "dryRun": args.dry_run, **result.to_dict()})
            return 0 if result.success else 1

        title = "Would install" if args.dry_run else "Installed"
        print_result(out, result, installed_title=title)
        if not result.success:
            out.text(f"Installation of '{args.name}' failed.")
            return 1
        if args.dry_run:
            out.text(f"Dry run: nothing written for '{args.name}'.")
            return 0
        out.text(f"Pack '{args.name}' installed.")
        if result.post_install_message:
            out.text("")
            out.text(result.post_install_message)
        return 0
    except Exception as exc:
        out.error(exc, error_code=error_code_for(exc, "pack_install_error"))
        return 1
