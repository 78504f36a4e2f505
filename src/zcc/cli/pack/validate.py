"""
zcc pack validate command.

SUMMARY: Validate a pack's manifest, components and dependencies

With ``--path`` the manifest file is validated on its own, without a source.
"""
from __future__ import annotations

import argparse
from pathlib import Path

from zcc.cli import add_json_flag, add_repo_root_flag, error_code_for
from zcc.core.exceptions import InvalidJsonError
from zcc.core.packs import PackValidator
from zcc.core.utils.io import read_json

from ._shared import formatter, manager

SUMMARY = "Validate a pack's manifest, components and dependencies"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", nargs="?", help="Available pack name")
    parser.add_argument("--path", help="Path to a manifest.json to check")
    parser.add_argument("--source", help="Load the pack from this source only")
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        if bool(args.name) == bool(args.path):
            raise ValueError("Give either a pack name or --path")
        if args.path:
            path = Path(args.path)
            try:
                data = read_json(path)
            except ValueError as exc:
                raise InvalidJsonError(f"Invalid JSON in {path}: {exc}", context={"path": str(path)}) from exc
            result = PackValidator().validate_manifest(data)
            target = str(path)
        else:
            result = manager(args).validate_pack(args.name, args.source)
            target = args.name

        if out.json_mode:
            out.json_output({"target": target, **result.to_dict()})
            return 0 if result.valid else 1

        out.issues(result.errors, result.warnings)
        out.text(f"{target}: {'valid' if result.valid else 'invalid'}")
        return 0 if result.valid else 1
    except Exception as exc:
        out.error(exc, error_code=error_code_for(exc, "pack_validate_error"))
        return 1
