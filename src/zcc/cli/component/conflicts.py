"""
zcc component conflicts command.

SUMMARY: Show components defined in more than one scope
"""
from __future__ import annotations

import argparse

from zcc.cli import add_json_flag, add_repo_root_flag, error_code_for
from zcc.core.components.model import SCOPE_PRECEDENCE

from ._shared import add_type_arg, core, formatter, kind_from

SUMMARY = "Show components defined in more than one scope"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("name", nargs="?", help="Only this component name")
    add_type_arg(parser)
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        versions = core(args).get_component_conflicts(args.name, kind_from(args))

        grouped = {}
        for resolved in versions:
            grouped.setdefault(resolved.component.key, []).append(resolved)
        if args.name:
            grouped = {k: v for k, v in grouped.items() if len(v) > 1}

        if out.json_mode:
            out.json_output(
                {
                    "conflicts": [
                        {"key": key, "versions": [r.to_dict() for r in items]}
                        for key, items in sorted(grouped.items())
                    ]
                }
            )
            return 0

        if not grouped:
            out.text("No conflicts.")
            return 0
        for key, items in sorted(grouped.items()):
            items = sorted(items, key=lambda r: -SCOPE_PRECEDENCE[r.source])
            out.text(f"{key}: {items[0].source} wins")
            for resolved in items:
                out.text(f"  [{resolved.source}] {resolved.component.path}")
        return 0
    except Exception as exc:
        out.error(exc, error_code=error_code_for(exc, "component_conflicts_error"))
        return 1
