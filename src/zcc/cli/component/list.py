"""
zcc component list command.

SUMMARY: List resolved components and the scope each comes from
"""
from __future__ import annotations

import argparse

from zcc.cli import add_json_flag, add_repo_root_flag, error_code_for
from zcc.core.components import COMPONENT_DIRS

from ._shared import add_type_arg, core, formatter, kind_from

SUMMARY = "List resolved components and the scope each comes from"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_type_arg(parser, positional=True)
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        cc = core(args)
        kind = kind_from(args)
        if kind:
            grouped = {f"{kind}s": cc.get_components_by_type_with_source(kind)}
        else:
            grouped = cc.list_components_with_source()

        if out.json_mode:
            out.json_output({d: [r.to_dict() for r in items] for d, items in grouped.items()})
            return 0

        total = 0
        for dirname in COMPONENT_DIRS:
            items = grouped.get(dirname)
            if not items:
                continue
            total += len(items)
            out.text(f"{dirname} ({len(items)}):")
            for resolved in items:
                desc = resolved.component.description
                out.text(f"  {resolved.component.name} [{resolved.source}]" + (f" - {desc}" if desc else ""))
        if not total:
            out.text("No components found.")
        return 0
    except Exception as exc:
        out.error(exc, error_code=error_code_for(exc, "component_list_error"))
        return 1
