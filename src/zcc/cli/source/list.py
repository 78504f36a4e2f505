"""
zcc source list command.

SUMMARY: List registered pack sources in lookup order
"""
from __future__ import annotations

import argparse

from zcc.cli import add_json_flag, add_repo_root_flag, error_code_for

from ._shared import formatter, registry

SUMMARY = "List registered pack sources in lookup order"


def register_args(parser: argparse.ArgumentParser) -> None:
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        sources = registry(args).list_sources()
        if out.json_mode:
            out.json_output({"sources": sources, "count": len(sources)})
            return 0
        out.text(f"Pack sources ({len(sources)}):")
        for position, info in enumerate(sources, start=1):
            out.text(f"  {position}. {info['name']} [{info['type']}] {info['location']}")
        return 0
    except Exception as exc:
        out.error(exc, error_code=error_code_for(exc, "source_list_error"))
        return 1
