"""
zcc pack search command.

SUMMARY: Search packs by text, category, tags, compatibility or author

All filters combine with AND. ``--tag`` and ``--compatible-with`` may be
repeated; a pack must carry every value given.
"""
from __future__ import annotations

import argparse

from zcc.cli import add_json_flag, add_repo_root_flag, error_code_for

from ._shared import formatter, manager, manifest_summary, print_manifest_rows

SUMMARY = "Search packs by text, category, tags, compatibility or author"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("query", nargs="?", help="Text to look for in name, description or tags")
    parser.add_argument("--category", help="Pack category")
    parser.add_argument("--tag", dest="tags", action="append", default=[], help="Required tag")
    parser.add_argument(
        "--compatible-with",
        dest="compatible_with",
        action="append",
        default=[],
        help="Required project type (e.g. react)",
    )
    parser.add_argument("--author", help="Pack author")
    add_json_flag(parser)
    add_repo_root_flag(parser)


def _matches_text(manifest, query: str) -> bool:
    needle = query.lower()
    haystack = [manifest.name, manifest.description, *manifest.tags]
    return any(needle in value.lower() for value in haystack)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        mgr = manager(args)
        found = mgr.search_packs(
            category=args.category,
            tags=args.tags,
            compatible_with=args.compatible_with,
            author=args.author,
        )
        if args.query:
            found = [m for m in found if _matches_text(m, args.query)]
        rows = [manifest_summary(m) for m in found]

        if out.json_mode:
            out.json_output({"packs": rows, "count": len(rows)})
            return 0
        if not rows:
            out.text("No packs match.")
            return 0
        out.text(f"Matching packs ({len(rows)}):")
        print_manifest_rows(out, rows)
        return 0
    except Exception as exc:
        out.error(exc, error_code=error_code_for(exc, "pack_search_error"))
        return 1
