"""
zcc component find command.

SUMMARY: Fuzzy-search components by name
"""
from __future__ import annotations

import argparse

from zcc.cli import add_json_flag, add_repo_root_flag, error_code_for
from zcc.core.components import fuzzy

from ._shared import add_type_arg, core, formatter, kind_from

SUMMARY = "Fuzzy-search components by name"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("query", help="Name, prefix, acronym or fragment")
    add_type_arg(parser)
    parser.add_argument("--max-results", type=int, default=fuzzy.DEFAULT_MAX_RESULTS)
    parser.add_argument("--min-score", type=int, default=fuzzy.DEFAULT_MIN_SCORE)
    parser.add_argument("--case-sensitive", action="store_true")
    parser.add_argument("--no-metadata", action="store_true", help="Ignore descriptions and tags")
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        cc = core(args)
        kind = kind_from(args)
        matches = cc.find_components(
            args.query,
            kind,
            max_results=args.max_results,
            min_score=args.min_score,
            case_sensitive=args.case_sensitive,
            include_metadata=not args.no_metadata,
        )
        suggestions = [] if matches else cc.generate_suggestions(args.query, kind)

        if out.json_mode:
            out.json_output(
                {
                    "query": args.query,
                    "matches": [m.to_dict() for m in matches],
                    "suggestions": suggestions,
                }
            )
            return 0 if matches else 1

        if not matches:
            out.text(f"No components match '{args.query}'.")
            if suggestions:
                out.text(f"Did you mean: {', '.join(suggestions)}?")
            return 1
        for match in matches:
            shadowed = ""
            if match.conflicts_with:
                others = [r.source for r in match.conflicts_with if r.source != match.source]
                shadowed = f" (also in {', '.join(others)})"
            out.text(
                f"  {match.score:3d}  {match.component.type}/{match.name} [{match.source}]"
                f" {match.match_type}{shadowed}"
            )
        return 0
    except Exception as exc:
        out.error(exc, error_code=error_code_for(exc, "component_find_error"))
        return 1
