"""
zcc source add command.

SUMMARY: Add a GitHub or HTTP pack source to the project configuration

Accepted URLs: ``https://github.com/<owner>/<repo>``, ``github:<owner>/<repo>``,
``git@github.com:<owner>/<repo>.git`` and any other ``http(s)://`` base URL
serving ``index.json`` and ``<pack>/manifest.json``. The entry is written to
``packs.sources`` in ``<project>/.zcc/config.yaml``; tokens are referenced by
environment variable name, never stored.
"""
from __future__ import annotations

import argparse

from zcc.cli import add_force_flag, add_json_flag, add_repo_root_flag, error_code_for, get_repo_root
from zcc.core.exceptions import ConfigurationError
from zcc.core.packs import ProjectConfigEditor
from zcc.core.packs.sources import source_entry_from_url

from ._shared import formatter, registry

SUMMARY = "Add a GitHub or HTTP pack source to the project configuration"


def register_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("url", help="GitHub repository or HTTP base URL")
    parser.add_argument("--name", help="Source name (default: owner-repo or host)")
    parser.add_argument("--branch", help="GitHub branch (default: main)")
    parser.add_argument("--path", dest="subpath", help="Directory inside the GitHub repository")
    parser.add_argument("--token-env", help="Environment variable holding an access token")
    add_force_flag(parser, help_text="Replace an existing source with the same name")
    add_json_flag(parser)
    add_repo_root_flag(parser)


def main(args: argparse.Namespace) -> int:
    out = formatter(args)
    try:
        entry = source_entry_from_url(args.url, args.name, tokenEnv=args.token_env)
        if entry["type"] == "github":
            if args.branch:
                entry["branch"] = args.branch
            if args.subpath:
                entry["path"] = args.subpath
        elif args.branch or args.subpath:
            raise ConfigurationError("--branch and --path only apply to GitHub sources")

        reg = registry(args)
        source = reg.create_source(entry)
        name = entry["name"]
        if name in reg.source_names and not args.force:
            raise ConfigurationError(
                f"Pack source '{name}' already exists (use --force to replace it)",
                context={"source": name},
            )

        editor = ProjectConfigEditor(get_repo_root(args))
        data = editor.load()
        packs = data.setdefault("packs", {})
        if not isinstance(packs, dict):
            raise ConfigurationError(f"'packs' in {editor.path} must be a mapping")
        sources = [s for s in packs.get("sources") or [] if isinstance(s, dict) and s.get("name") != name]
        sources.append(entry)
        packs["sources"] = sources
        editor.save(data)

        out.success(
            {"source": source.source_info(), "entry": entry, "config": str(editor.path)},
            f"Added pack source '{name}' ({source.source_type}: {source.location()})",
        )
        return 0
    except Exception as exc:
        out.error(exc, error_code=error_code_for(exc, "source_add_error"))
        return 1
