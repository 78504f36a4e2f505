"""
zcc CLI dispatcher.

Auto-discovers command domains (subfolders of ``zcc.cli``) and the command
modules inside them. A command module exposes:

- ``SUMMARY``: one-line help text
- ``register_args(parser)``: adds its arguments
- ``main(args) -> int``: runs the command and returns the exit code
"""
from __future__ import annotations

import argparse
import importlib
import logging
import sys
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from zcc.core.exceptions import ZccError

logger = logging.getLogger(__name__)

CLI_DIR = Path(__file__).parent


@lru_cache(maxsize=1)
def discover_domains() -> Dict[str, Path]:
    """Discover command domains (subfolders with command modules)."""
    domains: Dict[str, Path] = {}
    for item in CLI_DIR.iterdir():
        if not item.is_dir() or item.name.startswith("_"):
            continue
        has_commands = any(
            f.suffix == ".py" and not f.name.startswith("_") for f in item.iterdir()
        )
        if has_commands:
            domains[item.name] = item
    return domains


def discover_commands(domain: str) -> Dict[str, Dict[str, Any]]:
    """Discover the command modules of a domain.

    Returns:
        Mapping of command name to ``{module, summary, register_args, main}``
    """
    domain_path = discover_domains().get(domain)
    if domain_path is None:
        return {}

    commands: Dict[str, Dict[str, Any]] = {}
    for cmd_file in sorted(domain_path.glob("*.py")):
        if cmd_file.name.startswith("_"):
            continue
        cmd_name = cmd_file.stem
        try:
            module = importlib.import_module(f"zcc.cli.{domain}.{cmd_name}")
        except ImportError as exc:
            print(f"Warning: failed to load command {domain} {cmd_name}: {exc}", file=sys.stderr)
            continue
        commands[cmd_name] = {
            "module": module,
            "summary": getattr(module, "SUMMARY", ""),
            "register_args": getattr(module, "register_args", None),
            "main": getattr(module, "main", None),
        }
    return commands


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser with auto-discovered domains and commands."""
    parser = argparse.ArgumentParser(
        prog="zcc",
        description="zcc - install and manage AI-assistant component packs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {_get_version()}",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Write debug-level entries to the log file",
    )

    subparsers = parser.add_subparsers(
        dest="domain",
        title="domains",
        description="Available command domains",
        metavar="<domain>",
    )

    for domain_name in sorted(discover_domains()):
        domain_commands = discover_commands(domain_name)
        if not domain_commands:
            continue

        domain_parser = subparsers.add_parser(
            domain_name,
            help=f"{domain_name.title()} commands",
        )
        cmd_subparsers = domain_parser.add_subparsers(
            dest="command",
            title="commands",
            description=f"Available {domain_name} commands",
            metavar="<command>",
        )

        for cmd_name, cmd_info in sorted(domain_commands.items()):
            primary_name = cmd_name.replace("_", "-")
            aliases = [cmd_name] if primary_name != cmd_name else []
            cmd_parser = cmd_subparsers.add_parser(
                primary_name,
                aliases=aliases,
                help=cmd_info["summary"],
            )
            if cmd_info["register_args"]:
                cmd_info["register_args"](cmd_parser)
            if cmd_info["main"]:
                cmd_parser.set_defaults(_func=cmd_info["main"])

    return parser


def _get_version() -> str:
    from zcc import __version__

    return __version__


def _configure_logging(args: argparse.Namespace, *, json_mode: bool) -> None:
    """Route stdlib logging to the project log file per the ``logging`` config."""
    from zcc.cli._utils import get_repo_root
    from zcc.core.config import get_cached_config
    from zcc.core.stdlib_logging import configure_stdlib_logging, suppress_lastresort_in_json_mode
    from zcc.core.utils.paths import get_project_state_dir

    if json_mode:
        suppress_lastresort_in_json_mode()

    try:
        repo_root = get_repo_root(args)
        section = get_cached_config(repo_root).get("logging") or {}
        if not section.get("enabled", True):
            return
        level = "DEBUG" if getattr(args, "verbose", False) else str(section.get("level") or "INFO")
        log_file = Path(str(section.get("file") or "logs/zcc.log"))
        if not log_file.is_absolute():
            log_file = get_project_state_dir(repo_root) / log_file
        configure_stdlib_logging(log_path=log_file, level=level)
    except (ZccError, OSError) as exc:
        if not json_mode:
            print(f"Warning: logging disabled: {exc}", file=sys.stderr)


def main(argv: Optional[list] = None) -> int:
    """
    Main entry point for the zcc CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    if argv is None:
        argv = sys.argv[1:]

    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.domain:
        parser.print_help()
        return 0

    func: Optional[Callable[[argparse.Namespace], int]] = getattr(args, "_func", None)
    if func is None:
        domain_parser = parser._subparsers._group_actions[0].choices.get(args.domain)
        if domain_parser:
            domain_parser.print_help()
        return 1

    _configure_logging(args, json_mode=bool(getattr(args, "json", False)))
    logger.debug("Running zcc %s %s", args.domain, args.command)

    try:
        return func(args)
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
