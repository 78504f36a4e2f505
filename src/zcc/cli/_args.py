"""Common CLI argument registration utilities."""
from __future__ import annotations

import argparse


def add_json_flag(parser: argparse.ArgumentParser) -> None:
    """Add --json flag for JSON output mode."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )


def add_repo_root_flag(parser: argparse.ArgumentParser) -> None:
    """Add --repo-root flag for project root override."""
    parser.add_argument(
        "--repo-root",
        type=str,
        help="Override project root path",
    )


def add_force_flag(parser: argparse.ArgumentParser, help_text: str = "Overwrite conflicting files") -> None:
    parser.add_argument(
        "--force",
        "-f",
        action="store_true",
        help=help_text,
    )


def add_dry_run_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--dry-run",
        "-n",
        action="store_true",
        help="Show what would be done without making changes",
    )


def add_verbose_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging",
    )


def add_yes_flag(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--yes",
        "-y",
        action="store_true",
        help="Do not ask for confirmation",
    )


def add_standard_flags(parser: argparse.ArgumentParser) -> None:
    """Add standard flags that every command uses.

    Adds: --json, --repo-root

    Args:
        parser: ArgumentParser to add flags to
    """
    add_json_flag(parser)
    add_repo_root_flag(parser)


__all__ = [
    "add_json_flag",
    "add_repo_root_flag",
    "add_force_flag",
    "add_dry_run_flag",
    "add_verbose_flag",
    "add_yes_flag",
    "add_standard_flags",
]
