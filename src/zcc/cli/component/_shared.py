from __future__ import annotations

import argparse
from typing import Optional

from zcc.cli import OutputFormatter, get_repo_root
from zcc.core.components import COMPONENT_KINDS, ComponentCore, normalize_kind


def formatter(args: argparse.Namespace) -> OutputFormatter:
    return OutputFormatter(json_mode=bool(getattr(args, "json", False)))


def core(args: argparse.Namespace) -> ComponentCore:
    return ComponentCore(get_repo_root(args))


def add_type_arg(parser: argparse.ArgumentParser, *, positional: bool = False) -> None:
    help_text = f"Component type ({', '.join(COMPONENT_KINDS)}; plural accepted)"
    if positional:
        parser.add_argument("type", nargs="?", help=help_text)
    else:
        parser.add_argument("--type", "-t", help=help_text)


def kind_from(args: argparse.Namespace) -> Optional[str]:
    value = getattr(args, "type", None)
    return normalize_kind(value) if value else None
