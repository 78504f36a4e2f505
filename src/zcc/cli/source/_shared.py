from __future__ import annotations

import argparse

from zcc.cli import OutputFormatter, get_repo_root
from zcc.core.packs import PackRegistry


def formatter(args: argparse.Namespace) -> OutputFormatter:
    return OutputFormatter(json_mode=bool(getattr(args, "json", False)))


def registry(args: argparse.Namespace) -> PackRegistry:
    return PackRegistry(get_repo_root(args))
