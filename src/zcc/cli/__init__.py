"""
zcc CLI package.

Provides the command-line interface with auto-discovery of commands
from subfolders (pack/, source/, component/).

Framework utilities for building CLI commands:
- _output: Output formatting (JSON/text modes)
- _args: Common argument registration helpers
- _utils: Shared CLI utilities
- _prompts: Interactive confirmation
"""
from ._output import OutputFormatter, format_json, print_error, print_success
from ._args import (
    add_dry_run_flag,
    add_force_flag,
    add_json_flag,
    add_repo_root_flag,
    add_standard_flags,
    add_verbose_flag,
    add_yes_flag,
)
from ._utils import error_code_for, get_repo_root
from ._prompts import confirm

__all__ = [
    "OutputFormatter",
    "format_json",
    "print_success",
    "print_error",
    "add_json_flag",
    "add_repo_root_flag",
    "add_force_flag",
    "add_dry_run_flag",
    "add_verbose_flag",
    "add_yes_flag",
    "add_standard_flags",
    "get_repo_root",
    "error_code_for",
    "confirm",
]
