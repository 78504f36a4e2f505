"""Interactive prompts."""
from __future__ import annotations


def confirm(message: str, *, default: bool = False) -> bool:
    """Ask a yes/no question on stdin.

    End of input (non-interactive runs) answers with ``default``.
    """
    suffix = "[Y/n]" if default else "[y/N]"
    try:
        response = input(f"{message} {suffix} ")
    except EOFError:
        response = ""
    answer = response.strip().lower()
    if not answer:
        return default
    return answer in ("y", "yes")


__all__ = ["confirm"]
