"""Output helpers for zcc commands.

Commands print through ``OutputFormatter``: in ``--json`` mode stdout carries
exactly one JSON document and every human-oriented line is suppressed; errors
always go to stderr.
"""
from __future__ import annotations

import json
import sys
from typing import Any, Dict, Iterable, Optional

CHECK = "✓"
CROSS = "✗"


def format_json(data: Any, indent: int = 2) -> str:
    return json.dumps(data, indent=indent, default=str)


class OutputFormatter:
    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def success(self, data: Dict[str, Any], message: str, *, status: str = "success") -> None:
        """Emit ``data`` with a ``status`` key in JSON mode, ``message`` otherwise."""
        if self.json_mode:
            self.json_output({"status": status, **data})
        else:
            print(message)

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Report ``error`` on stderr.

        The JSON payload is ``{"error": code, "message": ..., "context"?: ...}``
        where ``context`` comes from ``ZccError.context`` when present.
        """
        msg = message or str(error)
        if not self.json_mode:
            print(f"Error: {msg}", file=sys.stderr)
            return
        payload: Dict[str, Any] = {"error": error_code, "message": msg}
        context = getattr(error, "context", None)
        if context:
            payload["context"] = context
        print(format_json(payload, self.indent), file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(format_json(data, self.indent))

    def text(self, message: str) -> None:
        if not self.json_mode:
            print(message)

    def text_kv(self, key: str, value: Any, prefix: str = "  ") -> None:
        self.text(f"{prefix}{key}: {value}")

    def section(self, title: str, lines: Iterable[str], *, indent: str = "  ") -> None:
        """Print ``title:`` followed by indented ``lines``; nothing when empty."""
        items = list(lines)
        if not items:
            return
        self.text(f"{title}:")
        for line in items:
            self.text(f"{indent}{line}")

    def issues(self, errors: Iterable[str], warnings: Iterable[str]) -> None:
        for error in errors:
            self.text(f"  {CROSS} {error}")
        for warning in warnings:
            self.text(f"  ! {warning}")

    def warning(self, message: str) -> None:
        if not self.json_mode:
            print(f"Warning: {message}", file=sys.stderr)


def print_success(message: str) -> None:
    print(f"{CHECK} {message}")


def print_error(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


__all__ = [
    "OutputFormatter",
    "format_json",
    "print_success",
    "print_error",
]
