"""YAML frontmatter parsing for component files.

Modes, workflows and agents are markdown documents whose metadata lives in
a leading block delimited by '---' markers:

    ---
    name: architect
    description: System design and high-level planning
    tags: [design, planning]
    ---

    # Architect Mode
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Dict

import yaml

FRONTMATTER_PATTERN = re.compile(
    r"^---\s*\n(.*?)\n---\s*\n?",
    re.DOTALL,
)


@dataclass
class ParsedDocument:
    """Result of parsing a document with YAML frontmatter."""

    frontmatter: Dict[str, Any]
    content: str
    raw_frontmatter: str


def parse_frontmatter(content: str) -> ParsedDocument:
    """Split ``content`` into frontmatter mapping and body.

    Documents without frontmatter yield an empty mapping and the full text.

    Raises:
        ValueError: If the frontmatter is not valid YAML or not a mapping
    """
    match = FRONTMATTER_PATTERN.match(content)
    if not match:
        return ParsedDocument(frontmatter={}, content=content, raw_frontmatter="")

    raw_yaml = match.group(1)
    try:
        parsed = yaml.safe_load(raw_yaml)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in frontmatter: {e}") from e
    if parsed is None:
        parsed = {}
    if not isinstance(parsed, dict):
        raise ValueError(f"Frontmatter must be a YAML mapping, got {type(parsed).__name__}")

    return ParsedDocument(
        frontmatter=parsed,
        content=content[match.end():],
        raw_frontmatter=raw_yaml,
    )


def has_frontmatter(content: str) -> bool:
    return bool(FRONTMATTER_PATTERN.match(content))


__all__ = ["FRONTMATTER_PATTERN", "ParsedDocument", "parse_frontmatter", "has_frontmatter"]
