"""Text helpers."""
from __future__ import annotations

from .frontmatter import ParsedDocument, has_frontmatter, parse_frontmatter

__all__ = ["ParsedDocument", "has_frontmatter", "parse_frontmatter"]
