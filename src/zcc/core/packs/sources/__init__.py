"""Pack sources: local directory, remote HTTP endpoint, GitHub repository."""
from __future__ import annotations

from .base import PackSource
from .cache import TTLCache
from .factory import create_source, parse_github_url, source_entry_from_url
from .github import GitHubPackSource
from .local import LocalPackSource, default_packs_root
from .remote import RemotePackSource

__all__ = [
    "PackSource",
    "TTLCache",
    "LocalPackSource",
    "RemotePackSource",
    "GitHubPackSource",
    "create_source",
    "default_packs_root",
    "parse_github_url",
    "source_entry_from_url",
]
