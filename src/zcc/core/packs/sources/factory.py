"""Build pack sources from configuration entries and URLs."""
from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

from zcc.core.exceptions import ConfigurationError

from .base import PackSource
from .github import DEFAULT_BRANCH, GitHubPackSource
from .http import DEFAULT_TIMEOUT
from .local import LocalPackSource
from .remote import DEFAULT_TTL, RemotePackSource

GITHUB_HTTPS_PATTERN = re.compile(
    r"^https?://github\.com/(?P<owner>[^/\s]+)/(?P<repo>[^/\s]+?)(?:\.git)?/?$"
)
GITHUB_SSH_PATTERN = re.compile(r"^git@github\.com:(?P<owner>[^/\s]+)/(?P<repo>[^/\s]+?)(?:\.git)?$")
GITHUB_SHORTHAND_PATTERN = re.compile(r"^github:(?P<owner>[^/\s]+)/(?P<repo>[^/\s]+?)(?:\.git)?$")
HTTP_URL_PATTERN = re.compile(r"^https?://[^/\s]+(?:/\S*)?$")


def parse_github_url(url: str) -> Optional[Tuple[str, str]]:
    """Return ``(owner, repo)`` for a GitHub repository URL, else None.

    Accepts ``https://github.com/o/r(.git)``, ``git@github.com:o/r.git`` and
    ``github:o/r``.
    """
    for pattern in (GITHUB_HTTPS_PATTERN, GITHUB_SSH_PATTERN, GITHUB_SHORTHAND_PATTERN):
        m = pattern.match(url.strip())
        if m:
            return m.group("owner"), m.group("repo")
    return None


def _resolve_token(entry: Mapping[str, Any]) -> Optional[str]:
    token = entry.get("token")
    if token:
        return str(token)
    env_name = entry.get("tokenEnv")
    if env_name:
        return os.environ.get(str(env_name)) or None
    return None


def create_source(
    entry: Mapping[str, Any],
    *,
    timeout: float = DEFAULT_TIMEOUT,
    ttl: float = DEFAULT_TTL,
    user_agent: str = "zcc",
    base_dir: Optional[Path] = None,
) -> PackSource:
    """Create a source from a ``packs.sources`` entry.

    Raises:
        ConfigurationError: Unknown type or missing required keys
    """
    name = str(entry.get("name") or "").strip()
    kind = str(entry.get("type") or "").strip().lower()
    if not name:
        raise ConfigurationError("Pack source entry needs a 'name'", context={"entry": dict(entry)})

    entry_ttl = float(entry.get("ttl", ttl))
    if kind == "local":
        raw = entry.get("path")
        if not raw:
            raise ConfigurationError(f"Local source '{name}' needs a 'path'", context={"source": name})
        path = Path(str(raw)).expanduser()
        if not path.is_absolute() and base_dir is not None:
            path = base_dir / path
        return LocalPackSource(name, path)
    if kind == "http":
        url = entry.get("url")
        if not url or not HTTP_URL_PATTERN.match(str(url)):
            raise ConfigurationError(f"HTTP source '{name}' needs a valid 'url'", context={"source": name})
        return RemotePackSource(
            name,
            str(url),
            token=_resolve_token(entry),
            ttl=entry_ttl,
            timeout=timeout,
            user_agent=user_agent,
        )
    if kind == "github":
        owner, repo = entry.get("owner"), entry.get("repo")
        if not owner or not repo:
            raise ConfigurationError(
                f"GitHub source '{name}' needs 'owner' and 'repo'", context={"source": name}
            )
        return GitHubPackSource(
            name,
            str(owner),
            str(repo),
            branch=str(entry.get("branch") or DEFAULT_BRANCH),
            path=str(entry.get("path") or ""),
            token=_resolve_token(entry),
            ttl=entry_ttl,
            timeout=timeout,
            user_agent=user_agent,
        )
    raise ConfigurationError(
        f"Unknown pack source type '{kind}' for '{name}' (expected local, http or github)",
        context={"source": name, "type": kind},
    )


def source_entry_from_url(url: str, name: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    """Translate a URL into a ``packs.sources`` entry.

    GitHub URLs become ``github`` entries, other http(s) URLs ``http`` entries.
    """
    parsed = parse_github_url(url)
    if parsed:
        owner, repo = parsed
        entry: Dict[str, Any] = {"name": name or f"{owner}-{repo}", "type": "github", "owner": owner, "repo": repo}
    elif HTTP_URL_PATTERN.match(url.strip()):
        host = url.strip().split("://", 1)[1].split("/", 1)[0]
        entry = {"name": name or host, "type": "http", "url": url.strip()}
    else:
        raise ConfigurationError(f"Invalid pack source URL: {url}", context={"url": url})
    entry.update({k: v for k, v in extra.items() if v is not None})
    return entry


__all__ = ["create_source", "parse_github_url", "source_entry_from_url"]
