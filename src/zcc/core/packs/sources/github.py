"""GitHub pack source, backed by the REST "contents" API.

Repository layout mirrors the local source, optionally under a path prefix::

    [<path>/]<pack>/manifest.json
    [<path>/]<pack>/components/<type>/<name>.<ext>
"""
from __future__ import annotations

import base64
import binascii
import logging
from typing import Any, Callable, Dict, List, Optional
from urllib.parse import quote

from zcc.core.exceptions import (
    ComponentNotFoundError,
    FetchError,
    InvalidJsonError,
    PackNotFoundError,
)

from ..model import PackManifest, PackStructure, component_filename
from .base import PackSource
from .cache import TTLCache
from .http import DEFAULT_TIMEOUT, build_headers, fetch_text, parse_json_text

logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com"
RAW_BASE = "https://raw.githubusercontent.com"
WEB_BASE = "https://github.com"
DEFAULT_BRANCH = "main"
DEFAULT_TTL = 300.0


class GitHubPackSource(PackSource):
    """Packs stored in a GitHub repository."""

    source_type = "github"

    def __init__(
        self,
        name: str,
        owner: str,
        repo: str,
        *,
        branch: str = DEFAULT_BRANCH,
        path: str = "",
        token: Optional[str] = None,
        ttl: float = DEFAULT_TTL,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = "zcc",
        api_base: str = API_BASE,
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        super().__init__(name)
        self.owner = owner
        self.repo = repo
        self.branch = branch or DEFAULT_BRANCH
        self.path = path.strip("/")
        self.token = token
        self.timeout = timeout
        self.user_agent = user_agent
        self.api_base = api_base.rstrip("/")
        self._manifests: TTLCache[PackStructure] = TTLCache(ttl, clock=clock)
        self._content: TTLCache[Any] = TTLCache(ttl, clock=clock)

    def location(self) -> str:
        loc = f"{self.owner}/{self.repo}@{self.branch}"
        return f"{loc}:{self.path}" if self.path else loc

    # ---------- URL helpers ----------

    def _repo_path(self, *parts: str) -> str:
        return "/".join(p for p in (self.path, *parts) if p)

    def _contents_url(self, repo_path: str) -> str:
        return (
            f"{self.api_base}/repos/{self.owner}/{self.repo}/contents/"
            f"{quote(repo_path)}?ref={quote(self.branch)}"
        )

    def _raw_url(self, repo_path: str) -> str:
        return f"{RAW_BASE}/{self.owner}/{self.repo}/{self.branch}/{repo_path}"

    def _tree_url(self, repo_path: str) -> str:
        return f"{WEB_BASE}/{self.owner}/{self.repo}/tree/{self.branch}/{repo_path}"

    def _headers(self) -> Dict[str, str]:
        extra = {"Accept": "application/vnd.github.v3+json"}
        if self.token:
            extra["Authorization"] = f"token {self.token}"
        return build_headers(user_agent=self.user_agent, extra=extra)

    # ---------- API access ----------

    def _get_contents(self, repo_path: str, **kwargs: Any) -> Any:
        """Fetch and cache one contents API response (file object or directory list)."""
        url = self._contents_url(repo_path)
        cached = self._content.get(url)
        if cached is not None:
            return cached
        text = fetch_text(url, headers=self._headers(), timeout=self.timeout, **kwargs)
        data = parse_json_text(text, url=url)
        self._content.set(url, data)
        return data

    def _decode_file(self, data: Any, repo_path: str) -> str:
        if not isinstance(data, dict) or data.get("type", "file") != "file":
            raise FetchError(
                f"Expected a file at {self.location()}/{repo_path}",
                url=self._contents_url(repo_path),
            )
        encoded = data.get("content") or ""
        if data.get("encoding", "base64") != "base64":
            return str(encoded)
        try:
            return base64.b64decode(encoded).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise FetchError(
                f"Cannot decode {repo_path} from {self.location()}: {exc}",
                url=self._contents_url(repo_path),
            ) from exc

    def _read_file(self, repo_path: str, **kwargs: Any) -> str:
        return self._decode_file(self._get_contents(repo_path, **kwargs), repo_path)

    # ---------- PackSource ----------

    def list_packs(self) -> List[str]:
        listing = self._get_contents(self.path)
        if not isinstance(listing, list):
            raise InvalidJsonError(
                f"Expected a directory listing at {self.location()}",
                context={"url": self._contents_url(self.path)},
            )
        names: List[str] = []
        for entry in listing:
            if not isinstance(entry, dict) or entry.get("type") != "dir":
                continue
            name = entry.get("name")
            if isinstance(name, str) and self.has_pack(name):
                names.append(name)
        return sorted(names)

    def load_pack(self, pack_name: str) -> PackStructure:
        manifest_path = self._repo_path(pack_name, "manifest.json")
        cached = self._manifests.get(manifest_path)
        if cached is not None:
            return cached

        text = self._read_file(
            manifest_path,
            not_found_message=f"Pack '{pack_name}' not found in {self.location()}",
        )
        url = self._contents_url(manifest_path)
        manifest = PackManifest.from_dict(parse_json_text(text, url=url), source=url)
        structure = PackStructure(
            manifest=manifest,
            path=self._tree_url(self._repo_path(pack_name)),
            components_path=self._tree_url(self._repo_path(pack_name, "components")),
        )
        self._manifests.set(manifest_path, structure)
        return structure

    def has_pack(self, pack_name: str) -> bool:
        try:
            self.load_pack(pack_name)
        except PackNotFoundError:
            return False
        except Exception as exc:
            logger.debug("GitHub pack check failed for %s: %s", pack_name, exc)
            return False
        return True

    def _component_repo_path(self, pack_name: str, component_type: str, component_name: str) -> str:
        return self._repo_path(
            pack_name, "components", component_type, component_filename(component_type, component_name)
        )

    def get_component_path(self, pack_name: str, component_type: str, component_name: str) -> str:
        return self._raw_url(self._component_repo_path(pack_name, component_type, component_name))

    def get_component_content(self, pack_name: str, component_type: str, component_name: str) -> str:
        return self._read_file(
            self._component_repo_path(pack_name, component_type, component_name),
            not_found=ComponentNotFoundError,
            not_found_message=f"Component {component_type}/{component_name} not found in pack '{pack_name}'",
        )

    def has_component(self, pack_name: str, component_type: str, component_name: str) -> bool:
        try:
            self.get_component_content(pack_name, component_type, component_name)
        except Exception as exc:
            logger.debug("Component check failed for %s/%s/%s: %s", pack_name, component_type, component_name, exc)
            return False
        return True

    def source_info(self) -> Dict[str, Any]:
        info = super().source_info()
        info.update({"owner": self.owner, "repo": self.repo, "branch": self.branch})
        if self.path:
            info["path"] = self.path
        return info

    def clear_cache(self) -> None:
        self._manifests.clear()
        self._content.clear()

    def clear_expired_cache(self) -> int:
        return self._manifests.clear_expired() + self._content.clear_expired()

    def get_cache_stats(self) -> Dict[str, Any]:
        return {"manifests": self._manifests.stats(), "content": self._content.stats()}


__all__ = ["GitHubPackSource", "API_BASE", "RAW_BASE", "DEFAULT_BRANCH"]
