"""Remote HTTP pack source.

Endpoints, relative to ``base_url``::

    GET index.json                                  -> ["pack", ...] or {"packs": [...]}
    GET <pack>/manifest.json
    GET <pack>/components/<type>/<name>.<ext>
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

from zcc.core.exceptions import ComponentNotFoundError, InvalidJsonError

from ..model import PackManifest, PackStructure, component_filename
from .base import PackSource
from .cache import TTLCache
from .http import DEFAULT_TIMEOUT, build_headers, fetch_text, parse_json_text

logger = logging.getLogger(__name__)

DEFAULT_TTL = 300.0


class RemotePackSource(PackSource):
    """Packs served over HTTP, cached in memory per URL for ``ttl`` seconds."""

    source_type = "http"

    def __init__(
        self,
        name: str,
        base_url: str,
        *,
        token: Optional[str] = None,
        ttl: float = DEFAULT_TTL,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = "zcc",
        clock: Optional[Callable[[], float]] = None,
    ) -> None:
        super().__init__(name)
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self.user_agent = user_agent
        self._manifests: TTLCache[PackStructure] = TTLCache(ttl, clock=clock)
        self._content: TTLCache[str] = TTLCache(ttl, clock=clock)

    def location(self) -> str:
        return self.base_url

    def _headers(self) -> Dict[str, str]:
        extra = {"Accept": "application/json, text/plain, */*"}
        if self.token:
            extra["Authorization"] = f"Bearer {self.token}"
        return build_headers(user_agent=self.user_agent, extra=extra)

    def _url(self, *parts: str) -> str:
        return "/".join([self.base_url, *parts])

    def list_packs(self) -> List[str]:
        url = self._url("index.json")
        data = parse_json_text(
            fetch_text(url, headers=self._headers(), timeout=self.timeout), url=url
        )
        if isinstance(data, dict):
            data = data.get("packs", [])
        if not isinstance(data, list):
            raise InvalidJsonError(
                f"Pack index at {url} must be a list or an object with 'packs'",
                context={"url": url},
            )
        names: List[str] = []
        for item in data:
            # Index entries may be bare names or objects carrying a name.
            if isinstance(item, dict):
                item = item.get("name")
            if isinstance(item, str) and item:
                names.append(item)
        return names

    def load_pack(self, pack_name: str) -> PackStructure:
        url = self._url(pack_name, "manifest.json")
        cached = self._manifests.get(url)
        if cached is not None:
            return cached

        text = fetch_text(
            url,
            headers=self._headers(),
            timeout=self.timeout,
            not_found_message=f"Pack '{pack_name}' not found at {self.base_url}",
        )
        manifest = PackManifest.from_dict(parse_json_text(text, url=url), source=url)
        structure = PackStructure(
            manifest=manifest,
            path=self._url(pack_name),
            components_path=self._url(pack_name, "components"),
        )
        self._manifests.set(url, structure)
        return structure

    def get_component_path(self, pack_name: str, component_type: str, component_name: str) -> str:
        return self._url(
            pack_name, "components", component_type, component_filename(component_type, component_name)
        )

    def get_component_content(self, pack_name: str, component_type: str, component_name: str) -> str:
        url = self.get_component_path(pack_name, component_type, component_name)
        cached = self._content.get(url)
        if cached is not None:
            return cached
        text = fetch_text(
            url,
            headers=self._headers(),
            timeout=self.timeout,
            not_found=ComponentNotFoundError,
            not_found_message=f"Component {component_type}/{component_name} not found in pack '{pack_name}'",
        )
        self._content.set(url, text)
        return text

    def has_component(self, pack_name: str, component_type: str, component_name: str) -> bool:
        try:
            self.get_component_content(pack_name, component_type, component_name)
        except Exception as exc:
            logger.debug("Component check failed for %s/%s/%s: %s", pack_name, component_type, component_name, exc)
            return False
        return True

    def clear_cache(self) -> None:
        self._manifests.clear()
        self._content.clear()

    def clear_expired_cache(self) -> int:
        return self._manifests.clear_expired() + self._content.clear_expired()

    def get_cache_stats(self) -> Dict[str, Any]:
        return {"manifests": self._manifests.stats(), "content": self._content.stats()}


__all__ = ["RemotePackSource", "DEFAULT_TTL"]
