"""``packs.*`` settings: extra sources and remote fetch behaviour."""
from __future__ import annotations

from functools import cached_property
from typing import Any, Dict, List

from ..base import BaseDomainConfig

DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_CACHE_TTL = 300.0


class PacksConfig(BaseDomainConfig):
    def _config_section(self) -> str:
        return "packs"

    @cached_property
    def sources(self) -> List[Dict[str, Any]]:
        """Source entries registered after the built-in ``local`` source; non-mappings are dropped."""
        return [dict(entry) for entry in self.setting("sources", default=[]) if isinstance(entry, dict)]

    @cached_property
    def http_timeout(self) -> float:
        return float(self.setting("http", "timeout", default=DEFAULT_HTTP_TIMEOUT))

    @cached_property
    def user_agent(self) -> str:
        from zcc import __version__

        return str(self.setting("http", "userAgent", default="") or f"zcc/{__version__}")

    @cached_property
    def cache_ttl(self) -> float:
        return float(self.setting("cache", "ttl", default=DEFAULT_CACHE_TTL))


__all__ = ["PacksConfig", "DEFAULT_HTTP_TIMEOUT", "DEFAULT_CACHE_TTL"]
