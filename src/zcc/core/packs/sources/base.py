"""Pack source interface.

A source gives read-only access to pack manifests and component content,
wherever the packs physically live. Every source owns its caching, auth and
error mapping; the registry only sees this interface.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, List

from ..model import PackStructure


class PackSource(ABC):
    """Abstract pack source.

    Subclasses set ``source_type`` and implement the capability methods.
    ``load_pack`` and ``get_component_content`` raise typed errors
    (``PackNotFoundError``, ``InvalidManifestError``, ``FetchError``);
    ``has_pack`` and ``has_component`` never raise.
    """

    source_type: str = "abstract"

    def __init__(self, name: str) -> None:
        self.name = name

    @abstractmethod
    def list_packs(self) -> List[str]:
        """Return the names of packs this source provides."""

    @abstractmethod
    def load_pack(self, pack_name: str) -> PackStructure:
        """Load and parse a pack's manifest."""

    def has_pack(self, pack_name: str) -> bool:
        try:
            self.load_pack(pack_name)
        except Exception:
            return False
        return True

    @abstractmethod
    def has_component(self, pack_name: str, component_type: str, component_name: str) -> bool:
        """Return True when the component file exists in this source."""

    @abstractmethod
    def get_component_path(self, pack_name: str, component_type: str, component_name: str) -> str:
        """Return a locator for the component (filesystem path or URL)."""

    @abstractmethod
    def get_component_content(self, pack_name: str, component_type: str, component_name: str) -> str:
        """Return the component file's text."""

    @abstractmethod
    def location(self) -> str:
        """Human-readable location (directory, base URL or repository)."""

    def source_info(self) -> Dict[str, Any]:
        return {"name": self.name, "type": self.source_type, "location": self.location()}

    def clear_cache(self) -> None:
        """Drop cached manifests and content. No-op for uncached sources."""

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r}, location={self.location()!r})"


__all__ = ["PackSource"]
