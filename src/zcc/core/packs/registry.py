"""Pack registry: aggregates named sources and resolves pack dependencies.

Source registration order is precedence: when two sources provide a pack of
the same name, the first-registered source wins. The built-in ``local``
source is always registered first.
"""
from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple

from zcc.core.exceptions import ConfigurationError, PackNotFoundError

from .model import DependencyResult, PackManifest, PackStructure
from .sources import LocalPackSource, PackSource, create_source, source_entry_from_url

logger = logging.getLogger(__name__)

DEFAULT_SOURCE_NAME = "local"

LoadedPack = Tuple[PackStructure, str, PackSource]


class PackRegistry:
    """Ordered collection of pack sources plus a loaded-pack cache."""

    def __init__(
        self,
        repo_root: Optional[Path] = None,
        *,
        packs_config: Any = None,
        local_root: Optional[Path] = None,
        load_configured_sources: bool = True,
    ) -> None:
        self.repo_root = repo_root
        self._sources: Dict[str, PackSource] = {}
        self._pack_cache: Dict[str, LoadedPack] = {}
        self._config = packs_config

        self.register_source(DEFAULT_SOURCE_NAME, LocalPackSource(DEFAULT_SOURCE_NAME, local_root))
        if load_configured_sources:
            self._register_configured_sources()

    # ---------- configuration ----------

    @property
    def packs_config(self):
        if self._config is None:
            from zcc.core.config.domains import PacksConfig

            self._config = PacksConfig(repo_root=self.repo_root)
        return self._config

    def _source_kwargs(self) -> Dict[str, Any]:
        cfg = self.packs_config
        return {
            "timeout": cfg.http_timeout,
            "ttl": cfg.cache_ttl,
            "user_agent": cfg.user_agent,
            "base_dir": self.repo_root,
        }

    def create_source(self, entry: Mapping[str, Any]) -> PackSource:
        """Build a source from a ``packs.sources`` entry using this project's HTTP settings."""
        return create_source(entry, **self._source_kwargs())

    def _register_configured_sources(self) -> None:
        for entry in self.packs_config.sources:
            try:
                source = self.create_source(entry)
            except ConfigurationError as exc:
                logger.warning("Skipping pack source %r: %s", entry.get("name"), exc)
                continue
            self.register_source(source.name, source)

    # ---------- sources ----------

    def register_source(self, name: str, source: PackSource) -> None:
        """Add (or replace in place) a named source."""
        if name in self._sources:
            logger.debug("Replacing pack source %s", name)
        self._sources[name] = source
        logger.debug("Registered pack source %s (%s)", name, source.source_type)

    def register_from_url(self, url: str, name: Optional[str] = None, **options: Any) -> PackSource:
        """Register a GitHub or HTTP source from a URL.

        Raises:
            ConfigurationError: If the URL is not a recognizable source URL
        """
        entry = source_entry_from_url(url, name, **options)
        source = self.create_source(entry)
        self.register_source(source.name, source)
        return source

    def list_sources(self) -> List[Dict[str, Any]]:
        return [src.source_info() for src in self._sources.values()]

    def get_source(self, name: str) -> Optional[PackSource]:
        return self._sources.get(name)

    @property
    def source_names(self) -> List[str]:
        return list(self._sources)

    # ---------- listing ----------

    def _collect_available(self) -> Dict[str, Tuple[PackManifest, str]]:
        """Packs keyed by the name their source lists them under (what ``load_pack`` takes)."""
        self.clear_expired_caches()
        available: Dict[str, Tuple[PackManifest, str]] = {}
        for source_name, source in self._sources.items():
            try:
                names = source.list_packs()
            except Exception as exc:
                logger.warning("Skipping pack source %s: %s", source_name, exc)
                continue
            for pack_name in names:
                if pack_name in available:
                    continue
                try:
                    structure = source.load_pack(pack_name)
                except Exception as exc:
                    logger.warning("Skipping pack %s from %s: %s", pack_name, source_name, exc)
                    continue
                available[pack_name] = (structure.manifest, source_name)
        return available

    def list_available_packs(self) -> List[PackManifest]:
        """Every pack from every source, first source winning on name clashes."""
        return [manifest for manifest, _ in self._collect_available().values()]

    def list_available_packs_with_source(self) -> List[Tuple[PackManifest, str]]:
        return list(self._collect_available().values())

    # ---------- loading ----------

    def _candidate_sources(self, preferred: Optional[str]) -> Iterable[Tuple[str, PackSource]]:
        if preferred:
            source = self._sources.get(preferred)
            if source is None:
                raise ConfigurationError(
                    f"Unknown pack source '{preferred}'", context={"source": preferred}
                )
            yield preferred, source
        for name, source in self._sources.items():
            if name != preferred:
                yield name, source

    def load_pack_with_source(self, pack_name: str, preferred_source: Optional[str] = None) -> LoadedPack:
        """Load a pack and report which source provided it.

        Raises:
            PackNotFoundError: If no source has the pack
            InvalidManifestError: If the only copy found is malformed
        """
        cached = self._pack_cache.get(pack_name)
        if cached is not None and (preferred_source is None or cached[1] == preferred_source):
            return cached

        last_error: Optional[Exception] = None
        for source_name, source in self._candidate_sources(preferred_source):
            try:
                structure = source.load_pack(pack_name)
            except PackNotFoundError:
                continue
            except Exception as exc:
                logger.warning("Failed to load pack %s from %s: %s", pack_name, source_name, exc)
                last_error = exc
                continue
            loaded = (structure, source_name, source)
            self._pack_cache[pack_name] = loaded
            logger.debug("Loaded pack %s from source %s", pack_name, source_name)
            return loaded

        if last_error is not None:
            raise last_error
        raise PackNotFoundError(
            f"Pack '{pack_name}' not found in any source",
            context={"pack": pack_name, "sources": self.source_names},
        )

    def load_pack(self, pack_name: str, preferred_source: Optional[str] = None) -> PackStructure:
        return self.load_pack_with_source(pack_name, preferred_source)[0]

    def has_pack(self, pack_name: str) -> bool:
        if pack_name in self._pack_cache:
            return True
        for source_name, source in self._sources.items():
            try:
                if source.has_pack(pack_name):
                    return True
            except Exception as exc:
                logger.debug("Source %s failed has_pack(%s): %s", source_name, pack_name, exc)
        return False

    # ---------- dependencies ----------

    def resolve_dependencies(self, pack_name: str) -> DependencyResult:
        """Dependency-first install order for everything ``pack_name`` needs.

        ``resolved`` excludes ``pack_name`` itself. A name met again while on
        the traversal stack is a cycle; a name no source has is missing and is
        not descended into.
        """
        resolved: List[str] = []
        missing: List[str] = []
        circular: List[str] = []
        on_stack: Set[str] = set()
        done: Set[str] = set()

        def visit(name: str, chain: List[str]) -> None:
            if name in on_stack:
                circular.append(name)
                logger.warning("Circular dependency detected: %s", " -> ".join([*chain, name]))
                return
            if name in done:
                return
            if not self.has_pack(name):
                missing.append(name)
                logger.warning("Missing dependency: %s", name)
                return

            on_stack.add(name)
            try:
                dependencies = self.load_pack(name).manifest.dependencies
            except Exception as exc:
                on_stack.discard(name)
                missing.append(name)
                logger.error("Error resolving dependencies for %s: %s", name, exc)
                return
            for dep in dependencies:
                visit(dep, [*chain, name])
            on_stack.discard(name)
            done.add(name)
            resolved.append(name)

        visit(pack_name, [])
        if pack_name in resolved:
            resolved.remove(pack_name)
        return DependencyResult(resolved=resolved, missing=missing, circular=circular)

    def validate_dependencies(self, pack_name: str) -> Dict[str, Any]:
        """Return ``{"valid": bool, "issues": [...]}`` for a pack's dependency graph."""
        try:
            result = self.resolve_dependencies(pack_name)
        except Exception as exc:
            return {"valid": False, "issues": [f"Failed to validate dependencies: {exc}"]}
        issues: List[str] = []
        if result.missing:
            issues.append(f"Missing dependencies: {', '.join(result.missing)}")
        if result.circular:
            issues.append(f"Circular dependencies: {', '.join(result.circular)}")
        return {"valid": not issues, "issues": issues}

    # ---------- search ----------

    def search_packs(
        self,
        *,
        category: Optional[str] = None,
        tags: Optional[Iterable[str]] = None,
        compatible_with: Optional[Iterable[str]] = None,
        author: Optional[str] = None,
    ) -> List[PackManifest]:
        """AND-filter available packs. ``tags``/``compatible_with`` are subset matches."""
        wanted_tags = set(tags or [])
        wanted_compat = set(compatible_with or [])

        def matches(m: PackManifest) -> bool:
            if category and m.category != category:
                return False
            if author and m.author != author:
                return False
            if wanted_tags and not wanted_tags.issubset(m.tags):
                return False
            if wanted_compat and not wanted_compat.issubset(m.compatible_with):
                return False
            return True

        return [m for m in self.list_available_packs() if matches(m)]

    def get_recommended_packs(self, project_type: str) -> List[PackManifest]:
        packs = [m for m in self.list_available_packs() if project_type in m.compatible_with]
        return sorted(packs, key=lambda m: m.name)

    # ---------- stats / caches ----------

    def get_stats(self) -> Dict[str, Any]:
        packs = self.list_available_packs()
        return {
            "totalPacks": len(packs),
            "sourceCount": len(self._sources),
            "categoryCounts": dict(Counter(m.effective_category for m in packs)),
            "authorCounts": dict(Counter(m.author for m in packs)),
        }

    def clear_cache(self) -> None:
        """Drop the loaded-pack cache. Source caches are untouched."""
        self._pack_cache.clear()

    def clear_expired_caches(self) -> int:
        dropped = 0
        for source in self._sources.values():
            clear_expired = getattr(source, "clear_expired_cache", None)
            if callable(clear_expired):
                dropped += clear_expired()
        return dropped

    def clear_all_caches(self) -> None:
        self.clear_cache()
        for source in self._sources.values():
            source.clear_cache()


__all__ = ["PackRegistry", "DEFAULT_SOURCE_NAME"]
