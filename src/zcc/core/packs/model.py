"""Pack data model.

Manifests are parsed once into frozen dataclasses and keep the original
mapping (``raw``) so snapshots and schema validation see exactly what the
source provided.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, NamedTuple, Optional, Tuple

from zcc.core.exceptions import InvalidManifestError

# Manifest component buckets, in install order.
COMPONENT_TYPES: Tuple[str, ...] = ("modes", "workflows", "agents", "hooks")

COMPONENT_EXTENSIONS: Dict[str, str] = {
    "modes": ".md",
    "workflows": ".md",
    "agents": ".md",
    "hooks": ".json",
}

REQUIRED_MANIFEST_FIELDS: Tuple[str, ...] = ("name", "version", "description")

DEFAULT_CATEGORY = "general"


def component_extension(component_type: str) -> str:
    """Return the file extension for a component bucket (``.md`` or ``.json``)."""
    return COMPONENT_EXTENSIONS.get(component_type, ".md")


def component_filename(component_type: str, name: str) -> str:
    return f"{name}{component_extension(component_type)}"


def _str_list(value: Any) -> List[str]:
    if not isinstance(value, (list, tuple)):
        return []
    return [str(v) for v in value if v is not None]


@dataclass(frozen=True)
class PackComponent:
    name: str
    required: bool = False
    description: Optional[str] = None
    custom_config: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PackComponent":
        return cls(
            name=str(data.get("name", "")),
            required=bool(data.get("required", False)),
            description=data.get("description"),
            custom_config=dict(data.get("customConfig") or {}),
        )


@dataclass(frozen=True)
class PackComponents:
    modes: Tuple[PackComponent, ...] = ()
    workflows: Tuple[PackComponent, ...] = ()
    agents: Tuple[PackComponent, ...] = ()
    hooks: Tuple[PackComponent, ...] = ()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PackComponents":
        buckets = {}
        for ctype in COMPONENT_TYPES:
            items = data.get(ctype) or []
            buckets[ctype] = tuple(
                PackComponent.from_dict(item) for item in items if isinstance(item, Mapping)
            )
        return cls(**buckets)

    def of_type(self, component_type: str) -> Tuple[PackComponent, ...]:
        return getattr(self, component_type, ())

    def iter_all(self):
        """Yield ``(component_type, component)`` in install order."""
        for ctype in COMPONENT_TYPES:
            for component in self.of_type(ctype):
                yield ctype, component

    def count(self) -> int:
        return sum(len(self.of_type(ctype)) for ctype in COMPONENT_TYPES)


@dataclass(frozen=True)
class PackConfiguration:
    default_mode: Optional[str] = None
    custom_commands: Dict[str, Dict[str, str]] = field(default_factory=dict)
    project_settings: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PackConfiguration":
        return cls(
            default_mode=data.get("defaultMode"),
            custom_commands=dict(data.get("customCommands") or {}),
            project_settings=dict(data.get("projectSettings") or {}),
        )

    def as_settings(self) -> Dict[str, Any]:
        """Return the configuration keys this block writes into project config."""
        settings: Dict[str, Any] = dict(self.project_settings)
        if self.default_mode:
            settings["defaultMode"] = self.default_mode
        if self.custom_commands:
            settings["customCommands"] = dict(self.custom_commands)
        return settings


@dataclass(frozen=True)
class PackManifest:
    """A parsed ``manifest.json``; immutable once loaded."""

    name: str
    version: str
    description: str
    author: str
    components: PackComponents
    category: Optional[str] = None
    tags: Tuple[str, ...] = ()
    dependencies: Tuple[str, ...] = ()
    compatible_with: Tuple[str, ...] = ()
    configuration: Optional[PackConfiguration] = None
    post_install_message: Optional[str] = None
    post_install_commands: Tuple[str, ...] = ()
    hooks: Tuple[Dict[str, Any], ...] = ()
    raw: Dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @classmethod
    def from_dict(cls, data: Any, *, source: str = "") -> "PackManifest":
        """Build a manifest, requiring ``name``, ``version`` and ``description``.

        Raises:
            InvalidManifestError: If ``data`` is not a mapping or lacks required fields
        """
        if not isinstance(data, Mapping):
            raise InvalidManifestError(
                "Manifest must be a JSON object", context={"source": source}
            )
        missing = [k for k in REQUIRED_MANIFEST_FIELDS if not str(data.get(k) or "").strip()]
        if missing:
            raise InvalidManifestError(
                f"Invalid manifest: missing required fields: {', '.join(missing)}",
                context={"source": source, "missing": missing},
            )

        configuration = data.get("configuration")
        post_install = data.get("postInstall") or {}
        return cls(
            name=str(data["name"]),
            version=str(data["version"]),
            description=str(data["description"]),
            author=str(data.get("author") or ""),
            components=PackComponents.from_dict(data.get("components") or {}),
            category=data.get("category"),
            tags=tuple(_str_list(data.get("tags"))),
            dependencies=tuple(_str_list(data.get("dependencies"))),
            compatible_with=tuple(_str_list(data.get("compatibleWith"))),
            configuration=(
                PackConfiguration.from_dict(configuration)
                if isinstance(configuration, Mapping)
                else None
            ),
            post_install_message=post_install.get("message") if isinstance(post_install, Mapping) else None,
            post_install_commands=tuple(
                _str_list(post_install.get("commands")) if isinstance(post_install, Mapping) else []
            ),
            hooks=tuple(dict(h) for h in (data.get("hooks") or []) if isinstance(h, Mapping)),
            raw=dict(data),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Return the manifest as its original JSON mapping."""
        return dict(self.raw)

    @property
    def effective_category(self) -> str:
        return self.category or DEFAULT_CATEGORY


@dataclass(frozen=True)
class PackStructure:
    """A loaded manifest plus where it came from.

    ``path`` and ``components_path`` are filesystem paths for local packs,
    URLs for remote packs and tree URLs for GitHub packs.
    """

    manifest: PackManifest
    path: str
    components_path: str

    @property
    def name(self) -> str:
        return self.manifest.name


class DependencyResult(NamedTuple):
    resolved: List[str]
    missing: List[str]
    circular: List[str]

    @property
    def ok(self) -> bool:
        return not self.missing and not self.circular


@dataclass
class PackValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"valid": self.valid, "errors": list(self.errors), "warnings": list(self.warnings)}


def empty_buckets() -> Dict[str, List[str]]:
    return {ctype: [] for ctype in COMPONENT_TYPES}


@dataclass
class PackInstallationResult:
    """Outcome of an install or uninstall.

    For uninstall, ``installed`` lists what was removed and ``skipped`` what
    was preserved because the user modified it.
    """

    success: bool
    installed: Dict[str, List[str]] = field(default_factory=empty_buckets)
    skipped: Dict[str, List[str]] = field(default_factory=empty_buckets)
    errors: List[str] = field(default_factory=list)
    conflicts: List[Dict[str, Optional[str]]] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    post_install_message: Optional[str] = None

    @property
    def removed(self) -> Dict[str, List[str]]:
        return self.installed

    @classmethod
    def failure(cls, *errors: str, conflicts: Optional[List[Dict[str, Optional[str]]]] = None) -> "PackInstallationResult":
        return cls(success=False, errors=list(errors), conflicts=list(conflicts or []))

    def merge(self, other: "PackInstallationResult") -> None:
        """Fold another result's names, errors and warnings into this one."""
        for ctype in COMPONENT_TYPES:
            self.installed[ctype].extend(other.installed.get(ctype, []))
            self.skipped[ctype].extend(other.skipped.get(ctype, []))
        self.errors.extend(other.errors)
        self.conflicts.extend(other.conflicts)
        self.warnings.extend(other.warnings)

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": self.success,
            "installed": {k: list(v) for k, v in self.installed.items()},
            "skipped": {k: list(v) for k, v in self.skipped.items()},
            "errors": list(self.errors),
            "conflicts": [dict(c) for c in self.conflicts],
            "warnings": list(self.warnings),
        }
        if self.post_install_message:
            payload["postInstallMessage"] = self.post_install_message
        return payload


__all__ = [
    "COMPONENT_TYPES",
    "COMPONENT_EXTENSIONS",
    "DEFAULT_CATEGORY",
    "REQUIRED_MANIFEST_FIELDS",
    "component_extension",
    "component_filename",
    "PackComponent",
    "PackComponents",
    "PackConfiguration",
    "PackManifest",
    "PackStructure",
    "DependencyResult",
    "PackValidationResult",
    "PackInstallationResult",
    "empty_buckets",
]
