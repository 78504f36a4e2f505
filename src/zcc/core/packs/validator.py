"""Pack validation: JSON Schema plus security and consistency rules.

Manifest checks run on the raw manifest mapping. Structure checks also look
at the component files a source provides; file-level checks (size, extension,
content) only apply to sources that keep files on disk.
"""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, List, Mapping, Optional, Pattern, Tuple

from jsonschema import Draft202012Validator

from zcc.data import SCHEMAS_DIR, read_json

from .model import COMPONENT_TYPES, PackStructure, PackValidationResult
from .sources import LocalPackSource, PackSource

logger = logging.getLogger(__name__)

SCHEMA_FILENAME = "pack-manifest.schema.json"

NAME_PATTERN = re.compile(r"^[a-z0-9-]+$")

SUSPICIOUS_COMMAND_PATTERNS: Tuple[Pattern[str], ...] = tuple(
    re.compile(p)
    for p in (
        r"rm\s+-rf\s*/",
        r"sudo\s+",
        r"chmod\s+777",
        r"curl\s+.*\|\s*sh",
        r"wget\s+.*\|\s*sh",
        r"eval\s+",
        r"exec\s+",
        r"system\s*\(",
        r"`.*`",
        r"\$\(.*\)",
        r">/dev/null.*2>&1.*&",
        r"nohup\s+",
        r"&\s*$",
    )
)


@dataclass(frozen=True)
class ValidationRules:
    max_name_length: int = 50
    max_description_length: int = 500
    max_components_per_type: int = 20
    allowed_extensions: FrozenSet[str] = frozenset({".md", ".json", ".sh"})
    forbidden_name_patterns: Tuple[str, ...] = ("..", "~", "/")
    max_file_size: int = 1024 * 1024


def is_command_suspicious(command: str) -> bool:
    return any(p.search(command) for p in SUSPICIOUS_COMMAND_PATTERNS)


def _load_schema() -> Dict[str, Any]:
    return read_json(SCHEMAS_DIR, SCHEMA_FILENAME)


@dataclass
class _Findings:
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    def result(self) -> PackValidationResult:
        return PackValidationResult(valid=not self.errors, errors=self.errors, warnings=self.warnings)


class PackValidator:
    """Validate manifests and pack structures."""

    def __init__(self, rules: Optional[ValidationRules] = None, schema: Optional[Dict[str, Any]] = None) -> None:
        self.rules = rules or ValidationRules()
        self._schema = schema
        self._validator: Optional[Draft202012Validator] = None

    @property
    def validator(self) -> Draft202012Validator:
        if self._validator is None:
            schema = self._schema if self._schema is not None else _load_schema()
            self._validator = Draft202012Validator(schema)
        return self._validator

    # ---------- manifest ----------

    def validate_manifest(self, manifest: Mapping[str, Any]) -> PackValidationResult:
        found = _Findings()
        self._check_schema(manifest, found)
        if isinstance(manifest, Mapping):
            self._check_security(manifest, found)
            self._check_business_rules(manifest, found)
        return found.result()

    def _check_schema(self, manifest: Any, found: _Findings) -> None:
        for err in sorted(self.validator.iter_errors(manifest), key=lambda e: list(e.path)):
            path = "/".join(str(p) for p in err.path) or "<root>"
            found.errors.append(f"{path} {err.message}")

    def _check_security(self, manifest: Mapping[str, Any], found: _Findings) -> None:
        rules = self.rules
        name = str(manifest.get("name") or "")
        if len(name) > rules.max_name_length:
            found.errors.append(f"Pack name too long (max {rules.max_name_length} characters)")
        if not NAME_PATTERN.match(name):
            found.errors.append("Pack name must contain only lowercase letters, numbers, and hyphens")
        for pattern in rules.forbidden_name_patterns:
            if pattern in name:
                found.errors.append(f"Pack name contains forbidden pattern: {pattern}")

        description = str(manifest.get("description") or "")
        if len(description) > rules.max_description_length:
            found.errors.append(
                f"Description too long (max {rules.max_description_length} characters)"
            )

        post_install = manifest.get("postInstall") or {}
        if isinstance(post_install, Mapping):
            for command in post_install.get("commands") or []:
                if isinstance(command, str) and is_command_suspicious(command):
                    found.errors.append(f"Suspicious post-install command detected: {command}")

        configuration = manifest.get("configuration") or {}
        commands = configuration.get("customCommands") if isinstance(configuration, Mapping) else None
        if isinstance(commands, Mapping):
            for cmd_name, cmd in commands.items():
                template = cmd.get("template") if isinstance(cmd, Mapping) else None
                if isinstance(template, str) and is_command_suspicious(template):
                    found.warnings.append(
                        f"Custom command '{cmd_name}' template may be suspicious: {template}"
                    )

    def _check_business_rules(self, manifest: Mapping[str, Any], found: _Findings) -> None:
        components = manifest.get("components") or {}
        if not isinstance(components, Mapping):
            return
        limit = self.rules.max_components_per_type

        seen: set = set()
        for ctype in COMPONENT_TYPES:
            items = components.get(ctype) or []
            if not isinstance(items, list):
                continue
            if len(items) > limit:
                found.errors.append(f"Too many {ctype} (max {limit})")
            for item in items:
                name = item.get("name") if isinstance(item, Mapping) else None
                if not name:
                    continue
                if name in seen:
                    found.errors.append(f"Duplicate component name: {name}")
                seen.add(name)

        modes = [m for m in components.get("modes") or [] if isinstance(m, Mapping)]
        configuration = manifest.get("configuration") or {}
        default_mode = configuration.get("defaultMode") if isinstance(configuration, Mapping) else None
        if default_mode and not any(m.get("name") == default_mode for m in modes):
            found.errors.append(f"Default mode '{default_mode}' not found in pack modes")
        if modes and not any(m.get("required") is True for m in modes):
            found.warnings.append("Pack has modes but none are marked as required")

    # ---------- structure ----------

    def validate_pack_structure(self, pack: PackStructure, source: PackSource) -> PackValidationResult:
        """Validate the manifest, then each declared component in ``source``.

        Component checks only run when the manifest itself is valid.
        """
        manifest_result = self.validate_manifest(pack.manifest.to_dict())
        if not manifest_result.valid:
            return manifest_result

        found = _Findings(list(manifest_result.errors), list(manifest_result.warnings))
        on_disk = isinstance(source, LocalPackSource)
        pack_name = pack.manifest.name
        for ctype, component in pack.manifest.components.iter_all():
            try:
                if not source.has_component(pack_name, ctype, component.name):
                    found.errors.append(
                        f"Component '{component.name}' of type '{ctype}' not found in pack"
                    )
                    continue
                if on_disk:
                    self._check_component_file(
                        Path(source.get_component_path(pack_name, ctype, component.name)), found
                    )
            except Exception as exc:
                found.errors.append(f"Error validating component '{component.name}': {exc}")

        if on_disk:
            self._check_file_structure(pack, found)
        return found.result()

    def _check_component_file(self, path: Path, found: _Findings) -> None:
        try:
            size = path.stat().st_size
            if size > self.rules.max_file_size:
                found.errors.append(f"Component file too large: {path.name} ({size} bytes)")
            ext = path.suffix
            if ext not in self.rules.allowed_extensions:
                found.errors.append(f"Forbidden file extension: {ext} in {path.name}")
            if ext == ".md":
                content = path.read_text(encoding="utf-8")
                if "<script>" in content or "javascript:" in content:
                    found.errors.append(f"Suspicious content detected in {path.name}")
                if not content:
                    found.warnings.append(f"Empty component file: {path.name}")
        except (OSError, UnicodeDecodeError) as exc:
            found.errors.append(f"Cannot validate component file {path.name}: {exc}")

    def _check_file_structure(self, pack: PackStructure, found: _Findings) -> None:
        pack_path = os.path.realpath(pack.path)
        components_path = os.path.realpath(pack.components_path)
        if os.path.commonpath([pack_path, components_path]) != pack_path:
            found.errors.append("Components directory is outside pack directory")


__all__ = [
    "PackValidator",
    "ValidationRules",
    "SUSPICIOUS_COMMAND_PATTERNS",
    "is_command_suspicious",
]
