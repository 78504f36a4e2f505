from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Mapping


class ErrorKind(str, Enum):
    """Stable error categories surfaced to callers and JSON output."""

    NOT_FOUND = "not_found"
    INVALID_MANIFEST = "invalid_manifest"
    INVALID_JSON = "invalid_json"
    FETCH_ERROR = "fetch_error"
    RATE_LIMITED = "rate_limited"
    CONFLICT = "conflict"
    MISSING_DEPENDENCY = "missing_dependency"
    CIRCULAR_DEPENDENCY = "circular_dependency"
    NOT_INSTALLED = "not_installed"
    PERMISSION_OR_IO = "permission_or_io"
    VALIDATION = "validation"
    CONFIGURATION = "configuration"


class ZccError(Exception):
    """Base exception for zcc."""

    kind: ErrorKind = ErrorKind.VALIDATION
    context: Dict[str, Any]

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        super().__init__(message)
        if context is not None:
            # Store a shallow copy to avoid accidental mutation.
            self.context = dict(context)
        else:
            self.context = {}

    def to_json_error(self) -> Dict[str, Any]:
        """Return a JSON-serializable error payload."""
        return {
            "message": str(self),
            "code": self.__class__.__name__,
            "kind": self.kind.value,
            "context": self.context,
        }


class PackNotFoundError(ZccError, LookupError):
    """Raised when a pack is absent from a source or from every source."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ZccError.__init__(self, message, context=context)
        LookupError.__init__(self, message)


class ComponentNotFoundError(PackNotFoundError):
    """Raised when a pack component cannot be located in its source."""


class InvalidManifestError(ZccError, ValueError):
    """Raised when a manifest is missing, malformed, or lacks required fields."""

    kind = ErrorKind.INVALID_MANIFEST

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ZccError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class InvalidJsonError(InvalidManifestError):
    """Raised when a manifest or index document is not valid JSON."""

    kind = ErrorKind.INVALID_JSON


class FetchError(ZccError, OSError):
    """Raised for network, HTTP, or hosting API failures."""

    kind = ErrorKind.FETCH_ERROR

    def __init__(
        self,
        message: str = "",
        *,
        url: str | None = None,
        status: int | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        if url:
            ctx["url"] = url
        if status is not None:
            ctx["status"] = status
        ZccError.__init__(self, message, context=ctx)
        OSError.__init__(self, message)
        self.url = url
        self.status = status


class RateLimitError(FetchError):
    """Raised when the hosting API refuses a request because of rate limiting."""

    kind = ErrorKind.RATE_LIMITED


class ConflictError(ZccError):
    """Raised when target paths are already owned by another pack."""

    kind = ErrorKind.CONFLICT

    def __init__(
        self,
        message: str = "",
        *,
        conflicts: list[Dict[str, Any]] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        self.conflicts = list(conflicts or [])
        if self.conflicts:
            ctx["conflicts"] = self.conflicts
        super().__init__(message, context=ctx)


class MissingDependencyError(ZccError, LookupError):
    """Raised when a declared pack dependency exists in no source."""

    kind = ErrorKind.MISSING_DEPENDENCY

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ZccError.__init__(self, message, context=context)
        LookupError.__init__(self, message)


class CircularDependencyError(ZccError, ValueError):
    """Raised when pack dependencies form a cycle."""

    kind = ErrorKind.CIRCULAR_DEPENDENCY

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ZccError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class NotInstalledError(ZccError, LookupError):
    """Raised when uninstalling a pack that is not installed."""

    kind = ErrorKind.NOT_INSTALLED

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ZccError.__init__(self, message, context=context)
        LookupError.__init__(self, message)


class PermissionOrIoError(ZccError, OSError):
    """Raised when a filesystem read or write fails."""

    kind = ErrorKind.PERMISSION_OR_IO

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ZccError.__init__(self, message, context=context)
        OSError.__init__(self, message)


class PackValidationError(ZccError, ValueError):
    """Raised when a pack fails validation and cannot be installed."""

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str = "",
        *,
        errors: list[str] | None = None,
        context: Mapping[str, Any] | None = None,
    ) -> None:
        ctx = dict(context or {})
        self.errors = list(errors or [])
        if self.errors:
            ctx["errors"] = self.errors
        ZccError.__init__(self, message, context=ctx)
        ValueError.__init__(self, message)


class ConfigurationError(ZccError, ValueError):
    """Raised for invalid configuration or source definitions."""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ZccError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


class ZccPathError(ZccError, ValueError):
    """Raised when the project root cannot be resolved."""

    kind = ErrorKind.CONFIGURATION

    def __init__(self, message: str = "", *, context: Mapping[str, Any] | None = None) -> None:
        ZccError.__init__(self, message, context=context)
        ValueError.__init__(self, message)


__all__ = [
    "ErrorKind",
    "ZccError",
    "PackNotFoundError",
    "ComponentNotFoundError",
    "InvalidManifestError",
    "InvalidJsonError",
    "FetchError",
    "RateLimitError",
    "ConflictError",
    "MissingDependencyError",
    "CircularDependencyError",
    "NotInstalledError",
    "PermissionOrIoError",
    "PackValidationError",
    "ConfigurationError",
    "ZccPathError",
]
