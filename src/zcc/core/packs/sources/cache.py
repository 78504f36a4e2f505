"""Instance-owned TTL cache for remote pack sources."""
from __future__ import annotations

import time
from typing import Any, Callable, Dict, Generic, Optional, Tuple, TypeVar

T = TypeVar("T")


class TTLCache(Generic[T]):
    """Map of key -> (value, expiry). Expired entries read as absent.

    ``clock`` defaults to ``time.monotonic`` and is injectable for tests.
    """

    def __init__(self, ttl: float, *, clock: Optional[Callable[[], float]] = None) -> None:
        self.ttl = float(ttl)
        self._clock = clock or time.monotonic
        self._entries: Dict[str, Tuple[T, float]] = {}

    def get(self, key: str) -> Optional[T]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if self._clock() >= expires_at:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: T) -> None:
        self._entries[key] = (value, self._clock() + self.ttl)

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def clear_expired(self) -> int:
        """Remove expired entries; return how many were dropped."""
        now = self._clock()
        expired = [k for k, (_, exp) in self._entries.items() if now >= exp]
        for key in expired:
            del self._entries[key]
        return len(expired)

    def stats(self) -> Dict[str, Any]:
        now = self._clock()
        expired = sum(1 for _, exp in self._entries.values() if now >= exp)
        return {
            "size": len(self._entries),
            "expired": expired,
            "active": len(self._entries) - expired,
            "ttl": self.ttl,
        }


__all__ = ["TTLCache"]
