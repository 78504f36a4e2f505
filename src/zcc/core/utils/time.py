"""UTC timestamps for ``installedAt`` fields.

Precision and the ``Z`` suffix follow the bundled ``time.iso8601`` settings.
"""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict


def _iso_settings() -> Dict[str, Any]:
    from zcc.data import read_yaml

    settings: Dict[str, Any] = {"timespec": "seconds", "use_z_suffix": True, "strip_microseconds": True}
    time_section = read_yaml("config", "defaults.yaml").get("time") or {}
    settings.update(time_section.get("iso8601") or {})
    return settings


def utc_now() -> datetime:
    now = datetime.now(timezone.utc)
    if _iso_settings()["strip_microseconds"]:
        return now.replace(microsecond=0)
    return now


def utc_timestamp() -> str:
    """``2024-05-01T12:00:00Z`` style timestamp for the current moment."""
    settings = _iso_settings()
    stamp = utc_now().isoformat(timespec=settings["timespec"] or "auto")
    return stamp.replace("+00:00", "Z") if settings["use_z_suffix"] else stamp


__all__ = ["utc_now", "utc_timestamp"]
