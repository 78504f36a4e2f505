"""Domain-specific configuration for user-facing preferences."""
from __future__ import annotations

from functools import cached_property
from typing import Optional

from ..base import BaseDomainConfig


class UIConfig(BaseDomainConfig):
    """Accessor for ``ui.*`` plus the top-level ``defaultMode``."""

    def _config_section(self) -> str:
        return "ui"

    @cached_property
    def color_output(self) -> bool:
        return bool(self.setting("colorOutput", default=True))

    @cached_property
    def verbose_logging(self) -> bool:
        return bool(self.setting("verboseLogging", default=False))

    @cached_property
    def default_mode(self) -> Optional[str]:
        value = self._config.get("defaultMode")
        return str(value) if value else None


__all__ = ["UIConfig"]
