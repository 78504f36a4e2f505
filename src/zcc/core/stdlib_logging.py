"""Route the ``zcc`` logger hierarchy to the project log file.

Library modules only call ``logging.getLogger(__name__)``; the CLI decides
where records go. Nothing is written to stdout or stderr by this setup, so
``--json`` output is never interleaved with log lines.
"""
from __future__ import annotations

import logging
from pathlib import Path

from zcc.core.utils.io import ensure_directory

LOGGER_NAME = "zcc"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

_file_handler: logging.FileHandler | None = None
_null_handler: logging.NullHandler | None = None


def _as_level(name: str) -> int:
    value = logging.getLevelName(str(name).upper())
    return value if isinstance(value, int) else logging.INFO


def configure_stdlib_logging(*, log_path: Path, level: str = "INFO") -> None:
    """Attach one file handler at ``log_path`` to the ``zcc`` logger.

    Calling again with the same path only changes the level; a different
    path replaces the handler.
    """
    global _file_handler

    target = Path(log_path).resolve()
    package_logger = logging.getLogger(LOGGER_NAME)
    package_logger.setLevel(_as_level(level))
    package_logger.propagate = False

    if _file_handler is not None and Path(_file_handler.baseFilename) == target:
        _file_handler.setLevel(_as_level(level))
        return

    if _file_handler is not None:
        package_logger.removeHandler(_file_handler)
        _file_handler.close()

    ensure_directory(target.parent)
    handler = logging.FileHandler(target, encoding="utf-8")
    handler.setLevel(_as_level(level))
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    package_logger.addHandler(handler)
    _file_handler = handler


def suppress_lastresort_in_json_mode() -> None:
    """Stop unhandled warnings from reaching stderr through ``logging.lastResort``."""
    global _null_handler

    if _null_handler is not None:
        return
    _null_handler = logging.NullHandler()
    logging.getLogger(LOGGER_NAME).addHandler(_null_handler)


def reset_stdlib_logging_for_tests() -> None:
    global _file_handler, _null_handler

    package_logger = logging.getLogger(LOGGER_NAME)
    for handler in (_file_handler, _null_handler):
        if handler is not None:
            package_logger.removeHandler(handler)
            handler.close()
    _file_handler = None
    _null_handler = None
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


__all__ = [
    "LOG_FORMAT",
    "LOGGER_NAME",
    "configure_stdlib_logging",
    "reset_stdlib_logging_for_tests",
    "suppress_lastresort_in_json_mode",
]
