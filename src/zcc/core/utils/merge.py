"""Dictionary merge and dotted-path helpers.

Used by configuration layering and by pack configuration side effects,
which record the leaves a pack set so they can be reverted later.
"""
from __future__ import annotations

from typing import Any, Dict, Iterator, List, Mapping, Tuple

_MISSING = object()


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge dictionaries without mutating inputs.

    Example:
        >>> deep_merge({"a": 1, "b": {"c": 2}}, {"b": {"d": 3}})
        {'a': 1, 'b': {'c': 2, 'd': 3}}
    """
    result: Dict[str, Any] = dict(base)
    for key, value in (override or {}).items():
        if key in result:
            if isinstance(result[key], dict) and isinstance(value, dict):
                result[key] = deep_merge(result[key], value)
            elif isinstance(result[key], list) and isinstance(value, list):
                result[key] = merge_arrays(result[key], value)
            else:
                result[key] = value
        else:
            result[key] = value
    return result


def merge_arrays(base: List[Any], override: List[Any]) -> List[Any]:
    """Merge arrays: a leading "+" appends, anything else replaces.

    Example:
        >>> merge_arrays([1, 2], [3, 4])
        [3, 4]
        >>> merge_arrays([1, 2], ["+", 3, 4])
        [1, 2, 3, 4]
    """
    if not override:
        return base
    first = override[0]
    if isinstance(first, str) and first == "+":
        return [*base, *override[1:]]
    return list(override)


def iter_leaves(data: Mapping[str, Any], prefix: str = "") -> Iterator[Tuple[str, Any]]:
    """Yield ``(dotted.path, value)`` for every non-mapping leaf."""
    for key, value in data.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(value, Mapping) and value:
            yield from iter_leaves(value, path)
        else:
            yield path, value


def get_dotted(data: Mapping[str, Any], path: str, default: Any = None) -> Any:
    """Return the value at a dotted path, or ``default`` when absent."""
    current: Any = data
    for part in path.split("."):
        if not isinstance(current, Mapping) or part not in current:
            return default
        current = current[part]
    return current


def has_dotted(data: Mapping[str, Any], path: str) -> bool:
    return get_dotted(data, path, _MISSING) is not _MISSING


def set_dotted(data: Dict[str, Any], path: str, value: Any) -> None:
    """Set a dotted path in place, creating intermediate mappings."""
    parts = path.split(".")
    current = data
    for part in parts[:-1]:
        nxt = current.get(part)
        if not isinstance(nxt, dict):
            nxt = {}
            current[part] = nxt
        current = nxt
    current[parts[-1]] = value


def unset_dotted(data: Dict[str, Any], path: str) -> bool:
    """Remove a dotted path in place and prune mappings left empty.

    Returns True when something was removed.
    """
    parts = path.split(".")
    trail: List[Tuple[Dict[str, Any], str]] = []
    current: Any = data
    for part in parts[:-1]:
        if not isinstance(current, dict) or not isinstance(current.get(part), dict):
            return False
        trail.append((current, part))
        current = current[part]
    if not isinstance(current, dict) or parts[-1] not in current:
        return False
    del current[parts[-1]]
    for parent, key in reversed(trail):
        if parent[key]:
            break
        del parent[key]
    return True


__all__ = [
    "deep_merge",
    "merge_arrays",
    "iter_leaves",
    "get_dotted",
    "has_dotted",
    "set_dotted",
    "unset_dotted",
]
