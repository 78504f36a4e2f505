from __future__ import annotations

from zcc.core.utils.merge import (
    deep_merge,
    get_dotted,
    has_dotted,
    iter_leaves,
    set_dotted,
    unset_dotted,
)


def test_deep_merge_nested_and_arrays() -> None:
    base = {"a": {"x": 1, "y": [1, 2]}, "b": [1, 2, 3], "c": 1}
    override = {"a": {"y": ["+", 3]}, "b": [9], "c": 2, "d": "new"}
    merged = deep_merge(base, override)
    assert merged == {"a": {"x": 1, "y": [1, 2, 3]}, "b": [9], "c": 2, "d": "new"}
    assert base["a"]["y"] == [1, 2]


def test_iter_leaves_flattens_mappings_only() -> None:
    data = {"defaultMode": "engineer", "frontend": {"framework": "react", "tools": ["a"]}}
    assert dict(iter_leaves(data)) == {
        "defaultMode": "engineer",
        "frontend.framework": "react",
        "frontend.tools": ["a"],
    }


def test_dotted_get_set_has() -> None:
    data: dict = {}
    set_dotted(data, "ui.colorOutput", False)
    assert data == {"ui": {"colorOutput": False}}
    assert has_dotted(data, "ui.colorOutput")
    assert get_dotted(data, "ui.colorOutput") is False
    assert get_dotted(data, "ui.missing", "dflt") == "dflt"
    assert not has_dotted(data, "ui.colorOutput.deeper")


def test_unset_dotted_prunes_empty_parents() -> None:
    data = {"frontend": {"framework": "react"}, "keep": 1}
    assert unset_dotted(data, "frontend.framework") is True
    assert data == {"keep": 1}
    assert unset_dotted(data, "frontend.framework") is False
