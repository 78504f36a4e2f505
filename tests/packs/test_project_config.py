from __future__ import annotations

from pathlib import Path

import pytest

from zcc.core.exceptions import ConfigurationError
from zcc.core.packs import ProjectConfigEditor


def test_apply_records_previous_values(tmp_path: Path) -> None:
    editor = ProjectConfigEditor(tmp_path)
    editor.save({"defaultMode": "architect", "keep": 1})

    applied = editor.apply({"defaultMode": "engineer", "frontend": {"framework": "react"}})
    assert applied == {
        "defaultMode": {"value": "engineer", "previous": "architect"},
        "frontend.framework": {"value": "react"},
    }
    assert editor.load() == {"defaultMode": "engineer", "frontend": {"framework": "react"}, "keep": 1}

    assert sorted(editor.revert(applied)) == ["defaultMode", "frontend.framework"]
    assert editor.load() == {"defaultMode": "architect", "keep": 1}


def test_revert_skips_user_changes(tmp_path: Path) -> None:
    editor = ProjectConfigEditor(tmp_path)
    applied = editor.apply({"defaultMode": "engineer"})
    data = editor.load()
    data["defaultMode"] = "mine"
    editor.save(data)

    assert editor.revert(applied) == []
    assert editor.load()["defaultMode"] == "mine"


def test_reapply_keeps_original_previous(tmp_path: Path) -> None:
    editor = ProjectConfigEditor(tmp_path)
    editor.save({"defaultMode": "architect"})
    first = editor.apply({"defaultMode": "engineer"})
    second = editor.apply({"defaultMode": "engineer"}, prior=first)

    assert second == {"defaultMode": {"value": "engineer", "previous": "architect"}}
    editor.revert(second)
    assert editor.load() == {"defaultMode": "architect"}


def test_unparseable_config_is_never_rewritten(tmp_path: Path) -> None:
    editor = ProjectConfigEditor(tmp_path)
    editor.path.parent.mkdir(parents=True)
    editor.path.write_text("a: [broken\n", encoding="utf-8")

    with pytest.raises(ConfigurationError):
        editor.apply({"defaultMode": "engineer"})
    assert editor.path.read_text(encoding="utf-8") == "a: [broken\n"
