from __future__ import annotations

import json
from pathlib import Path

import pytest

from zcc.core.packs import FileRegistry


def _file(project: Path, rel: str, text: str = "content\n") -> Path:
    path = project / rel
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


def test_register_and_reload(tmp_path: Path) -> None:
    target = _file(tmp_path, ".zcc/modes/architect.md")
    registry = FileRegistry(tmp_path)
    registry.register_pack("essentials", "1.0.0")
    entry = registry.register_file(target, "essentials", "modes/architect.md")

    assert entry["pack"] == "essentials"
    assert entry["modified"] is False
    assert entry["checksum"].startswith("sha256:")

    reloaded = FileRegistry(tmp_path)
    assert reloaded.is_file_registered(target)
    assert reloaded.get_pack_files("essentials") == [str(target)]
    assert reloaded.get_all_packs()["essentials"]["version"] == "1.0.0"


def test_register_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        FileRegistry(tmp_path).register_file(tmp_path / "nope.md", "p", "x")


def test_modification_detection(tmp_path: Path) -> None:
    target = _file(tmp_path, ".zcc/modes/a.md")
    registry = FileRegistry(tmp_path)
    registry.register_file(target, "p", "modes/a.md")
    assert not registry.is_file_modified(target)

    target.write_text("edited\n", encoding="utf-8")
    assert registry.is_file_modified(target)
    assert registry.detect_modifications() == [str(target)]
    assert registry.get_stats() == {"totalFiles": 1, "totalPacks": 1, "modifiedFiles": 1}

    target.unlink()
    assert registry.is_file_modified(target)
    assert not registry.is_file_modified(tmp_path / "untracked.md")


def test_conflicts_exclude_own_and_untracked(tmp_path: Path) -> None:
    owned = _file(tmp_path, ".zcc/modes/a.md")
    registry = FileRegistry(tmp_path)
    registry.register_file(owned, "one", "modes/a.md")

    assert registry.check_conflicts([owned, tmp_path / "free.md"], "two") == [
        {"path": str(owned), "existingPack": "one"}
    ]
    assert registry.check_conflicts([owned], "one") == []


def test_ownership_transfer_and_unregister(tmp_path: Path) -> None:
    shared = _file(tmp_path, ".zcc/modes/shared.md")
    other = _file(tmp_path, ".zcc/modes/other.md")
    registry = FileRegistry(tmp_path)
    registry.register_file(shared, "one", "modes/shared.md")
    registry.register_file(other, "one", "modes/other.md")

    registry.register_file(shared, "two", "modes/shared.md")
    assert registry.get_file_info(shared)["pack"] == "two"
    assert registry.get_pack_files("one") == [str(other)]

    assert registry.unregister_file(other)
    assert not registry.unregister_file(other)

    registry.unregister_pack("two")
    assert not registry.has_pack("two")
    assert not registry.is_file_registered(shared)


def test_backup_recovery(tmp_path: Path) -> None:
    first = _file(tmp_path, ".zcc/modes/first.md")
    second = _file(tmp_path, ".zcc/modes/second.md")
    registry = FileRegistry(tmp_path)
    registry.register_file(first, "p", "modes/first.md")
    assert not registry.backup_path.exists()
    registry.register_file(second, "p", "modes/second.md")
    assert registry.backup_path.exists()

    registry.path.write_text("{corrupt", encoding="utf-8")
    recovered = FileRegistry(tmp_path)
    assert recovered.is_file_registered(first)
    assert not recovered.is_file_registered(second)
    # The primary is rewritten from the backup.
    assert json.loads(registry.path.read_text(encoding="utf-8"))["files"]


def test_rebuild_from_ledger(tmp_path: Path) -> None:
    ledger = tmp_path / ".zcc" / "packs.json"
    ledger.parent.mkdir(parents=True)
    ledger.write_text(json.dumps({"packs": {"essentials": {"version": "1.0.0"}}}), encoding="utf-8")

    registry = FileRegistry(tmp_path)
    assert registry.load()["packs"] == {"essentials": {"version": "1.0.0", "files": []}}

    target = _file(tmp_path, ".zcc/modes/a.md")
    registry.register_file(target, "essentials", "modes/a.md")
    rebuilt = registry.rebuild()
    assert rebuilt["files"] == {}
    assert rebuilt["packs"]["essentials"]["files"] == []


def test_garbage_everywhere_starts_fresh(tmp_path: Path) -> None:
    registry = FileRegistry(tmp_path)
    registry.path.parent.mkdir(parents=True)
    registry.path.write_text("[]", encoding="utf-8")
    registry.backup_path.write_text("nope", encoding="utf-8")
    assert registry.load() == {"version": "1.0.0", "files": {}, "packs": {}}


def test_register_then_unregister_pack_leaves_no_trace(tmp_path: Path) -> None:
    owned = _file(tmp_path, ".zcc/modes/owned.md")
    registry = FileRegistry(tmp_path)
    registry.register_pack("x", "1.0.0")
    registry.register_file(owned, "x", "modes/owned.md")

    registry.unregister_pack("x")

    data = FileRegistry(tmp_path).load()
    assert "x" not in data["packs"]
    assert all(info["pack"] != "x" for info in data["files"].values())
    assert data["files"] == {}
