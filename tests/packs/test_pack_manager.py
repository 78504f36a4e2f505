from __future__ import annotations

import json
from pathlib import Path

import pytest
import yaml

from helpers.packs import make_manager, write_pack
from zcc.core.exceptions import NotInstalledError
from zcc.core.packs import FileRegistry


def _project_config(project: Path) -> dict:
    path = project / ".zcc" / "config.yaml"
    if not path.exists():
        return {}
    return yaml.safe_load(path.read_text(encoding="utf-8")) or {}


def test_install_and_uninstall_essentials(isolated_project_env: Path) -> None:
    project = isolated_project_env
    manager = make_manager(project)

    result = manager.install_pack("essentials")
    assert result.success, result.errors
    assert result.installed["modes"] == ["architect", "engineer"]
    assert result.installed["workflows"] == ["review"]
    assert result.post_install_message.startswith("Essentials installed")
    assert (project / ".zcc" / "modes" / "architect.md").is_file()
    assert (project / ".zcc" / "packs" / "essentials.manifest.json").is_file()
    assert _project_config(project)["defaultMode"] == "engineer"

    ledger = json.loads((project / ".zcc" / "packs.json").read_text(encoding="utf-8"))
    entry = ledger["packs"]["essentials"]
    assert entry["version"] == "1.0.0"
    assert entry["source"]["name"] == "local"
    assert entry["configApplied"] == {"defaultMode": {"value": "engineer"}}

    status = manager.get_pack_status("essentials")
    assert status["installed"] is True
    assert status["hasSnapshot"] is True
    assert len(status["files"]) == 3
    assert status["modifiedFiles"] == 0

    removed = manager.uninstall_pack("essentials")
    assert removed.success
    assert removed.removed["modes"] == ["architect", "engineer"]
    assert not (project / ".zcc" / "modes" / "architect.md").exists()
    assert "defaultMode" not in _project_config(project)
    assert manager.get_installed_packs() == {}
    assert not manager.get_pack_status("essentials")["hasSnapshot"]


def test_dependencies_install_first(isolated_project_env: Path) -> None:
    project = isolated_project_env
    manager = make_manager(project)

    result = manager.install_pack("frontend-react")
    assert result.success, result.errors
    assert result.installed["modes"] == ["architect", "engineer", "component-builder"]
    assert result.installed["agents"] == ["ui-reviewer"]
    assert (project / ".claude" / "agents" / "ui-reviewer.md").is_file()
    assert (project / ".zcc" / "hooks" / "lint-on-save.json").is_file()
    assert set(manager.get_installed_packs()) == {"essentials", "frontend-react"}

    config = _project_config(project)
    assert config["defaultMode"] == "component-builder"
    assert config["frontend"] == {"framework": "react", "testRunner": "vitest"}
    assert "storybook" in config["customCommands"]

    # Dependencies already installed are not reinstalled.
    again = manager.install_pack("frontend-react")
    assert again.success
    assert again.installed["modes"] == ["component-builder"]

    essentials = manager.uninstall_pack("essentials", dry_run=True)
    assert "Pack 'frontend-react' depends on 'essentials'" in essentials.warnings
    assert (project / ".zcc" / "modes" / "architect.md").exists()

    manager.uninstall_pack("frontend-react")
    config = _project_config(project)
    assert config["defaultMode"] == "engineer"
    assert "frontend" not in config
    assert "customCommands" not in config


def test_skip_optional(isolated_project_env: Path) -> None:
    manager = make_manager(isolated_project_env)
    result = manager.install_pack("frontend-react", skip_optional=True)
    assert result.success
    assert result.skipped["agents"] == ["ui-reviewer"]
    assert result.skipped["hooks"] == ["lint-on-save"]
    assert result.skipped["workflows"] == ["review"]
    assert not (isolated_project_env / ".claude" / "agents" / "ui-reviewer.md").exists()


def test_dry_run_changes_nothing(isolated_project_env: Path) -> None:
    manager = make_manager(isolated_project_env)
    result = manager.install_pack("frontend-react", dry_run=True)
    assert result.success
    assert result.installed["modes"] == ["architect", "engineer", "component-builder"]
    assert not (isolated_project_env / ".zcc").exists()
    assert not (isolated_project_env / ".claude").exists()
    assert manager.get_installed_packs() == {}


def test_missing_and_circular_dependencies(isolated_project_env: Path, packs_root: Path) -> None:
    write_pack(packs_root, "app", dependencies=["ghost"])
    write_pack(packs_root, "loop-a", dependencies=["loop-b"])
    write_pack(packs_root, "loop-b", dependencies=["loop-a"])
    manager = make_manager(isolated_project_env, packs_root)

    result = manager.install_pack("app")
    assert not result.success
    assert result.errors == ["Dependency 'ghost' not found"]

    result = manager.install_pack("loop-a")
    assert not result.success
    assert result.errors == ["Circular dependency: loop-a"]
    assert manager.get_installed_packs() == {}


def test_invalid_pack_is_refused(isolated_project_env: Path, packs_root: Path) -> None:
    write_pack(packs_root, "bad", components={"modes": ["a"]}, postInstall={"commands": ["sudo make install"]})
    manager = make_manager(isolated_project_env, packs_root)

    result = manager.install_pack("bad")
    assert not result.success
    assert result.errors == [
        "Pack 'bad' failed validation: Suspicious post-install command detected: sudo make install"
    ]
    assert not (isolated_project_env / ".zcc" / "modes").exists()


def test_unknown_pack(isolated_project_env: Path) -> None:
    manager = make_manager(isolated_project_env)
    result = manager.install_pack("nope")
    assert not result.success
    assert result.errors == ["Dependency 'nope' not found"]
    with pytest.raises(NotInstalledError):
        manager.uninstall_pack("nope")


def test_modified_files_survive_uninstall(isolated_project_env: Path) -> None:
    project = isolated_project_env
    manager = make_manager(project)
    manager.install_pack("essentials")
    architect = project / ".zcc" / "modes" / "architect.md"
    architect.write_text("my architect\n", encoding="utf-8")

    assert manager.get_pack_status("essentials")["modifiedFiles"] == 1
    result = manager.uninstall_pack("essentials")
    assert result.skipped["modes"] == ["architect"]
    assert result.removed["modes"] == ["engineer"]
    assert architect.read_text(encoding="utf-8") == "my architect\n"


def test_user_config_change_is_not_reverted(isolated_project_env: Path) -> None:
    project = isolated_project_env
    manager = make_manager(project)
    manager.install_pack("essentials")
    config_path = project / ".zcc" / "config.yaml"
    config = _project_config(project)
    config["defaultMode"] = "architect"
    config_path.write_text(yaml.safe_dump(config), encoding="utf-8")

    manager.uninstall_pack("essentials")
    assert _project_config(project)["defaultMode"] == "architect"


def test_uninstall_without_file_registry(isolated_project_env: Path) -> None:
    project = isolated_project_env
    manager = make_manager(project)
    manager.install_pack("essentials")
    (project / ".zcc" / "file-registry.json").unlink()
    (project / ".zcc" / "file-registry.json.backup").unlink()
    engineer = project / ".zcc" / "modes" / "engineer.md"
    engineer.write_text("changed\n", encoding="utf-8")

    result = make_manager(project).uninstall_pack("essentials")
    assert result.removed["modes"] == ["architect"]
    assert result.skipped["modes"] == ["engineer"]
    assert not (project / ".zcc" / "modes" / "architect.md").exists()
    assert engineer.exists()


def test_rebuild_and_stats(isolated_project_env: Path) -> None:
    manager = make_manager(isolated_project_env)
    manager.install_pack("essentials")

    stats = manager.get_registry_stats()
    assert stats["installedPacks"] == 1
    assert stats["totalPacks"] >= 3

    assert manager.rebuild_file_registry() == {"totalFiles": 0, "totalPacks": 1, "modifiedFiles": 0}
    assert manager.get_pack_status("essentials")["files"] == []


def test_validate_pack(isolated_project_env: Path, packs_root: Path) -> None:
    write_pack(packs_root, "ok", components={"modes": ["a"]})
    write_pack(packs_root, "needs", components={"modes": ["a"]}, dependencies=["ghost"])
    manager = make_manager(isolated_project_env, packs_root)

    assert manager.validate_pack("ok").valid
    result = manager.validate_pack("needs")
    assert not result.valid
    assert "Missing dependencies: ghost" in result.errors


def test_uninstall_keeps_file_taken_over_by_another_pack(isolated_project_env: Path, packs_root: Path) -> None:
    project = isolated_project_env
    write_pack(packs_root, "one", components={"modes": ["shared"]})
    write_pack(packs_root, "two", components={"modes": ["shared"]})
    manager = make_manager(project, packs_root)
    assert manager.install_pack("one").success
    assert manager.install_pack("two", force=True).success
    shared = project / ".zcc" / "modes" / "shared.md"

    result = manager.uninstall_pack("one")
    assert result.success
    assert result.removed["modes"] == []
    assert result.skipped["modes"] == ["shared"]
    assert shared.is_file()
    assert FileRegistry(project).get_file_info(shared)["pack"] == "two"
    assert manager.is_installed("two")
    assert not manager.is_installed("one")
