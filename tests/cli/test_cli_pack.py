from __future__ import annotations

import json
from pathlib import Path

import pytest

from helpers.packs import write_pack
from zcc.cli._dispatcher import main


def run_json(capsys: pytest.CaptureFixture[str], *argv: str):
    code = main([*argv, "--json"])
    captured = capsys.readouterr()
    stream = captured.out if captured.out.strip() else captured.err
    return code, json.loads(stream)


def test_list_builtin_packs(isolated_project_env: Path, capsys) -> None:
    code, data = run_json(capsys, "pack", "list")
    assert code == 0
    names = {p["name"]: p for p in data["packs"]}
    assert {"essentials", "frontend-react", "ai-agents"} <= set(names)
    assert names["essentials"]["installed"] is False
    assert data["count"] == len(data["packs"])

    code, data = run_json(capsys, "pack", "list", "--category", "frontend")
    assert [p["name"] for p in data["packs"]] == ["frontend-react"]


def test_search(isolated_project_env: Path, capsys) -> None:
    code, data = run_json(capsys, "pack", "search", "--tag", "react")
    assert code == 0
    assert [p["name"] for p in data["packs"]] == ["frontend-react"]

    code, data = run_json(capsys, "pack", "search", "agents")
    assert "ai-agents" in [p["name"] for p in data["packs"]]


def test_install_info_uninstall(isolated_project_env: Path, capsys) -> None:
    project = isolated_project_env

    code, data = run_json(capsys, "pack", "install", "essentials")
    assert code == 0
    assert data["success"] is True
    assert data["installed"]["modes"] == ["architect", "engineer"]
    assert (project / ".zcc" / "modes" / "engineer.md").is_file()

    code, data = run_json(capsys, "pack", "installed")
    assert [p["name"] for p in data["packs"]] == ["essentials"]

    code, data = run_json(capsys, "pack", "info", "essentials")
    assert code == 0
    assert data["status"]["installed"] is True
    assert data["dependencyResolution"] == {"resolved": [], "missing": [], "circular": []}

    code, data = run_json(capsys, "pack", "uninstall", "essentials")
    assert code == 0
    assert data["removed"]["modes"] == ["architect", "engineer"]
    assert not (project / ".zcc" / "modes" / "engineer.md").exists()


def test_install_conflict_exit_code(isolated_project_env: Path, capsys) -> None:
    target = isolated_project_env / ".zcc" / "modes" / "architect.md"
    target.parent.mkdir(parents=True)
    target.write_text("mine\n", encoding="utf-8")

    code, data = run_json(capsys, "pack", "install", "essentials")
    assert code == 1
    assert data["success"] is False
    assert data["conflicts"][0]["reason"] == "untracked"
    assert target.read_text(encoding="utf-8") == "mine\n"

    code, data = run_json(capsys, "pack", "install", "essentials", "--force")
    assert code == 0
    assert data["warnings"] == [f"Overwriting {target} (--force)"]


def test_text_install_and_confirmed_uninstall(isolated_project_env: Path, capsys, monkeypatch) -> None:
    assert main(["pack", "install", "essentials"]) == 0
    out = capsys.readouterr().out
    assert "Pack 'essentials' installed." in out
    assert "Essentials installed." in out

    monkeypatch.setattr("builtins.input", lambda prompt: "n")
    assert main(["pack", "uninstall", "essentials"]) == 1
    assert "Cancelled." in capsys.readouterr().out

    assert main(["pack", "uninstall", "essentials", "--yes"]) == 0
    assert "Pack 'essentials' uninstalled." in capsys.readouterr().out


def test_uninstall_not_installed(isolated_project_env: Path, capsys) -> None:
    code, data = run_json(capsys, "pack", "uninstall", "essentials")
    assert code == 1
    assert data["error"] == "not_installed"


def test_unknown_pack_info(isolated_project_env: Path, capsys) -> None:
    code, data = run_json(capsys, "pack", "info", "nope")
    assert code == 1
    assert data["error"] == "not_found"


def test_validate(isolated_project_env: Path, tmp_path: Path, capsys) -> None:
    code, data = run_json(capsys, "pack", "validate", "frontend-react")
    assert code == 0
    assert data["valid"] is True

    pack_dir = write_pack(tmp_path / "packs", "Bad-Name")
    code, data = run_json(capsys, "pack", "validate", "--path", str(pack_dir / "manifest.json"))
    assert code == 1
    assert "Pack name must contain only lowercase letters, numbers, and hyphens" in data["errors"]

    code, data = run_json(capsys, "pack", "validate")
    assert code == 1
    assert data["message"] == "Give either a pack name or --path"


def test_stats_and_rebuild(isolated_project_env: Path, capsys) -> None:
    run_json(capsys, "pack", "install", "essentials")

    code, data = run_json(capsys, "pack", "stats")
    assert code == 0
    assert data["registry"]["installedPacks"] == 1
    assert data["files"]["totalFiles"] == 3

    code, data = run_json(capsys, "pack", "rebuild-registry")
    assert code == 0
    assert data["status"] == "success"
    assert data["files"] == {"totalFiles": 0, "totalPacks": 1, "modifiedFiles": 0}
