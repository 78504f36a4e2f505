from __future__ import annotations

import pytest

from zcc import __version__
from zcc.cli._dispatcher import build_parser, discover_commands, discover_domains, main


def test_domains_and_commands_are_discovered() -> None:
    assert {"pack", "source", "component"} <= set(discover_domains())
    pack_commands = discover_commands("pack")
    assert {"install", "uninstall", "list", "rebuild_registry"} <= set(pack_commands)
    assert pack_commands["install"]["summary"]
    assert discover_commands("nope") == {}


def test_underscored_commands_get_hyphenated_names() -> None:
    parser = build_parser()
    args = parser.parse_args(["pack", "rebuild-registry"])
    assert args.command == "rebuild-registry"
    assert parser.parse_args(["pack", "rebuild_registry"])._func is args._func


def test_no_domain_prints_help(capsys: pytest.CaptureFixture[str]) -> None:
    assert main([]) == 0
    assert "usage: zcc" in capsys.readouterr().out


def test_domain_without_command_fails(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["pack"]) == 1
    assert "install" in capsys.readouterr().out


def test_version(capsys: pytest.CaptureFixture[str]) -> None:
    with pytest.raises(SystemExit) as info:
        main(["--version"])
    assert info.value.code == 0
    assert __version__ in capsys.readouterr().out
