from __future__ import annotations

from pathlib import Path

import pytest

from zcc.core.exceptions import ConfigurationError
from zcc.core.packs.sources import (
    GitHubPackSource,
    LocalPackSource,
    RemotePackSource,
    create_source,
    parse_github_url,
    source_entry_from_url,
)


@pytest.mark.parametrize(
    "url",
    [
        "https://github.com/acme/packs",
        "https://github.com/acme/packs.git",
        "git@github.com:acme/packs.git",
        "github:acme/packs",
    ],
)
def test_parse_github_url(url: str) -> None:
    assert parse_github_url(url) == ("acme", "packs")


def test_parse_github_url_rejects_others() -> None:
    assert parse_github_url("https://gitlab.com/acme/packs") is None


def test_entry_from_url() -> None:
    assert source_entry_from_url("https://github.com/acme/packs") == {
        "name": "acme-packs",
        "type": "github",
        "owner": "acme",
        "repo": "packs",
    }
    entry = source_entry_from_url("https://packs.example.com/v1", tokenEnv="PACKS_TOKEN", branch=None)
    assert entry == {
        "name": "packs.example.com",
        "type": "http",
        "url": "https://packs.example.com/v1",
        "tokenEnv": "PACKS_TOKEN",
    }
    with pytest.raises(ConfigurationError):
        source_entry_from_url("ftp://nope")


def test_create_each_source_type(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PACKS_TOKEN", "abc")

    local = create_source({"name": "mine", "type": "local", "path": "packs"}, base_dir=tmp_path)
    assert isinstance(local, LocalPackSource)
    assert local.root == tmp_path / "packs"

    http = create_source(
        {"name": "team", "type": "http", "url": "https://packs.example.com", "tokenEnv": "PACKS_TOKEN", "ttl": 5},
        timeout=3,
    )
    assert isinstance(http, RemotePackSource)
    assert http.token == "abc"
    assert http.timeout == 3
    assert http.get_cache_stats()["manifests"]["ttl"] == 5.0

    gh = create_source({"name": "gh", "type": "GitHub", "owner": "acme", "repo": "packs"})
    assert isinstance(gh, GitHubPackSource)
    assert gh.branch == "main"
    assert gh.token is None


@pytest.mark.parametrize(
    "entry",
    [
        {"type": "local", "path": "x"},
        {"name": "a", "type": "local"},
        {"name": "a", "type": "http", "url": "not-a-url"},
        {"name": "a", "type": "github", "owner": "acme"},
        {"name": "a", "type": "svn"},
    ],
)
def test_invalid_entries(entry) -> None:
    with pytest.raises(ConfigurationError):
        create_source(entry)
