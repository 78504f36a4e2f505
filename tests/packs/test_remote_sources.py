from __future__ import annotations

import pytest

from helpers.http import FakeUrlopen, connection_refused, github_file
from zcc.core.exceptions import (
    ComponentNotFoundError,
    FetchError,
    InvalidJsonError,
    PackNotFoundError,
    RateLimitError,
)
from zcc.core.packs.sources import GitHubPackSource, RemotePackSource

BASE = "https://packs.example.com/v1"
MANIFEST = {
    "name": "demo",
    "version": "1.0.0",
    "description": "Demo pack",
    "author": "tests",
    "components": {"modes": [{"name": "architect", "required": True}]},
}


class Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def fake(monkeypatch: pytest.MonkeyPatch) -> FakeUrlopen:
    opener = FakeUrlopen()
    monkeypatch.setattr("zcc.core.packs.sources.http.urlopen", opener)
    return opener


# ---------- RemotePackSource ----------


def test_remote_lists_and_loads(fake: FakeUrlopen) -> None:
    fake.add_json(f"{BASE}/index.json", {"packs": ["demo", {"name": "other"}, 3]})
    fake.add_json(f"{BASE}/demo/manifest.json", MANIFEST)
    fake.add(f"{BASE}/demo/components/modes/architect.md", "# Architect\n")
    source = RemotePackSource("team", BASE + "/", token="s3cret", user_agent="zcc/test")

    assert source.list_packs() == ["demo", "other"]
    structure = source.load_pack("demo")
    assert structure.manifest.name == "demo"
    assert structure.path == f"{BASE}/demo"
    assert source.get_component_content("demo", "modes", "architect") == "# Architect\n"
    assert source.has_component("demo", "modes", "architect")

    req = fake.requests[0]
    assert req.get_header("Authorization") == "Bearer s3cret"
    assert req.get_header("User-agent") == "zcc/test"
    assert source.location() == BASE


def test_remote_caches_until_ttl_expires(fake: FakeUrlopen) -> None:
    clock = Clock()
    fake.add_json(f"{BASE}/demo/manifest.json", MANIFEST)
    source = RemotePackSource("team", BASE, ttl=10, clock=clock)

    source.load_pack("demo")
    source.load_pack("demo")
    assert len(fake.requests) == 1
    assert source.get_cache_stats()["manifests"]["active"] == 1

    clock.now = 11
    assert source.get_cache_stats()["manifests"]["expired"] == 1
    assert source.clear_expired_cache() == 1
    source.load_pack("demo")
    assert len(fake.requests) == 2

    source.clear_cache()
    assert source.get_cache_stats()["manifests"]["size"] == 0


def test_remote_error_mapping(fake: FakeUrlopen) -> None:
    source = RemotePackSource("team", BASE)
    with pytest.raises(PackNotFoundError):
        source.load_pack("missing")
    with pytest.raises(ComponentNotFoundError):
        source.get_component_content("demo", "modes", "missing")
    assert not source.has_pack("missing")

    fake.add(f"{BASE}/limited/manifest.json", "", status=429)
    with pytest.raises(RateLimitError) as info:
        source.load_pack("limited")
    assert info.value.status == 429

    fake.add(f"{BASE}/down/manifest.json", "", status=500)
    with pytest.raises(FetchError) as info:
        source.load_pack("down")
    assert not isinstance(info.value, RateLimitError)
    assert info.value.url == f"{BASE}/down/manifest.json"

    fake.add(f"{BASE}/offline/manifest.json", connection_refused())
    with pytest.raises(FetchError):
        source.load_pack("offline")

    fake.add(f"{BASE}/garbled/manifest.json", "{nope")
    with pytest.raises(InvalidJsonError):
        source.load_pack("garbled")


def test_remote_index_must_be_a_list(fake: FakeUrlopen) -> None:
    fake.add_json(f"{BASE}/index.json", {"packs": "demo"})
    with pytest.raises(InvalidJsonError):
        RemotePackSource("team", BASE).list_packs()


# ---------- GitHubPackSource ----------

API = "https://api.github.com/repos/acme/packs/contents"


def test_github_lists_and_loads(fake: FakeUrlopen) -> None:
    import json

    fake.add_json(
        f"{API}/?ref=main",
        [
            {"type": "dir", "name": "demo"},
            {"type": "dir", "name": "not-a-pack"},
            {"type": "file", "name": "README.md"},
        ],
    )
    fake.add_json(f"{API}/demo/manifest.json?ref=main", github_file(json.dumps(MANIFEST)))
    fake.add_json(f"{API}/demo/components/modes/architect.md?ref=main", github_file("# Architect\n"))
    source = GitHubPackSource("gh", "acme", "packs", token="ghp_x")

    assert source.list_packs() == ["demo"]
    structure = source.load_pack("demo")
    assert structure.path == "https://github.com/acme/packs/tree/main/demo"
    assert source.get_component_content("demo", "modes", "architect") == "# Architect\n"
    assert source.get_component_path("demo", "modes", "architect") == (
        "https://raw.githubusercontent.com/acme/packs/main/demo/components/modes/architect.md"
    )
    assert fake.requests[0].get_header("Authorization") == "token ghp_x"
    assert source.location() == "acme/packs@main"


def test_github_path_prefix_and_branch(fake: FakeUrlopen) -> None:
    import json

    fake.add_json(f"{API}/packs/demo/manifest.json?ref=dev", github_file(json.dumps(MANIFEST)))
    source = GitHubPackSource("gh", "acme", "packs", branch="dev", path="/packs/")

    assert source.load_pack("demo").manifest.version == "1.0.0"
    assert source.location() == "acme/packs@dev:packs"
    assert source.source_info()["path"] == "packs"


def test_github_errors(fake: FakeUrlopen) -> None:
    source = GitHubPackSource("gh", "acme", "packs")
    with pytest.raises(PackNotFoundError):
        source.load_pack("missing")

    fake.add(
        f"{API}/limited/manifest.json?ref=main",
        "",
        status=403,
        headers={"X-RateLimit-Remaining": "0"},
    )
    with pytest.raises(RateLimitError):
        source.load_pack("limited")

    fake.add(f"{API}/forbidden/manifest.json?ref=main", "", status=403)
    with pytest.raises(FetchError) as info:
        source.load_pack("forbidden")
    assert not isinstance(info.value, RateLimitError)

    fake.add_json(f"{API}/dir/manifest.json?ref=main", [{"type": "file"}])
    with pytest.raises(FetchError):
        source.load_pack("dir")
