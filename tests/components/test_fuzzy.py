from __future__ import annotations

from pathlib import Path

import pytest

from zcc.core.components import ComponentInfo
from zcc.core.components import fuzzy


def _c(name: str, kind: str = "mode", **metadata) -> ComponentInfo:
    return ComponentInfo(name=name, type=kind, path=Path(f"/x/{kind}s/{name}.md"), metadata=metadata)


@pytest.mark.parametrize(
    "query, name, expected",
    [
        ("architect", "architect", 100),
        ("Architect", "architect", 95),
        ("arch", "architect", 80),
        ("tect", "architect", 60),
        ("apm", "autonomous-project-manager", 70),
        ("zzz", "architect", 0),
    ],
)
def test_score_tiers(query: str, name: str, expected: int) -> None:
    assert fuzzy.score(query, _c(name)) == expected


def test_case_sensitive_scoring() -> None:
    assert fuzzy.score("Architect", _c("architect"), case_sensitive=True) == 0
    assert fuzzy.score("architect", _c("architect"), case_sensitive=True) == 100


def test_metadata_boost_is_capped() -> None:
    reviewer = _c("reviewer", description="review code", tags=["review", "reviews", "reviewing", "review-x"])
    assert fuzzy.metadata_boost("rev", reviewer.metadata) == 15
    assert fuzzy.score("rev", reviewer) == 95
    assert fuzzy.score("rev", reviewer, include_metadata=False) == 80


def test_partial_scores() -> None:
    assert fuzzy.acronym_score("pm", "project-manager") == 70
    assert fuzzy.acronym_score("p", "project-manager") == 0
    assert fuzzy.word_score("proj", "my-project") == 28
    assert fuzzy.character_score("act", "architect") == 10
    assert fuzzy.character_score("xyz", "architect") == 0


def test_match_types() -> None:
    assert fuzzy.match_type("Architect", "architect") == "exact"
    assert fuzzy.match_type("chi", "architect") == "substring"
    assert fuzzy.match_type("apm", "autonomous-project-manager") == "acronym"
    assert fuzzy.match_type("aht", "architect") == "partial"


def test_find_matches_orders_by_score_then_scope_then_name() -> None:
    candidates = [
        (_c("review"), "builtin"),
        (_c("reviewer"), "builtin"),
        (_c("reviewer"), "project"),
        (_c("architect"), "project"),
    ]
    matches = fuzzy.find_matches("review", candidates)
    assert [(m.name, m.source, m.score) for m in matches] == [
        ("review", "builtin", 100),
        ("reviewer", "project", 80),
        ("reviewer", "builtin", 80),
    ]
    assert fuzzy.find_matches("review", candidates, max_results=1)[0].name == "review"
    assert fuzzy.find_matches("  ", candidates) == []
    assert fuzzy.find_best_match("arch", candidates).name == "architect"


def test_suggestions() -> None:
    candidates = [(_c("architect"), "builtin"), (_c("code-review"), "builtin"), (_c("engineer"), "builtin")]
    assert fuzzy.generate_suggestions("review-code", candidates) == ["code-review"]
    assert fuzzy.generate_suggestions("archi", candidates, max_suggestions=1) == ["architect"]
