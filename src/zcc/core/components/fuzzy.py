"""Fuzzy component-name matching.

Scores run 0-100. Exact 100, case-insensitive exact 95, prefix 80,
substring 60; acronyms (``apm`` -> ``autonomous-project-manager``), word
prefixes and in-order characters score by coverage. Matching metadata
(description, tags) adds up to 15 points.
"""
from __future__ import annotations

import math
import re
from typing import Any, Iterable, List, Mapping, Optional, Sequence, Tuple

from .model import SCOPE_PRECEDENCE, ComponentInfo, ComponentMatch

EXACT = 100
EXACT_CASE_INSENSITIVE = 95
STARTS_WITH = 80
SUBSTRING = 60
ACRONYM = 70
PARTIAL_WORD = 50
PARTIAL_CHAR = 30
METADATA_BOOST_CAP = 15

DEFAULT_MAX_RESULTS = 10
DEFAULT_MIN_SCORE = 20
SUGGESTION_MIN_SCORE = 10

_WORD_SPLIT = re.compile(r"[-_\s]+")

Candidate = Tuple[ComponentInfo, str]


def split_words(name: str) -> List[str]:
    return [w for w in _WORD_SPLIT.split(name) if w]


def acronym_score(query: str, name: str) -> int:
    words = split_words(name)
    if len(words) < len(query) or len(query) < 2:
        return 0
    for i, ch in enumerate(query):
        if words[i][0] != ch:
            return 0
    return math.floor(ACRONYM * len(query) / len(words))


def word_score(query: str, name: str) -> int:
    best = 0
    for word in split_words(name):
        coverage = len(query) / len(word)
        if word.startswith(query):
            best = max(best, math.floor(PARTIAL_WORD * coverage))
        elif query in word:
            best = max(best, math.floor(PARTIAL_WORD * coverage * 0.7))
    return best


def character_score(query: str, name: str) -> int:
    """Score the query's characters appearing in order within ``name``."""
    qi = 0
    for ch in name:
        if qi < len(query) and ch == query[qi]:
            qi += 1
    if qi < len(query):
        return 0
    return math.floor(PARTIAL_CHAR * qi / max(len(query), len(name)))


def metadata_boost(query: str, metadata: Mapping[str, Any]) -> int:
    boost = 0
    description = metadata.get("description")
    if isinstance(description, str) and query in description.lower():
        boost += 5
    tags = metadata.get("tags")
    if isinstance(tags, list):
        boost += sum(3 for t in tags if isinstance(t, str) and query in t.lower())
    return min(boost, METADATA_BOOST_CAP)


def score(
    query: str,
    component: ComponentInfo,
    *,
    case_sensitive: bool = False,
    include_metadata: bool = True,
) -> int:
    raw_query, raw_name = query, component.name
    q = raw_query if case_sensitive else raw_query.lower()
    name = raw_name if case_sensitive else raw_name.lower()

    if raw_query == raw_name:
        return EXACT
    if q == name:
        return EXACT_CASE_INSENSITIVE

    best = 0
    if name.startswith(q):
        best = STARTS_WITH
    elif q in name:
        best = SUBSTRING
    best = max(best, acronym_score(q, name), word_score(q, name), character_score(q, name))
    if include_metadata and component.metadata:
        best += metadata_boost(q, component.metadata)
    return min(best, EXACT)


def match_type(query: str, name: str) -> str:
    q, n = query.lower(), name.lower()
    if q == n:
        return "exact"
    if q in n:
        return "substring"
    words = split_words(n)
    if len(words) >= len(q) and all(words[i][0] == ch for i, ch in enumerate(q)):
        return "acronym"
    return "partial"


def _sort_key(match: ComponentMatch) -> Tuple[int, int, str]:
    return (-match.score, -SCOPE_PRECEDENCE.get(match.source, 0), match.name)


def find_matches(
    query: str,
    candidates: Iterable[Candidate],
    *,
    max_results: Optional[int] = DEFAULT_MAX_RESULTS,
    min_score: int = DEFAULT_MIN_SCORE,
    case_sensitive: bool = False,
    include_metadata: bool = True,
) -> List[ComponentMatch]:
    """Score every ``(component, source)`` and return hits above ``min_score``.

    Ordered by score, then scope precedence (project > global > builtin),
    then name.
    """
    if not query or not query.strip():
        return []
    query = query.strip()
    matches = []
    for component, source in candidates:
        s = score(query, component, case_sensitive=case_sensitive, include_metadata=include_metadata)
        if s >= min_score:
            matches.append(
                ComponentMatch(
                    name=component.name,
                    score=s,
                    source=source,
                    component=component,
                    match_type=match_type(query, component.name),
                )
            )
    matches.sort(key=_sort_key)
    return matches[:max_results] if max_results is not None else matches


def find_best_match(query: str, candidates: Iterable[Candidate], **options: Any) -> Optional[ComponentMatch]:
    options["max_results"] = 1
    matches = find_matches(query, candidates, **options)
    return matches[0] if matches else None


def generate_suggestions(query: str, candidates: Sequence[Candidate], max_suggestions: int = 3) -> List[str]:
    """Names to offer as "did you mean" hints.

    Low-threshold fuzzy hits first, then names sharing a word fragment with
    the query.
    """
    suggestions: List[str] = []
    for match in find_matches(
        query, candidates, max_results=max_suggestions * 2, min_score=SUGGESTION_MIN_SCORE
    ):
        if match.name not in suggestions:
            suggestions.append(match.name)
        if len(suggestions) >= max_suggestions:
            return suggestions

    query_words = [w.lower() for w in split_words(query)]
    for component, _ in candidates:
        if len(suggestions) >= max_suggestions:
            break
        if component.name in suggestions:
            continue
        name_words = [w.lower() for w in split_words(component.name)]
        if any(qw in nw or nw in qw for qw in query_words for nw in name_words):
            suggestions.append(component.name)
    return suggestions


__all__ = [
    "find_matches",
    "find_best_match",
    "generate_suggestions",
    "score",
    "match_type",
    "acronym_score",
    "word_score",
    "character_score",
    "metadata_boost",
    "split_words",
]
