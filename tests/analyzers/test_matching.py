"""Tests for path pattern matching helpers."""

from __future__ import annotations

from repolens.analyzers.matching import (
    any_path_matches,
    filter_paths,
    match_rules,
    matches_any,
)
from repolens.models import PatternRule

PATHS = ["api/users.ts", "src/api/orders.ts", "Dockerfile", "web/Api.md"]


def test_plain_fragments_behave_as_substrings() -> None:
    assert filter_paths(PATHS, ("/api/",)) == ["src/api/orders.ts"]
    assert matches_any("src/api/orders.ts", ("nothing", "orders"))


def test_anchored_patterns_only_match_at_start() -> None:
    assert filter_paths(PATHS, (r"^(api|routes)/",)) == ["api/users.ts"]


def test_case_insensitive_search() -> None:
    assert not any_path_matches(PATHS, "dockerfile")
    assert any_path_matches(PATHS, "dockerfile", ignore_case=True)


def test_match_rules_omits_rules_without_matches() -> None:
    hit = PatternRule(match=(r"\.ts$",), weight=0.5)
    miss = PatternRule(match=(r"\.go$",), weight=0.9)

    [result] = match_rules(PATHS, [hit, miss])

    assert result.rule is hit
    assert result.files == ("api/users.ts", "src/api/orders.ts")
