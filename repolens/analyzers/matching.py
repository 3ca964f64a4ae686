"""Path pattern matching shared by the detectors."""

from __future__ import annotations

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, List, Sequence

from ..models import PatternRule


@dataclass(frozen=True)
class RuleMatch:
    """Paths matched by a single rule."""

    rule: PatternRule
    files: tuple[str, ...]


@lru_cache(maxsize=None)
def compile_pattern(pattern: str) -> re.Pattern[str]:
    """Return the compiled form of a path pattern.

    Plain fragments such as ``"components/"`` behave as substrings, while
    anchors and alternations (``"^(api|routes)/"``) narrow the match.
    """
    return re.compile(pattern)


def matches_any(path: str, patterns: Iterable[str]) -> bool:
    """Return True when any pattern is found in ``path``."""
    return any(compile_pattern(pattern).search(path) for pattern in patterns)


def filter_paths(paths: Sequence[str], patterns: Iterable[str]) -> List[str]:
    """Return the paths (in input order) matching any of ``patterns``."""
    compiled = [compile_pattern(pattern) for pattern in patterns]
    return [path for path in paths if any(regex.search(path) for regex in compiled)]


def any_path_matches(paths: Sequence[str], pattern: str, *, ignore_case: bool = False) -> bool:
    """Return True when at least one path matches ``pattern``."""
    regex = compile_pattern(f"(?i:{pattern})" if ignore_case else pattern)
    return any(regex.search(path) for path in paths)


def match_rules(paths: Sequence[str], rules: Iterable[PatternRule]) -> List[RuleMatch]:
    """Evaluate every rule against ``paths``; rules without matches are omitted."""
    results: List[RuleMatch] = []
    for rule in rules:
        matched = filter_paths(paths, rule.match)
        if matched:
            results.append(RuleMatch(rule=rule, files=tuple(matched)))
    return results


__all__ = [
    "RuleMatch",
    "any_path_matches",
    "compile_pattern",
    "filter_paths",
    "match_rules",
    "matches_any",
]
