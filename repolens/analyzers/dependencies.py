"""Dependency ranking from manifests and import statements."""

from __future__ import annotations

from typing import Dict, List, Sequence

from ..config import AnalysisConfig
from ..logging import get_logger
from ..models import DependencyInsight, RepositoryFile
from .imports import analyze_import_statements
from .manifests import parse_manifest_dependencies
from .utils import valid_files

_LOGGER = get_logger("dependencies")


def analyze_dependencies(
    files: Sequence[RepositoryFile] | None, config: AnalysisConfig | None = None
) -> List[DependencyInsight]:
    """Rank external dependencies by manifest weight and import frequency.

    Manifest declarations are merged first; a name declared in several
    manifests keeps its highest weight. Import counts only raise an existing
    score, never lower it. The result is sorted by score (ties keep first
    insertion order) and truncated to ``config.max_dependencies``.
    """
    config = config or AnalysisConfig()
    candidates = valid_files(files, require_content=True)
    if not candidates:
        return []

    scores: Dict[str, int] = {}
    for dependency in parse_manifest_dependencies(candidates):
        scores[dependency.name] = max(scores.get(dependency.name, 0), dependency.count)

    imported = analyze_import_statements(candidates, limit=config.max_import_dependencies)
    for dependency in imported:
        scores[dependency.name] = max(scores.get(dependency.name, 0), dependency.count)

    ranked = sorted(scores.items(), key=lambda item: item[1], reverse=True)
    _LOGGER.debug("Ranked %d dependencies (%d from imports)", len(ranked), len(imported))
    return [
        DependencyInsight(name=name, count=count)
        for name, count in ranked[: config.max_dependencies]
    ]


__all__ = ["analyze_dependencies"]
