"""Runs the full structural analysis over a repository file set."""

from __future__ import annotations

from typing import Sequence

from .analyzers import analyze_insights, analyze_subsystems, build_project_tree
from .config import AnalysisConfig
from .logging import get_logger
from .models import GitHubRepository, RepositoryAnalysis, RepositoryFile

_LOGGER = get_logger("engine")


def analyze_repository(
    files: Sequence[RepositoryFile] | None,
    repository: GitHubRepository | None = None,
    config: AnalysisConfig | None = None,
) -> RepositoryAnalysis:
    """Return the project tree, subsystem analysis and insights for ``files``.

    The subsystem classification runs first because the tree annotates its
    nodes with the detected subsystem types; insights are independent of both.
    """
    config = config or AnalysisConfig()
    subsystem_analysis = analyze_subsystems(repository, files, config)
    project_tree = build_project_tree(files, subsystem_analysis.subsystems)
    insights = analyze_insights(files, config)

    _LOGGER.info(
        "Analyzed %d files: %s, %d subsystems, %d dependencies",
        project_tree.total_files,
        subsystem_analysis.project_type,
        len(subsystem_analysis.subsystems),
        len(insights.dependencies),
    )
    return RepositoryAnalysis(
        project_tree=project_tree,
        subsystem_analysis=subsystem_analysis,
        insights=insights,
    )


__all__ = ["analyze_repository"]
