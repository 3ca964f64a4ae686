"""Dependency and test coverage insights for a file set."""

from __future__ import annotations

from typing import Sequence

from ..config import AnalysisConfig
from ..models import InsightsData, RepositoryFile
from .coverage import analyze_test_coverage
from .dependencies import analyze_dependencies


def analyze_insights(
    files: Sequence[RepositoryFile] | None, config: AnalysisConfig | None = None
) -> InsightsData:
    """Combine the dependency ranking with the coverage estimate."""
    return InsightsData(
        dependencies=analyze_dependencies(files, config),
        test_coverage=analyze_test_coverage(files, config),
    )


__all__ = ["analyze_insights"]
