"""Structural analysis of source repositories."""

from .engine import analyze_repository
from .models import GitHubRepository, RepositoryAnalysis, RepositoryFile

__all__ = [
    "GitHubRepository",
    "RepositoryAnalysis",
    "RepositoryFile",
    "analyze_repository",
]
