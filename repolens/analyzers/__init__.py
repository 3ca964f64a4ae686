"""Structural analyzers: tree building, subsystem classification and insights."""

from __future__ import annotations

from .coverage import analyze_test_coverage
from .dependencies import analyze_dependencies
from .insights import analyze_insights
from .subsystems import SUBSYSTEM_CATALOG, analyze_subsystems
from .tree import build_project_tree, render_tree

__all__ = [
    "SUBSYSTEM_CATALOG",
    "analyze_dependencies",
    "analyze_insights",
    "analyze_subsystems",
    "analyze_test_coverage",
    "build_project_tree",
    "render_tree",
]
