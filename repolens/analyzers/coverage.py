"""File-count based test coverage estimation."""

from __future__ import annotations

import json
import math
import posixpath
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import AnalysisConfig
from ..logging import get_logger
from ..models import QualityMetrics, RepositoryFile, TestCoverageInsight
from .matching import matches_any
from .utils import file_size, valid_files

_LOGGER = get_logger("coverage")

# Matched against the lower-cased path.
_TEST_PATH_PATTERNS: Tuple[str, ...] = (
    r"\.(test|spec)\.(js|jsx|ts|tsx|mjs|cjs|py|go|java|rs|php|rb)$",
    r"(^|/)test_[^/]*\.py$",
    r"(^|/)conftest\.py$",
    r"_test\.(py|go)$",
    r"_spec\.rb$",
)
# Matched against the original basename; the capital letter is significant.
_JVM_TEST_SUFFIXES = ("Test.java", "Tests.java", "Test.kt")
_TEST_DIRECTORIES = frozenset({"__tests__", "tests", "test", "spec", "specs"})

_SOURCE_EXTENSIONS = frozenset(
    {"js", "jsx", "ts", "tsx", "py", "go", "java", "rs", "php", "rb", "c", "cpp", "cs", "kt"}
)
_EXCLUDED_DIRECTORIES = frozenset(
    {"node_modules", "dist", "build", ".git", "coverage", "vendor", "__pycache__"}
)

_NODE_FRAMEWORKS: Tuple[Tuple[str, str], ...] = (
    ("vitest", "Vitest"),
    ("jest", "Jest"),
    ("mocha", "Mocha"),
    ("cypress", "Cypress"),
    ("@playwright/test", "Playwright"),
)
_CONVENTION_FRAMEWORKS: Tuple[Tuple[str, str], ...] = (
    (r"(^|/)conftest\.py$", "pytest"),
    (r"_test\.go$", "Go testing"),
    (r"(^|/)test_[^/]*\.py$", "pytest"),
    (r"_spec\.rb$", "RSpec"),
)


def is_test_file(path: str) -> bool:
    """Return True when ``path`` follows a recognised test naming convention."""
    lowered = path.lower()
    if matches_any(lowered, _TEST_PATH_PATTERNS):
        return True
    segments = lowered.split("/")[:-1]
    if any(segment in _TEST_DIRECTORIES for segment in segments):
        return True
    return posixpath.basename(path).endswith(_JVM_TEST_SUFFIXES)


def is_source_file(path: str) -> bool:
    """Return True for non-test code outside dependency, build and generated output."""
    lowered = path.lower()
    extension = posixpath.splitext(lowered)[1][1:]
    if extension not in _SOURCE_EXTENSIONS or is_test_file(path):
        return False
    if lowered.endswith(".d.ts") or "generated" in lowered:
        return False
    return not any(segment in _EXCLUDED_DIRECTORIES for segment in lowered.split("/")[:-1])


def detect_test_framework(files: Sequence[RepositoryFile]) -> Optional[str]:
    """Name the test framework from package.json, then from file conventions."""
    manifests = [
        file for file in files if posixpath.basename(file.path) == "package.json"
    ]
    if manifests:
        manifest = min(manifests, key=lambda file: (file.path.count("/"), file.path))
        framework = _node_framework(manifest)
        if framework:
            return framework

    paths = [file.path.lower() for file in files]
    for pattern, name in _CONVENTION_FRAMEWORKS:
        if any(matches_any(path, (pattern,)) for path in paths):
            return name
    return None


def analyze_test_coverage(
    files: Sequence[RepositoryFile] | None, config: AnalysisConfig | None = None
) -> TestCoverageInsight:
    """Estimate coverage as the ratio of test files to source files.

    A source counts as tested when its extension-less basename appears
    (case-insensitively) in the path of some test file.
    """
    config = config or AnalysisConfig()
    candidates = valid_files(files)
    if not candidates:
        return TestCoverageInsight()

    tests = [file for file in candidates if is_test_file(file.path)]
    sources = [file for file in candidates if is_source_file(file.path)]
    test_paths = [file.path for file in tests]
    lowered_tests = [(path.lower(), path) for path in test_paths]

    mapping: Dict[str, List[str]] = {}
    untested: List[str] = []
    for source in sources:
        stem = posixpath.splitext(posixpath.basename(source.path))[0].lower()
        matches = sorted(original for lowered, original in lowered_tests if stem in lowered)
        if matches:
            mapping[source.path] = matches
        else:
            untested.append(source.path)

    total = len(sources)
    test_count = len(tests)
    percentage = min(math.floor(100 * test_count / total + 0.5), 100) if total else 0
    capped = sorted(untested)[: config.max_untested_files]
    tested = max(1, total - len(capped)) if test_count else 0

    ratio = round(test_count / total, 2) if test_count and total else 0.0
    test_bytes = sum(file_size(file) for file in tests)
    average_size = round(test_bytes / test_count) if test_count else 0

    _LOGGER.debug(
        "Coverage estimate: %d tests for %d sources (%d%%)", test_count, total, percentage
    )
    return TestCoverageInsight(
        percentage=percentage,
        tested_files=tested,
        total_files=total,
        test_files=test_paths,
        test_framework=detect_test_framework(candidates),
        untested_files=capped,
        test_to_source_mapping=mapping,
        quality_metrics=QualityMetrics(
            test_to_source_ratio=ratio,
            avg_test_file_size=average_size,
        ),
    )


def _node_framework(manifest: RepositoryFile) -> Optional[str]:
    if not isinstance(manifest.content, str):
        return None
    try:
        data = json.loads(manifest.content)
    except ValueError as exc:
        _LOGGER.debug("Ignoring unparsable %s: %s", manifest.path, exc)
        return None
    if not isinstance(data, dict):
        return None

    declared = set()
    for section in ("dependencies", "devDependencies"):
        entries = data.get(section)
        if isinstance(entries, dict):
            declared.update(entries)

    for package, name in _NODE_FRAMEWORKS:
        if package in declared:
            return name
    return None


__all__ = [
    "analyze_test_coverage",
    "detect_test_framework",
    "is_source_file",
    "is_test_file",
]
