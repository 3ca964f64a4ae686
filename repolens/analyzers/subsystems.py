"""Classifies repository paths into architectural subsystems."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from ..config import AnalysisConfig
from ..logging import get_logger
from ..models import (
    ArchitecturalPattern,
    GitHubRepository,
    PatternRule,
    RepositoryFile,
    SubsystemAnalysis,
    SubsystemConfig,
    SubsystemInfo,
)
from .matching import any_path_matches, filter_paths, match_rules
from .utils import valid_files

_LOGGER = get_logger("subsystems")

SUBSYSTEM_CATALOG: tuple[SubsystemConfig, ...] = (
    SubsystemConfig(
        name="Frontend",
        type="frontend",
        description="User interface components and frontend logic",
        patterns=(
            PatternRule(
                match=(r"^(pages|components|views|src/pages|src/components|src/views)/",),
                weight=0.8,
            ),
            PatternRule(match=(r"^(public|static|assets)/",), weight=0.6),
            PatternRule(match=(r"\.(jsx|tsx|vue|svelte)$",), weight=0.7),
            PatternRule(match=(r"^(styles|css|scss)/",), weight=0.5),
        ),
    ),
    SubsystemConfig(
        name="Backend",
        type="backend",
        description="Server-side logic and business rules",
        patterns=(
            PatternRule(match=(r"^(server|backend|api)/",), weight=0.8),
            PatternRule(match=(r"^(controllers|handlers|routes)/",), weight=0.7),
            PatternRule(match=(r"^(services|business|domain)/",), weight=0.6),
        ),
    ),
    SubsystemConfig(
        name="API",
        type="api",
        description="REST API endpoints and HTTP handlers",
        patterns=(
            PatternRule(match=(r"^(api|endpoints|routes)/",), weight=0.8),
            PatternRule(match=("/api/",), weight=0.7),
            PatternRule(match=(r"\.(route|endpoint|api)\.(js|ts)$",), weight=0.6),
        ),
    ),
    SubsystemConfig(
        name="Authentication",
        type="auth",
        description="User authentication and authorization system",
        patterns=(
            PatternRule(match=(r"^(auth|authentication|authorization)/",), weight=0.9),
            PatternRule(match=(r"/(auth|login|register|jwt)/",), weight=0.8),
            PatternRule(match=(r"^(middleware|guards)/",), weight=0.6),
            PatternRule(match=(r"\.(auth|login|middleware)\.(js|ts)$",), weight=0.7),
        ),
    ),
    SubsystemConfig(
        name="Data Layer",
        type="data",
        description="Database models, schemas, and data access logic",
        patterns=(
            PatternRule(match=(r"^(models|database|db|data)/",), weight=0.8),
            PatternRule(match=(r"^(repositories|dao|orm)/",), weight=0.7),
            PatternRule(match=(r"\.(model|schema|migration)\.(js|ts)$",), weight=0.6),
        ),
    ),
    SubsystemConfig(
        name="Configuration",
        type="config",
        description="Configuration files and deployment settings",
        patterns=(
            PatternRule(match=(r"^(config|configuration)/",), weight=0.7),
            PatternRule(match=(r"\.(config|env|json|yaml|yml)$",), weight=0.5),
            PatternRule(match=(r"^(docker|k8s|kubernetes|deployment)/",), weight=0.6),
            PatternRule(match=(r"^\.env",), weight=0.6),
        ),
    ),
    SubsystemConfig(
        name="CLI Tools",
        type="cli",
        description="Command-line interface and utility scripts",
        patterns=(
            PatternRule(match=(r"^(bin|cli|scripts|tools)/",), weight=0.8),
            PatternRule(match=(r"\.(cli|command|script)\.(js|ts)$",), weight=0.7),
        ),
    ),
    SubsystemConfig(
        name="Feature Modules",
        type="feature",
        description="Feature-based modules and business domains",
        patterns=(
            PatternRule(match=(r"^(features|modules)/",), weight=0.7),
            PatternRule(match=(r"/(user|product|order|payment|dashboard)/",), weight=0.6),
        ),
    ),
)

_UNKNOWN_PROJECT = "Unknown Project"
_UNKNOWN_ARCHITECTURE = "Unknown Architecture"

_DOCKER = r"dockerfile|docker-compose"
_K8S = r"k8s|kubernetes"


def analyze_subsystems(
    repository: GitHubRepository | None,
    files: Sequence[RepositoryFile] | None,
    config: AnalysisConfig | None = None,
) -> SubsystemAnalysis:
    """Score every catalog subsystem against the file paths.

    Never raises: malformed or empty input yields an empty analysis labelled
    ``"Unknown Project"``.
    """
    config = config or AnalysisConfig()
    paths = _file_paths(files)
    if not paths:
        return SubsystemAnalysis(
            subsystems=[],
            project_type=_UNKNOWN_PROJECT,
            patterns=[],
            architecture=_UNKNOWN_ARCHITECTURE,
        )

    scored = [
        score_subsystem(subsystem, paths, config.normalizer) for subsystem in SUBSYSTEM_CATALOG
    ]
    detected = [
        info for info in scored if info.files and info.confidence >= config.confidence_threshold
    ]
    subsystems = _dedupe_by_type(detected)
    subsystems.sort(key=lambda info: info.confidence, reverse=True)

    patterns = detect_architectural_patterns(paths)
    language = repository.language if isinstance(repository, GitHubRepository) else None
    project_type = determine_project_type(paths, language)
    architecture = determine_architecture(subsystems, patterns)

    _LOGGER.debug(
        "Classified %d paths: %d subsystems, project type %s",
        len(paths),
        len(subsystems),
        project_type,
    )
    return SubsystemAnalysis(
        subsystems=subsystems,
        project_type=project_type,
        patterns=patterns,
        architecture=architecture,
    )


def score_subsystem(
    subsystem: SubsystemConfig, paths: Sequence[str], normalizer: int = 5
) -> SubsystemInfo:
    """Return the subsystem's matched files and normalised confidence."""
    files: Dict[str, None] = {}
    score = 0.0
    for rule_match in match_rules(paths, subsystem.patterns):
        files.update(dict.fromkeys(rule_match.files))
        score += rule_match.rule.weight * min(len(rule_match.files) / normalizer, 1.0)

    return SubsystemInfo(
        name=subsystem.name,
        type=subsystem.type,
        files=list(files),
        confidence=min(score, 1.0),
        description=subsystem.description,
    )


def determine_project_type(paths: Sequence[str], language: Optional[str] = None) -> str:
    """Label the project from well-known root marker files."""
    root_files = set(paths)

    if "package.json" in root_files:
        if root_files & {"next.config.js", "next.config.ts"}:
            return "Next.js Application"
        if any("pages/" in path or "components/" in path for path in paths):
            return "React Application"
        if any("express" in path or "server" in path for path in paths):
            return "Node.js Server"
        return "JavaScript/TypeScript Project"

    if root_files & {"requirements.txt", "setup.py"}:
        return "Python Project"
    if "Cargo.toml" in root_files:
        return "Rust Project"
    if "go.mod" in root_files:
        return "Go Project"
    if root_files & {"pom.xml", "build.gradle"}:
        return "Java Project"

    if isinstance(language, str) and language.strip():
        lowered = language.strip().lower()
        return f"{lowered[0].upper()}{lowered[1:]} Project"

    return "Software Project"


def detect_architectural_patterns(paths: Sequence[str]) -> List[ArchitecturalPattern]:
    """Infer architecture styles from directory evidence."""
    patterns: List[ArchitecturalPattern] = []

    has_docker = any_path_matches(paths, _DOCKER, ignore_case=True)
    has_k8s = any_path_matches(paths, _K8S, ignore_case=True)

    if (
        any_path_matches(paths, r"/(models|model)/")
        and any_path_matches(paths, r"/(views|view)/")
        and any_path_matches(paths, r"/(controllers|controller)/")
    ):
        patterns.append(
            ArchitecturalPattern(
                pattern="MVC (Model-View-Controller)",
                description="Classic MVC architectural pattern with separate concerns",
                evidence=["models/", "views/", "controllers/"],
            )
        )

    service_paths = filter_paths(paths, (r"/(services|service)/",))
    if len(service_paths) > 2 and (has_docker or has_k8s):
        patterns.append(
            ArchitecturalPattern(
                pattern="Microservices",
                description="Distributed architecture with multiple services",
                evidence=["Multiple service directories", "Containerization setup"],
            )
        )

    if (
        any_path_matches(paths, r"^(public|static|dist)/")
        and any_path_matches(paths, "/api/")
        and any_path_matches(paths, r"\.(js|ts|jsx|tsx)$")
    ):
        patterns.append(
            ArchitecturalPattern(
                pattern="JAMStack",
                description="JavaScript, APIs, and Markup architecture",
                evidence=["Static assets", "API endpoints", "JavaScript/TypeScript"],
            )
        )

    concerns = sum(
        1
        for concern in (
            r"/(models|model)/",
            r"/(views|view|components)/",
            r"/(controllers|routes|api)/",
            r"/(services|business)/",
        )
        if any_path_matches(paths, concern)
    )
    if concerns >= 3 and not any_path_matches(paths, r"docker|k8s|kubernetes", ignore_case=True):
        patterns.append(
            ArchitecturalPattern(
                pattern="Monolithic",
                description="Single deployable unit with multiple concerns",
                evidence=["Unified codebase", "Multiple architectural layers"],
            )
        )

    if has_docker or has_k8s:
        evidence = ["Dockerfile", "Docker Compose"] if has_docker else ["Kubernetes manifests"]
        patterns.append(
            ArchitecturalPattern(
                pattern="Containerized",
                description="Application designed for container deployment",
                evidence=evidence,
            )
        )

    return patterns


def determine_architecture(
    subsystems: Sequence[SubsystemInfo], patterns: Sequence[ArchitecturalPattern]
) -> str:
    """Pick an architecture label, preferring detected patterns over subsystems."""
    names = {pattern.pattern for pattern in patterns}
    if "Microservices" in names:
        return "Microservices Architecture"
    if "JAMStack" in names:
        return "JAMStack Architecture"
    if "MVC (Model-View-Controller)" in names:
        return "MVC Architecture"
    if "Monolithic" in names:
        return "Monolithic Architecture"

    types = {subsystem.type for subsystem in subsystems}
    has_api = "api" in types
    has_frontend = "frontend" in types
    has_backend = "backend" in types

    if has_api and has_frontend and has_backend:
        return "Full-Stack Architecture"
    if has_frontend and has_api:
        return "Frontend with API"
    if has_backend or has_api:
        return "Backend Service"
    if has_frontend:
        return "Frontend Application"
    return "Custom Architecture"


def _file_paths(files: Sequence[RepositoryFile] | None) -> List[str]:
    return [item.path for item in valid_files(files)]


def _dedupe_by_type(subsystems: Sequence[SubsystemInfo]) -> List[SubsystemInfo]:
    by_type: Dict[str, SubsystemInfo] = {}
    for info in subsystems:
        existing = by_type.get(info.type)
        if existing is None or info.confidence > existing.confidence:
            by_type[info.type] = info
    return list(by_type.values())


__all__ = [
    "SUBSYSTEM_CATALOG",
    "analyze_subsystems",
    "detect_architectural_patterns",
    "determine_architecture",
    "determine_project_type",
    "score_subsystem",
]
