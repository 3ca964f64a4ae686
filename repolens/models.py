"""Core data models shared across repolens components."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

FILE_NODE = "file"
DIRECTORY_NODE = "directory"


@dataclass(frozen=True)
class RepositoryFile:
    """A fetched repository file handed to the analysis engine."""

    path: str
    content: str
    size: int
    type: str


@dataclass(frozen=True)
class GitHubRepository:
    """Descriptor of the repository a file set was fetched from."""

    name: str
    full_name: str
    description: Optional[str] = None
    language: Optional[str] = None
    default_branch: str = "main"
    html_url: str = ""
    clone_url: str = ""


@dataclass
class TreeNode:
    """Directory or file node of a project tree."""

    name: str
    type: str
    path: str
    children: Optional[List["TreeNode"]] = None
    subsystem_type: Optional[str] = None
    file_type: Optional[str] = None
    size: Optional[int] = None

    @property
    def is_directory(self) -> bool:
        return self.type == DIRECTORY_NODE

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"name": self.name, "type": self.type, "path": self.path}
        if self.subsystem_type is not None:
            data["subsystem_type"] = self.subsystem_type
        if self.file_type is not None:
            data["file_type"] = self.file_type
        if self.size is not None:
            data["size"] = self.size
        if self.children is not None:
            data["children"] = [child.to_dict() for child in self.children]
        return data


@dataclass
class ProjectTree:
    """Rooted project tree with counters computed during construction."""

    root: TreeNode
    total_files: int = 0
    total_directories: int = 0
    max_depth: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "root": self.root.to_dict(),
            "total_files": self.total_files,
            "total_directories": self.total_directories,
            "max_depth": self.max_depth,
        }


@dataclass(frozen=True)
class PatternRule:
    """Weighted path rule; a path matches when any pattern is found in it."""

    match: Tuple[str, ...]
    weight: float


@dataclass(frozen=True)
class SubsystemConfig:
    """Static description of a subsystem category and its scoring rules."""

    name: str
    type: str
    description: str
    patterns: Tuple[PatternRule, ...]


@dataclass
class SubsystemInfo:
    """A detected subsystem."""

    name: str
    type: str
    files: List[str]
    confidence: float
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "type": self.type,
            "files": list(self.files),
            "confidence": self.confidence,
            "description": self.description,
        }


@dataclass
class ArchitecturalPattern:
    """Architecture style inferred from path evidence."""

    pattern: str
    description: str
    evidence: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pattern": self.pattern,
            "description": self.description,
            "evidence": list(self.evidence),
        }


@dataclass
class SubsystemAnalysis:
    """Subsystem classification for a repository."""

    subsystems: List[SubsystemInfo] = field(default_factory=list)
    project_type: str = "Unknown Project"
    patterns: List[ArchitecturalPattern] = field(default_factory=list)
    architecture: str = "Unknown Architecture"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "subsystems": [subsystem.to_dict() for subsystem in self.subsystems],
            "project_type": self.project_type,
            "patterns": [pattern.to_dict() for pattern in self.patterns],
            "architecture": self.architecture,
        }


@dataclass(frozen=True)
class DependencyInsight:
    """External dependency with a relative importance score."""

    name: str
    count: int

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "count": self.count}


@dataclass
class QualityMetrics:
    """Secondary figures reported alongside the coverage estimate."""

    test_to_source_ratio: float = 0.0
    avg_test_file_size: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "test_to_source_ratio": self.test_to_source_ratio,
            "avg_test_file_size": self.avg_test_file_size,
        }


@dataclass
class TestCoverageInsight:
    """File-count based test coverage estimate."""

    __test__ = False  # not a pytest test class

    percentage: int = 0
    tested_files: int = 0
    total_files: int = 0
    test_files: List[str] = field(default_factory=list)
    test_framework: Optional[str] = None
    untested_files: List[str] = field(default_factory=list)
    test_to_source_mapping: Dict[str, List[str]] = field(default_factory=dict)
    quality_metrics: QualityMetrics = field(default_factory=QualityMetrics)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "percentage": self.percentage,
            "tested_files": self.tested_files,
            "total_files": self.total_files,
            "test_files": list(self.test_files),
            "untested_files": list(self.untested_files),
            "test_to_source_mapping": {
                source: list(tests) for source, tests in self.test_to_source_mapping.items()
            },
            "quality_metrics": self.quality_metrics.to_dict(),
        }
        if self.test_framework is not None:
            data["test_framework"] = self.test_framework
        return data


@dataclass
class InsightsData:
    """Dependency ranking and coverage estimate for a file set."""

    dependencies: List[DependencyInsight] = field(default_factory=list)
    test_coverage: TestCoverageInsight = field(default_factory=TestCoverageInsight)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "dependencies": [dependency.to_dict() for dependency in self.dependencies],
            "test_coverage": self.test_coverage.to_dict(),
        }


@dataclass
class RepositoryAnalysis:
    """Composite result of a full structural analysis."""

    project_tree: ProjectTree
    subsystem_analysis: SubsystemAnalysis
    insights: InsightsData

    def to_dict(self) -> Dict[str, Any]:
        return {
            "project_tree": self.project_tree.to_dict(),
            "subsystem_analysis": self.subsystem_analysis.to_dict(),
            "insights": self.insights.to_dict(),
        }
