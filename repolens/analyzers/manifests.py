"""Declarative dependency manifest parsers.

Every supported ecosystem is described by a parser descriptor drawn from a
closed set of syntax families:

* ``JsonManifest`` - JSON objects whose named sections map package -> version.
* ``SectionManifest`` - TOML or YAML text scanned line by line, tracking the
  current section header.
* ``LineManifest`` - flat text where regular expressions capture names per
  line, across the whole text, or inside ``require ( ... )`` style blocks.
* ``TagManifest`` - XML-like text where paired tags capture identifiers.

Each descriptor exposes ``parse(content)`` returning ``DependencyInsight``
entries weighted by the section they were declared in.
"""

from __future__ import annotations

import json
import posixpath
import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Tuple, Union

from ..logging import get_logger
from ..models import DependencyInsight, RepositoryFile

_LOGGER = get_logger("dependencies")

_TOML_KEY = re.compile(r"^([A-Za-z0-9_.-]+)\s*=")
_TOML_ARRAY_START = re.compile(r"^([A-Za-z0-9_.-]+)\s*=\s*\[(.*)$")
_YAML_KEY = re.compile(r"^([A-Za-z0-9_.-]+)\s*:")
_QUOTED = re.compile(r"\"([^\"]*)\"|'([^']*)'")
_REQUIREMENT_NAME = re.compile(r"^\s*([A-Za-z0-9][A-Za-z0-9_.-]*)")


def requirement_name(spec: str) -> Optional[str]:
    """Reduce a requirement string (``"httpx[http2]>=0.27; python_version>'3'"``) to its name."""
    match = _REQUIREMENT_NAME.match(spec)
    return match.group(1) if match else None


@dataclass(frozen=True)
class JsonSection:
    key: str
    weight: int
    exclude: frozenset[str] = frozenset()


@dataclass(frozen=True)
class JsonManifest:
    """Manifest whose dependency sections are JSON objects."""

    sections: Tuple[JsonSection, ...]

    def parse(self, content: str) -> List[DependencyInsight]:
        data = json.loads(content)
        if not isinstance(data, dict):
            return []

        dependencies: List[DependencyInsight] = []
        for section in self.sections:
            entries = data.get(section.key)
            if not isinstance(entries, dict):
                continue
            for name in entries:
                if name in section.exclude:
                    continue
                dependencies.append(DependencyInsight(name=name, count=section.weight))
        return dependencies


@dataclass(frozen=True)
class ManifestSection:
    """A tracked section header and the weight of entries declared under it.

    ``array_key`` switches the section from ``name = ...`` entries to collecting
    the requirement strings of the array assigned to that key.
    """

    marker: str
    weight: int
    exclude: frozenset[str] = frozenset()
    array_key: Optional[str] = None


@dataclass(frozen=True)
class SectionManifest:
    """TOML or YAML manifest scanned section by section."""

    sections: Tuple[ManifestSection, ...]
    syntax: str = "toml"

    def parse(self, content: str) -> List[DependencyInsight]:
        if self.syntax == "yaml":
            return self._parse_yaml(content)
        return self._parse_toml(content)

    def _section_for(self, header: str) -> Optional[ManifestSection]:
        for section in self.sections:
            if header == section.marker:
                return section
        return None

    def _parse_toml(self, content: str) -> List[DependencyInsight]:
        dependencies: List[DependencyInsight] = []
        current: Optional[ManifestSection] = None
        in_array = False

        for raw_line in content.splitlines():
            line = raw_line.strip()
            if not line or line.startswith("#"):
                continue

            if in_array:
                dependencies.extend(_quoted_requirements(line, current))
                in_array = not _closes_array(line)
                continue

            if line.startswith("["):
                header = line.split("#", 1)[0].rstrip()
                current = self._section_for(header)
                if current is None:
                    dependencies.extend(self._dotted_table_entry(header))
                continue

            if current is None:
                continue

            if current.array_key is not None:
                array = _TOML_ARRAY_START.match(line)
                if array and array.group(1) == current.array_key:
                    rest = array.group(2)
                    dependencies.extend(_quoted_requirements(rest, current))
                    in_array = not _closes_array(rest)
                continue

            key = _TOML_KEY.match(line)
            if key and key.group(1) not in current.exclude:
                dependencies.append(DependencyInsight(name=key.group(1), count=current.weight))

        return dependencies

    def _dotted_table_entry(self, header: str) -> List[DependencyInsight]:
        # [dependencies.serde] declares "serde" inside the [dependencies] table
        for section in self.sections:
            if section.array_key is not None or not section.marker.endswith("]"):
                continue
            prefix = section.marker[:-1] + "."
            if header.startswith(prefix) and header.endswith("]"):
                name = header[len(prefix) : -1].strip().strip("\"'")
                if name and name not in section.exclude:
                    return [DependencyInsight(name=name, count=section.weight)]
        return []

    def _parse_yaml(self, content: str) -> List[DependencyInsight]:
        dependencies: List[DependencyInsight] = []
        current: Optional[ManifestSection] = None
        child_indent: Optional[int] = None

        for raw_line in content.splitlines():
            stripped = raw_line.strip()
            if not stripped or stripped.startswith("#"):
                continue
            indent = len(raw_line) - len(raw_line.lstrip())

            if indent == 0:
                current = self._section_for(stripped)
                child_indent = None
                continue
            if current is None:
                continue

            if child_indent is None:
                child_indent = indent
            if indent != child_indent:
                continue

            key = _YAML_KEY.match(stripped)
            if key and key.group(1) not in current.exclude:
                dependencies.append(DependencyInsight(name=key.group(1), count=current.weight))

        return dependencies


@dataclass(frozen=True)
class LinePattern:
    """Regex taking group 1 as the dependency name.

    ``multiline`` patterns run over the whole text. With ``item`` set, group 1
    is a block whose lines are matched individually by ``item``.
    """

    regex: re.Pattern[str]
    weight: int
    multiline: bool = False
    item: Optional[re.Pattern[str]] = None


@dataclass(frozen=True)
class LineManifest:
    """Flat text manifest matched with line patterns."""

    patterns: Tuple[LinePattern, ...]
    skip: Optional[re.Pattern[str]] = None

    def parse(self, content: str) -> List[DependencyInsight]:
        found: List[Tuple[str, int]] = []

        line_patterns = [pattern for pattern in self.patterns if not pattern.multiline]
        if line_patterns:
            for raw_line in content.splitlines():
                line = raw_line.strip()
                if not line or (self.skip is not None and self.skip.match(line)):
                    continue
                for pattern in line_patterns:
                    for match in pattern.regex.finditer(line):
                        found.append((match.group(1), pattern.weight))

        for pattern in self.patterns:
            if not pattern.multiline:
                continue
            for match in pattern.regex.finditer(content):
                if pattern.item is None:
                    found.append((match.group(1), pattern.weight))
                    continue
                for block_line in match.group(1).splitlines():
                    item = pattern.item.match(block_line.strip())
                    if item:
                        found.append((item.group(1), pattern.weight))

        return [DependencyInsight(name=name, count=weight) for name, weight in found]


@dataclass(frozen=True)
class TagPattern:
    regex: re.Pattern[str]
    weight: int
    separator: str = ":"


@dataclass(frozen=True)
class TagManifest:
    """XML-like manifest matched with paired-tag patterns."""

    patterns: Tuple[TagPattern, ...] = field(default_factory=tuple)

    def parse(self, content: str) -> List[DependencyInsight]:
        dependencies: List[DependencyInsight] = []
        for pattern in self.patterns:
            for match in pattern.regex.finditer(content):
                parts = [group.strip() for group in match.groups() if group and group.strip()]
                if parts:
                    dependencies.append(
                        DependencyInsight(name=pattern.separator.join(parts), count=pattern.weight)
                    )
        return dependencies


ManifestParser = Union[JsonManifest, SectionManifest, LineManifest, TagManifest]

_GRADLE_CONFIGURATIONS = (
    r"(?:implementation|api|compile|compileOnly|runtimeOnly|testImplementation"
    r"|androidTestImplementation|kapt|annotationProcessor)"
)
_GRADLE_COORDINATE = r"([\w.\-]+:[\w.\-]+)(?::[^'\"]*)?"

MANIFEST_PARSERS: Mapping[str, ManifestParser] = MappingProxyType(
    {
        "package.json": JsonManifest(
            sections=(
                JsonSection("dependencies", 8),
                JsonSection("devDependencies", 5),
                JsonSection("peerDependencies", 3),
                JsonSection("optionalDependencies", 2),
            )
        ),
        "composer.json": JsonManifest(
            sections=(
                JsonSection("require", 7, exclude=frozenset({"php"})),
                JsonSection("require-dev", 4),
            )
        ),
        "cargo.toml": SectionManifest(
            sections=(
                ManifestSection("[dependencies]", 7),
                ManifestSection("[dev-dependencies]", 4),
                ManifestSection("[build-dependencies]", 3),
            )
        ),
        "pyproject.toml": SectionManifest(
            sections=(
                ManifestSection("[project]", 7, array_key="dependencies"),
                ManifestSection(
                    "[tool.poetry.dependencies]", 7, exclude=frozenset({"python"})
                ),
                ManifestSection("[tool.poetry.group.dev.dependencies]", 4),
                ManifestSection("[tool.poetry.dev-dependencies]", 4),
            )
        ),
        "pipfile": SectionManifest(
            sections=(
                ManifestSection("[packages]", 7),
                ManifestSection("[dev-packages]", 4),
            )
        ),
        "pubspec.yaml": SectionManifest(
            sections=(
                ManifestSection("dependencies:", 7, exclude=frozenset({"flutter", "sdk"})),
                ManifestSection("dev_dependencies:", 4, exclude=frozenset({"flutter_test", "sdk"})),
            ),
            syntax="yaml",
        ),
        "go.mod": LineManifest(
            patterns=(
                LinePattern(re.compile(r"^require\s+([^\s()]+)\s+v"), 6),
                LinePattern(
                    re.compile(r"^\s*require\s*\(([^)]*)\)", re.MULTILINE),
                    6,
                    multiline=True,
                    item=re.compile(r"^([^\s/][^\s]*)\s+v"),
                ),
            ),
            skip=re.compile(r"^//"),
        ),
        "gemfile": LineManifest(
            patterns=(LinePattern(re.compile(r"^gem\s+['\"]([^'\"]+)['\"]"), 6),),
            skip=re.compile(r"^#"),
        ),
        "pom.xml": TagManifest(
            patterns=(
                TagPattern(
                    re.compile(
                        r"<dependency>\s*<groupId>\s*([^<]+?)\s*</groupId>\s*"
                        r"<artifactId>\s*([^<]+?)\s*</artifactId>"
                    ),
                    6,
                ),
            )
        ),
    }
)

MANIFEST_FILENAME_PATTERNS: Tuple[Tuple[re.Pattern[str], ManifestParser], ...] = (
    (
        re.compile(r"^requirements.*\.txt$", re.IGNORECASE),
        LineManifest(
            patterns=(LinePattern(_REQUIREMENT_NAME, 7),),
            skip=re.compile(r"^(?:#|-|[\w.]+\+[\w.]+:|https?:)"),
        ),
    ),
    (
        re.compile(r"^build\.gradle(\.kts)?$", re.IGNORECASE),
        LineManifest(
            patterns=(
                LinePattern(
                    re.compile(
                        _GRADLE_CONFIGURATIONS + r"\s+['\"]" + _GRADLE_COORDINATE + r"['\"]"
                    ),
                    6,
                ),
                LinePattern(
                    re.compile(
                        _GRADLE_CONFIGURATIONS + r"\s*\(\s*['\"]" + _GRADLE_COORDINATE + r"['\"]"
                    ),
                    6,
                ),
            ),
            skip=re.compile(r"^(?://|/\*|\*)"),
        ),
    ),
    (
        re.compile(r"\.(cs|vb|fs)proj$", re.IGNORECASE),
        TagManifest(
            patterns=(TagPattern(re.compile(r"<PackageReference\s+Include=\"([^\"]+)\""), 6),)
        ),
    ),
)


def find_manifest_parser(path: str) -> Optional[ManifestParser]:
    """Return the parser for a manifest path, or None for non-manifest files."""
    filename = posixpath.basename(path).lower()
    parser = MANIFEST_PARSERS.get(filename)
    if parser is not None:
        return parser
    for pattern, candidate in MANIFEST_FILENAME_PATTERNS:
        if pattern.search(filename):
            return candidate
    return None


def parse_manifest_dependencies(files: Iterable[RepositoryFile]) -> List[DependencyInsight]:
    """Extract declared dependencies from every recognised manifest.

    A manifest that fails to parse is logged and skipped.
    """
    dependencies: List[DependencyInsight] = []
    for file in files:
        parser = find_manifest_parser(file.path)
        if parser is None or not isinstance(file.content, str):
            continue
        try:
            parsed = parser.parse(file.content)
        except (ValueError, TypeError, AttributeError, RecursionError) as exc:
            _LOGGER.warning("Failed to parse %s: %s", file.path, exc)
            continue
        _LOGGER.debug("Parsed %d dependencies from %s", len(parsed), file.path)
        dependencies.extend(parsed)
    return dependencies


def _quoted_requirements(
    text: str, section: Optional[ManifestSection]
) -> List[DependencyInsight]:
    if section is None:
        return []
    dependencies: List[DependencyInsight] = []
    for match in _QUOTED.finditer(text):
        spec = match.group(1) if match.group(1) is not None else match.group(2)
        name = requirement_name(spec or "")
        if name and name not in section.exclude:
            dependencies.append(DependencyInsight(name=name, count=section.weight))
    return dependencies


def _closes_array(text: str) -> bool:
    return "]" in _QUOTED.sub("", text)


__all__ = [
    "JsonManifest",
    "JsonSection",
    "LineManifest",
    "LinePattern",
    "MANIFEST_FILENAME_PATTERNS",
    "MANIFEST_PARSERS",
    "ManifestParser",
    "ManifestSection",
    "SectionManifest",
    "TagManifest",
    "TagPattern",
    "find_manifest_parser",
    "parse_manifest_dependencies",
    "requirement_name",
]
