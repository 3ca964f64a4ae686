"""Scans source files for import statements that reference external packages."""

from __future__ import annotations

import posixpath
import re
import sys
from collections import Counter
from dataclasses import dataclass
from types import MappingProxyType
from typing import Callable, Iterable, List, Mapping, Optional, Tuple

from ..models import DependencyInsight, RepositoryFile

_FORGE_DOMAINS = frozenset({"github.com", "gitlab.com", "bitbucket.org"})
_PYTHON_STDLIB = frozenset(sys.stdlib_module_names) | {"__future__"}
_QUOTED_IMPORT = re.compile(r"\"([^\"]+)\"")
# "@/components/Button" and "~/utils" are bundler aliases for the project root
_JS_PATH_ALIASES = frozenset({"@", "~"})
# "import a.b as c, d" lists several modules on one line
_PYTHON_IMPORT_LIST = re.compile(
    r"^[ \t]*import[ \t]+([A-Za-z_][\w.]*(?:[ \t]+as[ \t]+\w+)?"
    r"(?:[ \t]*,[ \t]*[A-Za-z_][\w.]*(?:[ \t]+as[ \t]+\w+)?)*)",
    re.MULTILINE,
)


@dataclass(frozen=True)
class ImportLanguage:
    """Import regexes, standard-library test and normaliser for one language.

    Patterns capture the referenced module in group 1. ``list`` patterns
    capture a comma-separated list whose entries each start with a module
    name; ``block`` patterns capture a parenthesised block whose quoted
    entries are individual imports.
    """

    name: str
    patterns: Tuple[re.Pattern[str], ...]
    is_standard: Callable[[str], bool]
    normalize: Callable[[str], Optional[str]]
    list_patterns: Tuple[re.Pattern[str], ...] = ()
    block_patterns: Tuple[re.Pattern[str], ...] = ()


def _regex_test(pattern: str) -> Callable[[str], bool]:
    compiled = re.compile(pattern)
    return lambda module: compiled.match(module) is not None


def _never(module: str) -> bool:
    return False


def _normalize_js(module: str) -> Optional[str]:
    parts = module.split("/")
    if parts[0] in _JS_PATH_ALIASES or "://" in module:
        return None
    if module.startswith("@"):
        return "/".join(parts[:2]) if len(parts) >= 2 and parts[1] else None
    return parts[0] or None


def _normalize_python(module: str) -> Optional[str]:
    return module.split(".")[0] or None


def _is_python_standard(module: str) -> bool:
    return module.split(".")[0] in _PYTHON_STDLIB


def _normalize_go(module: str) -> Optional[str]:
    parts = module.split("/")
    if parts[0] in _FORGE_DOMAINS:
        return "/".join(parts[:3])
    if "." in parts[0]:
        return parts[0]
    return module


def _normalize_dotted_pair(module: str) -> Optional[str]:
    return ".".join(module.split(".")[:2]) or None


def _normalize_rust(module: str) -> Optional[str]:
    return module.split("::")[0] or None


def _normalize_php(module: str) -> Optional[str]:
    return module.lstrip("\\").split("\\")[0] or None


def _normalize_ruby(module: str) -> Optional[str]:
    return module.split("/")[0] or None


def _normalize_dart(module: str) -> Optional[str]:
    if not module.startswith("package:"):
        return None
    return module[len("package:") :].split("/")[0] or None


def _normalize_first_dotted(module: str) -> Optional[str]:
    return module.split(".")[0] or None


_NODE_BUILTINS = (
    "assert|async_hooks|buffer|child_process|cluster|console|constants|crypto|dgram"
    "|diagnostics_channel|dns|domain|events|fs|http|http2|https|inspector|module|net|os"
    "|path|perf_hooks|process|punycode|querystring|readline|repl|stream|string_decoder"
    "|sys|timers|tls|trace_events|tty|url|util|v8|vm|wasi|worker_threads|zlib"
)

_RUBY_STDLIB = (
    "json|set|time|date|yaml|csv|erb|fileutils|logger|net|open-uri|open3|optparse"
    "|ostruct|pathname|securerandom|digest|base64|benchmark|socket|tempfile|uri"
    "|English|forwardable|singleton|timeout|zlib|stringio|strscan|pp|tmpdir|shellwords"
)

_SWIFT_SYSTEM = (
    "Foundation|UIKit|SwiftUI|Swift|Darwin|Combine|AppKit|CoreData|CoreGraphics"
    "|CoreFoundation|Dispatch|os|XCTest|Glibc|ObjectiveC|CoreLocation|MapKit"
)

_JAVA_LIKE_IMPORT = re.compile(r"^\s*import\s+(?:static\s+)?([A-Za-z_][\w.]*)", re.MULTILINE)

IMPORT_LANGUAGES: Mapping[str, ImportLanguage] = MappingProxyType(
    {
        "javascript": ImportLanguage(
            name="javascript",
            patterns=(
                re.compile(r"\bimport\s+(?:[\w*{}\s,$]+?\s+from\s+)?['\"`]([^'\"`]+)['\"`]"),
                re.compile(r"\bexport\s+[\w*{}\s,$]+?\s+from\s+['\"`]([^'\"`]+)['\"`]"),
                re.compile(r"\brequire\s*\(\s*['\"`]([^'\"`]+)['\"`]\s*\)"),
                re.compile(r"\bimport\s*\(\s*['\"`]([^'\"`]+)['\"`]\s*\)"),
            ),
            is_standard=_regex_test(rf"^(?:node:|(?:{_NODE_BUILTINS})(?:/|$))"),
            normalize=_normalize_js,
        ),
        "python": ImportLanguage(
            name="python",
            patterns=(
                re.compile(r"^\s*from\s+(\.*[A-Za-z_][\w.]*|\.+)\s+import\b", re.MULTILINE),
            ),
            list_patterns=(_PYTHON_IMPORT_LIST,),
            is_standard=_is_python_standard,
            normalize=_normalize_python,
        ),
        "go": ImportLanguage(
            name="go",
            patterns=(re.compile(r"^\s*import\s+(?:[\w.]+\s+)?\"([^\"]+)\"", re.MULTILINE),),
            block_patterns=(re.compile(r"^\s*import\s*\(([^)]*)\)", re.MULTILINE),),
            is_standard=_regex_test(r"^[^./]+(?:/|$)"),
            normalize=_normalize_go,
        ),
        "java": ImportLanguage(
            name="java",
            patterns=(_JAVA_LIKE_IMPORT,),
            is_standard=_regex_test(r"^(?:java|javax|kotlin|kotlinx|scala)\."),
            normalize=_normalize_dotted_pair,
        ),
        "rust": ImportLanguage(
            name="rust",
            patterns=(
                re.compile(
                    r"^\s*(?:pub(?:\([^)]*\))?\s+)?use\s+([A-Za-z_]\w*(?:::[A-Za-z_]\w*)*)",
                    re.MULTILINE,
                ),
                re.compile(r"\bextern\s+crate\s+([A-Za-z_]\w*)"),
            ),
            is_standard=_regex_test(r"^(?:std|core|alloc|crate|self|super)(?:::|$)"),
            normalize=_normalize_rust,
        ),
        "php": ImportLanguage(
            name="php",
            patterns=(
                re.compile(r"^\s*use\s+([A-Za-z_\\][\w\\]*)\s*(?:;|\bas\b)", re.MULTILINE),
            ),
            is_standard=_never,
            normalize=_normalize_php,
        ),
        "ruby": ImportLanguage(
            name="ruby",
            patterns=(re.compile(r"^\s*require\s+['\"`]([^'\"`]+)['\"`]", re.MULTILINE),),
            is_standard=_regex_test(rf"^(?:{_RUBY_STDLIB})(?:/|$)"),
            normalize=_normalize_ruby,
        ),
        "dart": ImportLanguage(
            name="dart",
            patterns=(
                re.compile(r"^\s*import\s+['\"`]([^'\"`]+)['\"`]", re.MULTILINE),
                re.compile(r"^\s*export\s+['\"`]([^'\"`]+)['\"`]", re.MULTILINE),
            ),
            is_standard=_regex_test(r"^dart:"),
            normalize=_normalize_dart,
        ),
        "csharp": ImportLanguage(
            name="csharp",
            patterns=(
                re.compile(r"^\s*(?:global\s+)?using\s+([A-Za-z_][\w.]*)\s*;", re.MULTILINE),
            ),
            is_standard=_regex_test(r"^(?:System|Microsoft)(?:\.|$)"),
            normalize=_normalize_first_dotted,
        ),
        "swift": ImportLanguage(
            name="swift",
            patterns=(
                re.compile(r"^\s*(?:@testable\s+)?import\s+([A-Za-z_]\w*)", re.MULTILINE),
            ),
            is_standard=_regex_test(rf"^(?:{_SWIFT_SYSTEM})$"),
            normalize=_normalize_first_dotted,
        ),
    }
)

EXTENSION_LANGUAGES: Mapping[str, str] = MappingProxyType(
    {
        "js": "javascript",
        "jsx": "javascript",
        "mjs": "javascript",
        "cjs": "javascript",
        "ts": "javascript",
        "tsx": "javascript",
        "py": "python",
        "go": "go",
        "java": "java",
        "kt": "java",
        "scala": "java",
        "rs": "rust",
        "php": "php",
        "rb": "ruby",
        "dart": "dart",
        "cs": "csharp",
        "swift": "swift",
    }
)


def language_for_path(path: str) -> Optional[ImportLanguage]:
    """Return the import table for a source path, based on its extension."""
    _, extension = posixpath.splitext(path)
    language = EXTENSION_LANGUAGES.get(extension[1:].lower())
    return IMPORT_LANGUAGES.get(language) if language else None


def package_for_import(module: str, language: ImportLanguage) -> Optional[str]:
    """Map an import reference to an external package name.

    Local references (leading ``.`` or ``/``) and standard-library modules
    yield None; the checks run in that order before normalisation.
    """
    module = module.strip()
    if not module or module.startswith((".", "/")):
        return None
    if language.is_standard(module):
        return None
    return language.normalize(module)


def iter_imports(content: str, language: ImportLanguage) -> Iterable[str]:
    """Yield raw import references in pattern order."""
    for pattern in language.patterns:
        for match in pattern.finditer(content):
            if match.group(1):
                yield match.group(1)
    for pattern in language.list_patterns:
        for match in pattern.finditer(content):
            for entry in match.group(1).split(","):
                if entry.strip():
                    yield entry.split()[0]
    for pattern in language.block_patterns:
        for match in pattern.finditer(content):
            for line in match.group(1).splitlines():
                quoted = _QUOTED_IMPORT.search(line)
                if quoted:
                    yield quoted.group(1)


def analyze_import_statements(
    files: Iterable[RepositoryFile], limit: int = 15
) -> List[DependencyInsight]:
    """Count external package references across source files, keeping the top ``limit``."""
    counts: Counter[str] = Counter()
    for file in files:
        language = language_for_path(file.path)
        if language is None or not isinstance(file.content, str):
            continue
        for module in iter_imports(file.content, language):
            package = package_for_import(module, language)
            if package:
                counts[package] += 1

    return [DependencyInsight(name=name, count=count) for name, count in counts.most_common(limit)]


__all__ = [
    "EXTENSION_LANGUAGES",
    "IMPORT_LANGUAGES",
    "ImportLanguage",
    "analyze_import_statements",
    "iter_imports",
    "language_for_path",
    "package_for_import",
]
