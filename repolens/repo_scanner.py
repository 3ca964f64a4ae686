"""Repository scanning: turns a local checkout into analysable files."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Sequence

from .config import ConfigError, ScanConfig, load_config
from .logging import get_logger
from .models import RepositoryFile

_LOGGER = get_logger("scanner")

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".tox",
    ".idea",
    ".cache",
}

_EXCLUDED_FILES = {
    ".DS_Store",
    "Thumbs.db",
}

_TYPE_BY_SUFFIX = {
    ".js": "javascript",
    ".jsx": "javascript",
    ".mjs": "javascript",
    ".cjs": "javascript",
    ".ts": "typescript",
    ".tsx": "typescript",
    ".py": "python",
    ".go": "go",
    ".java": "java",
    ".md": "markdown",
    ".json": "json",
    ".yml": "yaml",
    ".yaml": "yaml",
}


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .repolens.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def _build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []

    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8", errors="replace").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = _build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _load_ignore_rules(root: Path, exclude_paths: Sequence[str]) -> List[IgnoreRule]:
    rules = _parse_gitignore(root / ".gitignore")
    for pattern in exclude_paths:
        rule = _build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def _iter_files(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept_dirs = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            kept_dirs.append(name)
        dirnames[:] = kept_dirs

        for filename in sorted(filenames):
            if filename in _EXCLUDED_FILES:
                continue
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield current_dir / filename


def detect_file_type(path: str) -> str:
    """Return the coarse type tag for a path (``"text"`` when unknown)."""
    return _TYPE_BY_SUFFIX.get(Path(path).suffix.lower(), "text")


class RepoScanner:
    """Walks a repository and reads its text files."""

    def __init__(self, scan_config: ScanConfig | None = None) -> None:
        self._scan_config = scan_config

    def scan(self, root: str | Path) -> List[RepositoryFile]:
        """Return the UTF-8 text files of the repository, sorted by path.

        Binary or undecodable files and files above ``max_file_bytes`` are
        skipped.
        """
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Repository path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Repository path is not a directory: {root}")

        scan_config = self._scan_config or self._load_scan_config(root_path)
        rules = _load_ignore_rules(root_path, scan_config.exclude_paths)

        files: List[RepositoryFile] = []
        skipped = 0
        for path in _iter_files(root_path, rules):
            rel_path = path.relative_to(root_path).as_posix()
            try:
                size = path.stat().st_size
                if size > scan_config.max_file_bytes:
                    _LOGGER.debug("Skipping %s: %d bytes exceeds limit", rel_path, size)
                    skipped += 1
                    continue
                content = path.read_text(encoding="utf-8")
            except UnicodeDecodeError:
                _LOGGER.debug("Skipping %s: not UTF-8 text", rel_path)
                skipped += 1
                continue
            except OSError as exc:
                _LOGGER.debug("Skipping %s: %s", rel_path, exc)
                skipped += 1
                continue

            files.append(
                RepositoryFile(
                    path=rel_path,
                    content=content,
                    size=size,
                    type=detect_file_type(rel_path),
                )
            )

        _LOGGER.debug("Scanned %s: %d files kept, %d skipped", root_path, len(files), skipped)
        return sorted(files, key=lambda file: file.path)

    @staticmethod
    def _load_scan_config(root: Path) -> ScanConfig:
        try:
            return load_config(root).scan
        except ConfigError as exc:
            _LOGGER.warning("Ignoring invalid configuration: %s", exc)
            return ScanConfig()


__all__ = ["IgnoreRule", "RepoScanner", "detect_file_type"]
