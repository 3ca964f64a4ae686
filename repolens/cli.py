"""CLI entrypoints for repolens commands."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import List

from .analyzers import render_tree
from .config import ConfigError, load_config
from .engine import analyze_repository
from .logging import configure_logging
from .models import GitHubRepository, RepositoryAnalysis
from .repo_scanner import RepoScanner


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Increase log verbosity for troubleshooting.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="repolens",
        description="Summarise the structure, dependencies and tests of a repository.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    analyze_parser = subparsers.add_parser(
        "analyze",
        help="Analyze a local repository checkout.",
    )
    _add_verbose_option(analyze_parser, suppress_default=True)
    analyze_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the repository root (defaults to current directory).",
    )
    analyze_parser.add_argument(
        "--language",
        default=None,
        help="Primary language, used to label projects without marker files.",
    )
    analyze_parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also append log records to this file.",
    )
    analyze_parser.add_argument(
        "--json",
        action="store_true",
        help="Print the analysis as JSON instead of a text report.",
    )

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for repolens commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose), log_file=getattr(args, "log_file", None)
    )

    if args.command == "analyze":
        root = Path(args.path).expanduser()
        try:
            config = load_config(root)
            files = RepoScanner(config.scan).scan(root)
        except (FileNotFoundError, NotADirectoryError) as exc:
            parser.exit(1, f"{exc}\n")
        except ConfigError as exc:
            parser.exit(1, f"repolens analyze failed: {exc}\n")

        repository = GitHubRepository(
            name=config.root.name,
            full_name=config.root.name,
            language=args.language,
        )
        analysis = analyze_repository(files, repository, config.analysis)
        if args.json:
            print(json.dumps(analysis.to_dict(), indent=2))
        else:
            print(format_report(analysis))
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def format_report(analysis: RepositoryAnalysis) -> str:
    """Render an analysis as a plain-text report."""
    subsystem_analysis = analysis.subsystem_analysis
    coverage = analysis.insights.test_coverage
    lines: List[str] = [
        f"Project type: {subsystem_analysis.project_type}",
        f"Architecture: {subsystem_analysis.architecture}",
    ]

    if subsystem_analysis.patterns:
        names = ", ".join(pattern.pattern for pattern in subsystem_analysis.patterns)
        lines.append(f"Patterns: {names}")

    lines.append("")
    lines.append("Subsystems:")
    if subsystem_analysis.subsystems:
        for subsystem in subsystem_analysis.subsystems:
            lines.append(
                f"  - {subsystem.name} ({subsystem.confidence:.0%}, {len(subsystem.files)} files)"
            )
    else:
        lines.append("  (none detected)")

    lines.append("")
    lines.append("Dependencies:")
    if analysis.insights.dependencies:
        for dependency in analysis.insights.dependencies:
            lines.append(f"  - {dependency.name} ({dependency.count})")
    else:
        lines.append("  (none detected)")

    lines.append("")
    framework = f" [{coverage.test_framework}]" if coverage.test_framework else ""
    lines.append(
        f"Test coverage: ~{coverage.percentage}% "
        f"({len(coverage.test_files)} test files, "
        f"{coverage.tested_files}/{coverage.total_files} sources tested){framework}"
    )
    if coverage.untested_files:
        lines.append("Untested files:")
        lines.extend(f"  - {path}" for path in coverage.untested_files)

    tree = analysis.project_tree
    lines.append("")
    lines.append(
        f"Tree: {tree.total_files} files, {tree.total_directories} directories, "
        f"depth {tree.max_depth}"
    )
    rendered = render_tree(tree)
    if rendered:
        lines.append(rendered)

    return "\n".join(lines)


if __name__ == "__main__":
    main(sys.argv[1:])
