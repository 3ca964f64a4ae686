"""CLI parser and command behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from repolens.cli import _build_parser, main
from tests._fixtures.repo_builder import RepoBuilder


def _sample_repo(repo_builder: RepoBuilder) -> Path:
    repo_builder.write(
        {
            "package.json": """
                {
                  "dependencies": {"react": "^18.2.0"},
                  "devDependencies": {"jest": "^29.0.0"}
                }
            """,
            "src/components/Button.tsx": "import React from 'react';\n",
            "src/components/Button.test.tsx": "import { Button } from './Button';\n",
        }
    )
    return repo_builder.path()


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "analyze"])
    assert args.verbose is True
    assert args.command == "analyze"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["analyze", "--verbose"])
    assert args.verbose is True
    assert args.command == "analyze"


def test_cli_accepts_language_and_json_flags() -> None:
    parser = _build_parser()
    args = parser.parse_args(["analyze", "repo", "--language", "python", "--json"])
    assert args.path == "repo"
    assert args.language == "python"
    assert args.json is True
    assert args.log_file is None


def test_cli_requires_a_command() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args([])


def test_analyze_prints_text_report(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _sample_repo(repo_builder)

    main(["analyze", str(root)])

    output = capsys.readouterr().out
    assert "Project type: React Application" in output
    assert "  - react (8)" in output
    assert "Test coverage: ~100%" in output
    assert "[Jest]" in output
    assert "├── src/" in output


def test_analyze_prints_json(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _sample_repo(repo_builder)

    main(["analyze", str(root), "--json"])

    payload = json.loads(capsys.readouterr().out)
    assert payload["subsystem_analysis"]["project_type"] == "React Application"
    assert payload["project_tree"]["total_files"] == 3
    assert payload["insights"]["dependencies"][0] == {"name": "react", "count": 8}
    assert payload["insights"]["test_coverage"]["test_framework"] == "Jest"


def test_analyze_missing_path_exits_with_error(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["analyze", str(tmp_path / "nowhere")])

    assert excinfo.value.code == 1
    assert "Repository path not found" in capsys.readouterr().err


def test_analyze_invalid_config_exits_with_error(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({".repolens.yml": "- not\n- a mapping\n", "main.py": "print(1)\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["analyze", str(repo_builder.path())])

    assert excinfo.value.code == 1
    assert "repolens analyze failed" in capsys.readouterr().err


def test_analyze_writes_log_file(repo_builder: RepoBuilder, tmp_path: Path) -> None:
    root = _sample_repo(repo_builder)
    log_file = tmp_path / "logs" / "repolens.log"

    main(["analyze", str(root), "--log-file", str(log_file), "--json"])

    text = log_file.read_text(encoding="utf-8")
    assert "INFO repolens.engine: Analyzed 3 files" in text


def test_analyze_reports_despite_unreadable_file(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    root = _sample_repo(repo_builder)
    (root / "src" / "broken.ts").symlink_to(root / "src" / "gone.ts")

    main(["analyze", str(root)])

    captured = capsys.readouterr()
    assert "Project type: React Application" in captured.out
    assert "No such file" not in captured.err
