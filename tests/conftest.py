from __future__ import annotations

from pathlib import Path
from typing import Iterator, List

import pytest

from repolens.logging import reset_logging
from repolens.models import RepositoryFile
from tests._fixtures.repo_builder import RepoBuilder, make_files


@pytest.fixture
def repo_builder(tmp_path: Path) -> RepoBuilder:
    """Provide a reusable repo builder rooted at the pytest tmp_path."""
    return RepoBuilder(tmp_path)


@pytest.fixture
def fullstack_files() -> List[RepositoryFile]:
    """A small React + Express project with one test."""
    return make_files(
        {
            "package.json": """
                {
                  "name": "shop",
                  "dependencies": {"react": "^18.2.0", "express": "^4.18.0"},
                  "devDependencies": {"jest": "^29.0.0"}
                }
            """,
            "src/components/Button.tsx": "import React from 'react';\n",
            "src/components/Button.test.tsx": "import { render } from '@testing-library/react';\n",
            "src/components/Header.tsx": "import React from 'react';\nimport clsx from 'clsx';\n",
            "server/index.js": (
                "const express = require('express');\nconst path = require('path');\n"
            ),
            "server/routes/users.js": "const express = require('express');\n",
            "README.md": "# shop\n",
        }
    )


@pytest.fixture(autouse=True)
def _reset_repolens_logger() -> Iterator[None]:
    """Undo CLI logging configuration so caplog keeps seeing records."""
    yield
    reset_logging()
