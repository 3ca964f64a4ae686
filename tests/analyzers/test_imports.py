"""Tests for import statement scanning."""

from __future__ import annotations

import pytest

from repolens.analyzers.imports import (
    IMPORT_LANGUAGES,
    analyze_import_statements,
    language_for_path,
    package_for_import,
)
from tests._fixtures.repo_builder import make_files


def _counts(path: str, content: str) -> dict[str, int]:
    return {dep.name: dep.count for dep in analyze_import_statements(make_files({path: content}))}


def test_javascript_imports_requires_and_dynamic_imports() -> None:
    content = """
        import React from 'react';
        import { render } from '@testing-library/react';
        import './styles.css';
        import Button from '@/components/Button';
        import helpers from '~/lib/helpers';
        const fs = require('fs');
        const fp = require("lodash/fp");
        export { default } from 'next/router';
        const chart = await import('chart.js');
        import path from 'node:path';
        import confetti from 'https://esm.sh/canvas-confetti';
    """

    assert _counts("src/App.tsx", content) == {
        "react": 1,
        "@testing-library/react": 1,
        "lodash": 1,
        "next": 1,
        "chart.js": 1,
    }


def test_python_imports_skip_stdlib_and_relative() -> None:
    content = """
        from __future__ import annotations
        import os
        import yaml
        from requests.adapters import HTTPAdapter
        from . import utils
        from .models import User
        import numpy as np
    """

    assert _counts("app/service.py", content) == {"requests": 1, "yaml": 1, "numpy": 1}


def test_python_import_lists_count_every_module() -> None:
    content = """
        import requests, yaml
        import os.path as osp, numpy as np, json
    """

    assert _counts("app/cli.py", content) == {"requests": 1, "yaml": 1, "numpy": 1}


def test_go_single_and_block_imports() -> None:
    content = """
        package main

        import "fmt"

        import (
            "net/http"
            "github.com/gin-gonic/gin/binding"
            log "github.com/sirupsen/logrus"
            "golang.org/x/sync/errgroup"
        )
    """

    assert _counts("cmd/server/main.go", content) == {
        "github.com/gin-gonic/gin": 1,
        "github.com/sirupsen/logrus": 1,
        "golang.org": 1,
    }


def test_java_and_kotlin_imports() -> None:
    java = """
        import java.util.List;
        import static org.junit.Assert.assertEquals;
        import com.google.common.collect.ImmutableList;
    """
    kotlin = """
        import kotlinx.coroutines.launch
        import io.ktor.server.engine.embeddedServer
    """

    assert _counts("src/Main.java", java) == {"org.junit": 1, "com.google": 1}
    assert _counts("src/App.kt", kotlin) == {"io.ktor": 1}


def test_rust_use_and_extern_crate() -> None:
    content = """
        use std::collections::HashMap;
        use serde::{Deserialize, Serialize};
        use crate::config::Settings;
        pub use tokio::sync::mpsc;
        extern crate rand;
    """

    assert _counts("src/lib.rs", content) == {"serde": 1, "tokio": 1, "rand": 1}


def test_php_use_statements() -> None:
    content = """
        <?php
        require_once 'vendor/autoload.php';
        use Illuminate\\Support\\Facades\\Route;
        use Symfony\\Component\\HttpFoundation\\Request as HttpRequest;
    """

    assert _counts("routes/web.php", content) == {"Illuminate": 1, "Symfony": 1}


def test_ruby_requires() -> None:
    content = """
        require 'json'
        require 'sinatra/base'
        require_relative 'lib/helpers'
    """

    assert _counts("app.rb", content) == {"sinatra": 1}


def test_dart_package_imports() -> None:
    content = """
        import 'dart:async';
        import 'package:http/http.dart' as http;
        import 'src/widget.dart';
        export 'package:provider/provider.dart';
    """

    assert _counts("lib/main.dart", content) == {"http": 1, "provider": 1}


def test_csharp_and_swift_imports() -> None:
    csharp = """
        using System.Text;
        using Microsoft.Extensions.Logging;
        using Newtonsoft.Json;
    """
    swift = """
        import Foundation
        import Alamofire
        @testable import MyApp
    """

    assert _counts("Program.cs", csharp) == {"Newtonsoft": 1}
    assert _counts("Sources/App.swift", swift) == {"Alamofire": 1, "MyApp": 1}


def test_counts_accumulate_across_files_and_respect_limit() -> None:
    files = make_files(
        {
            "a.py": "import requests\n",
            "b.py": "import requests\nimport click\n",
            "c.js": "".join(f"import x{index} from 'pkg{index}';\n" for index in range(20)),
        }
    )

    dependencies = analyze_import_statements(files, limit=15)

    assert len(dependencies) == 15
    assert dependencies[0].name == "requests"
    assert dependencies[0].count == 2
    counts = [dep.count for dep in dependencies]
    assert counts == sorted(counts, reverse=True)


def test_non_source_files_are_ignored() -> None:
    files = make_files({"README.md": "import React from 'react'\n", "data.txt": "import os\n"})

    assert analyze_import_statements(files) == []


@pytest.mark.parametrize(
    ("module", "language", "expected"),
    [
        ("./local", "javascript", None),
        ("/abs/path", "javascript", None),
        ("node:fs", "javascript", None),
        ("fs/promises", "javascript", None),
        ("@scope/pkg/sub", "javascript", "@scope/pkg"),
        ("@scope", "javascript", None),
        ("https://esm.sh/react", "javascript", None),
        ("..pkg", "python", None),
        ("json.decoder", "python", None),
        ("django.db", "python", "django"),
        ("gitlab.com/group/project/pkg", "go", "gitlab.com/group/project"),
        ("core::fmt", "rust", None),
        ("dart:io", "dart", None),
    ],
)
def test_package_for_import_precedence(module: str, language: str, expected: str | None) -> None:
    assert package_for_import(module, IMPORT_LANGUAGES[language]) == expected


def test_language_for_path_uses_extension() -> None:
    assert language_for_path("web/App.TSX").name == "javascript"
    assert language_for_path("build.gradle.kts") is None
    assert language_for_path("Makefile") is None
