"""Tests for the project tree builder."""

from __future__ import annotations

from repolens.analyzers.tree import build_project_tree, render_tree
from repolens.models import DIRECTORY_NODE, FILE_NODE, SubsystemInfo, TreeNode
from tests._fixtures.repo_builder import make_files


def _assert_children_sorted(node: TreeNode) -> None:
    children = node.children or []
    kinds = [0 if child.is_directory else 1 for child in children]
    assert kinds == sorted(kinds)
    directories = [child.name for child in children if child.is_directory]
    files = [child.name for child in children if not child.is_directory]
    assert directories == sorted(directories)
    assert files == sorted(files)
    for child in children:
        _assert_children_sorted(child)


def _assert_paths_follow_names(node: TreeNode) -> None:
    for child in node.children or []:
        expected = f"{node.path}/{child.name}" if node.path else child.name
        assert child.path == expected
        _assert_paths_follow_names(child)


def test_single_nested_file_builds_two_levels() -> None:
    tree = build_project_tree(make_files({"src/App.jsx": "export default App;\n"}))

    assert tree.max_depth == 2
    assert tree.total_files == 1
    assert tree.total_directories == 1

    [src] = tree.root.children
    assert src.type == DIRECTORY_NODE
    assert src.path == "src"
    [app] = src.children
    assert app.type == FILE_NODE
    assert app.path == "src/App.jsx"
    assert app.file_type == "javascript"
    assert app.size == len("export default App;\n")
    assert app.children is None


def test_counts_distinct_paths_and_prefixes() -> None:
    files = make_files(["a/b/c.py", "a/b/d.py", "a/e.py", "f.md", "a/b/c.py"])

    tree = build_project_tree(files)

    assert tree.total_files == 4
    assert tree.total_directories == 2
    assert tree.max_depth == 3


def test_children_are_directories_first_then_files_by_name() -> None:
    files = make_files(["b.txt", "a/z.py", "a/b/c.py", "A.md", "Z/readme.md", "a/Y.py"])

    tree = build_project_tree(files)

    assert [child.name for child in tree.root.children] == ["Z", "a", "A.md", "b.txt"]
    a_dir = tree.root.children[1]
    assert [child.name for child in a_dir.children] == ["b", "Y.py", "z.py"]
    _assert_children_sorted(tree.root)


def test_child_paths_extend_their_parent_path() -> None:
    files = make_files(
        [
            "README.md",
            "src/app/models/user.py",
            "src/app/views.py",
            "src/main.py",
            "/docs//guide/intro.md",
            "lib",
            "lib/core.py",
        ]
    )

    tree = build_project_tree(files)

    assert tree.root.path == ""
    assert tree.max_depth == 4
    _assert_paths_follow_names(tree.root)


def test_input_order_does_not_change_the_tree() -> None:
    paths = ["src/index.js", "README.md", "src/lib/util.js", "docs/guide.md"]
    forward = make_files(paths)
    backward = list(reversed(forward))
    snapshot = list(backward)

    assert build_project_tree(forward).to_dict() == build_project_tree(backward).to_dict()
    assert backward == snapshot


def test_nodes_are_annotated_with_subsystem_types() -> None:
    files = make_files(["src/App.jsx", "server/index.js"])
    subsystems = [
        SubsystemInfo(
            name="Frontend",
            type="frontend",
            files=["src/App.jsx"],
            confidence=0.9,
            description="",
        ),
        SubsystemInfo(
            name="Backend",
            type="backend",
            files=["server/index.js", "server"],
            confidence=0.8,
            description="",
        ),
    ]

    tree = build_project_tree(files, subsystems)

    server, src = tree.root.children
    assert server.subsystem_type == "backend"
    assert server.children[0].subsystem_type == "backend"
    assert src.subsystem_type is None
    assert src.children[0].subsystem_type == "frontend"


def test_file_path_reused_as_directory_becomes_directory() -> None:
    tree = build_project_tree(make_files(["lib", "lib/core.py"]))

    [lib] = tree.root.children
    assert lib.is_directory
    assert [child.name for child in lib.children] == ["core.py"]
    assert tree.total_files == 1
    assert tree.total_directories == 1


def test_empty_segments_are_ignored() -> None:
    tree = build_project_tree(make_files(["/src//main.go"]))

    [src] = tree.root.children
    assert src.path == "src"
    assert src.children[0].path == "src/main.go"
    assert tree.max_depth == 2


def test_malformed_input_yields_empty_tree() -> None:
    for value in (None, "src/App.jsx", 42, [object(), None]):
        tree = build_project_tree(value)  # type: ignore[arg-type]
        assert tree.root.children == []
        assert tree.total_files == 0
        assert tree.total_directories == 0
        assert tree.max_depth == 0


def test_render_tree_draws_connectors_and_annotations() -> None:
    files = make_files(["src/App.jsx", "src/index.js", "README.md"])
    subsystems = [
        SubsystemInfo(
            name="Frontend",
            type="frontend",
            files=["src/App.jsx"],
            confidence=0.9,
            description="",
        )
    ]

    rendered = render_tree(build_project_tree(files, subsystems))

    assert rendered.splitlines() == [
        "├── src/",
        "│   ├── App.jsx (frontend)",
        "│   └── index.js",
        "└── README.md",
    ]


def test_render_tree_of_empty_tree_is_empty() -> None:
    assert render_tree(build_project_tree([])) == ""
