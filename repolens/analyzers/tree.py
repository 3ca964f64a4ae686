"""Builds the hierarchical project tree from a flat file list."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from ..logging import get_logger
from ..models import (
    DIRECTORY_NODE,
    FILE_NODE,
    ProjectTree,
    RepositoryFile,
    SubsystemInfo,
    TreeNode,
)
from .utils import valid_files

_LOGGER = get_logger("tree")


def build_project_tree(
    files: Sequence[RepositoryFile] | None,
    subsystems: Iterable[SubsystemInfo] | None = None,
) -> ProjectTree:
    """Return a sorted directory/file tree annotated with subsystem types.

    The caller's sequence is left untouched; traversal happens over a sorted
    copy so the result does not depend on input order.
    """
    root = TreeNode(name="root", type=DIRECTORY_NODE, path="", children=[])
    tree = ProjectTree(root=root)

    candidates = valid_files(files)
    if not candidates:
        return tree

    subsystem_by_path: Dict[str, str] = {}
    for subsystem in subsystems or ():
        for file_path in subsystem.files:
            subsystem_by_path[file_path] = subsystem.type

    for file in sorted(candidates, key=lambda item: item.path):
        parts = [part for part in file.path.split("/") if part]
        if not parts:
            continue
        tree.max_depth = max(tree.max_depth, len(parts))

        current = root
        for index, part in enumerate(parts):
            is_file = index == len(parts) - 1
            current_path = "/".join(parts[: index + 1])
            existing = _find_child(current.children, part)
            if existing is not None and not is_file and not existing.is_directory:
                # "a" listed as a file and as a parent of "a/b": keep it a directory
                existing.type = DIRECTORY_NODE
                existing.children = []
                existing.file_type = None
                existing.size = None
                tree.total_files -= 1
                tree.total_directories += 1
            if existing is None:
                existing = TreeNode(
                    name=part,
                    type=FILE_NODE if is_file else DIRECTORY_NODE,
                    path=current_path,
                    children=None if is_file else [],
                    subsystem_type=subsystem_by_path.get(current_path),
                    file_type=file.type if is_file else None,
                    size=file.size if is_file else None,
                )
                current.children.append(existing)
                if is_file:
                    tree.total_files += 1
                else:
                    tree.total_directories += 1
            current = existing

    _sort_children(root)
    _LOGGER.debug(
        "Built tree with %d files, %d directories (depth %d)",
        tree.total_files,
        tree.total_directories,
        tree.max_depth,
    )
    return tree


def render_tree(tree: ProjectTree | TreeNode) -> str:
    """Render a tree as indented text with box-drawing connectors."""
    node = tree.root if isinstance(tree, ProjectTree) else tree
    lines: List[str] = []
    children = node.children or []
    for index, child in enumerate(children):
        _render_node(child, "", index == len(children) - 1, lines)
    return "\n".join(lines)


def _render_node(node: TreeNode, prefix: str, is_last: bool, lines: List[str]) -> None:
    connector = "└── " if is_last else "├── "
    label = f"{node.name}/" if node.is_directory else node.name
    if node.subsystem_type:
        label += f" ({node.subsystem_type})"
    lines.append(prefix + connector + label)

    children = node.children or []
    child_prefix = prefix + ("    " if is_last else "│   ")
    for index, child in enumerate(children):
        _render_node(child, child_prefix, index == len(children) - 1, lines)


def _find_child(children: List[TreeNode], name: str) -> Optional[TreeNode]:
    for child in children:
        if child.name == name:
            return child
    return None


def _sort_children(node: TreeNode) -> None:
    if not node.children:
        return
    node.children.sort(key=lambda child: (0 if child.is_directory else 1, child.name))
    for child in node.children:
        _sort_children(child)


__all__ = ["build_project_tree", "render_tree"]
