"""Shared helper utilities for analyzer implementations."""

from __future__ import annotations

from typing import List, Sequence

from ..models import RepositoryFile


def valid_files(
    files: Sequence[RepositoryFile] | None, *, require_content: bool = False
) -> List[RepositoryFile]:
    """Return the well-formed entries of ``files``.

    Anything other than a list or tuple yields an empty list; entries that are
    not ``RepositoryFile`` instances or carry an empty/non-string path are
    dropped. With ``require_content`` the content must be a string as well.
    """
    if not isinstance(files, (list, tuple)):
        return []
    return [
        item
        for item in files
        if isinstance(item, RepositoryFile)
        and isinstance(item.path, str)
        and item.path
        and (not require_content or isinstance(item.content, str))
    ]


def file_size(file: RepositoryFile) -> int:
    """Return the declared size, or the encoded content length when it is missing."""
    if isinstance(file.size, int) and file.size >= 0:
        return file.size
    if isinstance(file.content, str):
        return len(file.content.encode("utf-8"))
    return 0


__all__ = ["file_size", "valid_files"]
