"""Reading every file below a local directory."""

from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass
class File:
    """A file found while walking, with its content."""

    name: str = ""
    content: str = ""
    path: str = ""


@dataclass
class Directory:
    """A directory found while walking."""

    name: str = ""
    path: str = ""


def _read(path: str) -> File:
    with open(path, "rb") as handle:
        content = handle.read().decode("utf-8", errors="replace")
    return File(name=os.path.basename(path), content=content, path=path)


def _walk(path: str, files: list[File]) -> None:
    with os.scandir(path) as iterator:
        entries = sorted(iterator, key=lambda entry: entry.name)
    for entry in entries:
        child = os.path.join(path, entry.name)
        if entry.is_dir(follow_symlinks=False):
            _walk(child, files)
        else:
            files.append(_read(child))


def walk_local_directory(path: str | os.PathLike[str]) -> list[File]:
    """Return every file below path, in lexical walk order, with its content.

    If path is a file, it alone is returned. Raises OSError when path or
    anything below it cannot be read.
    """
    root = os.fspath(path)
    if not os.path.isdir(root):
        os.stat(root)
        return [_read(root)]
    files: list[File] = []
    _walk(root, files)
    return files