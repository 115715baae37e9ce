"""Domain datatypes for project file entries and the project tree."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

ROOT_REL_PATH = "."


@dataclass(frozen=True)
class FileInfo:
    """One filesystem entry observed during a listing or walk."""

    name: str
    path: Path
    rel_path: str
    is_dir: bool
    size: int = 0
    mod_time: int = 0
    language: str = "text"


@dataclass(frozen=True)
class TreeNode:
    """Tree node with recursively nested children.

    ``is_last`` marks the final visible sibling and only drives connector
    rendering.
    """

    file: FileInfo
    children: tuple["TreeNode", ...] = ()
    level: int = 0
    is_last: bool = False

    @property
    def is_root(self) -> bool:
        return self.file.rel_path == ROOT_REL_PATH


def iter_tree(node: TreeNode) -> Iterator[TreeNode]:
    """Yield ``node`` and all descendants in depth-first pre-order."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


__all__ = [
    "ROOT_REL_PATH",
    "FileInfo",
    "TreeNode",
    "iter_tree",
]
