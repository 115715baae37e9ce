"""Go project model: descriptor detection, flat file listing and tree building.

``files()`` and ``file_tree()`` share one visibility predicate and depth
ceiling so the flat list and the tree always agree on which paths exist.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path, PurePosixPath

from .errors import NotAProjectError
from .file_tree_model import ROOT_REL_PATH, FileInfo, FileSystem, TreeNode

logger = logging.getLogger(__name__)

DESCRIPTOR_FILE = "go.mod"
EXCLUDED_DIR_NAMES = frozenset({"vendor", "node_modules"})
MAX_TREE_DEPTH = 64


def is_visible(info: FileInfo) -> bool:
    """Return whether ``info`` belongs in listings (the root is always visible)."""
    if info.rel_path == ROOT_REL_PATH:
        return True
    if info.name.startswith("."):
        return False
    return info.name not in EXCLUDED_DIR_NAMES


class GoProject:
    """One rooted Go project directory viewed through an injected ``FileSystem``."""

    def __init__(self, path: Path, fs: FileSystem) -> None:
        self._path = Path(path)
        self._name = self._path.name or str(self._path)
        self._fs = fs

    @property
    def path(self) -> Path:
        return self._path

    @property
    def name(self) -> str:
        return self._name

    @property
    def fs(self) -> FileSystem:
        return self._fs

    def is_go_project(self) -> bool:
        # Never cached: a descriptor deleted mid-session must be noticed.
        return self._fs.exists(self._path / DESCRIPTOR_FILE)

    def require_go_project(self) -> NotAProjectError | None:
        if self.is_go_project():
            return None
        return NotAProjectError(self._path)

    def files(self) -> tuple[list[FileInfo], Exception | None]:
        """Return every visible regular file in walk order.

        Hidden entries and dependency directories are pruned with their whole
        subtree. The second element carries the walk error, if any.
        """
        files: list[FileInfo] = []

        def visit(info: FileInfo) -> bool:
            if not is_visible(info):
                return False
            if info.rel_path == ROOT_REL_PATH:
                return True
            if not info.is_dir:
                files.append(info)
                return True
            if len(PurePosixPath(info.rel_path).parts) >= MAX_TREE_DEPTH:
                logger.warning("tree depth limit %d reached at %s", MAX_TREE_DEPTH, info.path)
                return False
            return True

        try:
            self._fs.walk_dir(self._path, visit)
        except OSError as exc:
            logger.debug("walk of %s failed: %s", self._path, exc)
            return files, exc
        return files, None

    def file_tree(self) -> tuple[TreeNode, Exception | None]:
        root_info = FileInfo(
            name=self._name,
            path=self._path,
            rel_path=ROOT_REL_PATH,
            is_dir=True,
        )
        try:
            children = self._build_children(self._path, 0)
        except OSError as exc:
            logger.debug("tree build of %s failed: %s", self._path, exc)
            return TreeNode(file=root_info, level=0), exc
        return TreeNode(file=root_info, children=children, level=0), None

    def _build_children(self, directory: Path, level: int) -> tuple[TreeNode, ...]:
        entries = [entry for entry in self._fs.list_files(directory) if is_visible(entry)]
        nodes: list[TreeNode] = []
        for index, entry in enumerate(entries):
            info = self._with_project_rel_path(entry)
            children: tuple[TreeNode, ...] = ()
            if info.is_dir:
                if level + 1 >= MAX_TREE_DEPTH:
                    logger.warning("tree depth limit %d reached at %s", MAX_TREE_DEPTH, info.path)
                else:
                    children = self._build_children(info.path, level + 1)
            nodes.append(
                TreeNode(
                    file=info,
                    children=children,
                    level=level + 1,
                    is_last=index == len(entries) - 1,
                )
            )
        return tuple(nodes)

    def _with_project_rel_path(self, entry: FileInfo) -> FileInfo:
        """Rebase a listing entry's relative path onto the project root."""
        try:
            rel_path = entry.path.relative_to(self._path).as_posix()
        except ValueError:
            return entry
        if rel_path == entry.rel_path:
            return entry
        return replace(entry, rel_path=rel_path)


__all__ = [
    "DESCRIPTOR_FILE",
    "EXCLUDED_DIR_NAMES",
    "MAX_TREE_DEPTH",
    "GoProject",
    "is_visible",
]
