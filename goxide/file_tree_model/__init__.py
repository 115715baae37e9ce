"""Domain model for project files and trees.

This package contains non-UI primitives:
- file entry and tree node datatypes
- the filesystem capability protocol with OS and in-memory backends
- extension-based language tags and display glyphs
"""

from __future__ import annotations

from .types import ROOT_REL_PATH, FileInfo, TreeNode, iter_tree
from .fs import FILE_MODE, FileSystem, OSFileSystem, WalkFunc, file_info_from_stat, rel_path_for
from .memory import MemoryFileSystem
from .languages import (
    DEFAULT_ICON,
    DEFAULT_LANGUAGE,
    DIRECTORY_ICON,
    get_icon_for_language,
    get_language_for_file,
)

__all__ = [
    "ROOT_REL_PATH",
    "FileInfo",
    "TreeNode",
    "iter_tree",
    "FILE_MODE",
    "FileSystem",
    "OSFileSystem",
    "WalkFunc",
    "file_info_from_stat",
    "rel_path_for",
    "MemoryFileSystem",
    "DEFAULT_ICON",
    "DEFAULT_LANGUAGE",
    "DIRECTORY_ICON",
    "get_icon_for_language",
    "get_language_for_file",
]
