"""Filesystem capability protocol and its real-disk implementation.

The project model only talks to a ``FileSystem`` so it can be exercised
against ``MemoryFileSystem`` in tests. Errors are ``OSError`` subclasses and
surface immediately; nothing here buffers or retries.
"""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from .languages import get_language_for_file
from .types import ROOT_REL_PATH, FileInfo

FILE_MODE = 0o644

WalkFunc = Callable[[FileInfo], "bool | None"]


class FileSystem(Protocol):
    """Read/write/list/walk/exists capabilities used by the project model."""

    def read_file(self, path: Path) -> bytes: ...

    def write_file(self, path: Path, data: bytes) -> None: ...

    def list_files(self, path: Path) -> list[FileInfo]: ...

    def walk_dir(self, path: Path, fn: WalkFunc) -> None:
        """Walk ``path`` in pre-order, root entry first.

        ``fn`` returns ``False`` to skip an entry's subtree. Anything raised by
        ``fn`` aborts the walk and propagates.
        """
        ...

    def exists(self, path: Path) -> bool: ...


def rel_path_for(root: Path, path: Path) -> str:
    """Return ``path`` relative to ``root`` as a POSIX string (``"."`` for root)."""
    if path == root:
        return ROOT_REL_PATH
    return path.relative_to(root).as_posix()


def file_info_from_stat(path: Path, rel_path: str, is_dir: bool, stat: os.stat_result) -> FileInfo:
    return FileInfo(
        name=path.name,
        path=path,
        rel_path=rel_path,
        is_dir=is_dir,
        size=int(stat.st_size),
        mod_time=int(stat.st_mtime),
        language=get_language_for_file(path.name),
    )


class OSFileSystem:
    """``FileSystem`` backed by real OS calls."""

    def read_file(self, path: Path) -> bytes:
        return Path(path).read_bytes()

    def write_file(self, path: Path, data: bytes) -> None:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        with os.fdopen(fd, "wb") as handle:
            handle.write(data)

    def list_files(self, path: Path) -> list[FileInfo]:
        """List immediate children sorted by name.

        Entries whose metadata cannot be read are skipped; failure to open the
        directory itself raises.
        """
        directory = Path(path)
        files: list[FileInfo] = []
        with os.scandir(directory) as entries:
            for entry in sorted(entries, key=lambda item: item.name):
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                    stat = entry.stat(follow_symlinks=False)
                except OSError:
                    continue
                child_path = directory / entry.name
                files.append(file_info_from_stat(child_path, entry.name, is_dir, stat))
        return files

    def walk_dir(self, path: Path, fn: WalkFunc) -> None:
        root = Path(path)
        root_info = file_info_from_stat(root, ROOT_REL_PATH, root.is_dir(), root.stat())

        # Explicit stack keeps deep trees off the interpreter recursion limit.
        stack: list[FileInfo] = [root_info]
        while stack:
            info = stack.pop()
            if fn(info) is False or not info.is_dir:
                continue
            with os.scandir(info.path) as scanned:
                entries = sorted(scanned, key=lambda item: item.name)
            children: list[FileInfo] = []
            for entry in entries:
                child_path = info.path / entry.name
                try:
                    is_dir = entry.is_dir(follow_symlinks=False)
                    stat = entry.stat(follow_symlinks=False)
                except FileNotFoundError:
                    # Removed between scandir and stat.
                    continue
                children.append(file_info_from_stat(child_path, rel_path_for(root, child_path), is_dir, stat))
            stack.extend(reversed(children))

    def exists(self, path: Path) -> bool:
        try:
            os.stat(path)
        except (OSError, ValueError):
            return False
        return True


__all__ = [
    "FILE_MODE",
    "WalkFunc",
    "FileSystem",
    "OSFileSystem",
    "file_info_from_stat",
    "rel_path_for",
]
