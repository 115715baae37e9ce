"""In-memory ``FileSystem`` used to exercise the project model without disk I/O."""

from __future__ import annotations

import errno
import os
from pathlib import Path

from .fs import WalkFunc, rel_path_for
from .languages import get_language_for_file
from .types import ROOT_REL_PATH, FileInfo


class MemoryFileSystem:
    """Dict-backed filesystem keyed by absolute paths.

    Writing a file implicitly creates its parent directories. ``denied`` paths
    raise ``PermissionError`` on read and list.
    """

    def __init__(self, files: dict[str, bytes | str] | None = None, mod_time: int = 0) -> None:
        self._files: dict[Path, bytes] = {}
        self._dirs: set[Path] = set()
        self.denied: set[Path] = set()
        self.mod_time = mod_time
        for raw_path, data in (files or {}).items():
            payload = data.encode("utf-8") if isinstance(data, str) else data
            self.write_file(Path(raw_path), payload)

    def mkdir(self, path: Path) -> None:
        path = Path(path)
        self._dirs.add(path)
        for parent in path.parents:
            self._dirs.add(parent)

    def read_file(self, path: Path) -> bytes:
        path = Path(path)
        self._check_access(path)
        if path not in self._files:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path))
        return self._files[path]

    def write_file(self, path: Path, data: bytes) -> None:
        path = Path(path)
        if path in self._dirs:
            raise IsADirectoryError(errno.EISDIR, os.strerror(errno.EISDIR), str(path))
        self.mkdir(path.parent)
        self._files[path] = bytes(data)

    def list_files(self, path: Path) -> list[FileInfo]:
        directory = Path(path)
        self._check_access(directory)
        if directory not in self._dirs:
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(directory))
        return [
            self._info(child, child.name)
            for child in self._children(directory)
        ]

    def walk_dir(self, path: Path, fn: WalkFunc) -> None:
        root = Path(path)
        if not self.exists(root):
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(root))

        stack: list[FileInfo] = [self._info(root, ROOT_REL_PATH)]
        while stack:
            info = stack.pop()
            if fn(info) is False or not info.is_dir:
                continue
            self._check_access(info.path)
            children = [self._info(child, rel_path_for(root, child)) for child in self._children(info.path)]
            stack.extend(reversed(children))

    def exists(self, path: Path) -> bool:
        path = Path(path)
        return path in self._files or path in self._dirs

    def _children(self, directory: Path) -> list[Path]:
        entries = {p for p in self._files if p.parent == directory}
        entries.update(p for p in self._dirs if p.parent == directory and p != directory)
        return sorted(entries, key=lambda item: item.name)

    def _check_access(self, path: Path) -> None:
        if path in self.denied:
            raise PermissionError(errno.EACCES, os.strerror(errno.EACCES), str(path))

    def _info(self, path: Path, rel_path: str) -> FileInfo:
        is_dir = path in self._dirs
        return FileInfo(
            name=path.name,
            path=path,
            rel_path=rel_path,
            is_dir=is_dir,
            size=0 if is_dir else len(self._files.get(path, b"")),
            mod_time=self.mod_time,
            language=get_language_for_file(path.name),
        )


__all__ = ["MemoryFileSystem"]
