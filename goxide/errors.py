"""Error taxonomy shared by the project model, builder and session.

Core operations return these as values; only the session loop turns them
into user-visible text.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path


class GoxideError(Exception):
    """Base class for errors produced by goxide itself."""


class NotAProjectError(GoxideError):
    """Operation needs a Go project but the root has no descriptor file."""

    def __init__(self, path: Path) -> None:
        super().__init__(f"not a Go project: {path}")
        self.path = path


class FileResolutionError(GoxideError):
    """A file reference could not be resolved against the listed files."""


class UnknownCommandError(GoxideError):
    """The first token of an input line names no registered command."""

    def __init__(self, name: str) -> None:
        super().__init__(f"unknown command: {name} (type 'help' for commands)")
        self.name = name


class ToolchainError(GoxideError):
    """Toolchain process failed to spawn or exited with a non-zero status."""

    def __init__(
        self,
        argv: Sequence[str],
        returncode: int | None = None,
        cause: BaseException | None = None,
    ) -> None:
        self.argv = tuple(argv)
        self.returncode = returncode
        self.cause = cause
        command = " ".join(self.argv)
        if cause is not None:
            message = f"failed to start {command}: {cause}"
        else:
            message = f"{command} exited with status {returncode}"
        super().__init__(message)


class CancelledError(GoxideError):
    """The active cancel context was cancelled while work was pending."""

    def __init__(self, reason: str = "context canceled") -> None:
        super().__init__(reason)
        self.reason = reason


__all__ = [
    "GoxideError",
    "NotAProjectError",
    "FileResolutionError",
    "UnknownCommandError",
    "ToolchainError",
    "CancelledError",
]
