"""Toolchain orchestration for build/run/test/clean.

Each operation spawns exactly one ``go`` process in the project root, bound
to a ``CancelContext``. Child stdio is inherited from the caller unless
streams are injected. Operations return an error value or ``None``.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Sequence
from pathlib import Path
from typing import IO, Any, Protocol

from .cancellation import CancelContext
from .errors import ToolchainError

logger = logging.getLogger(__name__)

DEFAULT_TOOLCHAIN = "go"
BUILD_ARGS: tuple[str, ...] = ("build", ".")
RUN_ARGS: tuple[str, ...] = ("run", ".")
TEST_ARGS: tuple[str, ...] = ("test", "./...")
CLEAN_ARGS: tuple[str, ...] = ("clean",)
DIST_DIR_NAME = "dist"
WINDOWS_EXE_SUFFIX = ".exe"
POLL_INTERVAL_SECONDS = 0.05

Stream = IO[Any] | int | None


class BuildableProject(Protocol):
    @property
    def path(self) -> Path: ...

    @property
    def name(self) -> str: ...

    def is_go_project(self) -> bool: ...

    def require_go_project(self) -> Exception | None: ...


def artifact_paths(project: BuildableProject) -> list[Path]:
    """Return build outputs removed by ``clean``: the binary and ``dist/``."""
    root = project.path
    return [
        root / project.name,
        root / f"{project.name}{WINDOWS_EXE_SUFFIX}",
        root / DIST_DIR_NAME,
    ]


def remove_artifact(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink()


class GoBuilder:
    """Runs fixed ``go`` subcommands against a project."""

    def __init__(
        self,
        toolchain: str = DEFAULT_TOOLCHAIN,
        stdin: Stream = None,
        stdout: Stream = None,
        stderr: Stream = None,
    ) -> None:
        self.toolchain = toolchain
        self._stdin = stdin
        self._stdout = stdout
        self._stderr = stderr

    def build(self, ctx: CancelContext, project: BuildableProject) -> Exception | None:
        return self._invoke(ctx, project, BUILD_ARGS, "Building project")

    def run(self, ctx: CancelContext, project: BuildableProject) -> Exception | None:
        # The launched program may be interactive.
        return self._invoke(ctx, project, RUN_ARGS, "Running project", interactive=True)

    def test(self, ctx: CancelContext, project: BuildableProject) -> Exception | None:
        return self._invoke(ctx, project, TEST_ARGS, "Testing project")

    def clean(self, ctx: CancelContext, project: BuildableProject) -> Exception | None:
        not_project = project.require_go_project()
        if not_project is not None:
            return not_project
        cancelled = ctx.err()
        if cancelled is not None:
            return cancelled

        for artifact in artifact_paths(project):
            if not artifact.exists() and not artifact.is_symlink():
                continue
            try:
                remove_artifact(artifact)
            except OSError as exc:
                logger.warning("Failed to remove artifact %s: %s", artifact, exc)

        return self._invoke(ctx, project, CLEAN_ARGS, "Cleaning project")

    def _invoke(
        self,
        ctx: CancelContext,
        project: BuildableProject,
        args: Sequence[str],
        action: str,
        interactive: bool = False,
    ) -> Exception | None:
        not_project = project.require_go_project()
        if not_project is not None:
            return not_project
        cancelled = ctx.err()
        if cancelled is not None:
            return cancelled

        argv = [self.toolchain, *args]
        logger.info("%s: %s", action, project.path)
        try:
            proc = subprocess.Popen(
                argv,
                cwd=project.path,
                stdin=self._stdin if interactive else subprocess.DEVNULL,
                stdout=self._stdout,
                stderr=self._stderr,
            )
        except OSError as exc:
            return ToolchainError(argv, cause=exc)

        returncode = self._wait(ctx, proc)
        if returncode is None or (returncode != 0 and ctx.cancelled):
            return ctx.err()
        if returncode != 0:
            return ToolchainError(argv, returncode)
        return None

    def _wait(self, ctx: CancelContext, proc: subprocess.Popen) -> int | None:
        """Wait for ``proc``; kill it and return ``None`` once ``ctx`` is cancelled.

        Ctrl+C while waiting cancels ``ctx`` instead of unwinding the caller.
        """
        while True:
            try:
                return proc.wait(timeout=POLL_INTERVAL_SECONDS)
            except subprocess.TimeoutExpired:
                if not ctx.cancelled:
                    continue
            except KeyboardInterrupt:
                ctx.cancel("interrupted")
            logger.info("Killing %s (pid %d): %s", proc.args, proc.pid, ctx.err())
            proc.kill()
            proc.wait()
            return None


__all__ = [
    "DEFAULT_TOOLCHAIN",
    "BUILD_ARGS",
    "RUN_ARGS",
    "TEST_ARGS",
    "CLEAN_ARGS",
    "GoBuilder",
    "artifact_paths",
    "remove_artifact",
]
