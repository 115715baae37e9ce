"""Interactive command session (read-eval-print loop) over one project.

Reads one line at a time, dispatches it through a closed command registry
and renders results. Handler errors are rendered at the dispatch boundary and
never end the loop; only the exit commands, end of input, or a cancelled
session context do.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Protocol, TextIO

from .cancellation import CancelContext
from .commands import Command, CommandBinding, CommandRegistry
from .errors import FileResolutionError
from .file_tree_model import FileInfo, FileSystem, TreeNode
from .render import Renderer
from .syntax import decode_text

logger = logging.getLogger(__name__)

PROMPT = "gox> "
EXIT_COMMANDS = ("exit", "quit", "q")


class SessionProject(Protocol):
    @property
    def path(self) -> Path: ...

    @property
    def name(self) -> str: ...

    @property
    def fs(self) -> FileSystem: ...

    def is_go_project(self) -> bool: ...

    def files(self) -> tuple[list[FileInfo], Exception | None]: ...

    def file_tree(self) -> tuple[TreeNode, Exception | None]: ...


class SessionBuilder(Protocol):
    def build(self, ctx: CancelContext, project) -> Exception | None: ...

    def run(self, ctx: CancelContext, project) -> Exception | None: ...

    def test(self, ctx: CancelContext, project) -> Exception | None: ...

    def clean(self, ctx: CancelContext, project) -> Exception | None: ...


def resolve_file_reference(files: list[FileInfo], ref: str) -> tuple[FileInfo | None, Exception | None]:
    """Resolve ``ref`` against the last listing.

    Integers are 1-based indexes; anything else must equal an entry's
    relative path or bare name (first match wins).
    """
    try:
        number = int(ref)
    except ValueError:
        number = None

    if number is not None:
        if not files:
            return None, FileResolutionError(
                f"invalid file number {ref}: no files listed yet; use 'ls' first"
            )
        if number < 1 or number > len(files):
            return None, FileResolutionError(
                f"invalid file number {ref} (valid range: 1-{len(files)}); "
                "use 'ls' to see available files"
            )
        return files[number - 1], None

    for info in files:
        if info.rel_path == ref or info.name == ref:
            return info, None
    return None, FileResolutionError(f"file not found: {ref}")


class Session:
    """REPL state for one project: the last listing and the current file."""

    def __init__(
        self,
        project: SessionProject,
        builder: SessionBuilder,
        renderer: Renderer | None = None,
        input: TextIO | None = None,
        output: TextIO | None = None,
        ctx: CancelContext | None = None,
        command_timeout: float | None = None,
    ) -> None:
        self.project = project
        self.builder = builder
        self.renderer = renderer if renderer is not None else Renderer()
        self.input = input if input is not None else sys.stdin
        self.output = output if output is not None else sys.stdout
        self.ctx = ctx if ctx is not None else CancelContext.background()
        self.command_timeout = command_timeout
        self.files: list[FileInfo] = []
        self.current_file: Path | None = None
        self.registry = CommandRegistry().register_bindings(
            CommandBinding(("help", "h"), self._help),
            CommandBinding(("ls", "list"), self._list_files),
            CommandBinding(("tree",), self._show_tree),
            CommandBinding(("open", "o"), self._open_file),
            CommandBinding(("cat", "view"), self._view_file),
            CommandBinding(("build",), self._build),
            CommandBinding(("run",), self._run),
            CommandBinding(("test",), self._test),
            CommandBinding(("clean",), self._clean),
            CommandBinding(("info",), self._info),
            CommandBinding(("version",), self._version),
            CommandBinding(EXIT_COMMANDS, self._exit),
        )

    def run(self) -> Exception | None:
        """Prompt and execute lines until end of input or cancellation."""
        self.renderer.render_welcome(self.output, self.project)
        while True:
            cancelled = self.ctx.err()
            if cancelled is not None:
                return cancelled
            self.output.write(PROMPT)
            self.output.flush()
            line = self.input.readline()
            if not line:
                return None
            self.execute(line)

    def execute(self, line: str) -> Exception | None:
        """Dispatch one input line, rendering any error it produces."""
        command = Command.parse(line)
        if command is None:
            return None
        try:
            err = self.registry.dispatch(command)
        except Exception as exc:
            logger.exception("Command %r crashed", command.name)
            err = exc
        if err is not None:
            logger.info("Command error: %s: %s", line.strip(), err)
            self.renderer.render_error(self.output, err)
        return err

    def resolve(self, ref: str) -> tuple[FileInfo | None, Exception | None]:
        return resolve_file_reference(self.files, ref)

    def _help(self, _args: tuple[str, ...]) -> Exception | None:
        self.renderer.render_help(self.output)
        return None

    def _list_files(self, _args: tuple[str, ...]) -> Exception | None:
        files, err = self.project.files()
        if err is not None:
            return err
        self.files = files
        self.renderer.render_file_list(self.output, self.project.name, files)
        return None

    def _show_tree(self, _args: tuple[str, ...]) -> Exception | None:
        tree, err = self.project.file_tree()
        if err is not None:
            return err
        self.renderer.render_file_tree(self.output, tree)
        return None

    def _open_file(self, args: tuple[str, ...]) -> Exception | None:
        if not args:
            return FileResolutionError("usage: open <file>")
        info, err = self.resolve(args[0])
        if err is not None:
            return err
        self.current_file = info.path
        self.renderer.render_message(self.output, f"✅ Opened: {args[0]}")
        self.renderer.render_message(self.output, f"💡 Use 'cat {args[0]}' to view contents")
        return None

    def _view_file(self, args: tuple[str, ...]) -> Exception | None:
        if not args:
            return FileResolutionError("usage: cat <file>")
        info, err = self.resolve(args[0])
        if err is not None:
            return err
        try:
            data = self.project.fs.read_file(info.path)
        except OSError as exc:
            return exc
        self.renderer.render_file(self.output, info, info.path, decode_text(data), size=len(data))
        return None

    def _build(self, _args: tuple[str, ...]) -> Exception | None:
        self._announce("🔨 Building Go project...")
        return self._finish(self._with_command_ctx(self.builder.build), "✅ Build succeeded")

    def _run(self, _args: tuple[str, ...]) -> Exception | None:
        self._announce("🏃 Running Go project...")
        return self._finish(self._with_command_ctx(self.builder.run), None)

    def _test(self, _args: tuple[str, ...]) -> Exception | None:
        self._announce("🧪 Running Go tests...")
        return self._finish(self._with_command_ctx(self.builder.test), "✅ Tests passed")

    def _clean(self, _args: tuple[str, ...]) -> Exception | None:
        self._announce("🧹 Cleaning Go project...")
        return self._finish(self._with_command_ctx(self.builder.clean), "✅ Clean complete")

    def _with_command_ctx(self, action) -> Exception | None:
        """Run a builder action under a child context so Ctrl+C spares the session.

        With ``command_timeout`` set the child context also carries a deadline.
        """
        if self.command_timeout:
            ctx = self.ctx.with_timeout(self.command_timeout)
        else:
            ctx = self.ctx.child()
        try:
            return action(ctx, self.project)
        finally:
            ctx.detach()

    def _announce(self, message: str) -> None:
        # Flush before the child writes to the shared terminal.
        self.renderer.render_message(self.output, message)
        self.output.flush()

    def _finish(self, err: Exception | None, success: str | None) -> Exception | None:
        if err is None and success is not None:
            self.renderer.render_message(self.output, success)
        self.output.flush()
        return err

    def _info(self, _args: tuple[str, ...]) -> Exception | None:
        self.renderer.render_project(self.output, self.project)
        return None

    def _version(self, _args: tuple[str, ...]) -> Exception | None:
        self.renderer.render_version(self.output)
        return None

    def _exit(self, _args: tuple[str, ...]) -> Exception | None:
        self.renderer.render_message(self.output, "Goodbye! Thanks for using GoX IDE 🚀")
        self.output.flush()
        raise SystemExit(0)


__all__ = ["PROMPT", "EXIT_COMMANDS", "Session", "resolve_file_reference"]
