"""Headless session tests: scripted input lines in, rendered text out."""

from __future__ import annotations

import io
import unittest
from pathlib import Path

from goxide.cancellation import CancelContext
from goxide.commands import CommandBinding
from goxide.errors import CancelledError, FileResolutionError, ToolchainError, UnknownCommandError
from goxide.file_tree_model import MemoryFileSystem
from goxide.project import GoProject
from goxide.session import PROMPT, Session, resolve_file_reference

ROOT = Path("/work/hello")


class FakeBuilder:
    def __init__(self, result: Exception | None = None, on_call=None) -> None:
        self.result = result
        self.on_call = on_call
        self.calls: list[tuple[str, CancelContext]] = []

    def _record(self, name: str, ctx: CancelContext, project) -> Exception | None:
        self.calls.append((name, ctx))
        if self.on_call is not None:
            self.on_call(name, ctx)
        return self.result

    def build(self, ctx, project):
        return self._record("build", ctx, project)

    def run(self, ctx, project):
        return self._record("run", ctx, project)

    def test(self, ctx, project):
        return self._record("test", ctx, project)

    def clean(self, ctx, project):
        return self._record("clean", ctx, project)


def _go_fs() -> MemoryFileSystem:
    return MemoryFileSystem(
        {
            "/work/hello/go.mod": "module hello\n",
            "/work/hello/main.go": "package main\n\nfunc main() {}\n",
            "/work/hello/.git/HEAD": "ref: refs/heads/main\n",
            "/work/hello/vendor/pkg.go": "package pkg\n",
        }
    )


def _session(fs: MemoryFileSystem | None = None, lines: str = "", builder=None, ctx=None) -> Session:
    project = GoProject(ROOT, fs if fs is not None else _go_fs())
    return Session(
        project,
        builder if builder is not None else FakeBuilder(),
        input=io.StringIO(lines),
        output=io.StringIO(),
        ctx=ctx,
    )


class SessionLoopTests(unittest.TestCase):
    def test_list_open_exit_scenario(self) -> None:
        fs = MemoryFileSystem(
            {
                "/work/hello/main.go": "package main\n",
                "/work/hello/.git/HEAD": "ref\n",
            }
        )
        session = _session(fs, "ls\nopen 1\nexit\n")

        with self.assertRaises(SystemExit) as raised:
            session.run()

        self.assertEqual(raised.exception.code, 0)
        output = session.output.getvalue()
        self.assertEqual(output.count(PROMPT), 3)
        self.assertEqual(len(session.files), 1)
        self.assertEqual(session.current_file, ROOT / "main.go")
        self.assertIn("✅ Opened: 1", output)
        self.assertIn("Goodbye!", output)

    def test_quit_aliases_exit(self) -> None:
        for word in ("quit", "q"):
            with self.subTest(word=word):
                session = _session(lines=f"{word}\n")
                with self.assertRaises(SystemExit):
                    session.run()

    def test_end_of_input_ends_cleanly(self) -> None:
        session = _session(lines="help\n")

        self.assertIsNone(session.run())
        output = session.output.getvalue()
        self.assertEqual(output.count(PROMPT), 2)
        self.assertIn("🐹 Go project detected!", output)
        self.assertIn("Commands:", output)

    def test_cancelled_session_context_stops_before_prompting(self) -> None:
        ctx = CancelContext.background()
        ctx.cancel()
        session = _session(lines="ls\n", ctx=ctx)

        err = session.run()

        self.assertIsInstance(err, CancelledError)
        self.assertNotIn(PROMPT, session.output.getvalue())
        self.assertEqual(session.files, [])

    def test_errors_do_not_end_the_loop(self) -> None:
        session = _session(lines="ls\nopen 5\nbogus\nls\n")

        self.assertIsNone(session.run())
        output = session.output.getvalue()
        self.assertEqual(output.count(PROMPT), 5)
        self.assertIn("❌ Error: invalid file number 5 (valid range: 1-2)", output)
        self.assertIn("❌ Error: unknown command: bogus", output)
        self.assertIsNone(session.current_file)


class SessionCommandTests(unittest.TestCase):
    def test_blank_line_is_ignored(self) -> None:
        session = _session()
        self.assertIsNone(session.execute("   \n"))
        self.assertEqual(session.output.getvalue(), "")

    def test_unknown_command_returns_error_value(self) -> None:
        session = _session()
        err = session.execute("frobnicate now")
        self.assertIsInstance(err, UnknownCommandError)
        self.assertEqual(err.name, "frobnicate")

    def test_list_is_idempotent(self) -> None:
        session = _session()

        session.execute("ls")
        first = list(session.files)
        first_output = session.output.getvalue()
        session.execute("list")

        self.assertEqual(session.files, first)
        self.assertEqual([info.rel_path for info in first], ["go.mod", "main.go"])
        self.assertEqual(session.output.getvalue(), first_output * 2)

    def test_open_before_list_reports_missing_listing(self) -> None:
        session = _session()

        err = session.execute("open 1")

        self.assertIsInstance(err, FileResolutionError)
        self.assertIn("no files listed yet", str(err))
        self.assertIsNone(session.current_file)

    def test_cat_by_name_before_list_is_not_found(self) -> None:
        session = _session()
        err = session.execute("cat main.go")
        self.assertIsInstance(err, FileResolutionError)
        self.assertEqual(str(err), "file not found: main.go")

    def test_open_without_argument_is_usage_error(self) -> None:
        session = _session()
        session.execute("ls")
        self.assertIn("usage", str(session.execute("open")))
        self.assertIn("usage", str(session.execute("view")))

    def test_open_then_cat_refer_to_same_file(self) -> None:
        session = _session()
        session.execute("ls")

        self.assertIsNone(session.execute("o main.go"))
        opened = session.current_file
        self.assertIsNone(session.execute("cat 2"))

        self.assertEqual(opened, ROOT / "main.go")
        output = session.output.getvalue()
        self.assertIn("📄 main.go (3 lines)", output)
        self.assertIn("   1 │ package main\n", output)
        self.assertIn("   3 │ func main() {}\n", output)

    def test_cat_decodes_non_utf8_content(self) -> None:
        fs = MemoryFileSystem({"/work/hello/notes.txt": b"caf\xe9\n"})
        session = _session(fs)
        session.execute("ls")

        self.assertIsNone(session.execute("cat notes.txt"))
        self.assertIn("   1 │ café\n", session.output.getvalue())

    def test_cat_footer_reports_raw_byte_count(self) -> None:
        fs = MemoryFileSystem(
            {
                "/work/hello/notes.txt": b"caf\xe9\n",
                "/work/hello/bom.go": b"\xef\xbb\xbfpackage main\n",
            }
        )
        session = _session(fs)
        session.execute("ls")

        self.assertIsNone(session.execute("cat notes.txt"))
        self.assertIsNone(session.execute("cat bom.go"))

        output = session.output.getvalue()
        self.assertIn("📊 File info: 5 bytes, 1 lines", output)
        self.assertIn("📊 File info: 16 bytes, 1 lines", output)
        self.assertIn("   1 │ package main\n", output)

    def test_cat_read_failure_is_rendered(self) -> None:
        fs = _go_fs()
        session = _session(fs)
        session.execute("ls")
        fs.denied.add(ROOT / "main.go")

        err = session.execute("cat main.go")

        self.assertIsInstance(err, PermissionError)
        self.assertIn("❌ Error:", session.output.getvalue())

    def test_tree_and_info_render_project(self) -> None:
        session = _session()

        self.assertIsNone(session.execute("tree"))
        self.assertIsNone(session.execute("info"))
        output = session.output.getvalue()
        self.assertIn("🌳 Project Structure: hello", output)
        self.assertIn("└── 🐹 main.go", output)
        self.assertNotIn("vendor", output)
        self.assertIn("📂 Project: hello", output)
        self.assertIn("🐹 Type: Go Project", output)

    def test_listing_error_is_returned(self) -> None:
        session = _session(MemoryFileSystem())
        err = session.execute("ls")
        self.assertIsInstance(err, FileNotFoundError)
        self.assertEqual(session.files, [])

    def test_crashing_handler_is_contained(self) -> None:
        session = _session()

        def explode(_args):
            raise RuntimeError("handler bug")

        session.registry.register_binding(CommandBinding(("boom",), explode))
        with self.assertLogs("goxide.session", level="ERROR"):
            err = session.execute("boom")

        self.assertIsInstance(err, RuntimeError)
        self.assertIn("❌ Error: handler bug", session.output.getvalue())


class SessionBuilderTests(unittest.TestCase):
    def test_builder_commands_use_child_context_and_report_success(self) -> None:
        builder = FakeBuilder()
        session = _session(builder=builder)

        for name in ("build", "run", "test", "clean"):
            self.assertIsNone(session.execute(name))

        self.assertEqual([name for name, _ctx in builder.calls], ["build", "run", "test", "clean"])
        for _name, ctx in builder.calls:
            self.assertIsNot(ctx, session.ctx)
        output = session.output.getvalue()
        self.assertIn("🔨 Building Go project...", output)
        self.assertIn("✅ Build succeeded", output)
        self.assertIn("✅ Tests passed", output)
        self.assertIn("✅ Clean complete", output)

    def test_builder_failure_is_rendered_without_success_line(self) -> None:
        builder = FakeBuilder(result=ToolchainError(["go", "build", "."], 2))
        session = _session(builder=builder)

        err = session.execute("build")

        self.assertIsInstance(err, ToolchainError)
        output = session.output.getvalue()
        self.assertIn("❌ Error: go build . exited with status 2", output)
        self.assertNotIn("✅ Build succeeded", output)

    def test_cancelling_command_context_leaves_session_running(self) -> None:
        builder = FakeBuilder(on_call=lambda _name, ctx: ctx.cancel("interrupted"))
        session = _session(lines="build\nhelp\n", builder=builder)

        self.assertIsNone(session.run())
        self.assertFalse(session.ctx.cancelled)
        self.assertEqual(session.output.getvalue().count(PROMPT), 3)

    def test_command_timeout_cancels_only_the_running_command(self) -> None:
        reasons: list[str] = []

        def wait_for_deadline(_name, ctx):
            self.assertTrue(ctx.wait(5))
            reasons.append(str(ctx.err()))

        builder = FakeBuilder(on_call=wait_for_deadline)
        project = GoProject(ROOT, _go_fs())
        session = Session(
            project,
            builder,
            input=io.StringIO("test\nhelp\n"),
            output=io.StringIO(),
            command_timeout=0.05,
        )

        self.assertIsNone(session.run())
        self.assertEqual(reasons, ["context deadline exceeded"])
        self.assertFalse(session.ctx.cancelled)
        self.assertEqual(session.output.getvalue().count(PROMPT), 3)

    def test_cancelling_session_context_reaches_running_command(self) -> None:
        seen: list[bool] = []

        def cancel_session(_name, ctx):
            session.ctx.cancel()
            seen.append(ctx.cancelled)

        builder = FakeBuilder(on_call=cancel_session)
        session = _session(lines="build\nls\n", builder=builder, ctx=CancelContext.background())

        err = session.run()

        self.assertIsInstance(err, CancelledError)
        self.assertEqual(seen, [True])
        self.assertEqual(session.output.getvalue().count(PROMPT), 1)
        self.assertEqual(session.files, [])


class ResolveFileReferenceTests(unittest.TestCase):
    def setUp(self) -> None:
        files, err = GoProject(ROOT, _go_fs()).files()
        self.assertIsNone(err)
        self.files = files

    def test_index_is_one_based(self) -> None:
        info, err = resolve_file_reference(self.files, "1")
        self.assertIsNone(err)
        self.assertEqual(info.rel_path, "go.mod")

    def test_out_of_range_indexes(self) -> None:
        for ref in ("0", "3", "-1"):
            with self.subTest(ref=ref):
                info, err = resolve_file_reference(self.files, ref)
                self.assertIsNone(info)
                self.assertIn("valid range: 1-2", str(err))

    def test_name_matches_relative_path_or_bare_name(self) -> None:
        fs = MemoryFileSystem({"/work/hello/cmd/tool/main.go": "package main\n"})
        files, _ = GoProject(ROOT, fs).files()

        by_path, err = resolve_file_reference(files, "cmd/tool/main.go")
        self.assertIsNone(err)
        by_name, err = resolve_file_reference(files, "main.go")
        self.assertIsNone(err)
        self.assertEqual(by_path, by_name)


if __name__ == "__main__":
    unittest.main()
