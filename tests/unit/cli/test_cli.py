"""CLI argument and project-path behavior tests.

Verifies how ``goxide.cli.main`` picks the project directory, wires the
session and reports fatal startup errors.
"""

from __future__ import annotations

import io
import json
import os
import sys
import tempfile
import unittest
from pathlib import Path
from unittest import mock

from goxide import cli
from goxide.errors import CancelledError


class CliTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        self.config_path = self.root / "config" / "config.json"
        patches = [
            mock.patch("goxide.config.CONFIG_PATH", self.config_path),
            mock.patch("goxide.cli.configure_logging"),
        ]
        for patcher in patches:
            patcher.start()
            self.addCleanup(patcher.stop)
        self.addCleanup(self._tmp.cleanup)

    def _run_main(self, argv: list[str], default_path: Path | None = None, result=None):
        with mock.patch.object(sys, "argv", ["goxide", *argv]), mock.patch("goxide.cli.Session") as session_cls:
            session_cls.return_value.run.return_value = result
            cli.main(default_path=default_path)
        return session_cls


class CliProjectPathTests(CliTestCase):
    def test_main_defaults_to_current_working_directory(self) -> None:
        previous_cwd = Path.cwd()
        try:
            os.chdir(self.root)
            session_cls = self._run_main([])
        finally:
            os.chdir(previous_cwd)

        session_cls.assert_called_once()
        project = session_cls.call_args.args[0]
        self.assertEqual(project.path.resolve(), self.root)
        session_cls.return_value.run.assert_called_once_with()

    def test_explicit_path_argument_wins_over_default(self) -> None:
        target = self.root / "svc"
        target.mkdir()

        session_cls = self._run_main([str(target)], default_path=self.root / "unused")

        project = session_cls.call_args.args[0]
        self.assertEqual(project.path, target)
        self.assertEqual(project.name, "svc")

    def test_project_flag_overrides_positional_path(self) -> None:
        first = self.root / "first"
        second = self.root / "second"
        first.mkdir()
        second.mkdir()

        session_cls = self._run_main([str(first), "--project", str(second), "--cli"])

        self.assertEqual(session_cls.call_args.args[0].path, second)

    def test_missing_path_is_fatal(self) -> None:
        missing = self.root / "missing"

        with self.assertRaises(SystemExit) as raised:
            self._run_main([str(missing)])

        self.assertEqual(str(raised.exception.code), f"Path not found: {missing}")

    def test_cwd_failure_is_fatal(self) -> None:
        with mock.patch("goxide.cli.Path.cwd", side_effect=FileNotFoundError("gone")):
            with self.assertRaises(SystemExit) as raised:
                cli.resolve_project_path(None)

        self.assertIn("Failed to get current directory", str(raised.exception.code))

    def test_session_error_becomes_exit_message(self) -> None:
        with self.assertRaises(SystemExit) as raised:
            self._run_main([str(self.root)], result=CancelledError())

        self.assertEqual(str(raised.exception.code), "❌ CLI application error: context canceled")


class CliOptionTests(CliTestCase):
    def test_version_prints_metadata_without_starting_session(self) -> None:
        stdout = io.StringIO()
        with mock.patch.object(sys, "stdout", stdout):
            session_cls = self._run_main(["--version"])

        session_cls.assert_not_called()
        lines = stdout.getvalue().splitlines()
        self.assertTrue(lines[0].startswith("GoX IDE "))
        self.assertTrue(lines[1].startswith("Build Time: "))
        self.assertTrue(lines[2].startswith("Git Commit: "))
        self.assertTrue(lines[3].startswith("Python Version: "))

    def test_style_and_no_color_reach_renderer(self) -> None:
        session_cls = self._run_main([str(self.root), "--no-color", "--style", "friendly"])

        renderer = session_cls.call_args.kwargs["renderer"]
        self.assertFalse(renderer.color)
        self.assertEqual(renderer.style, "friendly")

    def test_timeout_reaches_session(self) -> None:
        session_cls = self._run_main([str(self.root), "--timeout", "2.5"])
        self.assertEqual(session_cls.call_args.kwargs["command_timeout"], 2.5)

        session_cls = self._run_main([str(self.root)])
        self.assertIsNone(session_cls.call_args.kwargs["command_timeout"])

    def test_stored_config_supplies_defaults(self) -> None:
        self.config_path.parent.mkdir(parents=True)
        self.config_path.write_text(json.dumps({"style": "native", "log_level": "DEBUG"}), encoding="utf-8")

        session_cls = self._run_main([str(self.root)])

        self.assertEqual(session_cls.call_args.kwargs["renderer"].style, "native")
        logging_cfg = cli.configure_logging.call_args.args[0]
        self.assertEqual(logging_cfg.level, "DEBUG")

    def test_save_config_persists_given_options(self) -> None:
        self._run_main([str(self.root), "--save-config", "--style", "native", "--no-color"])

        saved = json.loads(self.config_path.read_text(encoding="utf-8"))
        self.assertEqual(saved, {"style": "native", "no_color": True})

    def test_keyboard_interrupt_exits_with_130(self) -> None:
        stdout = io.StringIO()
        with mock.patch.object(sys, "argv", ["goxide", str(self.root)]), mock.patch(
            "goxide.cli.Session"
        ) as session_cls, mock.patch.object(sys, "stdout", stdout):
            session_cls.return_value.run.side_effect = KeyboardInterrupt
            with self.assertRaises(SystemExit) as raised:
                cli.main()

        self.assertEqual(raised.exception.code, 130)


if __name__ == "__main__":
    unittest.main()
