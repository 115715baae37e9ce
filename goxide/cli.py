"""Command-line front door for goxide.

Parses CLI options, resolves the project directory, configures logging and
launches the interactive command session.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from . import config
from .builder import GoBuilder
from .cancellation import CancelContext
from .file_tree_model import OSFileSystem
from .log_config import LoggingConfig, configure_logging
from .project import GoProject
from .render import Renderer
from .session import Session
from .version import version_lines

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="goxide",
        description="Interactive shell for browsing, building and testing a Go project.",
    )
    parser.add_argument("path", nargs="?", default=None, help="Project directory. Defaults to current directory.")
    parser.add_argument("--project", metavar="PATH", default=None, help="Project directory (overrides PATH).")
    parser.add_argument("--cli", action="store_true", help="Force the interactive command session.")
    parser.add_argument("--version", action="store_true", help="Show version information and exit.")
    parser.add_argument("--no-color", action="store_true", help="Disable color output even on TTY.")
    parser.add_argument("--style", default=None, help="Pygments style name used by 'cat'.")
    parser.add_argument("--log-level", default=None, help="Logging level (DEBUG, INFO, WARNING, ERROR).")
    parser.add_argument("--log-file", metavar="PATH", default=None, help="Also write logs to PATH.")
    parser.add_argument(
        "--timeout",
        type=float,
        metavar="SECONDS",
        default=None,
        help="Cancel build, run, test and clean commands that take longer than SECONDS.",
    )
    parser.add_argument(
        "--save-config",
        action="store_true",
        help="Remember --style, --no-color, --log-level and --log-file as defaults.",
    )
    return parser


def resolve_project_path(raw: str | None, default_path: Path | None = None) -> Path:
    """Return the absolute project directory, defaulting to the working directory."""
    if raw:
        return Path(os.path.abspath(raw))
    if default_path is not None:
        return Path(os.path.abspath(default_path))
    try:
        return Path.cwd()
    except OSError as exc:
        raise SystemExit(f"❌ Failed to get current directory: {exc}") from exc


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and run the session on the chosen project.

    ``default_path`` is primarily for tests; when omitted the current working
    directory is used.
    """
    args = build_parser().parse_args()

    if args.version:
        for line in version_lines():
            sys.stdout.write(f"{line}\n")
        return

    if args.save_config:
        config.update_config(
            style=args.style,
            no_color=True if args.no_color else None,
            log_level=args.log_level,
            log_file=args.log_file,
        )

    log_file = Path(args.log_file).expanduser() if args.log_file else config.load_log_file()
    configure_logging(
        LoggingConfig(
            level=args.log_level or config.load_log_level(),
            log_file=log_file,
        )
    )

    path = resolve_project_path(args.project or args.path, default_path)
    if not path.is_dir():
        raise SystemExit(f"Path not found: {path}")

    no_color = args.no_color or config.load_no_color()
    renderer = Renderer(
        color=not no_color and sys.stdout.isatty(),
        style=args.style or config.load_style(),
    )
    project = GoProject(path, OSFileSystem())
    session = Session(
        project,
        GoBuilder(),
        renderer=renderer,
        ctx=CancelContext.background(),
        command_timeout=args.timeout,
    )
    logger.info("Starting session for %s", path)

    try:
        err = session.run()
    except KeyboardInterrupt:
        sys.stdout.write("\n")
        raise SystemExit(130) from None
    if err is not None:
        raise SystemExit(f"❌ CLI application error: {err}")


if __name__ == "__main__":
    main()
