"""Text rendering for the command session.

Presentation only: every method writes to the given stream and touches no
project state.
"""

from __future__ import annotations

from pathlib import Path
from typing import TextIO

from .file_tree_model import DIRECTORY_ICON, FileInfo, TreeNode, get_icon_for_language
from .syntax import DEFAULT_STYLE, colorize_source, sanitize_terminal_text
from .version import APP_TITLE, version_lines

RULE = "─" * 37
WIDE_RULE = "═" * 63
RESET = "\033[0m"
DIR_COLOR = "\033[1;34m"
ERROR_PREFIX = "❌ Error: "

BRANCH = "├── "
LAST_BRANCH = "└── "
PIPE_PREFIX = "│   "
BLANK_PREFIX = "    "

HELP_TEXT = f"""
🚀 {APP_TITLE} Commands:
{WIDE_RULE}
  📁 File Operations:
    ls, list         - List files in project
    tree             - Show project tree structure
    open, o <file>   - Open file for editing
    cat, view <file> - View file contents

  🔨 Build Operations:
    run              - Run the Go project (go run .)
    test             - Run tests (go test ./...)
    build            - Build the project (go build .)
    clean            - Remove build artifacts (go clean)

  ℹ️  Information:
    info             - Show project details
    help, h          - Show this help
    version          - Show version info

  🚪 Exit:
    exit, quit, q    - Exit the IDE

💡 Navigation Tips:
  • Use file numbers from 'ls' command: open 1, cat 2
  • Names match a file's relative path or its bare name
{WIDE_RULE}
"""


def split_lines(content: str) -> list[str]:
    """Split ``content`` on newlines, ignoring the final terminator."""
    if not content:
        return []
    lines = content.split("\n")
    if content.endswith("\n"):
        lines.pop()
    return lines


class Renderer:
    """Writes project listings, trees, file views and messages as text."""

    def __init__(self, color: bool = False, style: str = DEFAULT_STYLE) -> None:
        self.color = color
        self.style = style

    def render_welcome(self, out: TextIO, project) -> None:
        out.write(f"🚀 {APP_TITLE} - a small shell for Go projects\n")
        out.write(f"Project: {project.path}\n\n")
        if project.is_go_project():
            out.write("🐹 Go project detected!\n")
        out.write("💡 Type 'help' for available commands\n\n")

    def render_project(self, out: TextIO, project) -> None:
        out.write(f"📂 Project: {project.name}\n")
        out.write(f"📁 Path: {project.path}\n")
        if project.is_go_project():
            out.write("🐹 Type: Go Project\n")
        else:
            out.write("📄 Type: Generic Project\n")

    def render_file_list(self, out: TextIO, project_name: str, files: list[FileInfo]) -> None:
        out.write(f"\n📁 Files in {project_name}:\n")
        out.write(f"{RULE}\n")
        for index, info in enumerate(files, start=1):
            icon = get_icon_for_language(info.language)
            out.write(f"  {index:2d}. {icon} {info.rel_path}\n")
        out.write(f"{RULE}\n")
        out.write(f"Total: {len(files)} files\n\n")

    def render_file_tree(self, out: TextIO, tree: TreeNode) -> None:
        out.write(f"\n🌳 Project Structure: {tree.file.name}\n")
        out.write(f"{WIDE_RULE}\n")
        self._render_tree_node(out, tree, "")

    def _render_tree_node(self, out: TextIO, node: TreeNode, prefix: str) -> None:
        if node.is_root:
            out.write(f"{DIRECTORY_ICON} {self._dir_name(node.file.name)}/\n")
            child_prefix = prefix
        else:
            connector = LAST_BRANCH if node.is_last else BRANCH
            if node.file.is_dir:
                label = f"{DIRECTORY_ICON} {self._dir_name(node.file.name)}/"
            else:
                label = f"{get_icon_for_language(node.file.language)} {node.file.name}"
            out.write(f"{prefix}{connector}{label}\n")
            child_prefix = prefix + (BLANK_PREFIX if node.is_last else PIPE_PREFIX)

        for child in node.children:
            self._render_tree_node(out, child, child_prefix)

    def _dir_name(self, name: str) -> str:
        if not self.color:
            return name
        return f"{DIR_COLOR}{name}{RESET}"

    def render_file(
        self,
        out: TextIO,
        info: FileInfo | None,
        path: Path,
        content: str,
        size: int | None = None,
    ) -> None:
        """Render ``content`` with a header, line numbers and a size footer.

        ``size`` is the on-disk byte count; it defaults to the UTF-8 length of
        ``content``.
        """
        label = info.rel_path if info is not None else path.name
        safe = sanitize_terminal_text(content)
        lines = split_lines(safe)
        shown = lines
        if self.color and lines:
            colored = split_lines(colorize_source(safe, path, self.style))
            if len(colored) == len(lines):
                shown = colored

        out.write(f"\n📄 {label} ({len(lines)} lines)\n")
        out.write(f"{WIDE_RULE}\n")
        for number, line in enumerate(shown, start=1):
            suffix = RESET if self.color else ""
            out.write(f"{number:4d} │ {line}{suffix}\n")
        out.write(f"{WIDE_RULE}\n")
        if size is None:
            size = len(content.encode("utf-8"))
        out.write(f"📊 File info: {size} bytes, {len(lines)} lines\n\n")

    def render_help(self, out: TextIO) -> None:
        out.write(HELP_TEXT)

    def render_version(self, out: TextIO) -> None:
        out.write(f"\n{WIDE_RULE}\n")
        for line in version_lines():
            out.write(f"  {line}\n")
        out.write(f"{WIDE_RULE}\n")

    def render_message(self, out: TextIO, message: str) -> None:
        out.write(f"{message}\n")

    def render_error(self, out: TextIO, err: BaseException) -> None:
        out.write(f"{ERROR_PREFIX}{err}\n")


__all__ = ["Renderer", "HELP_TEXT", "ERROR_PREFIX", "split_lines"]
