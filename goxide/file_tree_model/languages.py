"""Extension-based language tags and the glyphs shown next to them."""

from __future__ import annotations

from pathlib import PurePath

DEFAULT_LANGUAGE = "text"
DEFAULT_ICON = "📄"
DIRECTORY_ICON = "📁"

LANGUAGE_BY_EXTENSION: dict[str, str] = {
    ".go": "go",
    ".mod": "gomod",
    ".sum": "gomod",
    ".md": "markdown",
    ".json": "json",
    ".yaml": "yaml",
    ".yml": "yaml",
    ".toml": "toml",
    ".sh": "shell",
    ".py": "python",
    ".js": "javascript",
    ".ts": "typescript",
    ".html": "html",
    ".css": "css",
}

ICON_BY_LANGUAGE: dict[str, str] = {
    "go": "🐹",
    "gomod": "📦",
    "markdown": "📋",
    "json": "🔧",
    "yaml": "⚙️",
    "toml": "⚙️",
    "shell": "🖥️",
    "python": "🐍",
    "javascript": "📜",
    "typescript": "📘",
    "html": "🌐",
    "css": "🎨",
}


def get_language_for_file(filename: str) -> str:
    """Return the language tag for ``filename`` based on its suffix alone."""
    suffix = PurePath(filename).suffix.lower()
    return LANGUAGE_BY_EXTENSION.get(suffix, DEFAULT_LANGUAGE)


def get_icon_for_language(language: str) -> str:
    return ICON_BY_LANGUAGE.get(language, DEFAULT_ICON)


__all__ = [
    "DEFAULT_LANGUAGE",
    "DEFAULT_ICON",
    "DIRECTORY_ICON",
    "LANGUAGE_BY_EXTENSION",
    "ICON_BY_LANGUAGE",
    "get_language_for_file",
    "get_icon_for_language",
]
