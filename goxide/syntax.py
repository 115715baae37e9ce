"""Source decoding, sanitization, and Pygments syntax highlighting for ``cat``.

Neutralizes terminal control bytes so viewing a file cannot move the cursor
or ring the bell.
"""

from __future__ import annotations

import re
from functools import lru_cache
from pathlib import Path

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import TextLexer, get_lexer_for_filename
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"
LEXER_OPTIONS = {"stripnl": False, "ensurenl": False}

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")


def decode_text(data: bytes) -> str:
    """Decode file bytes using tolerant encoding fallback order.

    Attempts UTF-8 (stripping a BOM if present) and falls back to latin-1,
    which accepts any byte sequence.
    """
    try:
        return data.decode("utf-8-sig")
    except UnicodeDecodeError:
        return data.decode("latin-1")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


@lru_cache(maxsize=None)
def normalize_style(style: str) -> str:
    """Return ``style`` when Pygments knows it, otherwise the default style."""
    try:
        get_style_by_name(style)
    except ClassNotFound:
        return DEFAULT_STYLE
    return style


@lru_cache(maxsize=None)
def _formatter_for_style(style: str) -> Terminal256Formatter:
    return Terminal256Formatter(style=style)


def colorize_source(source: str, path: Path, style: str = DEFAULT_STYLE) -> str:
    """Highlight ``source`` for a terminal, picking the lexer from ``path``.

    Unknown file types fall back to plain text. Leading and trailing newlines
    are preserved so rendered lines stay aligned with the raw text.
    """
    formatter = _formatter_for_style(normalize_style(style))
    try:
        lexer = get_lexer_for_filename(path.name, source, **LEXER_OPTIONS)
    except ClassNotFound:
        lexer = TextLexer(**LEXER_OPTIONS)
    return highlight(source, lexer, formatter)


__all__ = [
    "DEFAULT_STYLE",
    "decode_text",
    "sanitize_terminal_text",
    "normalize_style",
    "colorize_source",
]
