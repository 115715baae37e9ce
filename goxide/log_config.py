"""Logging setup for the goxide process.

Configures the root logger once with a stderr handler and an optional
rotating log file. Handlers installed here are tagged so a forced
reconfiguration replaces only them.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from logging.handlers import RotatingFileHandler
from pathlib import Path

_LEVEL_MAP: dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_HANDLER_TAG = "_goxide_handler"
_CONFIGURED_FLAG_ATTR = "_goxide_configured"


@dataclass(frozen=True)
class LoggingConfig:
    """Immutable logging settings.

    ``level`` defaults to WARNING so session output is not interleaved with
    informational records.
    """

    level: str = "WARNING"
    console: bool = True
    log_file: Path | None = None
    max_bytes: int = 1024 * 1024
    backup_count: int = 2
    console_fmt: str = "%(levelname)s | %(message)s"
    file_fmt: str = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"


def parse_level(level: str | None) -> int:
    """Map a level name to its ``logging`` constant; unknown names mean INFO."""
    return _LEVEL_MAP.get((level or "").strip().upper(), logging.INFO)


def _tag_handler(handler: logging.Handler) -> logging.Handler:
    setattr(handler, _HANDLER_TAG, True)
    return handler


def _is_our_handler(handler: logging.Handler) -> bool:
    return bool(getattr(handler, _HANDLER_TAG, False))


def _remove_our_handlers(root: logging.Logger) -> None:
    for handler in list(root.handlers):
        if _is_our_handler(handler):
            root.removeHandler(handler)
            handler.close()


def configure_logging(cfg: LoggingConfig, *, force: bool = False) -> logging.Logger:
    """Configure the root logger from ``cfg``; repeated calls are no-ops unless forced."""
    root = logging.getLogger()
    if getattr(root, _CONFIGURED_FLAG_ATTR, False) and not force:
        return root

    level = parse_level(cfg.level)
    root.setLevel(level)
    _remove_our_handlers(root)

    if cfg.console:
        console = logging.StreamHandler(sys.stderr)
        console.setLevel(level)
        console.setFormatter(logging.Formatter(cfg.console_fmt))
        root.addHandler(_tag_handler(console))

    if cfg.log_file is not None:
        try:
            cfg.log_file.parent.mkdir(parents=True, exist_ok=True)
            file_handler = RotatingFileHandler(
                cfg.log_file,
                maxBytes=cfg.max_bytes,
                backupCount=cfg.backup_count,
                encoding="utf-8",
            )
        except OSError as exc:
            root.warning("Cannot open log file %s: %s", cfg.log_file, exc)
        else:
            file_handler.setLevel(level)
            file_handler.setFormatter(logging.Formatter(cfg.file_fmt, datefmt=cfg.datefmt))
            root.addHandler(_tag_handler(file_handler))

    setattr(root, _CONFIGURED_FLAG_ATTR, True)
    return root


__all__ = ["LoggingConfig", "configure_logging", "parse_level"]
