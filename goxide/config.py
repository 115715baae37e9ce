"""Persistent JSON config helpers.

Stores the highlight style, colour preference and logging settings.
All access is defensive: malformed or missing config falls back safely.
"""

from __future__ import annotations

import json
from pathlib import Path

from platformdirs import user_config_dir

from .syntax import DEFAULT_STYLE
from .version import APP_NAME

CONFIG_FILENAME = "config.json"
CONFIG_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / CONFIG_FILENAME
DEFAULT_LOG_LEVEL = "WARNING"


def load_config() -> dict[str, object]:
    """Load the persisted JSON config object.

    Returns an empty dict when the file is missing, unreadable, malformed, or
    does not decode to a top-level JSON object.
    """
    try:
        data = json.loads(CONFIG_PATH.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def save_config(data: dict[str, object]) -> None:
    """Persist config data as pretty-printed JSON.

    Filesystem errors are ignored to keep startup non-fatal when config cannot
    be written.
    """
    try:
        CONFIG_PATH.parent.mkdir(parents=True, exist_ok=True)
        CONFIG_PATH.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    except OSError:
        pass


def update_config(**values: object) -> None:
    """Merge non-``None`` ``values`` into the stored config."""
    updates = {key: value for key, value in values.items() if value is not None}
    if not updates:
        return
    data = load_config()
    data.update(updates)
    save_config(data)


def _load_str(key: str) -> str | None:
    value = load_config().get(key)
    if not isinstance(value, str) or not value.strip():
        return None
    return value.strip()


def load_style() -> str:
    """Return the persisted Pygments style name, or the default style."""
    return _load_str("style") or DEFAULT_STYLE


def load_no_color() -> bool:
    """Return persisted colour opt-out; only explicit booleans are honoured."""
    value = load_config().get("no_color")
    return bool(value) if isinstance(value, bool) else False


def load_log_level() -> str:
    return _load_str("log_level") or DEFAULT_LOG_LEVEL


def load_log_file() -> Path | None:
    value = _load_str("log_file")
    if value is None:
        return None
    return Path(value).expanduser()


__all__ = [
    "CONFIG_PATH",
    "DEFAULT_LOG_LEVEL",
    "load_config",
    "save_config",
    "update_config",
    "load_style",
    "load_no_color",
    "load_log_level",
    "load_log_file",
]
