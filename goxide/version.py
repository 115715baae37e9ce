"""Static build metadata reported by ``--version`` and the ``version`` command."""

from __future__ import annotations

import platform

__version__ = "0.1.0a0"
# Overridden by release packaging; "unknown" for source checkouts.
BUILD_TIME = "unknown"
GIT_COMMIT = "unknown"

APP_NAME = "goxide"
APP_TITLE = "GoX IDE"


def version_lines() -> list[str]:
    return [
        f"{APP_TITLE} {__version__}",
        f"Build Time: {BUILD_TIME}",
        f"Git Commit: {GIT_COMMIT}",
        f"Python Version: {platform.python_version()}",
    ]


__all__ = ["__version__", "BUILD_TIME", "GIT_COMMIT", "APP_NAME", "APP_TITLE", "version_lines"]
