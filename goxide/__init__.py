"""Public package surface for goxide.

Exports ``main`` for programmatic CLI invocation.
Most implementation lives in submodules under ``goxide``.
"""

from __future__ import annotations

from .version import __version__


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


__all__ = ["main", "__version__"]
