"""Module entrypoint for ``python -m goxide``.

This keeps module-mode execution behavior identical to the console script.
All argument parsing and session setup happen in ``goxide.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
