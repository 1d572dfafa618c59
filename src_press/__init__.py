"""Plan printable books from the source files of a git repository.

This package exposes the CLI entry points used by the ``src-press`` console
script to write a book configuration, refresh it as the repository changes,
and plan (and proof) the resulting book.

Exports
-------
- ``app``: Cyclopts application holding the ``config``, ``update`` and
  ``render`` subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from src_press import main
>>> main()  # doctest: +SKIP
>>> from src_press import app
>>> callable(app)
True
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
