"""Cyclopts CLI entrypoint for planning books from repository sources.

The ``src-press`` console script defined here writes a starting
``src-press.toml`` for a repository (``config``), keeps its file lists in step
with the working tree (``update``), and plans the book (``render``): it
orders and measures every file, numbers the pages, resolves the templates,
imposes booklet signatures, writes the plan as JSON and optionally an HTML
proof.

Examples
--------
Plan the book described by the default configuration:

>>> from src_press.cli import main
>>> main()  # doctest: +SKIP

Write the plan and an HTML proof to custom locations:

>>> from src_press.cli import app
>>> app(
...     ["render", "--plan", "out/plan.json", "--html", "out/book.html"]
... )  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import os
import sys
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from ._constants import CONFIG_FILENAME
from .config import ConfigurationError, load_book_config
from .export import write_plan
from .imposition import printing_instructions
from .planner import BookPlanner
from .renderer import BookProofRenderer
from .repository import GitRepository, RepositoryError
from .update import update_config
from .wizard import run_wizard

DEFAULT_CONFIG = Path(CONFIG_FILENAME)
DEFAULT_PLAN = Path("book-plan.json")
LOG_LEVEL_ENV = "SRC_PRESS_LOG_LEVEL"
STRICT_EXIT_CODE = 2

app = App(name="src-press", config=cyclopts.config.Env("SRC_PRESS_", command=False))  # type: ignore[unknown-argument]


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:  # pragma: no cover - fallback for different roots
            return str(path)
    return str(path)


@app.command(help="Write a new book configuration for a repository.")
def config(
    *,
    yes: typ.Annotated[
        bool, Parameter(help="Accept detected values without prompting")
    ] = False,
    config_from: typ.Annotated[
        Path | None,
        Parameter(help="Reuse layout settings from an existing configuration"),
    ] = None,
    output: typ.Annotated[
        Path, Parameter(help="Where to write the configuration")
    ] = DEFAULT_CONFIG,
    repository: typ.Annotated[
        Path, Parameter(help="Repository to describe")
    ] = Path(),
) -> None:
    """Scan ``repository`` and write a starting configuration to ``output``.

    Parameters
    ----------
    yes : bool, optional
        Skip the prompts and the overwrite confirmation.
    config_from : Path or None, optional
        Existing configuration whose ``[pdf]``, ``[booklet]``, ``[epub]`` and
        ``[html]`` tables, block globs, commit order and submodule setting are
        reused.
    output : Path, optional
        Destination of the TOML document (``src-press.toml`` by default).
    repository : Path, optional
        Root of the git repository; the current folder by default.

    Returns
    -------
    None
        Prints the written path, or the document when overwriting was
        declined.
    """
    template = load_book_config(config_from) if config_from else None
    written = run_wizard(
        GitRepository(repository), output=output, template=template, assume_yes=yes
    )
    if written is not None:
        print(f"wrote {_format_path(written)}")


@app.command(help="Refresh the file lists of an existing configuration.")
def update(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to book config")
    ] = DEFAULT_CONFIG,
) -> None:
    """Re-scan the repository and rewrite ``config`` in place.

    Prints ``+path`` for files that joined the book, ``-path`` for files that
    left it, and a note when the configured entrypoint no longer exists.
    """
    summary = update_config(config_path=config)
    for path in summary.added:
        print(f"+{path}")
    for path in summary.removed:
        print(f"-{path}")
    if summary.entrypoint_dropped:
        print(f"entrypoint {summary.entrypoint_dropped} no longer exists; removed")
    if not summary.changed:
        print("no changes")


@app.command(help="Plan the book and write its plan and optional HTML proof.")
def render(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to book config")
    ] = DEFAULT_CONFIG,
    plan: typ.Annotated[
        Path, Parameter(help="Where to write the JSON plan")
    ] = DEFAULT_PLAN,
    html: typ.Annotated[
        Path | None, Parameter(help="Also write an HTML proof to this path")
    ] = None,
    strict: typ.Annotated[
        bool, Parameter(help="Fail when a line exceeds the page width")
    ] = False,
) -> None:
    """Run the planning pipeline and write its outputs.

    Parameters
    ----------
    config : Path, optional
        Book configuration file.
    plan : Path, optional
        Destination of the JSON document model.
    html : Path or None, optional
        Destination of the HTML proof; ``[html].outfile`` is used when the
        configuration has an ``[html]`` table and no path is given.
    strict : bool, optional
        Exit with status 2, before writing anything, when any line is wider
        than the printable width.

    Raises
    ------
    SystemExit
        With status 2 when ``strict`` is set and the capacity report has
        offenses.
    """
    book_config = load_book_config(config)
    model = BookPlanner(book_config).run()
    for warning in model.warnings:
        print(f"warning: {warning.message}")
    if strict and model.capacity.has_offenses:
        print(
            f"{len(model.capacity.offending_files)} file(s) exceed "
            f"{model.capacity.max_chars_per_line} characters per line",
            file=sys.stderr,
        )
        raise SystemExit(STRICT_EXIT_CODE)

    print(f"wrote {_format_path(write_plan(model, plan))}")

    html_path = html
    if html_path is None and book_config.html is not None:
        html_path = config.parent / book_config.html.outfile
    if html_path is not None:
        theme = book_config.html.theme if book_config.html else "default"
        renderer = BookProofRenderer(model, pygments_style=theme)
        print(f"wrote {_format_path(renderer.run(html_path))}")

    if model.imposition is not None:
        for line in printing_instructions(model.imposition):
            print(line)


def main() -> None:
    """Invoke the Cyclopts application that powers the `src-press` command.

    Logging is configured from ``SRC_PRESS_LOG_LEVEL`` (``WARNING`` by
    default). Configuration, repository and missing-file errors are reported
    as a single ``error:`` line on stderr with exit status 1.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    level = os.getenv(LOG_LEVEL_ENV, "WARNING").upper()
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        app()
    except (ConfigurationError, RepositoryError, FileNotFoundError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(1) from exc


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
