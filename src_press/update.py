"""Refresh the file lists of an existing ``src-press.toml``.

``update_config`` re-scans the repository with the stored block globs and
submodule setting, drops files that disappeared, appends new ones in reading
order, refreshes the author list, and writes the document back with
``tomlkit`` so comments, ordering and every other setting survive. It returns
an :class:`UpdateSummary` describing what changed.

Example
-------
.. code-block:: python

    from pathlib import Path
    from src_press.update import update_config

    summary = update_config(config_path=Path("src-press.toml"))
    for path in summary.added:
        print(f"+{path}")
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import typing as typ

import tomlkit
from tomlkit.exceptions import ParseError

from .config import (
    ConfigurationError,
    load_book_config,
    string_array,
    write_config_document,
)
from .detection import detect_frontmatter
from .models import CommitOrder
from .ordering import order_files
from .repository import GitRepository

if typ.TYPE_CHECKING:
    from pathlib import Path

    from .repository import RepositoryProvider


@dc.dataclass(slots=True)
class UpdateSummary:
    """Changes applied to the configuration by one update."""

    added: list[str] = dc.field(default_factory=list)
    removed: list[str] = dc.field(default_factory=list)
    frontmatter_added: list[str] = dc.field(default_factory=list)
    entrypoint_dropped: str | None = None
    authors: list[str] = dc.field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed or self.entrypoint_dropped)


def update_config(
    *, config_path: Path, repository: RepositoryProvider | None = None
) -> UpdateSummary:
    """Re-scan the repository and rewrite the file lists in ``config_path``.

    Parameters
    ----------
    config_path : Path
        Existing configuration file.
    repository : RepositoryProvider, optional
        Repository access; defaults to git at ``source.repository``.

    Returns
    -------
    UpdateSummary
        Added and removed paths across ``frontmatter_files`` and
        ``source_files``, newly detected frontmatter, a dropped entrypoint,
        and the refreshed authors.

    Raises
    ------
    FileNotFoundError
        If ``config_path`` does not exist.
    ConfigurationError
        If the configuration is invalid.
    RepositoryError
        If the repository cannot be read.
    """
    config = load_book_config(config_path)
    try:
        document = tomlkit.parse(config_path.read_text(encoding="utf-8"))
    except ParseError as exc:  # pragma: no cover - load_book_config parses first
        msg = f"Unable to parse config TOML at {config_path}"
        raise ConfigurationError(msg) from exc
    source_table = document.get("source")
    if not isinstance(source_table, cabc.MutableMapping):
        msg = "missing [source] table"
        raise ConfigurationError(msg, field="source")

    source = config.source
    repo = repository or GitRepository(source.repository)
    old_front = list(source.frontmatter_files)
    old_source = list(source.source_files)
    candidates = repo.list_tracked_files(
        source.block_globs, not source.exclude_submodules, [*old_front, *old_source]
    )
    available = {candidate.path for candidate in candidates}
    summary = UpdateSummary()

    entrypoint = source.entrypoint
    if entrypoint and entrypoint not in available:
        summary.entrypoint_dropped = entrypoint
        entrypoint = None
        del source_table["entrypoint"]

    frontmatter = [path for path in old_front if path in available]
    if source.auto_frontmatter:
        for path in detect_frontmatter(available):
            if path not in frontmatter and path not in old_source:
                frontmatter.append(path)
                if path not in old_front:
                    summary.frontmatter_added.append(path)

    front_set = set(frontmatter)
    ordered = order_files(candidates, entrypoint)
    new_source = [item.path for item in ordered if item.path not in front_set]

    old_all = list(dict.fromkeys([*old_front, *old_source]))
    new_all = [*frontmatter, *new_source]
    summary.added = [path for path in new_all if path not in set(old_all)]
    summary.removed = [path for path in old_all if path not in set(new_all)]

    authors = repo.authors(repo.commit_log(CommitOrder.NEWEST_FIRST))
    summary.authors = [str(author) for author in authors]

    source_table["frontmatter_files"] = string_array(frontmatter)
    source_table["source_files"] = string_array(new_source)
    if summary.authors or "authors" not in source_table:
        source_table["authors"] = string_array(summary.authors)
    write_config_document(document, config_path)
    return summary


__all__ = ["UpdateSummary", "update_config"]
