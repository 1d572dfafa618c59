"""Entrypoint-aware reading order for repository files.

A book reads best when it opens on the program's entrypoint, continues with
its neighbours, then walks the entrypoint's subdirectories before the rest of
the repository. :func:`order_files` assigns every candidate a unique
``order_rank`` following that policy:

1. the entrypoint itself;
2. other files in the entrypoint's directory, lexicographically;
3. files below the entrypoint's directory, grouped by their first
   subdirectory (groups and files lexicographic);
4. everything else, lexicographically.

Without an entrypoint, or when it is not among the candidates, rule 4 applies
to every file.

Examples
--------
>>> from src_press.models import CandidateFile
>>> files = [CandidateFile(p, 1) for p in ("README.md", "src/lib.rs", "src/main.rs")]
>>> [f.path for f in order_files(files, "src/main.rs")]
['src/main.rs', 'src/lib.rs', 'README.md']
"""

from __future__ import annotations

import logging
import posixpath
import typing as typ

from .models import CandidateFile, OrderedFile

logger = logging.getLogger(__name__)

_ENTRYPOINT = 0
_SIBLING = 1
_DESCENDANT = 2
_OTHER = 3


def order_files(
    candidates: typ.Iterable[CandidateFile], entrypoint: str | None = None
) -> list[OrderedFile]:
    """Return ``candidates`` in reading order with ranks ``0..n-1``.

    Parameters
    ----------
    candidates : Iterable[CandidateFile]
        Files to order. Paths are repository-relative POSIX paths and are
        assumed unique; a repeated path keeps its last occurrence.
    entrypoint : str, optional
        Repository-relative path of the file the book should open with.

    Returns
    -------
    list[OrderedFile]
        Files in final order; ``order_rank`` matches the list index.
    """
    by_path = {candidate.path: candidate for candidate in candidates}
    paths = sorted(by_path)
    if entrypoint and entrypoint in by_path:
        entry_dir = posixpath.dirname(entrypoint)
        paths.sort(key=lambda path: _rank_key(path, entrypoint, entry_dir))
    elif entrypoint:
        logger.debug("entrypoint %s not among candidates; using path order", entrypoint)
    return [
        OrderedFile.from_candidate(by_path[path], rank)
        for rank, path in enumerate(paths)
    ]


def _rank_key(path: str, entrypoint: str, entry_dir: str) -> tuple[int, str, str]:
    if path == entrypoint:
        return (_ENTRYPOINT, "", path)
    parent = posixpath.dirname(path)
    if parent == entry_dir:
        return (_SIBLING, "", path)
    prefix = f"{entry_dir}/" if entry_dir else ""
    if path.startswith(prefix):
        subdir = path[len(prefix) :].split("/", 1)[0]
        return (_DESCENDANT, subdir, path)
    return (_OTHER, "", path)


__all__ = ["order_files"]
