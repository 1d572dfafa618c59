"""Split the ordered file list into frontmatter and source files.

Frontmatter is the introductory material a reader expects before the code:
READMEs, design notes, contribution guides, changelogs, manifests and licence
texts. Recognition is a case-insensitive match of root-level file names
against fixed name sets: a document stem bare or with a text extension
(``README``, ``README.md``, ``CHANGELOG.rst``), an exact manifest name, or a
licence name with an optional ``-<id>`` part (``LICENSE``, ``LICENSE-MIT``,
``COPYING.txt``). Explicit lists in the configuration override recognition
in either direction.
"""

from __future__ import annotations

import posixpath
import re
import typing as typ

from ._constants import (
    FRONTMATTER_DOCUMENT_GROUPS,
    FRONTMATTER_TEXT_SUFFIXES,
    LICENCE_STEMS,
    MANIFEST_GROUPS,
)
from .config.models import ConfigurationError

if typ.TYPE_CHECKING:
    from .models import OrderedFile

_MANIFEST_PRIORITY = len(FRONTMATTER_DOCUMENT_GROUPS)
_LICENCE_PRIORITY = _MANIFEST_PRIORITY + 1
_LICENCE_NAME = re.compile(
    rf"(?P<stem>{'|'.join(LICENCE_STEMS)})"
    r"(?P<id>(?:-[A-Z0-9+]+(?:\.[0-9]+)*)*)"
    r"(?P<suffix>\.(?:md|txt|rst|markdown))?",
    re.IGNORECASE,
)


class FrontmatterRank(typ.NamedTuple):
    """Where a recognised file sorts among frontmatter proposals.

    ``group`` names the set a proposal picks a single file from and
    ``position`` orders sets that share a priority; ``preference`` orders
    alternatives within a set (``README.md`` before ``README.txt``).
    """

    priority: int
    position: int
    group: str
    preference: tuple[int, ...]


def frontmatter_rank(path: str) -> FrontmatterRank | None:
    """Return how ``path`` ranks as frontmatter, or ``None`` when unrecognised.

    Examples
    --------
    >>> frontmatter_rank("README.txt")
    FrontmatterRank(priority=0, position=0, group='README', preference=(0, 2))
    >>> frontmatter_rank("history.py") is None
    True
    """
    if "/" in path:
        return None
    stem, suffix = posixpath.splitext(path)
    if suffix.lower() in FRONTMATTER_TEXT_SUFFIXES:
        wanted = stem.upper()
        for priority, stems in enumerate(FRONTMATTER_DOCUMENT_GROUPS):
            if wanted in stems:
                preference = (
                    stems.index(wanted),
                    FRONTMATTER_TEXT_SUFFIXES.index(suffix.lower()),
                )
                return FrontmatterRank(priority, 0, stems[0], preference)
    lowered = path.lower()
    for position, names in enumerate(MANIFEST_GROUPS):
        if lowered in names:
            return FrontmatterRank(
                _MANIFEST_PRIORITY, position, names[0], (names.index(lowered),)
            )
    match = _LICENCE_NAME.fullmatch(path)
    if match:
        licence_suffix = (match["suffix"] or "").lower()
        preference = (
            LICENCE_STEMS.index(match["stem"].upper()),
            FRONTMATTER_TEXT_SUFFIXES.index(licence_suffix),
        )
        return FrontmatterRank(
            _LICENCE_PRIORITY, 0, f"LICENCE{match['id'].upper()}", preference
        )
    return None


def frontmatter_priority(path: str) -> int | None:
    """Return the recognition group of ``path``, or ``None`` when unrecognised.

    Lower values sort earlier when frontmatter files are proposed for a new
    configuration. Only files at the repository root are recognised.

    Examples
    --------
    >>> frontmatter_priority("README.md")
    0
    >>> frontmatter_priority("docs/README.md") is None
    True
    >>> frontmatter_priority("LICENSE-MIT")
    7
    >>> frontmatter_priority("licenses.py") is None
    True
    """
    rank = frontmatter_rank(path)
    return None if rank is None else rank.priority


def is_licence_name(name: str) -> bool:
    """Return whether ``name`` is a licence file name such as ``COPYING``."""
    return _LICENCE_NAME.fullmatch(name) is not None


def is_recognised_frontmatter(path: str) -> bool:
    return frontmatter_rank(path) is not None


def classify(
    ordered: typ.Sequence[OrderedFile],
    *,
    frontmatter_files: typ.Collection[str] = (),
    source_files: typ.Collection[str] = (),
    auto_detect: bool = True,
) -> tuple[list[OrderedFile], list[OrderedFile]]:
    """Partition ``ordered`` into ``(frontmatter, source)``.

    Parameters
    ----------
    ordered : Sequence[OrderedFile]
        Files in reading order.
    frontmatter_files : Collection[str]
        Paths the user placed in the frontmatter explicitly.
    source_files : Collection[str]
        Paths the user placed in the source section explicitly; this excludes
        them from frontmatter detection.
    auto_detect : bool
        Whether unlisted files are matched against the recognised names.

    Returns
    -------
    tuple[list[OrderedFile], list[OrderedFile]]
        Both lists preserve the relative order of ``ordered``; together they
        contain every input file exactly once.

    Raises
    ------
    ConfigurationError
        If a path is listed as both frontmatter and source.
    """
    explicit_front = set(frontmatter_files)
    explicit_source = set(source_files)
    conflicts = sorted(explicit_front & explicit_source)
    if conflicts:
        msg = f"listed as both frontmatter and source: {', '.join(conflicts)}"
        raise ConfigurationError(msg, field="source.frontmatter_files")

    frontmatter: list[OrderedFile] = []
    source: list[OrderedFile] = []
    for item in ordered:
        if item.path in explicit_front:
            frontmatter.append(item)
        elif item.path in explicit_source:
            source.append(item)
        elif auto_detect and is_recognised_frontmatter(item.path):
            frontmatter.append(item)
        else:
            source.append(item)
    return frontmatter, source


__all__ = [
    "FrontmatterRank",
    "classify",
    "frontmatter_priority",
    "frontmatter_rank",
    "is_licence_name",
    "is_recognised_frontmatter",
]
