"""Typed records shared by the book planning pipeline.

The planner threads these dataclasses from the repository scan through to the
:class:`BookDocumentModel` handed to renderers. Records produced by one stage
and consumed by the next are frozen; the aggregate model is assembled once per
``render`` invocation and never mutated afterwards.
"""

from __future__ import annotations

import dataclasses as dc
import datetime as dt  # noqa: TC003 - used for runtime type metadata
import enum
import re
from pathlib import Path  # noqa: TC003 - used for runtime type metadata

_AUTHOR_PATTERN = re.compile(r"^\s*(?P<name>[^<]+?)\s*(?:<(?P<email>[^>]*)>)?\s*$")


class SectionKind(enum.Enum):
    """Partitions of a book, in reading order."""

    FRONTMATTER = "frontmatter"
    SOURCE = "source"
    HISTORY = "history"


class NumberStyle(enum.Enum):
    """How page numbers are written within a section."""

    ROMAN_LOWER = "roman-lower"
    ROMAN_UPPER = "roman-upper"
    ARABIC = "arabic"
    NONE = "none"


class CommitOrder(enum.Enum):
    """Ordering of the commit appendix, or its absence."""

    NEWEST_FIRST = "newest-first"
    OLDEST_FIRST = "oldest-first"
    DISABLED = "disabled"


class Position(enum.Enum):
    """Horizontal placement of a running header or footer."""

    OUTER = "outer"
    INNER = "inner"
    CENTRE = "centre"
    LEFT = "left"
    RIGHT = "right"


class RulePosition(enum.Enum):
    """Where a horizontal rule is drawn relative to a header or footer."""

    NONE = "none"
    ABOVE = "above"
    BELOW = "below"


class WarningKind(enum.Enum):
    """Categories of advisory, non-fatal planning conditions."""

    CAPACITY = "capacity"
    TEMPLATE = "template"
    MISSING_FILE = "missing-file"


@dc.dataclass(frozen=True, slots=True)
class CandidateFile:
    """A repository file eligible for inclusion in the book.

    Binary files (``is_binary``) are kept so the book can show a placeholder
    page for them; they are never measured or highlighted.
    """

    path: str
    byte_size: int
    detected_language: str | None = None
    is_tracked: bool = True
    is_binary: bool = False


@dc.dataclass(frozen=True, slots=True)
class OrderedFile:
    """A candidate file with its final position in the reading order."""

    path: str
    byte_size: int
    detected_language: str | None
    is_tracked: bool
    order_rank: int
    is_binary: bool = False

    @classmethod
    def from_candidate(cls, candidate: CandidateFile, rank: int) -> OrderedFile:
        """Attach ``rank`` to ``candidate``."""
        return cls(
            path=candidate.path,
            byte_size=candidate.byte_size,
            detected_language=candidate.detected_language,
            is_tracked=candidate.is_tracked,
            order_rank=rank,
            is_binary=candidate.is_binary,
        )


@dc.dataclass(frozen=True, slots=True)
class NumberingScheme:
    """Page-number style and first page number for one section."""

    style: NumberStyle = NumberStyle.ARABIC
    start: int = 1


@dc.dataclass(frozen=True, slots=True)
class Author:
    """A contributor credited in the book, ranked by commit count."""

    name: str
    email: str | None = None
    prominence: int = 0

    @classmethod
    def parse(cls, text: str, prominence: int = 0) -> Author | None:
        """Parse ``"Name <email>"`` (email optional); ``None`` for blank text."""
        match = _AUTHOR_PATTERN.match(text)
        if not match or not match.group("name").strip():
            return None
        email = (match.group("email") or "").strip() or None
        return cls(name=match.group("name").strip(), email=email, prominence=prominence)

    def __str__(self) -> str:
        if self.email:
            return f"{self.name} <{self.email}>"
        return self.name


@dc.dataclass(frozen=True, slots=True)
class CommitRecord:
    """One materialized commit from the history provider."""

    hash: str
    author: str
    email: str
    timestamp: dt.datetime
    message: str

    @property
    def short_hash(self) -> str:
        return self.hash[:8]

    @property
    def summary(self) -> str:
        """First line of the commit message."""
        return self.message.strip().splitlines()[0] if self.message.strip() else ""

    @property
    def body(self) -> str:
        """Message text after the summary line, stripped."""
        lines = self.message.strip().splitlines()
        return "\n".join(lines[1:]).strip()


@dc.dataclass(frozen=True, slots=True)
class HistorySummary:
    """Aggregate view of the commit log used by the history appendix."""

    order: CommitOrder
    commits: tuple[CommitRecord, ...]
    total: int
    author_counts: tuple[tuple[str, int], ...]
    first_commit: dt.datetime | None
    last_commit: dt.datetime | None
    histogram: str

    @property
    def date_range(self) -> str:
        if self.first_commit is None or self.last_commit is None:
            return "unknown"
        return f"{self.first_commit:%Y-%m-%d} to {self.last_commit:%Y-%m-%d}"


@dc.dataclass(frozen=True, slots=True)
class LineOffense:
    """A source line wider than the page can hold."""

    path: str
    line_number: int
    actual_length: int


@dc.dataclass(frozen=True, slots=True)
class CapacityReport:
    """Advisory result of checking source lines against the page width.

    ``suppressed`` counts, per file, the offenses beyond the per-file cap that
    were not listed individually.
    """

    max_chars_per_line: int
    offending_files: tuple[LineOffense, ...] = ()
    suppressed: tuple[tuple[str, int], ...] = ()

    @property
    def has_offenses(self) -> bool:
        return bool(self.offending_files)

    @property
    def offending_paths(self) -> tuple[str, ...]:
        """Paths with at least one offense, in scan order."""
        return tuple(dict.fromkeys(offense.path for offense in self.offending_files))


@dc.dataclass(frozen=True, slots=True)
class LineStatistics:
    """Distribution of line lengths across the scanned source files."""

    total_lines: int = 0
    lines_that_wrap: int = 0
    longest_line_length: int = 0
    longest_line_path: str | None = None
    longest_line_number: int = 0
    percentile_95: int = 0
    suggested_font_size_pt: float | None = None

    @property
    def wrap_percentage(self) -> float:
        if not self.total_lines:
            return 0.0
        return self.lines_that_wrap / self.total_lines * 100.0


@dc.dataclass(frozen=True, slots=True)
class Section:
    """A contiguous run of pages sharing a numbering scheme."""

    kind: SectionKind
    files: tuple[OrderedFile, ...]
    numbering: NumberingScheme
    page_count: int = 0
    file_pages: tuple[int, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class SheetSide:
    """One physical sheet: the page pairs printed on its front and back.

    ``None`` marks a blank padding slot.
    """

    front: tuple[int | None, int | None]
    back: tuple[int | None, int | None]


@dc.dataclass(frozen=True, slots=True)
class Signature:
    """A folded, nested group of sheets, outermost sheet first."""

    index: int
    sheets: tuple[SheetSide, ...]


@dc.dataclass(frozen=True, slots=True)
class ImpositionPlan:
    """Saddle-stitch ordering of logical pages onto physical sheets."""

    signature_size: int
    page_count: int
    padded_page_count: int
    signatures: tuple[Signature, ...]

    @property
    def sheet_count(self) -> int:
        return sum(len(signature.sheets) for signature in self.signatures)

    @property
    def blank_count(self) -> int:
        return self.padded_page_count - self.page_count


@dc.dataclass(frozen=True, slots=True)
class PageSlot:
    """One logical page of the planned book.

    ``section`` is ``None`` for the title and colophon pages, which carry no
    running header or footer.
    """

    number: int
    section: SectionKind | None
    index_in_section: int
    label: str
    file: str | None
    header: str
    footer: str


@dc.dataclass(frozen=True, slots=True)
class PlanWarning:
    """An advisory condition collected while planning."""

    kind: WarningKind
    message: str
    path: str | None = None


@dc.dataclass(frozen=True, slots=True)
class LanguageStat:
    """Per-language totals for the colophon."""

    language: str
    files: int
    lines: int


@dc.dataclass(frozen=True, slots=True)
class BookStatistics:
    """Aggregate counts over the files included in the book."""

    file_count: int = 0
    line_count: int = 0
    total_bytes: int = 0
    languages: tuple[LanguageStat, ...] = ()


@dc.dataclass(frozen=True, slots=True)
class BookDocumentModel:
    """Fully resolved plan of a book, ready for a document renderer."""

    title: str
    authors: tuple[Author, ...]
    licences: tuple[str, ...]
    remotes: tuple[tuple[str, str], ...]
    root: Path
    generated_at: dt.datetime
    sections: tuple[Section, ...]
    history: HistorySummary | None
    capacity: CapacityReport
    line_stats: LineStatistics
    imposition: ImpositionPlan | None
    pages: tuple[PageSlot, ...]
    title_page: str
    cover: str | None
    colophon: str
    statistics: BookStatistics
    warnings: tuple[PlanWarning, ...] = ()

    def section(self, kind: SectionKind) -> Section | None:
        """Return the section of ``kind`` when the book has one."""
        for section in self.sections:
            if section.kind is kind:
                return section
        return None

    @property
    def page_count(self) -> int:
        return len(self.pages)


__all__ = [
    "Author",
    "BookDocumentModel",
    "BookStatistics",
    "CandidateFile",
    "CapacityReport",
    "CommitOrder",
    "CommitRecord",
    "HistorySummary",
    "ImpositionPlan",
    "LanguageStat",
    "LineOffense",
    "LineStatistics",
    "NumberStyle",
    "NumberingScheme",
    "OrderedFile",
    "PageSlot",
    "PlanWarning",
    "Position",
    "RulePosition",
    "Section",
    "SectionKind",
    "SheetSide",
    "Signature",
    "WarningKind",
]
