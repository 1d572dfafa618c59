"""Section numbering schemes and page-count estimates.

Estimates are deliberately simple and deterministic: every file starts a new
page, each source line costs as many rows as it wraps into, and a page holds a
fixed number of rows. More content therefore never yields fewer pages. The
renderer reconciles actual page counts; these numbers drive running heads and
imposition planning.
"""

from __future__ import annotations

import math
import typing as typ

from ._constants import FILE_HEADING_ROWS, LINE_HEIGHT_FACTOR, POINTS_PER_INCH
from .models import NumberingScheme, NumberStyle, Section, SectionKind

if typ.TYPE_CHECKING:
    from .config.models import PdfConfig
    from .models import CommitRecord, HistorySummary, OrderedFile

_ROMAN_NUMERALS: tuple[tuple[int, str], ...] = (
    (1000, "m"),
    (900, "cm"),
    (500, "d"),
    (400, "cd"),
    (100, "c"),
    (90, "xc"),
    (50, "l"),
    (40, "xl"),
    (10, "x"),
    (9, "ix"),
    (5, "v"),
    (4, "iv"),
    (1, "i"),
)


def to_roman(number: int) -> str:
    """Return lowercase roman numerals; non-positive numbers stay arabic.

    Examples
    --------
    >>> to_roman(1994)
    'mcmxciv'
    >>> to_roman(0)
    '0'
    """
    if number <= 0:
        return str(number)
    parts: list[str] = []
    remaining = number
    for value, numeral in _ROMAN_NUMERALS:
        count, remaining = divmod(remaining, value)
        parts.append(numeral * count)
    return "".join(parts)


def format_page_number(number: int, style: NumberStyle) -> str:
    """Format ``number`` in ``style``.

    >>> format_page_number(4, NumberStyle.ROMAN_UPPER)
    'IV'
    >>> format_page_number(4, NumberStyle.NONE)
    ''
    """
    match style:
        case NumberStyle.ROMAN_LOWER:
            return to_roman(number)
        case NumberStyle.ROMAN_UPPER:
            return to_roman(number).upper()
        case NumberStyle.NONE:
            return ""
        case _:
            return str(number)


def derive_lines_per_page(layout: PdfConfig) -> int:
    """Rows of body text that fit between the top and bottom margins.

    One row each is reserved for a non-empty header and footer template.
    """
    usable_pt = layout.printable_height_in * POINTS_PER_INCH
    rows = math.floor(usable_pt / (layout.font_size_body_pt * LINE_HEIGHT_FACTOR))
    rows -= bool(layout.header_template.strip()) + bool(layout.footer_template.strip())
    return max(1, rows)


def line_rows(length: int, max_chars: int) -> int:
    """Rows a line of ``length`` columns occupies once wrapped."""
    return max(1, math.ceil(length / max_chars))


def file_rows(lengths: typ.Iterable[int], max_chars: int) -> int:
    return FILE_HEADING_ROWS + sum(line_rows(length, max_chars) for length in lengths)


def commit_rows(commit: CommitRecord, max_chars: int) -> int:
    """Two header rows, the wrapped message, and a separating blank row."""
    lines = commit.message.splitlines() or [""]
    return 2 + sum(line_rows(len(line), max_chars) for line in lines) + 1


class PaginationPlanner:
    """Assign numbering schemes and estimate page counts per section."""

    def __init__(self, layout: PdfConfig, max_chars: int) -> None:
        self.numbering = layout.numbering
        self.max_chars = max_chars
        self.lines_per_page = layout.lines_per_page or derive_lines_per_page(layout)

    def pages_for_rows(self, rows: int) -> int:
        return max(1, math.ceil(rows / self.lines_per_page))

    def file_pages(self, lengths: typ.Iterable[int], *, binary: bool = False) -> int:
        """Pages one file occupies; always at least one.

        A binary file takes a single page holding its placeholder.
        """
        if binary:
            return 1
        return self.pages_for_rows(file_rows(lengths, self.max_chars))

    def history_pages(self, history: HistorySummary) -> int:
        rows = sum(commit_rows(commit, self.max_chars) for commit in history.commits)
        return self.pages_for_rows(rows)

    def plan_sections(
        self,
        frontmatter: typ.Sequence[OrderedFile],
        source: typ.Sequence[OrderedFile],
        history: HistorySummary | None,
        line_lengths: typ.Mapping[str, typ.Sequence[int]],
    ) -> list[Section]:
        """Build the book's sections in reading order.

        Parameters
        ----------
        frontmatter, source : Sequence[OrderedFile]
            Partitioned files in reading order.
        history : HistorySummary or None
            Commit summary; a history section is planned only when it holds
            commits.
        line_lengths : Mapping[str, Sequence[int]]
            Measured line lengths per path. Missing paths count as empty files.

        Returns
        -------
        list[Section]
            Frontmatter (when non-empty), Source (always) and History (when
            present). A History section without an explicit scheme continues
            the Source numbering where it ends.
        """
        sections: list[Section] = []
        if frontmatter:
            sections.append(
                self._file_section(
                    SectionKind.FRONTMATTER,
                    frontmatter,
                    self.numbering.frontmatter,
                    line_lengths,
                )
            )
        source_section = self._file_section(
            SectionKind.SOURCE, source, self.numbering.source, line_lengths
        )
        sections.append(source_section)
        if history is not None and history.total:
            scheme = self.numbering.history or NumberingScheme(
                style=source_section.numbering.style,
                start=source_section.numbering.start + source_section.page_count,
            )
            sections.append(
                Section(
                    kind=SectionKind.HISTORY,
                    files=(),
                    numbering=scheme,
                    page_count=self.history_pages(history),
                )
            )
        return sections

    def _file_section(
        self,
        kind: SectionKind,
        files: typ.Sequence[OrderedFile],
        numbering: NumberingScheme,
        line_lengths: typ.Mapping[str, typ.Sequence[int]],
    ) -> Section:
        file_pages = tuple(
            self.file_pages(line_lengths.get(f.path, ()), binary=f.is_binary)
            for f in files
        )
        return Section(
            kind=kind,
            files=tuple(files),
            numbering=numbering,
            page_count=sum(file_pages),
            file_pages=file_pages,
        )


__all__ = [
    "PaginationPlanner",
    "commit_rows",
    "derive_lines_per_page",
    "file_rows",
    "format_page_number",
    "line_rows",
    "to_roman",
]
