"""Unit tests for numbering schemes and page-count estimates."""

from __future__ import annotations

import typing as typ

import pytest

from src_press.config import NumberingConfig, PdfConfig
from src_press.history import summarize_history
from src_press.models import (
    CandidateFile,
    CommitOrder,
    NumberingScheme,
    NumberStyle,
    SectionKind,
)
from src_press.ordering import order_files
from src_press.pagination import (
    PaginationPlanner,
    derive_lines_per_page,
    file_rows,
    format_page_number,
    to_roman,
)

if typ.TYPE_CHECKING:
    from src_press.models import CommitRecord


@pytest.mark.parametrize(
    ("number", "style", "expected"),
    [
        (1, NumberStyle.ROMAN_LOWER, "i"),
        (4, NumberStyle.ROMAN_LOWER, "iv"),
        (14, NumberStyle.ROMAN_UPPER, "XIV"),
        (2024, NumberStyle.ROMAN_UPPER, "MMXXIV"),
        (0, NumberStyle.ROMAN_LOWER, "0"),
        (12, NumberStyle.ARABIC, "12"),
        (12, NumberStyle.NONE, ""),
    ],
)
def test_format_page_number(number: int, style: NumberStyle, expected: str) -> None:
    assert format_page_number(number, style) == expected, (
        f"unexpected label for {number} in {style}"
    )


def test_roman_numerals_are_subtractive() -> None:
    assert [to_roman(n) for n in (9, 40, 90, 400, 900)] == [
        "ix",
        "xl",
        "xc",
        "cd",
        "cm",
    ], "subtractive pairs are used"


def test_default_lines_per_page() -> None:
    # floor(7.75 in * 72 / 12 pt) minus header and footer rows
    assert derive_lines_per_page(PdfConfig()) == 44, "default page holds 44 rows"


def test_empty_running_heads_free_their_rows() -> None:
    layout = PdfConfig(header_template="", footer_template="  ")

    assert derive_lines_per_page(layout) == 46, "blank templates reserve no rows"


def test_file_rows_count_wrapped_lines() -> None:
    assert file_rows([10, 61, 62, 200, 0], 61) == 2 + 1 + 1 + 2 + 4 + 1, (
        "each line costs its wrapped rows plus two heading rows"
    )


def test_page_estimates_are_monotonic() -> None:
    planner = PaginationPlanner(PdfConfig(lines_per_page=10), 61)
    previous = 0
    for count in range(0, 200, 7):
        pages = planner.file_pages([40] * count)
        assert pages >= previous, f"{count} lines gave fewer pages than before"
        previous = pages
    assert planner.file_pages([]) == 1, "an empty file still takes a page"


def test_default_sections_and_history_continuation(
    sample_commits: list[CommitRecord],
) -> None:
    layout = PdfConfig(lines_per_page=10)
    planner = PaginationPlanner(layout, 61)
    front = order_files([CandidateFile("README.md", 1)])
    source = order_files([CandidateFile("a.py", 1), CandidateFile("b.py", 1)])
    lengths = {"README.md": [5] * 3, "a.py": [10] * 25, "b.py": [10] * 2}
    history = summarize_history(sample_commits, CommitOrder.NEWEST_FIRST)

    sections = planner.plan_sections(front, source, history, lengths)

    kinds = [section.kind for section in sections]
    assert kinds == [SectionKind.FRONTMATTER, SectionKind.SOURCE, SectionKind.HISTORY], (
        f"unexpected sections {kinds}"
    )
    frontmatter, source_section, history_section = sections
    assert frontmatter.numbering == NumberingScheme(NumberStyle.ROMAN_LOWER, 1), (
        "frontmatter defaults to lower roman"
    )
    assert source_section.file_pages == (3, 1), (
        f"27 rows over 10-row pages is 3 pages: {source_section.file_pages}"
    )
    assert history_section.numbering == NumberingScheme(NumberStyle.ARABIC, 5), (
        f"history continues after 4 source pages: {history_section.numbering}"
    )
    # 4 + 6 + 4 rows for the three commits
    assert history_section.page_count == 2, "history rows are paginated"


def test_explicit_history_scheme_and_missing_sections() -> None:
    numbering = NumberingConfig(history=NumberingScheme(NumberStyle.ROMAN_UPPER, 1))
    planner = PaginationPlanner(PdfConfig(numbering=numbering), 61)
    empty_history = summarize_history([], CommitOrder.NEWEST_FIRST)

    sections = planner.plan_sections([], [], empty_history, {})

    assert [s.kind for s in sections] == [SectionKind.SOURCE], (
        "without frontmatter or commits only the source section remains"
    )
    assert sections[0].page_count == 0, "an empty source section has no pages"


def test_binary_files_take_one_placeholder_page() -> None:
    planner = PaginationPlanner(PdfConfig(lines_per_page=10), 61)

    assert planner.file_pages([40] * 500, binary=True) == 1, (
        "line lengths are ignored for binary files"
    )
    assert planner.file_pages([], binary=True) == 1, "the placeholder fills one page"
