"""Typed dataclasses describing the ``src-press.toml`` configuration."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from .._constants import (
    DEFAULT_COLOPHON_TEMPLATE,
    DEFAULT_COVER_TEMPLATE,
    DEFAULT_FOOTER_TEMPLATE,
    DEFAULT_HEADER_TEMPLATE,
    DEFAULT_MAX_OFFENSES_PER_FILE,
    DEFAULT_TITLE_TEMPLATE,
)
from ..models import CommitOrder, NumberingScheme, NumberStyle, Position, RulePosition


class ConfigurationError(ValueError):
    """Raised when the book configuration is invalid or incomplete.

    ``field`` names the offending setting in dotted form (for example
    ``booklet.signature_size``) when one can be identified.
    """

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field

    def __str__(self) -> str:
        if self.field:
            return f"{self.field}: {self.message}"
        return self.message


@dc.dataclass(slots=True)
class SourceConfig:
    """Which repository files go into the book, and how they are credited."""

    title: str
    repository: Path = Path()
    licences: list[str] = dc.field(default_factory=list)
    authors: list[str] = dc.field(default_factory=list)
    commit_order: CommitOrder = CommitOrder.NEWEST_FIRST
    entrypoint: str | None = None
    block_globs: list[str] = dc.field(default_factory=list)
    exclude_submodules: bool = True
    auto_frontmatter: bool = True
    frontmatter_files: list[str] = dc.field(default_factory=list)
    source_files: list[str] = dc.field(default_factory=list)


@dc.dataclass(slots=True)
class NumberingConfig:
    """Numbering scheme per section; ``history=None`` continues the source."""

    frontmatter: NumberingScheme = NumberingScheme(NumberStyle.ROMAN_LOWER, 1)
    source: NumberingScheme = NumberingScheme(NumberStyle.ARABIC, 1)
    history: NumberingScheme | None = None


@dc.dataclass(slots=True)
class PdfConfig:
    """Page geometry, typography and running heads of the printed book."""

    outfile: Path = Path("book.pdf")
    font: str = "SourceCodePro"
    char_width_em: float | None = None
    theme: str = "github"
    page_width_in: float = 5.5
    page_height_in: float = 8.5
    margin_top_in: float = 0.5
    margin_outer_in: float = 0.125
    margin_bottom_in: float = 0.25
    margin_inner_in: float = 0.25
    font_size_title_pt: float = 32.0
    font_size_heading_pt: float = 24.0
    font_size_subheading_pt: float = 12.0
    font_size_body_pt: float = 10.0
    font_size_small_pt: float = 8.0
    lines_per_page: int | None = None
    max_offenses_per_file: int = DEFAULT_MAX_OFFENSES_PER_FILE
    title_template: str = DEFAULT_TITLE_TEMPLATE
    header_template: str = DEFAULT_HEADER_TEMPLATE
    header_position: Position = Position.OUTER
    header_rule: RulePosition = RulePosition.BELOW
    footer_template: str = DEFAULT_FOOTER_TEMPLATE
    footer_position: Position = Position.OUTER
    footer_rule: RulePosition = RulePosition.NONE
    colophon_template: str = DEFAULT_COLOPHON_TEMPLATE
    numbering: NumberingConfig = dc.field(default_factory=NumberingConfig)

    @property
    def printable_width_in(self) -> float:
        return self.page_width_in - self.margin_inner_in - self.margin_outer_in

    @property
    def printable_height_in(self) -> float:
        return self.page_height_in - self.margin_top_in - self.margin_bottom_in


@dc.dataclass(slots=True)
class BookletConfig:
    """Saddle-stitch booklet output; its presence requests imposition."""

    outfile: Path = Path("book-booklet.pdf")
    signature_size: int = 16
    sheet_width_in: float = 11.0
    sheet_height_in: float = 8.5


@dc.dataclass(slots=True)
class EpubConfig:
    """EPUB output settings."""

    outfile: Path = Path("book.epub")
    theme: str = "github"
    cover_template: str = DEFAULT_COVER_TEMPLATE
    colophon_template: str = DEFAULT_COLOPHON_TEMPLATE
    language: str = "en"
    subject: str = ""
    keywords: str = ""


@dc.dataclass(slots=True)
class HtmlConfig:
    """HTML proof output settings."""

    outfile: Path = Path("book.html")
    theme: str = "default"


@dc.dataclass(slots=True)
class BookConfig:
    """Root configuration document."""

    source: SourceConfig
    pdf: PdfConfig | None = None
    booklet: BookletConfig | None = None
    epub: EpubConfig | None = None
    html: HtmlConfig | None = None

    @property
    def layout(self) -> PdfConfig:
        """Page layout used for planning; defaults when ``[pdf]`` is absent."""
        return self.pdf if self.pdf is not None else PdfConfig()
