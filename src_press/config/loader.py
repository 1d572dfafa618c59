"""Load ``src-press.toml`` into typed dataclasses."""

from __future__ import annotations

import collections.abc as cabc
import typing as typ
from pathlib import Path

import tomlkit
from tomlkit.exceptions import ParseError

from .._constants import PAGE_SIZES
from ..models import CommitOrder, Position, RulePosition
from .helpers import (
    _bool,
    _build_scheme,
    _non_negative_number,
    _optional_positive_int,
    _optional_str,
    _parse_choice,
    _path_list,
    _positive_number,
    _str_list,
    _table,
    _validate_entrypoint,
    _validate_signature_size,
)
from .models import (
    BookConfig,
    BookletConfig,
    ConfigurationError,
    EpubConfig,
    HtmlConfig,
    NumberingConfig,
    PdfConfig,
    SourceConfig,
)


def load_book_config(path: Path) -> BookConfig:
    """Load the TOML document describing what to print and how.

    Parameters
    ----------
    path : Path
        Filesystem path to the configuration file (usually
        ``src-press.toml``). A relative ``source.repository`` is resolved
        against the file's directory.

    Returns
    -------
    BookConfig
        Parsed and validated configuration.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    ConfigurationError
        If the TOML cannot be parsed, the ``[source]`` table is missing, or a
        field holds an invalid value. The error names the offending field.

    Examples
    --------
    >>> from pathlib import Path
    >>> config = load_book_config(Path("src-press.toml"))  # doctest: +SKIP
    >>> config.source.commit_order  # doctest: +SKIP
    <CommitOrder.NEWEST_FIRST: 'newest-first'>
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)
    try:
        document = tomlkit.parse(path.read_text(encoding="utf-8"))
    except ParseError as exc:
        msg = f"Unable to parse config TOML at {path}: {exc}"
        raise ConfigurationError(msg) from exc
    return parse_book_config(document.unwrap(), base_dir=path.parent)


def parse_book_config(
    raw: typ.Mapping[str, typ.Any], *, base_dir: Path | None = None
) -> BookConfig:
    """Validate an already-decoded configuration mapping."""
    if not isinstance(raw, cabc.Mapping):
        msg = "Top-level configuration must be a mapping."
        raise ConfigurationError(msg)
    source_raw = _table(raw, "source")
    if source_raw is None:
        msg = "missing [source] table"
        raise ConfigurationError(msg, field="source")
    source = _build_source_config(source_raw, base_dir or Path())

    pdf_raw = _table(raw, "pdf")
    booklet_raw = _table(raw, "booklet")
    epub_raw = _table(raw, "epub")
    html_raw = _table(raw, "html")
    return BookConfig(
        source=source,
        pdf=_build_pdf_config(pdf_raw) if pdf_raw is not None else None,
        booklet=_build_booklet_config(booklet_raw) if booklet_raw is not None else None,
        epub=_build_epub_config(epub_raw) if epub_raw is not None else None,
        html=_build_html_config(html_raw) if html_raw is not None else None,
    )


def _build_source_config(
    payload: typ.Mapping[str, typ.Any], base_dir: Path
) -> SourceConfig:
    repository = Path(str(payload.get("repository", ".")))
    if not repository.is_absolute():
        repository = base_dir / repository
    title = _optional_str(payload.get("title")) or repository.resolve().name

    frontmatter_files = _path_list(
        payload.get("frontmatter_files"), "source.frontmatter_files"
    )
    source_files = _path_list(payload.get("source_files"), "source.source_files")
    conflicts = sorted(set(frontmatter_files) & set(source_files))
    if conflicts:
        msg = f"listed as both frontmatter and source: {', '.join(conflicts)}"
        raise ConfigurationError(msg, field="source.frontmatter_files")

    return SourceConfig(
        title=title,
        repository=repository,
        licences=_str_list(payload.get("licences"), "source.licences"),
        authors=_str_list(payload.get("authors"), "source.authors"),
        commit_order=_parse_choice(
            payload.get("commit_order", CommitOrder.NEWEST_FIRST.value),
            CommitOrder,
            "source.commit_order",
        ),
        entrypoint=_validate_entrypoint(payload.get("entrypoint")),
        block_globs=_str_list(payload.get("block_globs"), "source.block_globs"),
        exclude_submodules=_bool(
            payload.get("exclude_submodules"), "source.exclude_submodules", default=True
        ),
        auto_frontmatter=_bool(
            payload.get("auto_frontmatter"), "source.auto_frontmatter", default=True
        ),
        frontmatter_files=frontmatter_files,
        source_files=source_files,
    )


def _build_pdf_config(payload: typ.Mapping[str, typ.Any]) -> PdfConfig:
    """Build a PdfConfig, applying a page-size preset before explicit sizes."""
    base = PdfConfig()
    width, height = base.page_width_in, base.page_height_in
    page_size = payload.get("page_size")
    if page_size is not None:
        preset = PAGE_SIZES.get(str(page_size).strip().lower().replace("_", "-"))
        if preset is None:
            allowed = ", ".join(PAGE_SIZES)
            msg = f"unknown page size {page_size!r}; expected one of: {allowed}"
            raise ConfigurationError(msg, field="pdf.page_size")
        width, height = preset

    def number(key: str, default: float) -> float:
        return _positive_number(payload.get(key), f"pdf.{key}", default=default)

    def margin(key: str, default: float) -> float:
        return _non_negative_number(payload.get(key), f"pdf.{key}", default=default)

    char_width = payload.get("char_width_em")
    numbering_raw = _table(payload, "numbering", field="pdf.numbering") or {}
    numbering = _build_numbering(numbering_raw)

    config = PdfConfig(
        outfile=Path(str(payload.get("outfile", base.outfile))),
        font=_optional_str(payload.get("font")) or base.font,
        char_width_em=(
            None
            if char_width is None
            else _positive_number(char_width, "pdf.char_width_em", default=0.0)
        ),
        theme=_optional_str(payload.get("theme")) or base.theme,
        page_width_in=number("page_width_in", width),
        page_height_in=number("page_height_in", height),
        margin_top_in=margin("margin_top_in", base.margin_top_in),
        margin_outer_in=margin("margin_outer_in", base.margin_outer_in),
        margin_bottom_in=margin("margin_bottom_in", base.margin_bottom_in),
        margin_inner_in=margin("margin_inner_in", base.margin_inner_in),
        font_size_title_pt=number("font_size_title_pt", base.font_size_title_pt),
        font_size_heading_pt=number("font_size_heading_pt", base.font_size_heading_pt),
        font_size_subheading_pt=number(
            "font_size_subheading_pt", base.font_size_subheading_pt
        ),
        font_size_body_pt=number("font_size_body_pt", base.font_size_body_pt),
        font_size_small_pt=number("font_size_small_pt", base.font_size_small_pt),
        lines_per_page=_optional_positive_int(
            payload.get("lines_per_page"), "pdf.lines_per_page"
        ),
        max_offenses_per_file=_optional_positive_int(
            payload.get("max_offenses_per_file"), "pdf.max_offenses_per_file"
        )
        or base.max_offenses_per_file,
        title_template=str(payload.get("title_template", base.title_template)),
        header_template=str(payload.get("header_template", base.header_template)),
        header_position=_parse_choice(
            payload.get("header_position", base.header_position),
            Position,
            "pdf.header_position",
        ),
        header_rule=_parse_choice(
            payload.get("header_rule", base.header_rule), RulePosition, "pdf.header_rule"
        ),
        footer_template=str(payload.get("footer_template", base.footer_template)),
        footer_position=_parse_choice(
            payload.get("footer_position", base.footer_position),
            Position,
            "pdf.footer_position",
        ),
        footer_rule=_parse_choice(
            payload.get("footer_rule", base.footer_rule), RulePosition, "pdf.footer_rule"
        ),
        colophon_template=str(payload.get("colophon_template", base.colophon_template)),
        numbering=numbering,
    )
    if config.printable_width_in <= 0:
        msg = "inner and outer margins leave no printable width"
        raise ConfigurationError(msg, field="pdf.margin_inner_in")
    if config.printable_height_in <= 0:
        msg = "top and bottom margins leave no printable height"
        raise ConfigurationError(msg, field="pdf.margin_top_in")
    return config


def _build_numbering(payload: typ.Mapping[str, typ.Any]) -> NumberingConfig:
    base = NumberingConfig()
    history_raw = _table(payload, "history", field="pdf.numbering.history")
    return NumberingConfig(
        frontmatter=_build_scheme(
            _table(payload, "frontmatter", field="pdf.numbering.frontmatter"),
            "pdf.numbering.frontmatter",
            base.frontmatter,
        ),
        source=_build_scheme(
            _table(payload, "source", field="pdf.numbering.source"),
            "pdf.numbering.source",
            base.source,
        ),
        history=(
            _build_scheme(history_raw, "pdf.numbering.history", base.source)
            if history_raw
            else None
        ),
    )


def _build_booklet_config(payload: typ.Mapping[str, typ.Any]) -> BookletConfig:
    base = BookletConfig()
    return BookletConfig(
        outfile=Path(str(payload.get("outfile", base.outfile))),
        signature_size=_validate_signature_size(
            payload.get("signature_size", base.signature_size)
        ),
        sheet_width_in=_positive_number(
            payload.get("sheet_width_in"),
            "booklet.sheet_width_in",
            default=base.sheet_width_in,
        ),
        sheet_height_in=_positive_number(
            payload.get("sheet_height_in"),
            "booklet.sheet_height_in",
            default=base.sheet_height_in,
        ),
    )


def _build_epub_config(payload: typ.Mapping[str, typ.Any]) -> EpubConfig:
    base = EpubConfig()
    return EpubConfig(
        outfile=Path(str(payload.get("outfile", base.outfile))),
        theme=_optional_str(payload.get("theme")) or base.theme,
        cover_template=str(payload.get("cover_template", base.cover_template)),
        colophon_template=str(payload.get("colophon_template", base.colophon_template)),
        language=_optional_str(payload.get("language")) or base.language,
        subject=str(payload.get("subject", base.subject)),
        keywords=str(payload.get("keywords", base.keywords)),
    )


def _build_html_config(payload: typ.Mapping[str, typ.Any]) -> HtmlConfig:
    base = HtmlConfig()
    return HtmlConfig(
        outfile=Path(str(payload.get("outfile", base.outfile))),
        theme=_optional_str(payload.get("theme")) or base.theme,
    )
