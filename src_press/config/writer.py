"""Serialise a :class:`BookConfig` into a ``src-press.toml`` document."""

from __future__ import annotations

import typing as typ

import tomlkit

if typ.TYPE_CHECKING:
    from pathlib import Path

    from tomlkit.items import Table
    from tomlkit.toml_document import TOMLDocument

    from ..models import NumberingScheme
    from .models import (
        BookConfig,
        BookletConfig,
        EpubConfig,
        HtmlConfig,
        PdfConfig,
        SourceConfig,
    )


def build_config_document(config: BookConfig) -> TOMLDocument:
    """Return a TOML document holding every section present in ``config``."""
    doc = tomlkit.document()
    doc.add(tomlkit.comment("Book configuration for src-press."))
    doc.add(tomlkit.nl())
    doc["source"] = _source_table(config.source)
    if config.pdf is not None:
        doc["pdf"] = _pdf_table(config.pdf)
    if config.booklet is not None:
        doc["booklet"] = _booklet_table(config.booklet)
    if config.epub is not None:
        doc["epub"] = _epub_table(config.epub)
    if config.html is not None:
        doc["html"] = _html_table(config.html)
    return doc


def write_config_document(document: TOMLDocument, path: Path) -> Path:
    """Write ``document`` to ``path``, creating parent folders as needed."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(tomlkit.dumps(document), encoding="utf-8")
    return path


def string_array(values: typ.Iterable[str]) -> tomlkit.items.Array:
    """Return a TOML array that renders one entry per line when non-empty."""
    array = tomlkit.array()
    array.extend(values)
    if len(array) > 1:
        array.multiline(True)
    return array


def _text(value: str) -> tomlkit.items.String:
    return tomlkit.string(value, multiline="\n" in value)


def _source_table(source: SourceConfig) -> Table:
    table = tomlkit.table()
    table["title"] = source.title
    table["repository"] = source.repository.as_posix()
    table["licences"] = string_array(source.licences)
    table["authors"] = string_array(source.authors)
    table["commit_order"] = source.commit_order.value
    if source.entrypoint:
        table["entrypoint"] = source.entrypoint
    table["block_globs"] = string_array(source.block_globs)
    table["exclude_submodules"] = source.exclude_submodules
    table["auto_frontmatter"] = source.auto_frontmatter
    table["frontmatter_files"] = string_array(source.frontmatter_files)
    table["source_files"] = string_array(source.source_files)
    return table


def _scheme_table(scheme: NumberingScheme) -> Table:
    table = tomlkit.table()
    table["style"] = scheme.style.value
    table["start"] = scheme.start
    return table


def _pdf_table(pdf: PdfConfig) -> Table:
    table = tomlkit.table()
    table["outfile"] = pdf.outfile.as_posix()
    table["font"] = pdf.font
    if pdf.char_width_em is not None:
        table["char_width_em"] = pdf.char_width_em
    table["theme"] = pdf.theme
    table["page_width_in"] = pdf.page_width_in
    table["page_height_in"] = pdf.page_height_in
    table["margin_top_in"] = pdf.margin_top_in
    table["margin_outer_in"] = pdf.margin_outer_in
    table["margin_bottom_in"] = pdf.margin_bottom_in
    table["margin_inner_in"] = pdf.margin_inner_in
    table["font_size_title_pt"] = pdf.font_size_title_pt
    table["font_size_heading_pt"] = pdf.font_size_heading_pt
    table["font_size_subheading_pt"] = pdf.font_size_subheading_pt
    table["font_size_body_pt"] = pdf.font_size_body_pt
    table["font_size_small_pt"] = pdf.font_size_small_pt
    if pdf.lines_per_page is not None:
        table["lines_per_page"] = pdf.lines_per_page
    table["max_offenses_per_file"] = pdf.max_offenses_per_file
    table["title_template"] = _text(pdf.title_template)
    table["header_template"] = _text(pdf.header_template)
    table["header_position"] = pdf.header_position.value
    table["header_rule"] = pdf.header_rule.value
    table["footer_template"] = _text(pdf.footer_template)
    table["footer_position"] = pdf.footer_position.value
    table["footer_rule"] = pdf.footer_rule.value
    table["colophon_template"] = _text(pdf.colophon_template)

    numbering = tomlkit.table()
    numbering["frontmatter"] = _scheme_table(pdf.numbering.frontmatter)
    numbering["source"] = _scheme_table(pdf.numbering.source)
    if pdf.numbering.history is not None:
        numbering["history"] = _scheme_table(pdf.numbering.history)
    table["numbering"] = numbering
    return table


def _booklet_table(booklet: BookletConfig) -> Table:
    table = tomlkit.table()
    table["outfile"] = booklet.outfile.as_posix()
    table["signature_size"] = booklet.signature_size
    table["sheet_width_in"] = booklet.sheet_width_in
    table["sheet_height_in"] = booklet.sheet_height_in
    return table


def _epub_table(epub: EpubConfig) -> Table:
    table = tomlkit.table()
    table["outfile"] = epub.outfile.as_posix()
    table["theme"] = epub.theme
    table["cover_template"] = _text(epub.cover_template)
    table["colophon_template"] = _text(epub.colophon_template)
    table["language"] = epub.language
    table["subject"] = epub.subject
    table["keywords"] = epub.keywords
    return table


def _html_table(html: HtmlConfig) -> Table:
    table = tomlkit.table()
    table["outfile"] = html.outfile.as_posix()
    table["theme"] = html.theme
    return table
