"""Render Markdown and syntax-highlighted source files to HTML fragments."""

from __future__ import annotations

import logging
import re
from html import escape

from markdown import Markdown
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, get_lexer_for_filename
from pygments.lexers.special import TextLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

from .._constants import BINARY_PLACEHOLDER
from ..templates import format_bytes

logger = logging.getLogger(__name__)

FENCED_INDENT_PATTERN = re.compile(r"^[ ]{1,3}([`~]{3,})", re.MULTILINE)
CODEHILITE_OPEN_TAG = re.compile(r'<div class="codehilite">')
MARKDOWN_SUFFIXES = (".md", ".markdown")
FALLBACK_STYLE = "default"


def resolve_style(name: str) -> str:
    """Return ``name`` when Pygments knows it, else the fallback style."""
    try:
        get_style_by_name(name)
    except ClassNotFound:
        logger.warning("unknown Pygments style %r; using %r", name, FALLBACK_STYLE)
        return FALLBACK_STYLE
    return name


class HtmlContentRenderer:
    """Render book content with one consistent highlighting style."""

    def __init__(self, pygments_style: str = FALLBACK_STYLE) -> None:
        """Initialize the renderer.

        Parameters
        ----------
        pygments_style : str, optional
            Pygments style used for code; unknown names fall back to
            ``"default"``.
        """
        self.pygments_style = resolve_style(pygments_style)
        self._formatter = HtmlFormatter(style=self.pygments_style, cssclass="codehilite")
        self._numbered_formatter = HtmlFormatter(
            style=self.pygments_style, cssclass="codehilite", linenos="table"
        )

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str) -> str:
        """Render Markdown frontmatter such as a README into HTML."""
        normalized = FENCED_INDENT_PATTERN.sub(r"\1", text)
        if not normalized.strip():
            return ""
        md = Markdown(
            extensions=["fenced_code", "codehilite", "tables", "sane_lists"],
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        return md.convert(normalized)

    def source_file(self, path: str, text: str, language: str | None = None) -> str:
        """Highlight a whole file with line numbers.

        The lexer is chosen by file name, then by ``language``, then plain
        text.
        """
        try:
            lexer = get_lexer_for_filename(path, stripnl=False)
        except ClassNotFound:
            lexer = self._lexer_by_name(language)
        html = highlight(text, lexer, self._numbered_formatter)
        return self._attach_language_attribute(html, lexer.name)

    def binary_placeholder(self, byte_size: int) -> str:
        """Stand-in paragraph for a file whose bytes are not text."""
        label = escape(BINARY_PLACEHOLDER)
        return f'<p class="binary-data">{label} ({format_bytes(byte_size)})</p>'

    def file_content(self, path: str, text: str, language: str | None = None) -> str:
        """Markdown files render as prose; everything else as code."""
        if path.lower().endswith(MARKDOWN_SUFFIXES):
            return self.markdown(text)
        return self.source_file(path, text, language)

    @staticmethod
    def _lexer_by_name(language: str | None) -> Lexer:
        if not language:
            return TextLexer(stripnl=False)
        try:
            return get_lexer_by_name(language, stripnl=False)
        except ClassNotFound:
            return TextLexer(stripnl=False)

    @staticmethod
    def _attach_language_attribute(html: str, language: str) -> str:
        """Add a single language attribute to an already highlighted block."""
        safe_lang = escape(language or "text", quote=True)

        def _repl(match: re.Match[str]) -> str:
            return f'<div class="codehilite" data-language="{safe_lang}">'

        return CODEHILITE_OPEN_TAG.sub(_repl, html, 1)


__all__ = ["HtmlContentRenderer", "resolve_style"]
