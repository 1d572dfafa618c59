"""Load, validate and write the ``src-press.toml`` book configuration.

This subpackage parses the TOML document into strongly typed dataclasses
(:class:`BookConfig`, :class:`SourceConfig`, :class:`PdfConfig`, ...), applies
defaults and page-size presets, and rejects invalid values with a
:class:`ConfigurationError` naming the offending field. The writer turns a
:class:`BookConfig` back into a ``tomlkit`` document for the ``config``
command.

Examples
--------
>>> from pathlib import Path
>>> from src_press.config import load_book_config
>>> config = load_book_config(Path("src-press.toml"))  # doctest: +SKIP
>>> config.layout.page_width_in  # doctest: +SKIP
5.5
"""

from .loader import load_book_config, parse_book_config
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
from .writer import build_config_document, string_array, write_config_document

__all__ = [
    "BookConfig",
    "BookletConfig",
    "ConfigurationError",
    "EpubConfig",
    "HtmlConfig",
    "NumberingConfig",
    "PdfConfig",
    "SourceConfig",
    "build_config_document",
    "load_book_config",
    "parse_book_config",
    "string_array",
    "write_config_document",
]
