"""Expand ``{placeholder}`` templates for title pages, covers and running heads.

Each call site has a scope, and only the placeholders valid in that scope are
substituted. Anything else, typos included, is left in the output verbatim
and reported back to the caller, so a bad template never aborts a render.
Resolution is a pure function of the template and the context.

Examples
--------
>>> context = TemplateContext.for_scope(
...     TemplateScope.HEADER, {"file": "src/main.rs", "n": "3", "title": "Book"}
... )
>>> result = resolve_template("{file} p.{n} {title}", context)
>>> result.text
'src/main.rs p.3 {title}'
>>> result.unresolved
('title',)
"""

from __future__ import annotations

import dataclasses as dc
import enum
import re
import typing as typ

from ._constants import LANGUAGE_STATS_LIMIT

if typ.TYPE_CHECKING:
    from .models import Author, LanguageStat

PLACEHOLDER_PATTERN = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")

_BOOK_PLACEHOLDERS = frozenset({"title", "authors", "licences", "date"})
_PAGE_PLACEHOLDERS = frozenset({"file", "n", "total"})
_COLOPHON_PLACEHOLDERS = frozenset(
    {
        "title",
        "authors",
        "licences",
        "remotes",
        "file_count",
        "line_count",
        "commit_count",
        "language_stats",
        "commit_chart",
        "generated_date",
        "tool_version",
        "total_bytes",
        "date_range",
    }
)


class TemplateScope(enum.Enum):
    """Where a template is rendered; decides which placeholders apply."""

    TITLE = "title"
    COVER = "cover"
    COLOPHON = "colophon"
    HEADER = "header"
    FOOTER = "footer"


SCOPE_PLACEHOLDERS: dict[TemplateScope, frozenset[str]] = {
    TemplateScope.TITLE: _BOOK_PLACEHOLDERS,
    TemplateScope.COVER: _BOOK_PLACEHOLDERS,
    TemplateScope.COLOPHON: _COLOPHON_PLACEHOLDERS,
    TemplateScope.HEADER: _PAGE_PLACEHOLDERS,
    TemplateScope.FOOTER: _PAGE_PLACEHOLDERS,
}


@dc.dataclass(frozen=True, slots=True)
class TemplateContext:
    """Placeholder values available to one scope."""

    scope: TemplateScope
    values: typ.Mapping[str, str]

    @classmethod
    def for_scope(
        cls, scope: TemplateScope, values: typ.Mapping[str, str]
    ) -> TemplateContext:
        """Keep only the entries of ``values`` that ``scope`` recognises."""
        allowed = SCOPE_PLACEHOLDERS[scope]
        return cls(
            scope=scope,
            values={name: value for name, value in values.items() if name in allowed},
        )


@dc.dataclass(frozen=True, slots=True)
class ResolvedTemplate:
    """Expanded text plus the placeholder names left untouched."""

    text: str
    unresolved: tuple[str, ...] = ()


def resolve_template(template: str, context: TemplateContext) -> ResolvedTemplate:
    """Substitute recognised placeholders in ``template``.

    Parameters
    ----------
    template : str
        Text with ``{name}`` tokens.
    context : TemplateContext
        Values for the call site's scope.

    Returns
    -------
    ResolvedTemplate
        ``unresolved`` lists, once each and in first-seen order, the tokens
        that had no value in ``context``.
    """
    unresolved: list[str] = []

    def _repl(match: re.Match[str]) -> str:
        name = match.group(1)
        if name in context.values:
            return context.values[name]
        if name not in unresolved:
            unresolved.append(name)
        return match.group(0)

    return ResolvedTemplate(
        text=PLACEHOLDER_PATTERN.sub(_repl, template), unresolved=tuple(unresolved)
    )


def format_authors(authors: typ.Iterable[Author]) -> str:
    """Join author names, most prominent first as given."""
    return ", ".join(author.name for author in authors)


def format_licences(licences: typ.Sequence[str]) -> str:
    return ", ".join(licences) if licences else "No licence specified"


def format_remotes(remotes: typ.Iterable[tuple[str, str]]) -> str:
    return "\n".join(f"{name}: {url}" for name, url in remotes)


def format_bytes(size: int) -> str:
    """Render a byte count with a binary unit.

    >>> format_bytes(512)
    '512 B'
    >>> format_bytes(1536)
    '1.5 KB'
    """
    if size < 1024:
        return f"{size} B"
    value = float(size)
    for unit in ("KB", "MB", "GB"):
        value /= 1024
        if value < 1024 or unit == "GB":
            return f"{value:.1f} {unit}"
    return f"{value:.1f} GB"  # pragma: no cover - loop always returns


def format_language_stats(
    languages: typ.Sequence[LanguageStat], limit: int = LANGUAGE_STATS_LIMIT
) -> str:
    return "\n".join(
        f"  {stat.language:<12} {stat.files:>5} files  {stat.lines:>7} lines"
        for stat in languages[:limit]
    )


__all__ = [
    "PLACEHOLDER_PATTERN",
    "SCOPE_PLACEHOLDERS",
    "ResolvedTemplate",
    "TemplateContext",
    "TemplateScope",
    "format_authors",
    "format_bytes",
    "format_language_stats",
    "format_licences",
    "format_remotes",
    "resolve_template",
]
