"""Unit tests for scoped placeholder resolution."""

from __future__ import annotations

import pytest

from src_press.models import Author, LanguageStat
from src_press.templates import (
    SCOPE_PLACEHOLDERS,
    TemplateContext,
    TemplateScope,
    format_authors,
    format_bytes,
    format_language_stats,
    format_licences,
    format_remotes,
    resolve_template,
)

BOOK_VALUES = {
    "title": "Demo",
    "authors": "Ada Lovelace",
    "licences": "MIT",
    "date": "2024-05-01",
    "file": "src/main.rs",
    "n": "iv",
    "total": "x",
    "remotes": "origin: https://example.com/demo.git",
}


def test_recognised_placeholders_are_expanded() -> None:
    context = TemplateContext.for_scope(TemplateScope.TITLE, BOOK_VALUES)

    result = resolve_template("{title}\nby {authors}\n{licences} - {date}", context)

    assert result.text == "Demo\nby Ada Lovelace\nMIT - 2024-05-01", (
        f"unexpected text {result.text!r}"
    )
    assert result.unresolved == (), "nothing left unresolved"


def test_placeholders_outside_scope_stay_verbatim() -> None:
    context = TemplateContext.for_scope(TemplateScope.FOOTER, BOOK_VALUES)

    result = resolve_template("{n} of {total} - {title} {titel} {n}", context)

    assert result.text == "iv of x - {title} {titel} iv", (
        f"unexpected text {result.text!r}"
    )
    assert result.unresolved == ("title", "titel"), (
        f"unresolved names reported once in order: {result.unresolved}"
    )


@pytest.mark.parametrize("scope", list(TemplateScope))
def test_text_without_placeholders_is_unchanged(scope: TemplateScope) -> None:
    template = "Plain text with {braces and} a } stray"
    context = TemplateContext.for_scope(scope, BOOK_VALUES)

    assert resolve_template(template, context).text == template, (
        "templates without placeholders pass through"
    )


@pytest.mark.parametrize("scope", list(TemplateScope))
def test_fully_defined_context_leaves_no_recognised_token(scope: TemplateScope) -> None:
    names = sorted(SCOPE_PLACEHOLDERS[scope])
    template = " ".join(f"{{{name}}}" for name in names)
    context = TemplateContext.for_scope(scope, {name: name.upper() for name in names})

    result = resolve_template(template, context)

    assert result.text == " ".join(name.upper() for name in names), (
        f"every {scope.value} placeholder should be substituted"
    )


def test_colophon_scope_excludes_page_placeholders() -> None:
    context = TemplateContext.for_scope(TemplateScope.COLOPHON, BOOK_VALUES)

    assert "remotes" in context.values, "colophon sees remotes"
    assert "file" not in context.values, "colophon does not see page values"
    assert "date" not in context.values, "colophon uses generated_date instead"


def test_formatters() -> None:
    authors = [Author("Ada Lovelace", "ada@example.com", 3), Author("Grace Hopper")]
    stats = [LanguageStat("Python", 3, 1200), LanguageStat("Rust", 1, 40)]

    assert format_authors(authors) == "Ada Lovelace, Grace Hopper", "names joined"
    assert format_licences([]) == "No licence specified", "empty licence fallback"
    assert format_licences(["MIT", "Apache-2.0"]) == "MIT, Apache-2.0", "joined"
    assert format_remotes([("origin", "u1"), ("fork", "u2")]) == "origin: u1\nfork: u2"
    assert format_bytes(3 * 1024 * 1024) == "3.0 MB", "megabytes"
    assert format_language_stats(stats).splitlines()[0] == (
        "  Python           3 files     1200 lines"
    ), "fixed-width language rows"
    assert format_language_stats(stats * 10).count("\n") == 9, "at most ten rows"


def test_author_parsing_round_trips() -> None:
    author = Author.parse("  Ada Lovelace <ada@example.com> ")

    assert author == Author("Ada Lovelace", "ada@example.com"), f"parsed {author}"
    assert str(author) == "Ada Lovelace <ada@example.com>", "formatted back"
    assert Author.parse("Grace Hopper") == Author("Grace Hopper"), "email optional"
    assert Author.parse("   ") is None, "blank text is not an author"
