"""Unit tests for splitting files into frontmatter and source sections."""

from __future__ import annotations

import pytest

from src_press.config import ConfigurationError
from src_press.frontmatter import classify, frontmatter_priority
from src_press.models import CandidateFile
from src_press.ordering import order_files


def _ordered(*paths: str):
    return order_files([CandidateFile(path, 1) for path in paths])


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("README.md", 0),
        ("readme", 0),
        ("Design.md", 1),
        ("CHANGELOG.md", 3),
        ("SECURITY.md", 5),
        ("Cargo.toml", 6),
        ("Makefile", 6),
        ("LICENSE-APACHE", 7),
        ("COPYING", 7),
        ("LICENSE-MIT.txt", 7),
        ("LICENSE-APACHE-2.0", 7),
        ("setup.py", 6),
        ("docs/README.md", None),
        ("src/main.rs", None),
        ("history.py", None),
        ("design.py", None),
        ("security.py", None),
        ("readme_parser.py", None),
        ("licenses.py", None),
        ("LICENSE.py", None),
    ],
)
def test_frontmatter_priority(path: str, expected: int | None) -> None:
    assert frontmatter_priority(path) == expected, (
        f"unexpected priority for {path!r}"
    )


def test_auto_detection_partitions_in_reading_order() -> None:
    ordered = _ordered("src/lib.rs", "README.md", "LICENSE", "Cargo.toml", "docs/README.md")

    frontmatter, source = classify(ordered)

    assert [f.path for f in frontmatter] == ["Cargo.toml", "LICENSE", "README.md"], (
        "frontmatter should keep the reading order"
    )
    assert [f.path for f in source] == ["docs/README.md", "src/lib.rs"], (
        "nested READMEs are source files"
    )
    assert sorted([*frontmatter, *source], key=lambda f: f.order_rank) == ordered, (
        "every file must land in exactly one section"
    )


def test_explicit_lists_override_detection_both_ways() -> None:
    ordered = _ordered("README.md", "NOTES.txt", "src/main.py")

    frontmatter, source = classify(
        ordered, frontmatter_files=["NOTES.txt"], source_files=["README.md"]
    )

    assert [f.path for f in frontmatter] == ["NOTES.txt"], "explicit inclusion wins"
    assert [f.path for f in source] == ["README.md", "src/main.py"], (
        "explicit exclusion wins"
    )


def test_auto_detection_can_be_disabled() -> None:
    frontmatter, source = classify(_ordered("README.md", "main.py"), auto_detect=False)

    assert frontmatter == [], "nothing is frontmatter unless listed"
    assert len(source) == 2, "all files are source files"


def test_conflicting_lists_raise_configuration_error() -> None:
    with pytest.raises(ConfigurationError) as excinfo:
        classify(
            _ordered("README.md"),
            frontmatter_files=["README.md"],
            source_files=["README.md"],
        )

    assert excinfo.value.field == "source.frontmatter_files", (
        f"unexpected field {excinfo.value.field!r}"
    )
    assert "README.md" in str(excinfo.value), "error should name the file"


def test_root_modules_named_like_documents_stay_in_source() -> None:
    ordered = _ordered(
        "history.py", "security.py", "design.py", "licenses.py", "README.md", "main.py"
    )

    frontmatter, source = classify(ordered)

    assert [f.path for f in frontmatter] == ["README.md"], (
        f"only exact document names are frontmatter: {[f.path for f in frontmatter]}"
    )
    assert "history.py" in [f.path for f in source], "modules remain source files"
