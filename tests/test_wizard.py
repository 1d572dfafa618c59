"""Unit tests for proposing a new configuration."""

from __future__ import annotations

import typing as typ

import pytest

from src_press.config import (
    BookConfig,
    BookletConfig,
    PdfConfig,
    SourceConfig,
    load_book_config,
)
from src_press.models import CommitOrder
from src_press.wizard import confirm, run_wizard

if typ.TYPE_CHECKING:
    from pathlib import Path

    from src_press.models import CommitRecord

    from conftest import FakeRepository

CARGO_TOML = """\
[package]
name = "demo"
version = "0.1.0"
license = "MIT OR Apache-2.0"
"""


def _answers(*replies: str) -> typ.Callable[[str], str]:
    """Return an ``input`` stand-in that replays ``replies`` in order."""
    remaining = iter(replies)
    return lambda _prompt: next(remaining)


@pytest.fixture
def rust_repo(
    make_repository: typ.Callable[..., FakeRepository],
    sample_commits: list[CommitRecord],
) -> FakeRepository:
    """Small Rust crate with a readme, manifest and licence file."""
    return make_repository(
        {
            "README.md": "# Demo\n",
            "Cargo.toml": CARGO_TOML,
            "Cargo.lock": "# generated\n",
            "LICENSE": "MIT License\n\nPermission is hereby granted, free of charge\n",
            "src/lib.rs": "pub fn add() {}\n",
            "src/main.rs": "fn main() {}\n",
        },
        commits=sample_commits,
    )


def test_unattended_run_writes_detected_values(
    tmp_path: Path, rust_repo: FakeRepository
) -> None:
    output = tmp_path / "src-press.toml"

    written = run_wizard(rust_repo, output=output, assume_yes=True)

    assert written == output, "the configuration path is returned"
    config = load_book_config(output)
    source = config.source
    assert source.title == "Demo Project", f"title from folder name: {source.title}"
    assert source.repository.resolve() == rust_repo.root.resolve(), (
        "relative repository path resolves back to the root"
    )
    assert source.licences == ["MIT", "Apache-2.0"], "manifest expression split"
    assert source.entrypoint == "src/main.rs", "conventional entrypoint detected"
    assert source.frontmatter_files == ["README.md", "Cargo.toml", "LICENSE"], (
        f"frontmatter by priority: {source.frontmatter_files}"
    )
    assert source.source_files == ["src/main.rs", "src/lib.rs", "Cargo.lock"], (
        f"sources in reading order: {source.source_files}"
    )
    assert source.authors[0] == "Ada Lovelace <ada.lovelace@example.com>", (
        "most active author first"
    )
    assert config.pdf is not None, "a [pdf] table is proposed"
    assert config.epub is not None, "an [epub] table is proposed"
    assert config.booklet is None, "booklets are opt-in"
    assert 'repository = "demo-project"' in output.read_text(encoding="utf-8"), (
        "repository written relative to the configuration file"
    )


def test_prompts_adjust_the_proposal(tmp_path: Path, rust_repo: FakeRepository) -> None:
    output = tmp_path / "src-press.toml"
    echoed: list[str] = []
    ask = _answers(
        "My Book",
        "src/nope.rs",
        "src/lib.rs",
        "sideways",
        "oldest-first",
        "y",
    )

    run_wizard(rust_repo, output=output, ask=ask, echo=echoed.append)

    source = load_book_config(output).source
    assert source.title == "My Book", "title answer used"
    assert source.entrypoint == "src/lib.rs", "second entrypoint answer accepted"
    assert source.source_files[:2] == ["src/lib.rs", "src/main.rs"], (
        "the chosen entrypoint opens the sources"
    )
    assert source.commit_order is CommitOrder.OLDEST_FIRST, "commit order answer used"
    assert load_book_config(output).booklet is not None, "booklet requested"
    assert echoed[0] == "src/nope.rs is not one of the repository's files", (
        f"unexpected message {echoed[0]!r}"
    )
    assert "unrecognised value 'sideways'" in echoed[1], "bad order explained"


def test_declined_overwrite_prints_the_document(
    tmp_path: Path, rust_repo: FakeRepository
) -> None:
    output = tmp_path / "src-press.toml"
    output.write_text("# existing\n", encoding="utf-8")
    echoed: list[str] = []

    written = run_wizard(
        rust_repo, output=output, ask=_answers("", "", "", "", "n"), echo=echoed.append
    )

    assert written is None, "nothing written when overwrite is declined"
    assert output.read_text(encoding="utf-8") == "# existing\n", "file untouched"
    assert "[source]" in echoed[-1], "the proposed document is shown instead"


def test_template_supplies_layout_and_globs(
    tmp_path: Path, rust_repo: FakeRepository
) -> None:
    template = BookConfig(
        source=SourceConfig(
            title="Other",
            block_globs=["*.lock"],
            commit_order=CommitOrder.DISABLED,
        ),
        pdf=PdfConfig(font="Inconsolata"),
        booklet=BookletConfig(signature_size=8),
    )
    output = tmp_path / "src-press.toml"

    run_wizard(rust_repo, output=output, template=template, assume_yes=True)

    config = load_book_config(output)
    assert config.source.title == "Demo Project", "title still detected"
    assert "Cargo.lock" not in config.source.source_files, "template globs applied"
    assert config.source.block_globs == ["*.lock"], "globs carried over"
    assert config.source.commit_order is CommitOrder.DISABLED, "commit order reused"
    assert config.pdf is not None, "layout table present"
    assert config.pdf.font == "Inconsolata", "layout copied from the template"
    assert config.booklet is not None, "booklet kept"
    assert config.booklet.signature_size == 8, "booklet settings copied"
    assert config.epub is None, "absent tables stay absent"


@pytest.mark.parametrize(
    ("answer", "default", "expected"),
    [
        ("", True, True),
        ("", False, False),
        ("Yes", False, True),
        ("n", True, False),
        ("maybe", True, False),
    ],
)
def test_confirm(answer: str, default: bool, expected: bool) -> None:  # noqa: FBT001
    prompts: list[str] = []

    def ask(prompt: str) -> str:
        prompts.append(prompt)
        return answer

    assert confirm("Continue?", default=default, ask=ask) is expected, (
        f"{answer!r} with default {default} should give {expected}"
    )
    assert prompts[0].endswith("[Y/n]: " if default else "[y/N]: "), "default shown"
