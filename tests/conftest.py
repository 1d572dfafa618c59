"""Shared fixtures: an in-memory repository provider and commit builders."""

from __future__ import annotations

import collections
import datetime as dt
import fnmatch
import posixpath
import typing as typ

import pytest

from src_press.config import BookConfig, HtmlConfig, SourceConfig
from src_press.models import Author, CandidateFile, CommitOrder, CommitRecord
from src_press.planner import BookPlanner
from src_press.repository import detect_language

if typ.TYPE_CHECKING:
    from pathlib import Path

    from src_press.models import BookDocumentModel


class FakeRepository:
    """Repository provider backed by files written under ``root``.

    ``bytes`` values stand for binary files.
    """

    def __init__(
        self,
        root: Path,
        files: typ.Mapping[str, str | bytes],
        *,
        commits: typ.Sequence[CommitRecord] = (),
        remotes: typ.Sequence[tuple[str, str]] = (),
    ) -> None:
        self.root = root
        self.files = dict(files)
        self.commits = list(commits)
        self._remotes = list(remotes)
        for path, text in self.files.items():
            target = root / path
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(text, bytes):
                target.write_bytes(text)
            else:
                target.write_text(text, encoding="utf-8")

    def list_tracked_files(
        self,
        exclude_globs: typ.Sequence[str] = (),
        include_submodules: bool = False,
        explicit: typ.Collection[str] = (),
    ) -> list[CandidateFile]:
        def blocked(path: str) -> bool:
            name = posixpath.basename(path)
            return any(
                fnmatch.fnmatchcase(path, glob) or fnmatch.fnmatchcase(name, glob)
                for glob in exclude_globs
            )

        candidates: list[CandidateFile] = []
        for path, text in sorted(self.files.items()):
            if path not in explicit and blocked(path):
                continue
            if isinstance(text, bytes):
                candidates.append(CandidateFile(path, len(text), is_binary=True))
            else:
                size = len(text.encode("utf-8"))
                candidates.append(CandidateFile(path, size, detect_language(path)))
        return candidates

    def commit_log(self, order: CommitOrder) -> list[CommitRecord]:
        if order is CommitOrder.DISABLED:
            return []
        return sorted(
            self.commits,
            key=lambda commit: commit.timestamp,
            reverse=order is CommitOrder.NEWEST_FIRST,
        )

    def remotes(self) -> list[tuple[str, str]]:
        return list(self._remotes)

    def authors(self, commits: typ.Sequence[CommitRecord]) -> list[Author]:
        counts = collections.Counter((commit.author, commit.email) for commit in commits)
        return sorted(
            (Author(name, email, count) for (name, email), count in counts.items()),
            key=lambda author: (-author.prominence, author.name),
        )

    def read_text(self, path: str) -> str | None:
        text = self.files.get(path)
        return text if isinstance(text, str) else None


def make_commit(
    index: int, author: str, day: int, message: str = "Change", *, month: int = 1
) -> CommitRecord:
    """Build a commit dated ``2024-month-day`` with a deterministic hash."""
    return CommitRecord(
        hash=f"{index:040x}",
        author=author,
        email=f"{author.lower().replace(' ', '.')}@example.com",
        timestamp=dt.datetime(2024, month, day, 12, tzinfo=dt.UTC),
        message=message,
    )


@pytest.fixture
def make_repository(tmp_path: Path) -> typ.Callable[..., FakeRepository]:
    """Return a factory writing files into a fresh folder under ``tmp_path``."""

    def _make(
        files: typ.Mapping[str, str | bytes],
        *,
        name: str = "demo-project",
        commits: typ.Sequence[CommitRecord] = (),
        remotes: typ.Sequence[tuple[str, str]] = (),
    ) -> FakeRepository:
        root = tmp_path / name
        root.mkdir(parents=True, exist_ok=True)
        return FakeRepository(root, files, commits=commits, remotes=remotes)

    return _make


@pytest.fixture
def sample_files() -> dict[str, str]:
    """A small repository: one README and two Python modules."""
    return {
        "README.md": "# Demo\n\nA tiny project.\n",
        "src/main.py": "".join(f"print({n})\n" for n in range(10)),
        "src/util.py": "def helper():\n    return 1\n",
    }


@pytest.fixture
def sample_commits() -> list[CommitRecord]:
    return [
        make_commit(1, "Ada Lovelace", 1, "Initial commit"),
        make_commit(2, "Grace Hopper", 5, "Add helper\n\nWith a body line."),
        make_commit(3, "Ada Lovelace", 9, "Tidy up"),
    ]


@pytest.fixture
def commit_factory() -> typ.Callable[..., CommitRecord]:
    """Expose :func:`make_commit` to tests and step definitions."""
    return make_commit


@pytest.fixture
def planned_model(
    make_repository: typ.Callable[..., FakeRepository],
    sample_files: dict[str, str],
    sample_commits: list[CommitRecord],
) -> BookDocumentModel:
    """Plan the sample repository with default layout settings."""
    repo = make_repository(sample_files, commits=sample_commits)
    config = BookConfig(
        source=SourceConfig(title="Demo", repository=repo.root, entrypoint="src/main.py"),
        html=HtmlConfig(),
    )
    generated_at = dt.datetime(2024, 5, 1, tzinfo=dt.UTC)
    return BookPlanner(config, repository=repo, generated_at=generated_at).run()
