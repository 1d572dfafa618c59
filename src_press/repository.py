"""Read repository files and history through the ``git`` executable.

:class:`GitRepository` is the concrete repository provider used by the
planner. It lists tracked (and untracked, non-ignored) files while honouring
``.gitignore`` and block globs, materialises the commit log into
:class:`~src_press.models.CommitRecord` values, and reads file text. Every
git failure surfaces as :class:`RepositoryError` carrying git's own message.

Example
-------
.. code-block:: python

    from pathlib import Path
    from src_press.models import CommitOrder
    from src_press.repository import GitRepository

    repo = GitRepository(Path("."))
    files = repo.list_tracked_files(["*.lock"], include_submodules=False)
    commits = repo.commit_log(CommitOrder.NEWEST_FIRST)
"""

from __future__ import annotations

import collections
import datetime as dt
import fnmatch
import functools
import logging
import posixpath
import subprocess
import typing as typ

from pygments.lexers import get_lexer_for_filename
from pygments.util import ClassNotFound

from ._constants import AUTHORS_FILENAMES, BINARY_SNIFF_BYTES
from .models import Author, CandidateFile, CommitOrder, CommitRecord

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_FIELD_SEP = "\x1f"
_RECORD_SEP = "\x1e"
_LOG_FORMAT = "%H%x1f%an%x1f%ae%x1f%aI%x1f%B%x1e"
_GITLINK_MODE = "160000"


class RepositoryError(RuntimeError):
    """Raised when the repository cannot be read."""


class RepositoryProvider(typ.Protocol):
    """Operations the planner needs from a repository."""

    root: Path

    def list_tracked_files(
        self,
        exclude_globs: typ.Sequence[str] = (),
        include_submodules: bool = False,
        explicit: typ.Collection[str] = (),
    ) -> list[CandidateFile]: ...

    def commit_log(self, order: CommitOrder) -> list[CommitRecord]: ...

    def remotes(self) -> list[tuple[str, str]]: ...

    def authors(self, commits: typ.Sequence[CommitRecord]) -> list[Author]: ...

    def read_text(self, path: str) -> str | None: ...


class GitRepository:
    """Repository provider backed by the ``git`` command line."""

    def __init__(self, root: Path, *, git_executable: str = "git") -> None:
        """Open ``root`` and confirm it has a git working tree.

        Raises
        ------
        RepositoryError
            If ``root`` is not a directory, git is missing, or ``root`` is not
            inside a work tree.
        """
        self.root = root
        self.git_executable = git_executable
        if not root.is_dir():
            msg = f"Repository path {root} isn't a directory!"
            raise RepositoryError(msg)
        if self._git("rev-parse", "--is-inside-work-tree").strip() != "true":
            msg = f"{root} is not inside a git working tree"
            raise RepositoryError(msg)

    def _git(self, *args: str) -> str:
        command = [self.git_executable, "-C", str(self.root), *args]
        logger.debug("running %s", " ".join(command))
        try:
            result = subprocess.run(  # noqa: S603
                command,
                check=True,
                capture_output=True,
                encoding="utf-8",
                errors="replace",
            )
        except FileNotFoundError as exc:
            msg = f"git executable {self.git_executable!r} not found"
            raise RepositoryError(msg) from exc
        except subprocess.CalledProcessError as exc:
            detail = (exc.stderr or "").strip()
            msg = detail or f"git {args[0]} exited with status {exc.returncode}"
            raise RepositoryError(msg) from exc
        return result.stdout

    def list_tracked_files(
        self,
        exclude_globs: typ.Sequence[str] = (),
        include_submodules: bool = False,
        explicit: typ.Collection[str] = (),
    ) -> list[CandidateFile]:
        """List the files git knows about, minus blocked paths.

        Parameters
        ----------
        exclude_globs : Sequence[str]
            ``fnmatch`` patterns matched against repository-relative paths.
        include_submodules : bool
            Recurse into submodules instead of dropping them.
        explicit : Collection[str]
            Paths the configuration names explicitly; these survive the block
            globs.

        Returns
        -------
        list[CandidateFile]
            Files sorted by path. Untracked files that are not ignored are
            included with ``is_tracked=False``; binary files are included with
            ``is_binary=True`` and no detected language.
        """
        stage_args = ["ls-files", "-z", "--stage"]
        if include_submodules:
            stage_args.append("--recurse-submodules")
        tracked = set(_parse_stage_listing(self._git(*stage_args)))
        untracked = {
            path
            for path in self._git(
                "ls-files", "-z", "--others", "--exclude-standard"
            ).split("\0")
            if path
        }
        explicit_paths = set(explicit)

        candidates: list[CandidateFile] = []
        for path in sorted(tracked | untracked):
            if path not in explicit_paths and _is_blocked(path, exclude_globs):
                logger.debug("blocked by glob: %s", path)
                continue
            full_path = self.root / path
            if not full_path.is_file():
                logger.debug("skipping %s: not present in the working tree", path)
                continue
            binary = self.read_text(path) is None
            if binary:
                logger.debug("binary file %s gets a placeholder page", path)
            candidates.append(
                CandidateFile(
                    path=path,
                    byte_size=full_path.stat().st_size,
                    detected_language=None if binary else detect_language(path),
                    is_tracked=path in tracked,
                    is_binary=binary,
                )
            )
        return candidates

    def commit_log(self, order: CommitOrder) -> list[CommitRecord]:
        """Return the commits reachable from ``HEAD`` in ``order``."""
        if order is CommitOrder.DISABLED:
            return []
        try:
            self._git("rev-parse", "--verify", "--quiet", "HEAD")
        except RepositoryError:
            logger.debug("repository has no commits yet")
            return []
        args = ["log", f"--format={_LOG_FORMAT}"]
        if order is CommitOrder.OLDEST_FIRST:
            args.append("--reverse")
        return parse_commit_log(self._git(*args))

    def remotes(self) -> list[tuple[str, str]]:
        """Return ``(name, url)`` fetch remotes in git's listing order."""
        remotes: list[tuple[str, str]] = []
        for line in self._git("remote", "-v").splitlines():
            name, _, rest = line.partition("\t")
            url, _, kind = rest.rpartition(" ")
            if kind == "(fetch)" and (name, url) not in remotes:
                remotes.append((name, url))
        return remotes

    def authors(self, commits: typ.Sequence[CommitRecord]) -> list[Author]:
        """Rank commit authors by commit count, then add AUTHORS file entries."""
        counts = collections.Counter((commit.author, commit.email) for commit in commits)
        authors = [
            Author(name=name, email=email or None, prominence=count)
            for (name, email), count in counts.items()
        ]
        known = {author.name.lower() for author in authors}
        for author in self._authors_from_files():
            if author.name.lower() not in known:
                known.add(author.name.lower())
                authors.append(author)
        return sorted(authors, key=lambda a: (-a.prominence, a.name.lower()))

    def _authors_from_files(self) -> list[Author]:
        found: list[Author] = []
        for filename in AUTHORS_FILENAMES:
            path = self.root / filename
            if not path.is_file():
                continue
            for line in path.read_text(encoding="utf-8", errors="replace").splitlines():
                text = line.strip().lstrip("-*").strip()
                if not text or text.startswith("#"):
                    continue
                author = Author.parse(text)
                if author is not None:
                    found.append(author)
        return found

    def read_text(self, path: str) -> str | None:
        """Return the UTF-8 text of ``path``, or ``None`` for binary files."""
        try:
            data = (self.root / path).read_bytes()
        except OSError as exc:
            logger.warning("unable to read %s: %s", path, exc)
            return None
        if is_binary_data(data):
            return None
        return data.decode("utf-8")


def parse_commit_log(output: str) -> list[CommitRecord]:
    """Parse ``git log`` output produced with the module's record format."""
    commits: list[CommitRecord] = []
    for record in output.split(_RECORD_SEP):
        record = record.strip("\n")
        if not record.strip():
            continue
        fields = record.split(_FIELD_SEP, 4)
        if len(fields) != 5:
            logger.warning("skipping malformed commit record %r", record[:40])
            continue
        commit_hash, name, email, timestamp, message = fields
        commits.append(
            CommitRecord(
                hash=commit_hash.strip(),
                author=name,
                email=email,
                timestamp=dt.datetime.fromisoformat(timestamp.strip()),
                message=message.strip(),
            )
        )
    return commits


def _parse_stage_listing(output: str) -> typ.Iterator[str]:
    """Yield paths from ``git ls-files --stage -z``, skipping submodule links."""
    for record in output.split("\0"):
        if not record:
            continue
        meta, _, path = record.partition("\t")
        if meta.split(" ", 1)[0] == _GITLINK_MODE:
            continue
        yield path


def _is_blocked(path: str, globs: typ.Sequence[str]) -> bool:
    name = posixpath.basename(path)
    return any(
        fnmatch.fnmatchcase(path, pattern) or fnmatch.fnmatchcase(name, pattern)
        for pattern in globs
    )


def is_binary_data(data: bytes) -> bool:
    """Return whether ``data`` looks binary: a NUL early on, or not UTF-8.

    Examples
    --------
    >>> is_binary_data(b"\\x89PNG\\0")
    True
    >>> is_binary_data("caf\\u00e9\\n".encode())
    False
    """
    if b"\0" in data[:BINARY_SNIFF_BYTES]:
        return True
    try:
        data.decode("utf-8")
    except UnicodeDecodeError:
        return True
    return False


@functools.lru_cache(maxsize=1024)
def detect_language(path: str) -> str | None:
    """Return the Pygments lexer name for ``path`` or ``None``.

    Examples
    --------
    >>> detect_language("src/main.py")
    'Python'
    """
    try:
        lexer = get_lexer_for_filename(posixpath.basename(path))
    except ClassNotFound:
        return None
    return lexer.name


__all__ = [
    "GitRepository",
    "RepositoryError",
    "RepositoryProvider",
    "detect_language",
    "is_binary_data",
    "parse_commit_log",
]
