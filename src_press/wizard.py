"""Propose a new ``src-press.toml`` from what a repository already says.

The wizard scans the repository once, pre-fills the title, licences, authors,
entrypoint and frontmatter from conventional files, orders everything else
into ``source_files``, and writes the result with the configuration writer.
With ``assume_yes`` it runs unattended; otherwise a few plain prompts let the
user adjust the title, entrypoint, commit order and booklet output.
"""

from __future__ import annotations

import dataclasses as dc
import logging
import os
import typing as typ
from pathlib import Path

import tomlkit

from .config import (
    BookConfig,
    BookletConfig,
    ConfigurationError,
    EpubConfig,
    PdfConfig,
    SourceConfig,
    build_config_document,
    write_config_document,
)
from .config.helpers import _parse_choice, _validate_entrypoint
from .detection import (
    detect_entrypoint,
    detect_frontmatter,
    detect_licences,
    detect_title,
)
from .models import CandidateFile, CommitOrder
from .ordering import order_files

if typ.TYPE_CHECKING:
    from .repository import RepositoryProvider

logger = logging.getLogger(__name__)

Prompt = typ.Callable[[str], str]
Echo = typ.Callable[[str], None]


@dc.dataclass(slots=True)
class RepositoryScan:
    """Files and metadata detected in a repository."""

    root: Path
    candidates: list[CandidateFile]
    title: str
    entrypoint: str | None
    frontmatter: list[str]
    licences: list[str]
    authors: list[str]

    @property
    def paths(self) -> set[str]:
        return {candidate.path for candidate in self.candidates}


@dc.dataclass(slots=True)
class WizardChoices:
    """Settings the user may adjust before the file is written."""

    title: str
    entrypoint: str | None
    commit_order: CommitOrder
    booklet: bool


def scan_repository(
    repository: RepositoryProvider,
    *,
    block_globs: typ.Sequence[str] = (),
    include_submodules: bool = False,
) -> RepositoryScan:
    """Collect candidates and detected metadata from ``repository``."""
    candidates = repository.list_tracked_files(block_globs, include_submodules)
    paths = [candidate.path for candidate in candidates]
    commits = repository.commit_log(CommitOrder.NEWEST_FIRST)
    scan = RepositoryScan(
        root=repository.root,
        candidates=candidates,
        title=detect_title(repository.root),
        entrypoint=detect_entrypoint(paths),
        frontmatter=detect_frontmatter(paths),
        licences=detect_licences(repository.root),
        authors=[str(author) for author in repository.authors(commits)],
    )
    logger.debug(
        "scanned %d files; entrypoint=%s frontmatter=%s",
        len(candidates),
        scan.entrypoint,
        scan.frontmatter,
    )
    return scan


def default_choices(scan: RepositoryScan, template: BookConfig | None = None) -> WizardChoices:
    """Return the unattended answers for ``scan``."""
    return WizardChoices(
        title=scan.title,
        entrypoint=scan.entrypoint,
        commit_order=(
            template.source.commit_order if template else CommitOrder.NEWEST_FIRST
        ),
        booklet=bool(template and template.booklet),
    )


def prompt_choices(
    scan: RepositoryScan, defaults: WizardChoices, *, ask: Prompt = input, echo: Echo = print
) -> WizardChoices:
    """Ask for each adjustable setting; blank answers keep the default."""
    title = ask(f"Book title [{defaults.title}]: ").strip() or defaults.title

    entrypoint = defaults.entrypoint
    available = scan.paths
    while True:
        shown = entrypoint or "none"
        answer = ask(f"Entrypoint file, '-' for none [{shown}]: ").strip()
        if not answer:
            break
        if answer == "-":
            entrypoint = None
            break
        try:
            candidate = _validate_entrypoint(answer)
        except ConfigurationError as exc:
            echo(str(exc))
            continue
        if candidate in available:
            entrypoint = candidate
            break
        echo(f"{candidate} is not one of the repository's files")

    commit_order = defaults.commit_order
    while True:
        choices = "/".join(member.value for member in CommitOrder)
        answer = ask(f"Commit order ({choices}) [{commit_order.value}]: ").strip()
        if not answer:
            break
        try:
            commit_order = _parse_choice(answer, CommitOrder, "source.commit_order")
            break
        except ConfigurationError as exc:
            echo(str(exc))

    booklet = confirm(
        "Plan a saddle-stitch booklet?", default=defaults.booklet, ask=ask
    )
    return WizardChoices(title, entrypoint, commit_order, booklet)


def confirm(question: str, *, default: bool = False, ask: Prompt = input) -> bool:
    """Ask a yes/no question; a blank answer returns ``default``."""
    hint = "Y/n" if default else "y/N"
    answer = ask(f"{question} [{hint}]: ").strip().lower()
    if not answer:
        return default
    return answer in {"y", "yes"}


def build_config(
    scan: RepositoryScan,
    choices: WizardChoices,
    *,
    template: BookConfig | None = None,
) -> BookConfig:
    """Turn a scan and the chosen settings into a :class:`BookConfig`.

    ``template`` supplies the layout tables and the block globs, commit order
    and submodule settings of an existing configuration.
    """
    frontmatter = list(scan.frontmatter)
    front_set = set(frontmatter)
    ordered = order_files(scan.candidates, choices.entrypoint)
    source_files = [item.path for item in ordered if item.path not in front_set]

    base_source = template.source if template else None
    source = SourceConfig(
        title=choices.title,
        repository=scan.root,
        licences=list(scan.licences),
        authors=list(scan.authors),
        commit_order=choices.commit_order,
        entrypoint=choices.entrypoint,
        block_globs=list(base_source.block_globs) if base_source else [],
        exclude_submodules=base_source.exclude_submodules if base_source else True,
        frontmatter_files=frontmatter,
        source_files=source_files,
    )
    if template is None:
        return BookConfig(
            source=source,
            pdf=PdfConfig(),
            booklet=BookletConfig() if choices.booklet else None,
            epub=EpubConfig(),
        )
    booklet = template.booklet
    if choices.booklet and booklet is None:
        booklet = BookletConfig()
    elif not choices.booklet:
        booklet = None
    return BookConfig(
        source=source,
        pdf=template.pdf,
        booklet=booklet,
        epub=template.epub,
        html=template.html,
    )


def relative_repository(config: BookConfig, output: Path) -> BookConfig:
    """Return ``config`` with its repository path relative to ``output``."""
    root = config.source.repository.resolve()
    try:
        relative = Path(os.path.relpath(root, output.resolve().parent))
    except ValueError:
        relative = root
    source = dc.replace(config.source, repository=relative)
    return dc.replace(config, source=source)


def run_wizard(
    repository: RepositoryProvider,
    *,
    output: Path,
    template: BookConfig | None = None,
    assume_yes: bool = False,
    ask: Prompt = input,
    echo: Echo = print,
) -> Path | None:
    """Scan, optionally prompt, and write a new configuration file.

    Parameters
    ----------
    repository : RepositoryProvider
        Repository to describe.
    output : Path
        Destination of the TOML document.
    template : BookConfig, optional
        Existing configuration whose layout settings are reused.
    assume_yes : bool
        Skip every prompt, including the overwrite confirmation.
    ask, echo : callable
        Input and output hooks, ``input`` and ``print`` by default.

    Returns
    -------
    Path | None
        The written path, or ``None`` when the user declined to overwrite an
        existing file (the document is echoed instead).
    """
    source = template.source if template else None
    scan = scan_repository(
        repository,
        block_globs=source.block_globs if source else (),
        include_submodules=not source.exclude_submodules if source else False,
    )
    choices = default_choices(scan, template)
    if not assume_yes:
        choices = prompt_choices(scan, choices, ask=ask, echo=echo)
    config = relative_repository(build_config(scan, choices, template=template), output)
    document = build_config_document(config)
    if (
        output.exists()
        and not assume_yes
        and not confirm(f"{output} already exists. Overwrite?", ask=ask)
    ):
        echo(tomlkit.dumps(document))
        return None
    return write_config_document(document, output)


__all__ = [
    "RepositoryScan",
    "WizardChoices",
    "build_config",
    "confirm",
    "default_choices",
    "prompt_choices",
    "relative_repository",
    "run_wizard",
    "scan_repository",
]
