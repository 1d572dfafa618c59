"""Assemble the book document model from configuration and repository state.

:class:`BookPlanner` runs the planning pipeline in dependency order: scan the
repository, order and partition the files, measure them against the page
width, summarise history, number and count pages, resolve templates, and
impose the pages onto booklet sheets when a booklet is configured.
Configuration and repository errors propagate immediately; advisory findings
(overlong lines, unknown placeholders, missing listed files) are collected on
the returned model.

Example
-------
>>> from pathlib import Path
>>> from src_press.config import load_book_config
>>> from src_press.planner import BookPlanner
>>> config = load_book_config(Path("src-press.toml"))  # doctest: +SKIP
>>> model = BookPlanner(config).run()  # doctest: +SKIP
>>> model.capacity.max_chars_per_line  # doctest: +SKIP
61
"""

from __future__ import annotations

import collections
import datetime as dt
import logging
import posixpath
import typing as typ

from ._constants import BINARY_LANGUAGE_LABEL, TOOL_NAME, TOOL_VERSION
from .capacity import CapacityAnalyzer
from .frontmatter import classify
from .history import summarize_history
from .imposition import plan_imposition
from .models import (
    Author,
    BookDocumentModel,
    BookStatistics,
    CandidateFile,
    CommitOrder,
    LanguageStat,
    PageSlot,
    PlanWarning,
    WarningKind,
)
from .ordering import order_files
from .pagination import PaginationPlanner, format_page_number
from .repository import GitRepository
from .templates import (
    TemplateContext,
    TemplateScope,
    format_authors,
    format_bytes,
    format_language_stats,
    format_licences,
    format_remotes,
    resolve_template,
)

if typ.TYPE_CHECKING:
    from .config.models import BookConfig, PdfConfig
    from .models import CapacityReport, CommitRecord, HistorySummary, OrderedFile, Section
    from .repository import RepositoryProvider

logger = logging.getLogger(__name__)


class BookPlanner:
    """Build a :class:`BookDocumentModel` for one render invocation."""

    def __init__(
        self,
        config: BookConfig,
        *,
        repository: RepositoryProvider | None = None,
        generated_at: dt.datetime | None = None,
        workers: int = 1,
    ) -> None:
        """Prepare a planner.

        Parameters
        ----------
        config : BookConfig
            Parsed configuration.
        repository : RepositoryProvider, optional
            Repository access; defaults to a :class:`GitRepository` opened at
            ``config.source.repository`` when :meth:`run` is called.
        generated_at : datetime, optional
            Timestamp printed as the render date; defaults to now (UTC).
        workers : int
            Threads used by the capacity scan.
        """
        self.config = config
        self._repository = repository
        self.generated_at = generated_at
        self.workers = workers

    @property
    def repository(self) -> RepositoryProvider:
        if self._repository is None:
            self._repository = GitRepository(self.config.source.repository)
        return self._repository

    def run(self) -> BookDocumentModel:
        """Plan the whole book.

        Returns
        -------
        BookDocumentModel
            A complete model; advisory findings are in ``warnings`` and
            ``capacity``.

        Raises
        ------
        ConfigurationError
            If the layout cannot hold a line, the signature size is invalid, or
            explicit file lists conflict.
        RepositoryError
            If the repository cannot be read.
        """
        source_config = self.config.source
        layout = self.config.layout
        analyzer = CapacityAnalyzer(layout, workers=self.workers)
        generated_at = self.generated_at or dt.datetime.now(dt.UTC)
        warnings: list[PlanWarning] = []
        repository = self.repository

        explicit = [*source_config.frontmatter_files, *source_config.source_files]
        scanned = repository.list_tracked_files(
            source_config.block_globs,
            not source_config.exclude_submodules,
            explicit,
        )
        candidates = self._select_candidates(scanned, warnings)
        ordered = order_files(candidates, source_config.entrypoint)
        frontmatter, source = classify(
            ordered,
            frontmatter_files=source_config.frontmatter_files,
            source_files=source_config.source_files,
            auto_detect=source_config.auto_frontmatter,
        )
        logger.debug(
            "planned %d frontmatter and %d source files", len(frontmatter), len(source)
        )

        texts = {
            item.path: repository.read_text(item.path) or ""
            for item in ordered
            if not item.is_binary
        }
        source_scans = analyzer.scan(
            [(item.path, texts[item.path]) for item in source if not item.is_binary]
        )
        front_scans = [
            analyzer.scan_file(item.path, texts[item.path])
            for item in frontmatter
            if not item.is_binary
        ]
        capacity = analyzer.report(source_scans)
        warnings.extend(_capacity_warnings(capacity))

        commits = repository.commit_log(source_config.commit_order)
        history = summarize_history(commits, source_config.commit_order)
        authors = self._resolve_authors(repository, commits)
        remotes = tuple(repository.remotes())

        line_lengths = {scan.path: scan.lengths for scan in (*front_scans, *source_scans)}
        sections = PaginationPlanner(layout, analyzer.max_chars_per_line).plan_sections(
            frontmatter, source, history, line_lengths
        )
        statistics = _book_statistics(ordered, line_lengths)
        values = self._template_values(
            authors=authors,
            remotes=remotes,
            statistics=statistics,
            history=history,
            generated_at=generated_at,
        )

        title_page = _resolve(layout.title_template, TemplateScope.TITLE, values, warnings)
        cover = None
        if self.config.epub is not None:
            cover = _resolve(
                self.config.epub.cover_template, TemplateScope.COVER, values, warnings
            )
        colophon = _resolve(
            self._colophon_template(), TemplateScope.COLOPHON, values, warnings
        )
        pages = _page_slots(sections, layout, warnings)
        imposition = None
        if self.config.booklet is not None:
            imposition = plan_imposition(len(pages), self.config.booklet.signature_size)

        logger.info(
            "planned %d pages from %d files (%d overlong lines)",
            len(pages),
            len(ordered),
            len(capacity.offending_files),
        )
        return BookDocumentModel(
            title=source_config.title,
            authors=tuple(authors),
            licences=tuple(source_config.licences),
            remotes=remotes,
            root=source_config.repository,
            generated_at=generated_at,
            sections=tuple(sections),
            history=history,
            capacity=capacity,
            line_stats=analyzer.statistics(source_scans),
            imposition=imposition,
            pages=tuple(pages),
            title_page=title_page,
            cover=cover,
            colophon=colophon,
            statistics=statistics,
            warnings=tuple(warnings),
        )

    def _select_candidates(
        self, scanned: typ.Sequence[CandidateFile], warnings: list[PlanWarning]
    ) -> list[CandidateFile]:
        """Restrict to listed files when ``source_files`` is set; flag missing ones."""
        source_config = self.config.source
        available = {candidate.path for candidate in scanned}
        listed = list(
            dict.fromkeys([*source_config.frontmatter_files, *source_config.source_files])
        )
        for path in listed:
            if path not in available:
                warnings.append(
                    PlanWarning(
                        WarningKind.MISSING_FILE,
                        "listed in the configuration but not found in the repository",
                        path,
                    )
                )
        if not source_config.source_files:
            return list(scanned)
        wanted = set(listed)
        return [candidate for candidate in scanned if candidate.path in wanted]

    def _resolve_authors(
        self, repository: RepositoryProvider, commits: typ.Sequence[CommitRecord]
    ) -> list[Author]:
        """Configured authors (in configured order) or those found in git."""
        if self.config.source.authors:
            counts = collections.Counter(commit.author.lower() for commit in commits)
            parsed = (Author.parse(text) for text in self.config.source.authors)
            return [
                Author(author.name, author.email, counts.get(author.name.lower(), 0))
                for author in parsed
                if author is not None
            ]
        if self.config.source.commit_order is CommitOrder.DISABLED:
            commits = repository.commit_log(CommitOrder.NEWEST_FIRST)
        return repository.authors(commits)

    def _colophon_template(self) -> str:
        if self.config.pdf is not None:
            return self.config.pdf.colophon_template
        if self.config.epub is not None:
            return self.config.epub.colophon_template
        return self.config.layout.colophon_template

    def _template_values(
        self,
        *,
        authors: typ.Sequence[Author],
        remotes: typ.Sequence[tuple[str, str]],
        statistics: BookStatistics,
        history: HistorySummary | None,
        generated_at: dt.datetime,
    ) -> dict[str, str]:
        date = f"{generated_at:%Y-%m-%d}"
        return {
            "title": self.config.source.title,
            "authors": format_authors(authors),
            "licences": format_licences(self.config.source.licences),
            "date": date,
            "remotes": format_remotes(remotes),
            "file_count": str(statistics.file_count),
            "line_count": str(statistics.line_count),
            "language_stats": format_language_stats(statistics.languages),
            "generated_date": date,
            "tool_version": f"{TOOL_NAME} {TOOL_VERSION}",
            "total_bytes": format_bytes(statistics.total_bytes),
            "commit_count": str(history.total) if history else "",
            "commit_chart": history.histogram if history else "",
            "date_range": history.date_range if history else "",
        }


def _resolve(
    template: str,
    scope: TemplateScope,
    values: typ.Mapping[str, str],
    warnings: list[PlanWarning],
) -> str:
    resolved = resolve_template(template, TemplateContext.for_scope(scope, values))
    warnings.extend(_template_warnings(scope, resolved.unresolved))
    return resolved.text


def _template_warnings(
    scope: TemplateScope, names: typ.Iterable[str]
) -> list[PlanWarning]:
    return [
        PlanWarning(
            WarningKind.TEMPLATE,
            f"unrecognised placeholder {{{name}}} in {scope.value} template left as is",
        )
        for name in names
    ]


def _capacity_warnings(report: CapacityReport) -> list[PlanWarning]:
    per_file = collections.Counter(offense.path for offense in report.offending_files)
    per_file.update(dict(report.suppressed))
    return [
        PlanWarning(
            WarningKind.CAPACITY,
            f"{count} line(s) longer than {report.max_chars_per_line} characters",
            path,
        )
        for path, count in per_file.items()
    ]


def _page_slots(
    sections: typ.Sequence[Section], layout: PdfConfig, warnings: list[PlanWarning]
) -> list[PageSlot]:
    """Lay out the title page, every section page, then the colophon page."""
    pages = [PageSlot(1, None, 0, "", None, "", "")]
    unresolved: dict[TemplateScope, list[str]] = {
        TemplateScope.HEADER: [],
        TemplateScope.FOOTER: [],
    }
    for section in sections:
        style = section.numbering.style
        total = format_page_number(section.page_count, style)
        files = _page_files(section)
        for index in range(section.page_count):
            label = format_page_number(section.numbering.start + index, style)
            current = files[index]
            values = {"file": current or "", "n": label, "total": total}
            running: dict[TemplateScope, str] = {}
            for scope, template in (
                (TemplateScope.HEADER, layout.header_template),
                (TemplateScope.FOOTER, layout.footer_template),
            ):
                resolved = resolve_template(
                    template, TemplateContext.for_scope(scope, values)
                )
                running[scope] = resolved.text
                for name in resolved.unresolved:
                    if name not in unresolved[scope]:
                        unresolved[scope].append(name)
            pages.append(
                PageSlot(
                    number=len(pages) + 1,
                    section=section.kind,
                    index_in_section=index,
                    label=label,
                    file=current,
                    header=running[TemplateScope.HEADER],
                    footer=running[TemplateScope.FOOTER],
                )
            )
    pages.append(PageSlot(len(pages) + 1, None, 0, "", None, "", ""))
    for scope, names in unresolved.items():
        warnings.extend(_template_warnings(scope, names))
    return pages


def _page_files(section: Section) -> list[str | None]:
    """The file shown on each page of ``section``; ``None`` for history pages."""
    if not section.files:
        return [None] * section.page_count
    files: list[str | None] = []
    for item, count in zip(section.files, section.file_pages, strict=True):
        files.extend([item.path] * count)
    return files


def _book_statistics(
    ordered: typ.Sequence[OrderedFile], line_lengths: typ.Mapping[str, list[int]]
) -> BookStatistics:
    per_language: dict[str, list[int]] = {}
    for item in ordered:
        language = (
            BINARY_LANGUAGE_LABEL
            if item.is_binary
            else item.detected_language or _extension_label(item.path)
        )
        totals = per_language.setdefault(language, [0, 0])
        totals[0] += 1
        totals[1] += len(line_lengths.get(item.path, ()))
    languages = sorted(
        (LanguageStat(name, files, lines) for name, (files, lines) in per_language.items()),
        key=lambda stat: (-stat.lines, stat.language.lower()),
    )
    return BookStatistics(
        file_count=len(ordered),
        line_count=sum(len(line_lengths.get(item.path, ())) for item in ordered),
        total_bytes=sum(item.byte_size for item in ordered),
        languages=tuple(languages),
    )


def _extension_label(path: str) -> str:
    extension = posixpath.splitext(path)[1]
    return extension or "Text"


__all__ = ["BookPlanner"]
