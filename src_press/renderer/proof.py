"""HTML proof of a planned book.

The proof is a single self-contained HTML page that mirrors the planned
book: title page, contents, frontmatter, source files, commit history and
colophon, each source file labelled with the page number it is planned to
start on. It lets a reader check ordering, numbering and running heads
before a print renderer is involved.

Typical usage:

>>> from src_press.renderer import BookProofRenderer
>>> renderer = BookProofRenderer(model)  # doctest: +SKIP
>>> renderer.run(Path("book.html"))  # doctest: +SKIP
PosixPath('book.html')
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from ..models import SectionKind
from .content import FALLBACK_STYLE, HtmlContentRenderer

if typ.TYPE_CHECKING:
    from ..models import BookDocumentModel, OrderedFile


@dc.dataclass(slots=True)
class ProofEntry:
    """One file as shown in the proof."""

    path: str
    anchor: str
    html: str
    first_page: str


class BookProofRenderer:
    """Render a :class:`BookDocumentModel` to an HTML proof."""

    def __init__(
        self,
        model: BookDocumentModel,
        *,
        pygments_style: str = FALLBACK_STYLE,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the renderer and its Jinja environment.

        Parameters
        ----------
        model : BookDocumentModel
            Planned book; file contents are read from ``model.root``.
        pygments_style : str, optional
            Pygments style for highlighted code.
        templates_dir : Path, optional
            Directory containing ``book_proof.jinja``; defaults to the
            package templates.
        """
        self.model = model
        self.content = HtmlContentRenderer(pygments_style)
        default_templates = Path(__file__).resolve().parents[1] / "templates"
        self.templates_dir = templates_dir or default_templates
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=select_autoescape(["html", "xml", "jinja"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.template = self.env.get_template("book_proof.jinja")

    def render(self) -> str:
        """Return the proof as an HTML string."""
        first_pages = self._first_pages()
        sections = {section.kind: section for section in self.model.sections}
        frontmatter = sections.get(SectionKind.FRONTMATTER)
        source = sections.get(SectionKind.SOURCE)
        return self.template.render(
            model=self.model,
            stylesheet=self.content.stylesheet,
            frontmatter=self._entries(frontmatter.files if frontmatter else (), first_pages),
            source=self._entries(source.files if source else (), first_pages),
            history=self.model.history if SectionKind.HISTORY in sections else None,
            history_page=first_pages.get(None, ""),
        )

    def run(self, output_path: Path) -> Path:
        """Write the proof to ``output_path`` and return the path."""
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(self.render(), encoding="utf-8")
        return output_path

    def _entries(
        self, files: typ.Iterable[OrderedFile], first_pages: dict[str | None, str]
    ) -> list[ProofEntry]:
        entries: list[ProofEntry] = []
        for item in files:
            entries.append(
                ProofEntry(
                    path=item.path,
                    anchor=f"file-{item.order_rank}",
                    html=self._file_html(item),
                    first_page=first_pages.get(item.path, ""),
                )
            )
        return entries

    def _file_html(self, item: OrderedFile) -> str:
        if item.is_binary:
            return self.content.binary_placeholder(item.byte_size)
        path = self.model.root / item.path
        text = path.read_text(encoding="utf-8", errors="replace") if path.is_file() else ""
        return self.content.file_content(item.path, text, item.detected_language)

    def _first_pages(self) -> dict[str | None, str]:
        """Label of the first page per file; ``None`` keys the history start."""
        labels: dict[str | None, str] = {}
        for page in self.model.pages:
            if page.section is SectionKind.HISTORY:
                labels.setdefault(None, page.label)
            elif page.file is not None:
                labels.setdefault(page.file, page.label)
        return labels


__all__ = ["BookProofRenderer", "ProofEntry"]
