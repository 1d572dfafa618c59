"""Estimate how many characters fit on a printed line and find overflows.

The analyzer never lays out glyphs. It multiplies the monospace font's average
advance (in em) by the body point size to get a character width, divides the
printable width by it, and compares every source line against the result.
The outcome is advisory: callers decide whether to proceed.
"""

from __future__ import annotations

import concurrent.futures
import dataclasses as dc
import logging
import math
import typing as typ

from ._constants import (
    DEFAULT_CHAR_WIDTH_EM,
    FONT_CHAR_WIDTHS_EM,
    POINTS_PER_INCH,
    TAB_WIDTH,
)
from .config.models import ConfigurationError
from .models import CapacityReport, LineOffense, LineStatistics

if typ.TYPE_CHECKING:
    from .config.models import PdfConfig

logger = logging.getLogger(__name__)

_MIN_FONT_SIZE_PT = 1.0
_MAX_FONT_SIZE_PT = 72.0


@dc.dataclass(slots=True)
class FileScan:
    """Measured line lengths and overflows of one file."""

    path: str
    lengths: list[int]
    offenses: list[LineOffense]
    suppressed: int = 0


def char_width_em(font: str, override: float | None = None) -> float:
    """Return the average advance of ``font`` in em.

    Examples
    --------
    >>> char_width_em("Source Code Pro")
    0.6
    >>> char_width_em("Inconsolata")
    0.5
    >>> char_width_em("Anything", override=0.55)
    0.55
    """
    if override is not None:
        return override
    key = "".join(font.lower().split()).replace("-", "").replace("_", "")
    width = FONT_CHAR_WIDTHS_EM.get(key)
    if width is None:
        logger.warning(
            "no advance width known for font %r; assuming %s em",
            font,
            DEFAULT_CHAR_WIDTH_EM,
        )
        return DEFAULT_CHAR_WIDTH_EM
    return width


def measure_line(line: str) -> int:
    """Count the columns ``line`` occupies with tabs expanded.

    >>> measure_line("\\tx")
    5
    """
    return len(line.expandtabs(TAB_WIDTH))


def max_chars_per_line(layout: PdfConfig) -> int:
    """Return ``floor(printable width / average character width)``.

    Raises
    ------
    ConfigurationError
        If the page cannot hold a single character per line.
    """
    usable_pt = layout.printable_width_in * POINTS_PER_INCH
    char_pt = char_width_em(layout.font, layout.char_width_em) * layout.font_size_body_pt
    chars = math.floor(usable_pt / char_pt) if usable_pt > 0 else 0
    if chars < 1:
        msg = "page width minus margins cannot hold a single character"
        raise ConfigurationError(msg, field="pdf.page_width_in")
    return chars


def suggest_font_size(layout: PdfConfig, line_length: int) -> float | None:
    """Largest body size (0.1 pt steps, 1 to 72 pt) fitting ``line_length``."""
    if line_length <= 0:
        return None
    usable_pt = layout.printable_width_in * POINTS_PER_INCH
    em = char_width_em(layout.font, layout.char_width_em)
    size = math.floor(usable_pt / (em * line_length) * 10) / 10
    return min(_MAX_FONT_SIZE_PT, max(_MIN_FONT_SIZE_PT, size))


class CapacityAnalyzer:
    """Check source text against the configured page width."""

    def __init__(
        self,
        layout: PdfConfig,
        *,
        max_offenses_per_file: int | None = None,
        workers: int = 1,
    ) -> None:
        """Bind the analyzer to a page layout.

        Parameters
        ----------
        layout : PdfConfig
            Page geometry and font settings; the font is taken from here
            rather than from any process-wide registry.
        max_offenses_per_file : int, optional
            Cap on individually reported offenses per file; defaults to
            ``layout.max_offenses_per_file``.
        workers : int
            Threads used to scan files. Results keep input order.
        """
        self.layout = layout
        self.max_chars_per_line = max_chars_per_line(layout)
        self.max_offenses_per_file = max_offenses_per_file or layout.max_offenses_per_file
        self.workers = max(1, workers)

    def scan_file(self, path: str, text: str) -> FileScan:
        """Measure every line of ``text`` and record overflows up to the cap."""
        scan = FileScan(path=path, lengths=[], offenses=[])
        for number, line in enumerate(text.splitlines(), start=1):
            length = measure_line(line)
            scan.lengths.append(length)
            if length <= self.max_chars_per_line:
                continue
            if len(scan.offenses) < self.max_offenses_per_file:
                scan.offenses.append(LineOffense(path, number, length))
            else:
                scan.suppressed += 1
        return scan

    def scan(self, files: typ.Sequence[tuple[str, str]]) -> list[FileScan]:
        """Scan ``(path, text)`` pairs, in parallel when ``workers > 1``."""
        paths = [path for path, _ in files]
        texts = [text for _, text in files]
        if self.workers == 1 or len(files) < 2:
            return list(map(self.scan_file, paths, texts))
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.workers) as pool:
            return list(pool.map(self.scan_file, paths, texts))

    def report(self, scans: typ.Iterable[FileScan]) -> CapacityReport:
        offenses: list[LineOffense] = []
        suppressed: list[tuple[str, int]] = []
        for scan in scans:
            offenses.extend(scan.offenses)
            if scan.suppressed:
                suppressed.append((scan.path, scan.suppressed))
        return CapacityReport(
            max_chars_per_line=self.max_chars_per_line,
            offending_files=tuple(offenses),
            suppressed=tuple(suppressed),
        )

    def statistics(self, scans: typ.Iterable[FileScan]) -> LineStatistics:
        """Summarise line lengths and suggest a body size for the 95th percentile."""
        lengths: list[int] = []
        longest = (0, None, 0)
        for scan in scans:
            for number, length in enumerate(scan.lengths, start=1):
                if length > longest[0]:
                    longest = (length, scan.path, number)
            lengths.extend(scan.lengths)
        if not lengths:
            return LineStatistics()
        ordered = sorted(lengths)
        p95 = ordered[min(int(len(ordered) * 0.95), len(ordered) - 1)]
        return LineStatistics(
            total_lines=len(lengths),
            lines_that_wrap=sum(1 for length in lengths if length > self.max_chars_per_line),
            longest_line_length=longest[0],
            longest_line_path=longest[1],
            longest_line_number=longest[2],
            percentile_95=p95,
            suggested_font_size_pt=suggest_font_size(self.layout, p95),
        )


__all__ = [
    "CapacityAnalyzer",
    "FileScan",
    "char_width_em",
    "max_chars_per_line",
    "measure_line",
    "suggest_font_size",
]
