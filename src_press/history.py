"""Summarise a materialised commit log for the history appendix.

The functions here are pure: they take commit records that the repository
provider has already read and never touch git themselves, so they can be
tested with hand-built :class:`~src_press.models.CommitRecord` values.
"""

from __future__ import annotations

import collections
import math
import typing as typ

from ._constants import HISTOGRAM_BAR_HEIGHT, HISTOGRAM_COLUMNS
from .models import CommitOrder, HistorySummary

if typ.TYPE_CHECKING:
    import datetime as dt

    from .models import CommitRecord


def summarize_history(
    commits: typ.Iterable[CommitRecord],
    order: CommitOrder,
    *,
    columns: int = HISTOGRAM_COLUMNS,
    bar_height: int = HISTOGRAM_BAR_HEIGHT,
) -> HistorySummary | None:
    """Aggregate ``commits`` into counts, a date range and a histogram.

    Parameters
    ----------
    commits : Iterable[CommitRecord]
        Commit records in any order.
    order : CommitOrder
        Order of ``HistorySummary.commits``. ``DISABLED`` skips the work and
        returns ``None``.
    columns : int
        Number of time buckets (and so the histogram width) when the commits
        span more than an instant.
    bar_height : int
        Rows used by the tallest bar.

    Returns
    -------
    HistorySummary or None
        ``None`` when history is disabled.
    """
    if order is CommitOrder.DISABLED:
        return None
    ordered = sorted(
        commits,
        key=lambda commit: commit.timestamp,
        reverse=order is CommitOrder.NEWEST_FIRST,
    )
    per_author = collections.Counter(commit.author for commit in ordered)
    author_counts = tuple(
        sorted(per_author.items(), key=lambda item: (-item[1], item[0].lower()))
    )
    timestamps = [commit.timestamp for commit in ordered]
    return HistorySummary(
        order=order,
        commits=tuple(ordered),
        total=len(ordered),
        author_counts=author_counts,
        first_commit=min(timestamps) if timestamps else None,
        last_commit=max(timestamps) if timestamps else None,
        histogram=render_histogram(timestamps, columns=columns, bar_height=bar_height),
    )


def bucket_counts(
    timestamps: typ.Sequence[dt.datetime], columns: int = HISTOGRAM_COLUMNS
) -> list[int]:
    """Count ``timestamps`` into equal-width buckets between oldest and newest.

    A single instant (or a single commit) yields one bucket.
    """
    if not timestamps:
        return []
    oldest, newest = min(timestamps), max(timestamps)
    span = (newest - oldest).total_seconds()
    buckets = max(1, columns) if span > 0 else 1
    counts = [0] * buckets
    for timestamp in timestamps:
        if span > 0:
            offset = (timestamp - oldest).total_seconds() / span
            index = min(int(offset * buckets), buckets - 1)
        else:
            index = 0
        counts[index] += 1
    return counts


def render_histogram(
    timestamps: typ.Sequence[dt.datetime],
    *,
    columns: int = HISTOGRAM_COLUMNS,
    bar_height: int = HISTOGRAM_BAR_HEIGHT,
) -> str:
    """Draw commit activity as ``#`` columns over a dated baseline.

    Examples
    --------
    >>> import datetime as dt
    >>> day = dt.datetime(2024, 1, 1, tzinfo=dt.UTC)
    >>> print(render_histogram([day, day], bar_height=2))
    #
    #
    -
    2024-01-01 to 2024-01-01
    """
    counts = bucket_counts(timestamps, columns)
    if not counts:
        return ""
    peak = max(counts)
    heights = [math.ceil(count * bar_height / peak) if count else 0 for count in counts]
    rows = [
        "".join("#" if height >= level else " " for height in heights).rstrip()
        for level in range(bar_height, 0, -1)
    ]
    rows.append("-" * len(counts))
    rows.append(f"{min(timestamps):%Y-%m-%d} to {max(timestamps):%Y-%m-%d}")
    return "\n".join(rows)


__all__ = ["bucket_counts", "render_histogram", "summarize_history"]
