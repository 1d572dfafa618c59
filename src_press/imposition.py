"""Saddle-stitch imposition of logical pages onto printed sheets.

For a signature of ``S`` pages, sheet ``k`` (counting from the outside, from
1) carries pages ``(S - 2k + 2, 2k - 1)`` on its front and ``(2k, S - 2k + 1)``
on its back. Printing every sheet double-sided, folding each signature in half,
nesting its sheets and stacking the signatures in order restores reading
order. The pages of signature ``i`` are offset by ``i * S``; positions past
the real page count are blank padding, reported as ``None``.

Examples
--------
>>> plan = plan_imposition(20, 16)
>>> plan.padded_page_count, len(plan.signatures)
(32, 2)
>>> plan.signatures[0].sheets[0]
SheetSide(front=(16, 1), back=(2, 15))
>>> plan.signatures[1].sheets[0].front
(None, 17)
"""

from __future__ import annotations

import math

from .config.helpers import _validate_signature_size
from .models import ImpositionPlan, SheetSide, Signature


def plan_imposition(
    page_count: int, signature_size: int, *, field: str = "booklet.signature_size"
) -> ImpositionPlan:
    """Compute sheet ordering for ``page_count`` pages in signatures.

    Parameters
    ----------
    page_count : int
        Logical pages to print, numbered from 1.
    signature_size : int
        Pages per signature; a positive multiple of four.
    field : str
        Configuration field reported when ``signature_size`` is invalid.

    Returns
    -------
    ImpositionPlan
        Signatures in binding order, padded only at the end of the last one.

    Raises
    ------
    ConfigurationError
        If ``signature_size`` is not a positive multiple of four.
    ValueError
        If ``page_count`` is negative.
    """
    size = _validate_signature_size(signature_size, field)
    if page_count < 0:
        msg = f"page count must not be negative, got {page_count}"
        raise ValueError(msg)
    padded = math.ceil(page_count / size) * size

    def slot(page: int) -> int | None:
        return page if page <= page_count else None

    signatures: list[Signature] = []
    for index in range(padded // size):
        offset = index * size
        sheets = tuple(
            SheetSide(
                front=(slot(offset + size - 2 * k + 2), slot(offset + 2 * k - 1)),
                back=(slot(offset + 2 * k), slot(offset + size - 2 * k + 1)),
            )
            for k in range(1, size // 4 + 1)
        )
        signatures.append(Signature(index=index, sheets=sheets))
    return ImpositionPlan(
        signature_size=size,
        page_count=page_count,
        padded_page_count=padded,
        signatures=tuple(signatures),
    )


def reading_order(signature: Signature) -> list[int | None]:
    """Pages met when reading one folded signature from cover to cover.

    Going in, each sheet shows its front right-hand page then its back
    left-hand page; coming out, its back right-hand page then its front
    left-hand page.
    """
    inward: list[int | None] = []
    outward: list[int | None] = []
    for sheet in signature.sheets:
        inward.extend((sheet.front[1], sheet.back[0]))
        outward.extend((sheet.front[0], sheet.back[1]))
    return inward + outward[::-1]


def printing_instructions(plan: ImpositionPlan) -> list[str]:
    """Human-readable steps for printing and binding ``plan``."""
    sheets_per_signature = plan.signature_size // 4
    return [
        f"{plan.sheet_count} sheets in {len(plan.signatures)} signature(s) "
        f"of {plan.signature_size} pages ({plan.blank_count} blank pages)",
        "Print double-sided, flipping on the short edge.",
        f"Fold each group of {sheets_per_signature} sheets in half and nest them.",
        "Stack the signatures in order and staple along the fold.",
    ]


__all__ = ["plan_imposition", "printing_instructions", "reading_order"]
