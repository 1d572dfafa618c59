"""HTML rendering of planned books: highlighted content and the proof page."""

from .content import HtmlContentRenderer
from .proof import BookProofRenderer, ProofEntry

__all__ = ["BookProofRenderer", "HtmlContentRenderer", "ProofEntry"]
