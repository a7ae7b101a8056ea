"""
Module: warnings

Purpose:
    Structured, non-fatal reconciliation warnings. Nothing in the
    reconciliation core raises for bad data; each recoverable problem
    becomes a ReconcileWarning that the surrounding system can review.

Key Classes:
    - WarningKind: The three warning categories
    - ReconcileWarning: One warning (article, reason, affected pages)

Used By:
    - toc.diagnostics.WarningCollector
    - core.models.articles.ArticleCandidate
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple


class WarningKind(str, Enum):
    """
    Warning categories.

    UNRESOLVED_REFERENCE:  a "Solutions" entry or solution page that no
                           heuristic could attach
    AMBIGUOUS_ATTRIBUTION: a feature larger than expected, or whose parent
                           was found only by the fallback rule
    MALFORMED_INPUT:       a page range corrected on entry
    """

    UNRESOLVED_REFERENCE = "unresolved_reference"
    AMBIGUOUS_ATTRIBUTION = "ambiguous_attribution"
    MALFORMED_INPUT = "malformed_input"


@dataclass(frozen=True, slots=True)
class ReconcileWarning:
    """
    A single reconciliation warning.

    Attributes:
        kind: Warning category
        title: Title of the affected article
        reason: Human-readable explanation
        pages: Affected pages (may be empty)
        phase: Pipeline phase that raised it (e.g. "merge", "annotate")
    """

    kind: WarningKind
    title: str
    reason: str
    pages: Tuple[int, ...] = field(default_factory=tuple)
    phase: str = ""

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "kind": self.kind.value,
            "title": self.title,
            "reason": self.reason,
        }
        if self.pages:
            d["pages"] = list(self.pages)
        if self.phase:
            d["phase"] = self.phase
        return d

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> ReconcileWarning:
        return cls(
            kind=WarningKind(data["kind"]),
            title=data["title"],
            reason=data["reason"],
            pages=tuple(data.get("pages", ())),
            phase=data.get("phase", ""),
        )

    def __str__(self) -> str:
        pages = f" (pages {', '.join(map(str, self.pages))})" if self.pages else ""
        return f"[{self.kind.value}] \"{self.title}\": {self.reason}{pages}"
