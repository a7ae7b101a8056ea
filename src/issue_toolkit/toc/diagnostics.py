"""
Module: toc.diagnostics

Collects reconciliation warnings raised by the TOC phases and hands
them back per article once a run completes.

Every add_* method logs the warning and records a ReconcileWarning.
The collector never raises; the surrounding system decides whether
accumulated warnings block publication.
"""

from __future__ import annotations

import json
import logging
import threading
from collections import Counter
from pathlib import Path
from typing import Dict, Iterable, List

from issue_toolkit.core.models.warnings import ReconcileWarning, WarningKind

logger = logging.getLogger(__name__)


class WarningCollector:
    """
    Thread-safe collector for reconciliation warnings.

    Example:
        >>> collector = WarningCollector()
        >>> collector.add_unresolved_solutions("Solutions", [80])
        >>> collector.count()
        1
    """

    def __init__(self):
        self._warnings: List[ReconcileWarning] = []
        self._lock = threading.Lock()

    def add(
        self,
        kind: WarningKind,
        title: str,
        reason: str,
        pages: Iterable[int] = (),
        phase: str = "",
    ) -> ReconcileWarning:
        """Record a warning and log it."""
        warning = ReconcileWarning(
            kind=kind,
            title=title,
            reason=reason,
            pages=tuple(sorted(set(pages))),
            phase=phase,
        )
        logger.warning(f"[{phase or 'reconcile'}] {warning}")
        with self._lock:
            self._warnings.append(warning)
        return warning

    # ─────────────────────────────────────────────────────────────────────────
    # Typed Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def add_unresolved_solutions(self, title: str, pages: Iterable[int]) -> None:
        """Record a "Solutions" entry that matched no parent article."""
        self.add(
            WarningKind.UNRESOLVED_REFERENCE,
            title,
            "no parent article found for solutions entry; kept standalone",
            pages,
            phase="merge",
        )

    def add_missing_solution_page(self, title: str, pages: Iterable[int]) -> None:
        """Record a problem article with no discoverable solution page."""
        self.add(
            WarningKind.UNRESOLVED_REFERENCE,
            title,
            "no solution page reference found in page text or page image",
            pages,
            phase="locate",
        )

    def add_oversized_feature(self, title: str, content_pages: Iterable[int], limit: int) -> None:
        """Record a short feature with more problem pages than expected."""
        pages = list(content_pages)
        self.add(
            WarningKind.AMBIGUOUS_ATTRIBUTION,
            title,
            f"{len(pages)} problem pages, expected <= {limit}; "
            f"TOC may have given it pages belonging to its parent article",
            pages,
            phase="annotate",
        )

    def add_fallback_parent(self, title: str, parent_title: str, pages: Iterable[int]) -> None:
        """Record a parent found only by span containment, not direct overlap."""
        self.add(
            WarningKind.AMBIGUOUS_ATTRIBUTION,
            title,
            f"parent \"{parent_title}\" found by span containment only",
            pages,
            phase="annotate",
        )

    def add_ambiguous_container(self, title: str, containers: List[str], pages: Iterable[int]) -> None:
        """Record a short feature whose content sits inside several main articles."""
        self.add(
            WarningKind.AMBIGUOUS_ATTRIBUTION,
            title,
            f"content pages lie inside {len(containers)} main articles "
            f"({', '.join(containers)}); left untrimmed",
            pages,
            phase="expand",
        )

    def add_clipped_away(self, title: str, pages: Iterable[int]) -> None:
        """Record an article whose every page was preview content."""
        self.add(
            WarningKind.AMBIGUOUS_ATTRIBUTION,
            title,
            "all pages fell inside next-issue preview content",
            pages,
            phase="filter",
        )

    def add_malformed_range(self, title: str, raw: str, corrected: str) -> None:
        """Record a page range corrected on entry."""
        self.add(
            WarningKind.MALFORMED_INPUT,
            title,
            f"page range {raw} corrected to {corrected}",
            phase="normalize",
        )

    # ─────────────────────────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────────────────────────

    def warnings(self) -> List[ReconcileWarning]:
        with self._lock:
            return list(self._warnings)

    def for_title(self, title: str) -> List[ReconcileWarning]:
        with self._lock:
            return [w for w in self._warnings if w.title == title]

    def count(self, kind: WarningKind | None = None) -> int:
        with self._lock:
            if kind is None:
                return len(self._warnings)
            return sum(1 for w in self._warnings if w.kind is kind)

    def summary(self) -> Dict[str, int]:
        """Warning counts keyed by kind value."""
        with self._lock:
            return dict(Counter(w.kind.value for w in self._warnings))

    def write_report(self, path: Path) -> None:
        """Write all warnings to a JSON file."""
        payload = {
            "summary": self.summary(),
            "warnings": [w.to_dict() for w in self.warnings()],
        }
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(payload, f, indent=2)
        logger.info(f"Wrote {len(payload['warnings'])} reconciliation warnings to {path}")
