"""Centralized threshold and magic number configuration.

Every numeric heuristic used by reconciliation lives here so tuning
happens in one place.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ReconcileThresholds:
    """Thresholds for TOC-level reconciliation."""

    # Annotator: a short feature with more non-solution pages than this is
    # probably carrying pages that belong to its parent article.
    max_short_feature_pages: int = 3

    # Merger: how far (in list positions) a bare "Solutions" entry may sit
    # from the problem feature it answers.
    bare_solutions_window: int = 5

    def __post_init__(self) -> None:
        if self.max_short_feature_pages < 1:
            raise ValueError(f"max_short_feature_pages must be >= 1: {self.max_short_feature_pages}")
        if self.bare_solutions_window < 0:
            raise ValueError(f"bare_solutions_window must be >= 0: {self.bare_solutions_window}")


@dataclass(frozen=True)
class FragmentThresholds:
    """Thresholds for fragment marker detection."""

    marker_scan_chars: int = 300  # Leading characters of a text fragment scanned for markers

    def __post_init__(self) -> None:
        if self.marker_scan_chars <= 0:
            raise ValueError(f"marker_scan_chars must be positive: {self.marker_scan_chars}")


RECONCILE_THRESHOLDS = ReconcileThresholds()
FRAGMENT_THRESHOLDS = FragmentThresholds()
