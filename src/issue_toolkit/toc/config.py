"""
Module: toc.config

Purpose:
    Configuration dataclass for TOC reconciliation. Immutable settings
    for the feature taxonomy, numeric thresholds, the annotator's
    tie-break policy and the opt-in title cleanup passes.

Key Classes:
    - ParentTieBreak: How the annotator picks between overlapping parents
    - ReconcileConfig: Main configuration for reconcile_issue()

Dependencies:
    - common.features: FeatureTaxonomy
    - common.thresholds: ReconcileThresholds

Used By:
    - toc.pipeline: Threads the config through every phase
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from issue_toolkit.common.features import FeatureTaxonomy
from issue_toolkit.common.thresholds import ReconcileThresholds


class ParentTieBreak(str, Enum):
    """
    Annotator policy when a short feature overlaps several larger articles.

    FIRST_FOUND:     first qualifying article in input order (default)
    LARGEST_OVERLAP: most shared pages; ties fall back to input order
    """

    FIRST_FOUND = "first_found"
    LARGEST_OVERLAP = "largest_overlap"


@dataclass(frozen=True)
class ReconcileConfig:
    """
    Configuration for TOC reconciliation (immutable).

    Attributes:
        taxonomy: Feature lookup tables (short / interleavable / problem)
        thresholds: Numeric heuristics
        parent_tie_break: Annotator tie-break policy
        strip_author_titles: Strip trailing "by Author" from titles
        deduplicate: Merge near-duplicate TOC entries
        use_solution_reader: Allow the locator to call the external reader

    Example:
        >>> config = ReconcileConfig(parent_tie_break=ParentTieBreak.LARGEST_OVERLAP)
        >>> config.thresholds.max_short_feature_pages
        3
    """

    taxonomy: FeatureTaxonomy = field(default_factory=FeatureTaxonomy)
    thresholds: ReconcileThresholds = field(default_factory=ReconcileThresholds)
    parent_tie_break: ParentTieBreak = ParentTieBreak.FIRST_FOUND

    # Title cleanup (off by default; they rename or remove articles)
    strip_author_titles: bool = False
    deduplicate: bool = False

    use_solution_reader: bool = True

    def __post_init__(self) -> None:
        if not isinstance(self.parent_tie_break, ParentTieBreak):
            object.__setattr__(self, "parent_tie_break", ParentTieBreak(self.parent_tie_break))
