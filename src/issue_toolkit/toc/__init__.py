"""
Module: toc

Purpose:
    Table-of-contents reconciliation for one magazine issue. Turns the
    raw TOC extraction into articles with trustworthy page ranges,
    merged solution pages and interleave annotations.

Key Functions:
    - reconcile_issue(): Main entry point for reconciliation

Key Classes:
    - ReconcileConfig: Configuration for reconciliation
    - ReconcileResult: Container for reconciliation output
    - WarningCollector: Thread-safe warning collector

Dependencies:
    - PIL: Page images handed to the external solution-page reader
    - issue_toolkit.core.models: Article and page-range models

Used By:
    - scripts/reconcile_toc.py
"""

from .annotator import AnnotationDecision, annotate_interleaved, find_parent
from .config import ParentTieBreak, ReconcileConfig
from .diagnostics import WarningCollector
from .expansion import TrimDecision, expand_and_trim, expand_main_articles, trim_interleaved_features
from .locator import (
    LocatorOutcome,
    PageSource,
    SolutionPageReader,
    find_solution_reference,
    locate_solution_pages,
)
from .merger import (
    DEFAULT_STRATEGIES,
    MatchStrategy,
    MergeDecision,
    merge_problem_solutions,
    parse_solutions_title,
)
from .normalize import normalize_articles
from .pipeline import ReconcileResult, reconcile_issue
from .preview_filter import filter_preview_articles, is_preview_title
from .timing import TimingLog, timed_phase
from .titles import deduplicate_articles, strip_author_from_title, strip_author_titles

__all__ = [
    "reconcile_issue",
    "ReconcileConfig",
    "ReconcileResult",
    "ParentTieBreak",
    "WarningCollector",
    "TimingLog",
    "timed_phase",
    "normalize_articles",
    "merge_problem_solutions",
    "parse_solutions_title",
    "MatchStrategy",
    "MergeDecision",
    "DEFAULT_STRATEGIES",
    "filter_preview_articles",
    "is_preview_title",
    "expand_and_trim",
    "expand_main_articles",
    "trim_interleaved_features",
    "TrimDecision",
    "annotate_interleaved",
    "find_parent",
    "AnnotationDecision",
    "locate_solution_pages",
    "find_solution_reference",
    "LocatorOutcome",
    "PageSource",
    "SolutionPageReader",
    "strip_author_from_title",
    "strip_author_titles",
    "deduplicate_articles",
]
