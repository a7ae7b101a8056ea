"""
Module: toc.pipeline

Purpose:
    Main orchestrator for TOC reconciliation. Runs every phase in order
    over one issue's article list and hands back the reconciled articles
    with their warnings, the merge and locator decisions and per-phase
    timings.

Key Functions:
    - reconcile_issue(): Main entry point for reconciliation

Key Classes:
    - ReconcileResult: Container for reconciliation output

Dependencies:
    - toc.normalize, toc.merger, toc.preview_filter, toc.expansion,
      toc.titles, toc.annotator, toc.locator
    - toc.diagnostics: WarningCollector
    - toc.timing: TimingLog

Used By:
    - scripts/reconcile_toc.py
    - Callers importing issue_toolkit.reconcile_issue

Phase Order:
    normalize -> merge -> filter -> expand -> titles -> annotate -> locate

Running the pipeline on its own output produces the same pages,
solution pages and interleave annotations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from issue_toolkit.core.models.articles import ArticleCandidate, IssueMeta
from issue_toolkit.core.models.warnings import ReconcileWarning
from .annotator import AnnotationDecision, annotate_interleaved
from .config import ReconcileConfig
from .diagnostics import WarningCollector
from .expansion import TrimDecision, expand_and_trim
from .locator import LocatorOutcome, PageSource, SolutionPageReader, locate_solution_pages
from .merger import MergeDecision, merge_problem_solutions
from .normalize import normalize_articles
from .preview_filter import filter_preview_articles
from .timing import TimingLog, timed_phase
from .titles import deduplicate_articles, strip_author_titles

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """
    Result of reconciling one issue.

    Attributes:
        articles: Reconciled articles, each carrying its warnings
        warnings: Every warning raised during the run
        merge_decisions: One record per solutions entry seen by the merger
        trim_decisions: One record per short feature seen by the trimmer
        annotations: One record per interleavable feature
        locator_outcomes: One record per problem article examined
        timings: Per-phase durations
    """
    articles: List[ArticleCandidate]
    warnings: List[ReconcileWarning] = field(default_factory=list)
    merge_decisions: List[MergeDecision] = field(default_factory=list)
    trim_decisions: List[TrimDecision] = field(default_factory=list)
    annotations: List[AnnotationDecision] = field(default_factory=list)
    locator_outcomes: List[LocatorOutcome] = field(default_factory=list)
    timings: TimingLog = field(default_factory=TimingLog)

    @property
    def article_count(self) -> int:
        return len(self.articles)

    def article(self, title: str) -> Optional[ArticleCandidate]:
        """Look up a reconciled article by exact title."""
        for article in self.articles:
            if article.title == title:
                return article
        return None

    def warning_summary(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for warning in self.warnings:
            counts[warning.kind.value] = counts.get(warning.kind.value, 0) + 1
        return counts


def reconcile_issue(
    articles: List[ArticleCandidate],
    issue: IssueMeta,
    *,
    total_pages: int,
    page_source: Optional[PageSource] = None,
    solution_reader: Optional[SolutionPageReader] = None,
    config: Optional[ReconcileConfig] = None,
    collector: Optional[WarningCollector] = None,
) -> ReconcileResult:
    """
    Reconcile one issue's table of contents.

    Articles are corrected in place; removed entries (merged solutions,
    previews, absorbed duplicates) are absent from the result list.

    Args:
        articles: Article candidates from TOC extraction
        issue: Issue metadata (month drives the preview filter)
        total_pages: Document page count
        page_source: Page text/image access for the solution-page locator
        solution_reader: External reader for the locator's image fallback
        config: Reconciliation config (defaults used if None)
        collector: Warning collector (a fresh one is used if None)

    Returns:
        ReconcileResult with reconciled articles and diagnostics

    Raises:
        ValueError: If total_pages < 1

    Example:
        >>> result = reconcile_issue(articles, IssueMeta(month=4, year=2025), total_pages=80)
        >>> [a.title for a in result.articles if a.interleaved]
        ['Test Your Play']
    """
    config = config or ReconcileConfig()
    collector = collector or WarningCollector()
    taxonomy = config.taxonomy
    timings = TimingLog()
    result = ReconcileResult(articles=articles, timings=timings)

    logger.info(
        f"Reconciling {len(articles)} TOC entries for "
        f"{issue.title or f'{issue.month}/{issue.year}'} ({total_pages} pages)"
    )

    with timed_phase(timings, "normalize"):
        normalize_articles(articles, total_pages, collector)

    with timed_phase(timings, "merge"):
        articles, result.merge_decisions = merge_problem_solutions(
            articles,
            features=taxonomy.problem_features,
            window=config.thresholds.bare_solutions_window,
            collector=collector,
        )

    with timed_phase(timings, "filter"):
        articles = filter_preview_articles(articles, issue.month, collector)

    with timed_phase(timings, "expand"):
        result.trim_decisions = expand_and_trim(
            articles,
            total_pages,
            short_features=taxonomy.short_features,
            collector=collector,
        )

    if config.strip_author_titles or config.deduplicate:
        with timed_phase(timings, "titles"):
            if config.strip_author_titles:
                strip_author_titles(articles)
            if config.deduplicate:
                articles = deduplicate_articles(articles)

    with timed_phase(timings, "annotate"):
        result.annotations = annotate_interleaved(
            articles,
            interleavable=taxonomy.interleavable,
            tie_break=config.parent_tie_break,
            max_feature_pages=config.thresholds.max_short_feature_pages,
            collector=collector,
        )

    with timed_phase(timings, "locate"):
        result.locator_outcomes = locate_solution_pages(
            articles,
            total_pages,
            page_source,
            reader=solution_reader if config.use_solution_reader else None,
            problem_features=taxonomy.problem_features,
            collector=collector,
        )

    for article in articles:
        article.warnings = collector.for_title(article.title)

    result.articles = articles
    result.warnings = collector.warnings()
    logger.info(
        f"Reconciled {len(articles)} articles: {len(result.warnings)} warning(s), "
        f"{sum(1 for a in articles if a.interleaved)} interleaved "
        f"in {timings.total:.3f}s (slowest phase: {timings.slowest_phase()})"
    )
    logger.debug(timings.summary())
    return result
