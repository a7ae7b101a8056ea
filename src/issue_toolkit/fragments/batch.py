"""
Module: fragments.batch

Purpose:
    Runs fragment cleanup and the solution interleaver over every
    article of an issue. Articles are independent, so they are processed
    on a thread pool; a cancellation event stops pending articles while
    keeping the ones already finished.

Key Functions:
    - process_article_fragments(): Cleanup + interleave for one article
    - process_issue_fragments(): Same across an issue, in parallel

Key Classes:
    - ArticleFragments: Result for one article
    - IssueFragments: Results for an issue

Dependencies:
    - concurrent.futures: Thread pool execution
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence

from issue_toolkit.common.thresholds import FRAGMENT_THRESHOLDS
from issue_toolkit.core.models.fragments import AnyFragment
from .cleanup import CleanupReport, FragmentCleanupConfig, apply_cleanup
from .interleaver import InterleaveResult, interleave_solutions

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 4


@dataclass
class ArticleFragments:
    """
    Processed fragments for one article.

    Attributes:
        title: Article title
        fragments: Final fragment order
        cleanup: Counts from the cleanup passes
        interleave: Interleaver result
    """
    title: str
    fragments: List[AnyFragment]
    cleanup: CleanupReport
    interleave: InterleaveResult


@dataclass
class IssueFragments:
    """
    Processed fragments for an issue.

    Attributes:
        articles: Results keyed by article title
        failed: Error message per article that raised
        cancelled: Titles skipped because of cancellation
    """
    articles: Dict[str, ArticleFragments] = field(default_factory=dict)
    failed: Dict[str, str] = field(default_factory=dict)
    cancelled: List[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.failed and not self.cancelled


def process_article_fragments(
    title: str,
    fragments: Sequence[AnyFragment],
    *,
    issue_month: Optional[int] = None,
    cleanup: Optional[FragmentCleanupConfig] = None,
    scan_chars: int = FRAGMENT_THRESHOLDS.marker_scan_chars,
) -> ArticleFragments:
    """
    Clean up and interleave one article's fragments.

    Args:
        title: Article title (used for logging and as the result key)
        fragments: Article fragments in reading order
        issue_month: Current issue month; enables the next-month pass
        cleanup: Which cleanup passes to run
        scan_chars: Leading characters scanned for markers

    Returns:
        ArticleFragments with the final fragment order
    """
    cleaned, report = apply_cleanup(fragments, issue_month, cleanup)
    result = interleave_solutions(cleaned, scan_chars=scan_chars)
    if report.total or result.solution_count:
        logger.debug(
            f"\"{title}\": cleanup touched {report.total} fragment(s), "
            f"{result.problem_count} problems / {result.solution_count} solutions"
        )
    return ArticleFragments(title=title, fragments=result.fragments, cleanup=report, interleave=result)


def process_issue_fragments(
    articles: Mapping[str, Sequence[AnyFragment]],
    *,
    issue_month: Optional[int] = None,
    cleanup: Optional[FragmentCleanupConfig] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    cancel_event: Optional[threading.Event] = None,
) -> IssueFragments:
    """
    Process every article of an issue on a thread pool.

    Args:
        articles: Fragments keyed by article title
        issue_month: Current issue month; enables the next-month pass
        cleanup: Which cleanup passes to run
        max_workers: Thread pool size
        cancel_event: When set, articles not yet started are skipped

    Returns:
        IssueFragments; finished articles are kept even after cancellation

    Example:
        >>> out = process_issue_fragments({"Test Your Play": blocks}, issue_month=4)
        >>> out.articles["Test Your Play"].interleave.reordered
        True
    """
    if max_workers < 1:
        raise ValueError(f"max_workers must be >= 1: {max_workers}")

    outcome = IssueFragments()

    def _work(title: str, fragments: Sequence[AnyFragment]) -> Optional[ArticleFragments]:
        if cancel_event is not None and cancel_event.is_set():
            return None
        return process_article_fragments(title, fragments, issue_month=issue_month, cleanup=cleanup)

    futures: Dict[str, Future] = {}
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        for title, fragments in articles.items():
            if cancel_event is not None and cancel_event.is_set():
                outcome.cancelled.append(title)
                continue
            futures[title] = executor.submit(_work, title, fragments)

        for title, future in futures.items():
            try:
                processed = future.result()
            except Exception as e:
                logger.error(f"Fragment processing failed for \"{title}\": {e}")
                outcome.failed[title] = str(e)
                continue
            if processed is None:
                outcome.cancelled.append(title)
            else:
                outcome.articles[title] = processed

    if outcome.cancelled:
        logger.info(f"Fragment processing cancelled; {len(outcome.cancelled)} article(s) skipped")
    logger.info(f"Processed fragments for {len(outcome.articles)} of {len(articles)} article(s)")
    return outcome
