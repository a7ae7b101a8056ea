"""
Module: toc.expansion

Purpose:
    Grows main-article page ranges to absorb the gap pages the TOC does
    not list, then shrinks short recurring features that turn out to be
    typeset inside a main article.

Key Functions:
    - expand_main_articles(): Phase 1, fill gaps between main articles
    - trim_interleaved_features(): Phase 2, trim embedded short features
    - expand_and_trim(): Both phases in order

Used By:
    - toc.pipeline (after the preview filter)

Algorithm:
    Phase 1: Main articles (everything that is not a short feature) are
    sorted by start page. Each one's FIRST range is extended to the page
    before the next main article starts (or the document end for the
    last). Solution pages owned by other articles are reserved: the
    extension stops short of a trailing reserved page and splits around
    interior ones. Later ranges that lie beyond the new end are kept.

    Phase 2: A short feature whose content pages (pages minus solution
    pages) all sit inside exactly one main article's expanded pages, and
    that has more than one content page, is trimmed to its first
    content page plus its solution pages.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from issue_toolkit.common.features import DEFAULT_TAXONOMY, FeatureMatcher
from issue_toolkit.core.models.articles import ArticleCandidate
from issue_toolkit.core.models.pages import (
    PageRange,
    format_ranges,
    normalize_ranges,
)
from .diagnostics import WarningCollector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TrimDecision:
    """
    Trimmer outcome for one short feature.

    Attributes:
        title: Short feature title
        container_title: Main article enclosing its content, if unique
        trimmed: Whether the feature's pages were replaced
    """
    title: str
    container_title: Optional[str]
    trimmed: bool


# ─────────────────────────────────────────────────────────────────────────────
# Phase 1: Expansion
# ─────────────────────────────────────────────────────────────────────────────

def expand_main_articles(
    articles: List[ArticleCandidate],
    total_pages: int,
    *,
    short_features: FeatureMatcher = DEFAULT_TAXONOMY.short_features,
) -> List[ArticleCandidate]:
    """
    Extend each main article's first range up to the next main article.

    Args:
        articles: Article list (main articles are mutated)
        total_pages: Document page count
        short_features: Matcher for short recurring features

    Returns:
        Main articles in start-page order (the anchors used by Phase 2)

    Example:
        >>> a = ArticleCandidate("A", pages=[PageRange(3, 5)])
        >>> b = ArticleCandidate("B", pages=[PageRange(9, 12)])
        >>> _ = expand_main_articles([a, b], total_pages=12)
        >>> a.pages, b.pages
        ([PageRange(3-8)], [PageRange(9-12)])
    """
    reserved: Dict[int, str] = {}
    for article in articles:
        for page in article.solution_page_set():
            reserved.setdefault(page, article.title)
    if reserved:
        logger.debug(f"[expand] Reserved solution pages: {sorted(reserved)}")

    mains = []
    for article in articles:
        if short_features.matches(article.title):
            continue
        if not article.pages:
            logger.debug(f"[expand] \"{article.title}\" has no pages; not an expansion anchor")
            continue
        mains.append(article)
    mains.sort(key=lambda a: a.pages[0].start)

    for mi, article in enumerate(mains):
        start = article.pages[0].start
        toc_end = article.pages[0].end
        next_start = mains[mi + 1].pages[0].start if mi + 1 < len(mains) else total_pages + 1
        expanded_end = min(next_start - 1, total_pages)

        own_solutions = article.solution_page_set()

        def is_reserved(page: int) -> bool:
            return page in reserved and page not in own_solutions

        while expanded_end > toc_end and is_reserved(expanded_end):
            expanded_end -= 1
        if expanded_end <= toc_end:
            continue

        first_ranges = _runs_skipping(start, expanded_end, is_reserved)
        later_ranges = [r for r in article.pages[1:] if r.start > expanded_end]
        before = format_ranges(article.pages)
        article.pages = normalize_ranges(first_ranges + later_ranges)
        logger.info(f"[expand] \"{article.title}\": {before} -> {format_ranges(article.pages)}")

    return mains


def _runs_skipping(start: int, end: int, is_reserved) -> List[PageRange]:
    """Maximal runs in [start, end] that avoid reserved pages."""
    ranges: List[PageRange] = []
    run_start: Optional[int] = None
    for page in range(start, end + 1):
        if is_reserved(page):
            if run_start is not None:
                ranges.append(PageRange(run_start, page - 1))
                run_start = None
        elif run_start is None:
            run_start = page
    if run_start is not None:
        ranges.append(PageRange(run_start, end))
    return ranges


# ─────────────────────────────────────────────────────────────────────────────
# Phase 2: Trim
# ─────────────────────────────────────────────────────────────────────────────

def trim_interleaved_features(
    articles: List[ArticleCandidate],
    mains: List[ArticleCandidate],
    *,
    short_features: FeatureMatcher = DEFAULT_TAXONOMY.short_features,
    collector: Optional[WarningCollector] = None,
) -> List[TrimDecision]:
    """
    Trim short features whose content sits inside one main article.

    Args:
        articles: Full article list (short features are mutated)
        mains: Expanded main articles from expand_main_articles()
        short_features: Matcher for short recurring features
        collector: Optional warning collector

    Returns:
        One TrimDecision per short feature examined
    """
    main_pages: List[tuple[ArticleCandidate, Set[int]]] = [(m, m.page_set()) for m in mains]
    decisions: List[TrimDecision] = []

    for article in articles:
        if not short_features.matches(article.title):
            continue

        solution_pages = article.solution_page_set()
        content_pages = sorted(article.page_set() - solution_pages)
        if not content_pages:
            continue

        containers = [m for m, pages in main_pages if m is not article and all(p in pages for p in content_pages)]
        if len(containers) > 1:
            if len(content_pages) > 1 and collector is not None:
                collector.add_ambiguous_container(
                    article.title, [c.title for c in containers], content_pages,
                )
            decisions.append(TrimDecision(article.title, None, False))
            continue

        container = containers[0] if containers else None
        if container is None or len(content_pages) <= 1:
            decisions.append(TrimDecision(article.title, container.title if container else None, False))
            continue

        first = content_pages[0]
        before = format_ranges(article.pages)
        article.pages = normalize_ranges([PageRange(first, first), *article.solution_pages])
        logger.info(
            f"[expand] \"{article.title}\": [{before}] -> [{format_ranges(article.pages)}] "
            f"(interleaved within \"{container.title}\")"
        )
        decisions.append(TrimDecision(article.title, container.title, True))

    return decisions


def expand_and_trim(
    articles: List[ArticleCandidate],
    total_pages: int,
    *,
    short_features: FeatureMatcher = DEFAULT_TAXONOMY.short_features,
    collector: Optional[WarningCollector] = None,
) -> List[TrimDecision]:
    """Run expansion then trimming. Returns the trim decisions."""
    mains = expand_main_articles(articles, total_pages, short_features=short_features)
    return trim_interleaved_features(
        articles, mains, short_features=short_features, collector=collector,
    )
