"""
Module: toc.normalize

Purpose:
    Entry normalization for raw TOC articles. Clamps every page range
    into the document, sorts range sets and keeps solution pages inside
    the article's own pages. Runs before the merger so every later
    phase can rely on valid, sorted ranges.

Key Functions:
    - normalize_articles(): Normalize a whole article list in place

Used By:
    - toc.pipeline
"""

from __future__ import annotations

import logging
from typing import List, Optional

from issue_toolkit.core.models.articles import ArticleCandidate
from issue_toolkit.core.models.pages import (
    PageRange,
    clamp_range,
    clip_ranges,
    format_ranges,
    normalize_ranges,
)
from .diagnostics import WarningCollector

logger = logging.getLogger(__name__)


def normalize_articles(
    articles: List[ArticleCandidate],
    total_pages: int,
    collector: Optional[WarningCollector] = None,
) -> None:
    """
    Normalize page ranges of every article in place.

    Rules:
    1. An article with no pages claims the whole document [1, total]
    2. Each range is clamped into [1, total] with end >= start
    3. Range sets are sorted by start
    4. Solution pages outside the article's pages are dropped

    Every correction is logged and recorded as a malformed-input
    warning; nothing raises.

    Args:
        articles: Articles to normalize (mutated)
        total_pages: Document page count
        collector: Optional warning collector

    Raises:
        ValueError: If total_pages < 1 (caller error, not data error)
    """
    if total_pages < 1:
        raise ValueError(f"total_pages must be >= 1: {total_pages}")

    for article in articles:
        if not article.pages:
            whole = [PageRange(1, total_pages)]
            _record(collector, article.title, "[]", format_ranges(whole))
            article.pages = whole
        else:
            article.pages = _clamp_all(article, article.pages, total_pages, collector)

        if article.solution_pages:
            solution_pages = _clamp_all(article, article.solution_pages, total_pages, collector)
            outside = {p for r in solution_pages for p in r.pages()} - article.page_set()
            if outside:
                clipped = clip_ranges(solution_pages, outside)
                _record(collector, article.title, format_ranges(solution_pages), format_ranges(clipped))
                solution_pages = clipped
            article.solution_pages = normalize_ranges(solution_pages)

        if article.parent_title and not article.interleaved:
            logger.debug(f"[normalize] \"{article.title}\": dropping parent without interleave flag")
            article.parent_title = None


def _clamp_all(
    article: ArticleCandidate,
    ranges: List[PageRange],
    total_pages: int,
    collector: Optional[WarningCollector],
) -> List[PageRange]:
    result = []
    for r in ranges:
        clamped, changed = clamp_range(r.start, r.end, total_pages)
        if changed:
            _record(collector, article.title, format_ranges([r]), format_ranges([clamped]))
        result.append(clamped)
    return normalize_ranges(result)


def _record(collector: Optional[WarningCollector], title: str, raw: str, corrected: str) -> None:
    if collector is not None:
        collector.add_malformed_range(title, raw, corrected)
    else:
        logger.warning(f"[normalize] \"{title}\": page range {raw} corrected to {corrected}")
