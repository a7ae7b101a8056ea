"""
Module: toc.preview_filter

Purpose:
    Removes next-issue preview articles ("May Problems" in an April
    issue, "West Hands for ...") and clips their pages out of every
    remaining article, so later phases never expand into preview pages.

Key Functions:
    - is_preview_title(): Decide whether a title is preview content
    - filter_preview_articles(): Remove previews and clip the rest

Used By:
    - toc.pipeline (after the merger)
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Set

from issue_toolkit.common.months import mentions_month, next_month
from issue_toolkit.core.models.articles import ArticleCandidate
from issue_toolkit.core.models.pages import clip_ranges, format_ranges, pages_of
from .diagnostics import WarningCollector

logger = logging.getLogger(__name__)

HANDS_FOR_PATTERN = re.compile(r"\b(?:west|east)\s+hands?\s+for\s", re.IGNORECASE)
PROBLEMS_FOR_PATTERN = re.compile(r"\bproblems?\s+for\s", re.IGNORECASE)


def is_preview_title(title: str, issue_month: int) -> bool:
    """
    Check whether a title names next-issue preview content.

    A title is preview content when it mentions next month, a
    "West/East Hands for ..." set, or "Problems for ...", and does not
    also mention the current month.

    Example:
        >>> is_preview_title("May Problems", 4)
        True
        >>> is_preview_title("April Problems and May Results", 4)
        False
    """
    title = title or ""
    if mentions_month(title, issue_month):
        return False
    return (
        mentions_month(title, next_month(issue_month))
        or HANDS_FOR_PATTERN.search(title) is not None
        or PROBLEMS_FOR_PATTERN.search(title) is not None
    )


def filter_preview_articles(
    articles: List[ArticleCandidate],
    issue_month: int,
    collector: Optional[WarningCollector] = None,
) -> List[ArticleCandidate]:
    """
    Remove preview articles and clip their pages from the rest.

    Args:
        articles: Article list (kept articles are mutated)
        issue_month: Current issue month, 1-12
        collector: Optional warning collector

    Returns:
        Article list without preview entries

    Example:
        >>> kept = filter_preview_articles([
        ...     ArticleCandidate("May Problems", pages=[PageRange(40, 40)]),
        ...     ArticleCandidate("Bidding Match", pages=[PageRange(38, 42)]),
        ... ], issue_month=4)
        >>> kept[0].pages
        [PageRange(38-39), PageRange(41-42)]
    """
    excluded: Set[int] = set()
    kept: List[ArticleCandidate] = []

    for article in articles:
        if is_preview_title(article.title, issue_month):
            logger.info(f"[filter] Removed next-issue preview: \"{article.title}\" ({format_ranges(article.pages)})")
            excluded |= pages_of(article.pages)
        else:
            kept.append(article)

    if not excluded:
        return kept

    for article in kept:
        before = list(article.pages)
        article.pages = clip_ranges(article.pages, excluded)
        article.solution_pages = clip_ranges(article.solution_pages, excluded)
        if article.pages == before:
            continue
        logger.info(
            f"[filter] Clipped \"{article.title}\": {format_ranges(before)} -> "
            f"{format_ranges(article.pages) or '(none)'}"
        )
        if not article.pages and collector is not None:
            collector.add_clipped_away(article.title, pages_of(before))

    return kept
