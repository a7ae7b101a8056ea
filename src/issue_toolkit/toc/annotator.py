"""
Module: toc.annotator

Purpose:
    Marks short recurring features as interleaved inside a longer
    article and records the enclosing article's title as a weak
    reference (parent_title).

Key Functions:
    - annotate_interleaved(): Annotate every interleavable feature
    - find_parent(): Resolve a parent_title back to its article

Used By:
    - toc.pipeline (after expansion and title cleanup)

Algorithm:
    Candidates are re-annotated from scratch on every run. Overlap and
    size are measured on content pages (pages minus solution pages) so
    solution pages added by the locator never change the outcome of a
    later run.

    1. Parent search: articles that are not interleavable themselves,
       have strictly more pages than the candidate and share at least
       one page with it. Ties follow ReconcileConfig.parent_tie_break.
    2. Fallback: the largest article overall, when it is not
       interleavable and a candidate page falls inside its page span.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Set

from issue_toolkit.common.features import DEFAULT_TAXONOMY, FeatureMatcher
from issue_toolkit.common.thresholds import RECONCILE_THRESHOLDS
from issue_toolkit.core.models.articles import ArticleCandidate
from .config import ParentTieBreak
from .diagnostics import WarningCollector

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnnotationDecision:
    """
    Annotator outcome for one candidate.

    Attributes:
        title: Candidate title
        parent_title: Enclosing article, None if standalone
        method: "overlap", "span" or None
        overlap: Shared content pages with the parent (0 for span)
    """
    title: str
    parent_title: Optional[str]
    method: Optional[str]
    overlap: int = 0


def annotate_interleaved(
    articles: List[ArticleCandidate],
    *,
    interleavable: FeatureMatcher = DEFAULT_TAXONOMY.interleavable,
    tie_break: ParentTieBreak = ParentTieBreak.FIRST_FOUND,
    max_feature_pages: int = RECONCILE_THRESHOLDS.max_short_feature_pages,
    collector: Optional[WarningCollector] = None,
) -> List[AnnotationDecision]:
    """
    Annotate interleavable features with their enclosing article.

    Args:
        articles: Reconciled article list (candidates are mutated)
        interleavable: Matcher for interleavable feature titles
        tie_break: Policy when several articles qualify as parent
        max_feature_pages: Content-page count above which a warning is raised
        collector: Optional warning collector

    Returns:
        One AnnotationDecision per candidate
    """
    content = [a.content_page_set() for a in articles]
    largest = _largest_index(content)
    decisions: List[AnnotationDecision] = []

    for i, article in enumerate(articles):
        if not interleavable.matches(article.title):
            continue
        article.clear_interleave()

        pages = content[i]
        if len(pages) > max_feature_pages:
            logger.info(
                f"[interleave] \"{article.title}\" has {len(pages)} problem pages, "
                f"expected <= {max_feature_pages}"
            )
            if collector is not None:
                collector.add_oversized_feature(article.title, sorted(pages), max_feature_pages)

        parent_idx, overlap = _find_overlapping_parent(articles, content, i, interleavable, tie_break)
        if parent_idx is not None:
            parent = articles[parent_idx]
            article.mark_interleaved(parent.title)
            logger.info(
                f"[interleave] \"{article.title}\" is interleaved within \"{parent.title}\" "
                f"({overlap} shared pages)"
            )
            decisions.append(AnnotationDecision(article.title, parent.title, "overlap", overlap))
            continue

        if largest is not None and largest != i and _within_span(pages, content[largest]):
            parent = articles[largest]
            if not interleavable.matches(parent.title):
                article.mark_interleaved(parent.title)
                logger.info(
                    f"[interleave] \"{article.title}\" is within span of \"{parent.title}\" "
                    f"(pages {min(content[largest])}-{max(content[largest])})"
                )
                if collector is not None:
                    collector.add_fallback_parent(article.title, parent.title, sorted(pages))
                decisions.append(AnnotationDecision(article.title, parent.title, "span"))
                continue

        logger.debug(f"[interleave] \"{article.title}\" is standalone")
        decisions.append(AnnotationDecision(article.title, None, None))

    return decisions


def find_parent(
    articles: List[ArticleCandidate],
    article: ArticleCandidate,
) -> Optional[ArticleCandidate]:
    """
    Resolve an article's parent_title within the same issue.

    Returns:
        The parent article, or None if the article is not interleaved or
        the parent no longer exists (both are valid outcomes)
    """
    if not article.interleaved or not article.parent_title:
        return None
    for other in articles:
        if other is not article and other.title == article.parent_title:
            return other
    return None


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────

def _largest_index(content: List[Set[int]]) -> Optional[int]:
    """Index of the article with the most content pages (first on ties)."""
    best: Optional[int] = None
    for i, pages in enumerate(content):
        if pages and (best is None or len(pages) > len(content[best])):
            best = i
    return best


def _find_overlapping_parent(
    articles: List[ArticleCandidate],
    content: List[Set[int]],
    index: int,
    interleavable: FeatureMatcher,
    tie_break: ParentTieBreak,
) -> tuple[Optional[int], int]:
    pages = content[index]
    best: Optional[int] = None
    best_overlap = 0

    for j, other in enumerate(articles):
        if j == index or interleavable.matches(other.title):
            continue
        overlap = len(pages & content[j])
        if overlap == 0 or len(content[j]) <= len(pages):
            continue
        if tie_break is ParentTieBreak.FIRST_FOUND:
            return j, overlap
        if overlap > best_overlap:
            best, best_overlap = j, overlap

    return best, best_overlap


def _within_span(pages: Set[int], parent_pages: Set[int]) -> bool:
    if not pages or not parent_pages:
        return False
    low, high = min(parent_pages), max(parent_pages)
    return any(low <= p <= high for p in pages)
