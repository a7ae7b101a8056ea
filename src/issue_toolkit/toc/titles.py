"""
Module: toc.titles

Purpose:
    Optional title cleanup passes. Strips a trailing "conducted by ..."
    credit from titles and merges near-duplicate TOC entries that the
    extraction produced twice.

Key Functions:
    - strip_author_from_title(): Split a credit off one title
    - strip_author_titles(): Apply it to an article list
    - deduplicate_articles(): Merge near-duplicate entries

Used By:
    - toc.pipeline (between expansion and annotation, when enabled)
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Tuple

from issue_toolkit.core.models.articles import ArticleCandidate
from issue_toolkit.core.models.pages import normalize_ranges, page_count

logger = logging.getLogger(__name__)

AUTHOR_CREDIT_PATTERN = re.compile(
    r"\s+(?:conducted|edited|moderated|presented)?\s*by\s+"
    r"([A-Z][a-zA-Z.]+(?:\s+[A-Z][a-zA-Z.]+){0,4})\s*$"
)
MIN_TITLE_LENGTH = 3
MAX_WORD_DIFFERENCE = 3


def strip_author_from_title(title: str, known_author: str = "") -> Tuple[str, Optional[str]]:
    """
    Split a trailing author credit off a title.

    Args:
        title: Article title
        known_author: Author already on record; the credit is only
            stripped when it agrees with it

    Returns:
        Tuple of (cleaned title, extracted author or None)

    Example:
        >>> strip_author_from_title("Test Your Play conducted by Jeff Rubens")
        ('Test Your Play', 'Jeff Rubens')
    """
    match = AUTHOR_CREDIT_PATTERN.search(title)
    if not match:
        return title, None

    author = match.group(1).strip()
    cleaned = title[:match.start()].strip()
    if len(cleaned) < MIN_TITLE_LENGTH:
        return title, None

    if known_author:
        known, found = known_author.lower(), author.lower()
        if known not in found and found not in known:
            return title, None
    return cleaned, author


def strip_author_titles(articles: List[ArticleCandidate]) -> int:
    """Strip author credits from every title in place. Returns the count changed."""
    changed = 0
    for article in articles:
        cleaned, author = strip_author_from_title(article.title, article.author_name)
        if author is None:
            continue
        logger.info(f"[titles] \"{article.title}\" -> \"{cleaned}\"")
        article.title = cleaned
        if not article.author_name:
            article.author_name = author
        changed += 1
    return changed


def _normalize_title(title: str) -> str:
    lowered = re.sub(r"[^a-z0-9\s]", "", title.lower())
    return re.sub(r"\s+", " ", lowered).strip()


def _is_near_duplicate(a: ArticleCandidate, b: ArticleCandidate) -> bool:
    if a.category.lower() != b.category.lower():
        return False
    norm_a, norm_b = _normalize_title(a.title), _normalize_title(b.title)
    if norm_a in norm_b or norm_b in norm_a:
        return True
    words_a, words_b = set(norm_a.split()), set(norm_b.split())
    return len(words_a ^ words_b) <= MAX_WORD_DIFFERENCE


def deduplicate_articles(articles: List[ArticleCandidate]) -> List[ArticleCandidate]:
    """
    Merge near-duplicate entries of the same category.

    Two entries are duplicates when one normalized title contains the
    other or they differ by at most three words. The entry with more
    pages is kept and absorbs the other's pages and solution pages.

    Returns:
        Article list without absorbed entries
    """
    removed: set[int] = set()

    for i, a in enumerate(articles):
        if i in removed:
            continue
        for j in range(i + 1, len(articles)):
            if j in removed:
                continue
            b = articles[j]
            if not _is_near_duplicate(a, b):
                continue

            keep, drop, drop_idx = (a, b, j) if page_count(a.pages) >= page_count(b.pages) else (b, a, i)
            keep.pages = normalize_ranges([*keep.pages, *drop.pages])
            keep.solution_pages = normalize_ranges([*keep.solution_pages, *drop.solution_pages])
            removed.add(drop_idx)
            logger.info(f"[dedup] Merged \"{drop.title}\" into \"{keep.title}\"")
            if drop_idx == i:
                break

    if not removed:
        return articles
    logger.info(f"[dedup] Removed {len(removed)} duplicate article(s)")
    return [a for i, a in enumerate(articles) if i not in removed]
