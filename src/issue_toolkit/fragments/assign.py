"""
Module: fragments.assign

Purpose:
    Maps page-tagged fragments from a whole-issue extraction onto the
    reconciled articles that claim each page. A page claimed by one
    article goes to it outright; a page claimed by several goes to a
    single winner chosen by resolve_shared_page(). Fragments on pages no
    article claims are discarded and counted.

Key Functions:
    - assign_fragments_to_articles(): Group fragments by owning article
    - resolve_shared_page(): Pick the owner of a shared page

Key Classes:
    - FragmentAssignment: Per-article fragments plus counts

Used By:
    - scripts/reconcile_toc.py (--page-fragments)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from issue_toolkit.core.models.articles import ArticleCandidate
from issue_toolkit.core.models.fragments import AnyFragment

logger = logging.getLogger(__name__)

# (1-indexed page number, fragment)
PageFragment = Tuple[int, AnyFragment]


@dataclass
class FragmentAssignment:
    """
    Fragments grouped by owning article.

    Attributes:
        articles: title -> fragments, in article order; fragments sorted
            by page, keeping extraction order within a page
        discarded: Fragments on pages no article claims
        shared_pages: Number of pages with more than one claimant
    """
    articles: Dict[str, List[AnyFragment]] = field(default_factory=dict)
    discarded: int = 0
    shared_pages: int = 0


def resolve_shared_page(page: int, claimants: Sequence[ArticleCandidate]) -> ArticleCandidate:
    """
    Choose which of several claiming articles owns a page.

    A single non-interleaved claimant wins. Otherwise, among the
    non-interleaved claimants (or all of them when every claimant is
    interleaved), the article whose first page is closest at or before
    `page` wins; equal starts go to the later article.
    """
    non_interleaved = [a for a in claimants if not a.interleaved]
    if len(non_interleaved) == 1:
        return non_interleaved[0]

    candidates = non_interleaved or list(claimants)
    best = candidates[0]
    best_start = 0
    for article in candidates:
        start = article.first_page or 0
        if best_start <= start <= page:
            best, best_start = article, start
    return best


def assign_fragments_to_articles(
    page_fragments: Sequence[PageFragment],
    articles: Sequence[ArticleCandidate],
) -> FragmentAssignment:
    """
    Assign page-tagged fragments to the articles whose pages contain them.

    Args:
        page_fragments: (page, fragment) pairs in extraction order
        articles: Reconciled articles

    Returns:
        FragmentAssignment with an entry (possibly empty) for every title

    Example:
        >>> result = assign_fragments_to_articles([(3, f1), (4, f2)], articles)
        >>> result.articles["Bidding Match"]
        [f1, f2]
    """
    claimants_by_page: Dict[int, List[ArticleCandidate]] = {}
    for article in articles:
        for page in sorted(article.page_set()):
            claimants_by_page.setdefault(page, []).append(article)

    by_page: Dict[int, List[AnyFragment]] = {}
    for page, fragment in page_fragments:
        by_page.setdefault(page, []).append(fragment)

    owned: Dict[str, List[PageFragment]] = {a.title: [] for a in articles}
    result = FragmentAssignment()

    for page, fragments in by_page.items():
        claimants = claimants_by_page.get(page)
        if not claimants:
            logger.debug(f"[assign] Page {page}: unclaimed ({len(fragments)} fragments discarded)")
            result.discarded += len(fragments)
            continue

        if len(claimants) == 1:
            owner = claimants[0]
        else:
            result.shared_pages += 1
            owner = resolve_shared_page(page, claimants)
            logger.debug(f"[assign] Page {page}: shared by {len(claimants)} -> '{owner.title}'")
        owned[owner.title].extend((page, f) for f in fragments)

    for title, items in owned.items():
        items.sort(key=lambda item: item[0])
        result.articles[title] = [f for _, f in items]

    if result.discarded:
        logger.info(f"[assign] {result.discarded} fragment(s) discarded from unclaimed pages")
    if result.shared_pages:
        logger.info(f"[assign] {result.shared_pages} shared page(s) resolved")
    return result
