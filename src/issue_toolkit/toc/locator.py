"""
Module: toc.locator

Purpose:
    Finds the solution page for problem articles that still have none
    after the merge. Scans each of the article's own pages for a
    printed reference ("Solution on page 73"), then falls back to one
    call to an external reader with the article's first page image. A
    located page is released from any other article whose expanded
    range had absorbed it.

Key Functions:
    - locate_solution_pages(): Run the locator over an article list
    - find_solution_reference(): Scan one page's text for a reference

Key Protocols:
    - PageSource: page_text(n) / page_image(n), 1-indexed
    - SolutionPageReader: (image, title) -> page number or None

Used By:
    - toc.pipeline (last phase)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Container, List, Optional, Protocol

from PIL import Image

from issue_toolkit.common.features import DEFAULT_TAXONOMY, FeatureMatcher
from issue_toolkit.core.models.articles import ArticleCandidate
from issue_toolkit.core.models.pages import PageRange, clip_ranges, format_ranges
from .diagnostics import WarningCollector

logger = logging.getLogger(__name__)

# Ordered: the first pattern that yields an acceptable page wins.
SOLUTION_REFERENCE_PATTERNS = (
    re.compile(r"\bsolutions?\s+(?:on\s+)?page\s+(\d+)", re.IGNORECASE),
    re.compile(r"\banswers?\s+(?:on\s+)?page\s+(\d+)", re.IGNORECASE),
    re.compile(r"\(solution\s+(?:on\s+)?page\s+(\d+)\s*\.?\)", re.IGNORECASE),
    re.compile(r"\bsee\s+(?:solutions?\s+(?:on\s+)?)?page\s+(\d+)", re.IGNORECASE),
    re.compile(r"\bpage\s+(\d+)\s+for\s+(?:the\s+)?solutions?", re.IGNORECASE),
)

METHOD_TEXT = "text"
METHOD_READER = "reader"


class PageSource(Protocol):
    """Read access to a document's pages (1-indexed). Missing pages return None."""

    def page_text(self, page: int) -> Optional[str]: ...

    def page_image(self, page: int) -> Optional[Image.Image]: ...


# (page image, article title) -> solution page number, or None
SolutionPageReader = Callable[[Image.Image, str], Optional[int]]


@dataclass(frozen=True)
class LocatorOutcome:
    """
    Locator result for one problem article.

    Attributes:
        title: Article title
        page: Solution page added, None if not found
        method: "text", "reader" or None
    """
    title: str
    page: Optional[int]
    method: Optional[str]

    @property
    def found(self) -> bool:
        return self.page is not None


def find_solution_reference(text: str, total_pages: int, exclude: Container[int] = ()) -> Optional[int]:
    """
    Scan text for a printed solution-page reference.

    Args:
        text: Page text
        total_pages: Document page count (references beyond it are ignored)
        exclude: Pages that cannot be the answer (the article's own pages)

    Returns:
        Referenced page number, or None

    Example:
        >>> find_solution_reference("(Solution on page 73.)", 80)
        73
        >>> find_solution_reference("Solutions on page 9", 80, exclude={9}) is None
        True
    """
    if not text:
        return None
    for pattern in SOLUTION_REFERENCE_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue
        page = int(match.group(1))
        if 1 <= page <= total_pages and page not in exclude:
            return page
    return None


def locate_solution_pages(
    articles: List[ArticleCandidate],
    total_pages: int,
    page_source: Optional[PageSource],
    *,
    reader: Optional[SolutionPageReader] = None,
    problem_features: FeatureMatcher = DEFAULT_TAXONOMY.problem_features,
    collector: Optional[WarningCollector] = None,
) -> List[LocatorOutcome]:
    """
    Add a solution page to problem articles that have none.

    Args:
        articles: Reconciled article list (problem articles are mutated)
        total_pages: Document page count
        page_source: Page text/image access; None skips the phase
        reader: Optional external reader for the image fallback
        problem_features: Matcher for problem-article titles
        collector: Optional warning collector

    Returns:
        One LocatorOutcome per problem article examined
    """
    if page_source is None:
        logger.debug("[solution-fix] No page source; skipping solution-page discovery")
        return []

    outcomes: List[LocatorOutcome] = []
    for article in articles:
        if not problem_features.matches(article.title) or article.solution_pages or not article.pages:
            continue

        own_pages = sorted(article.page_set())
        logger.info(
            f"[solution-fix] \"{article.title}\" has no solution pages; scanning {len(own_pages)} page(s)"
        )

        page, method = _scan_text(page_source, own_pages, total_pages)
        if page is None and reader is not None:
            page, method = _ask_reader(page_source, reader, article, own_pages, total_pages), METHOD_READER

        if page is None:
            if collector is not None:
                collector.add_missing_solution_page(article.title, own_pages)
            else:
                logger.warning(f"[solution-fix] No solution page found for \"{article.title}\"")
            outcomes.append(LocatorOutcome(article.title, None, None))
            continue

        article.add_solution_ranges([PageRange(page, page)])
        logger.info(f"[solution-fix] Added solution page {page} to \"{article.title}\" ({method})")
        _release_page(articles, article, page)
        outcomes.append(LocatorOutcome(article.title, page, method))

    return outcomes


def _scan_text(
    page_source: PageSource,
    own_pages: List[int],
    total_pages: int,
) -> tuple[Optional[int], Optional[str]]:
    exclude = set(own_pages)
    for page in own_pages:
        text = page_source.page_text(page)
        found = find_solution_reference(text or "", total_pages, exclude)
        if found is not None:
            logger.debug(f"[solution-fix] Found reference to page {found} in text of page {page}")
            return found, METHOD_TEXT
    return None, None


def _ask_reader(
    page_source: PageSource,
    reader: SolutionPageReader,
    article: ArticleCandidate,
    own_pages: List[int],
    total_pages: int,
) -> Optional[int]:
    image = page_source.page_image(own_pages[0])
    if image is None:
        logger.debug(f"[solution-fix] No image for page {own_pages[0]}; reader skipped")
        return None

    try:
        page = reader(image, article.title)
    except Exception as e:
        logger.error(f"[solution-fix] Reader failed for \"{article.title}\": {e}")
        return None

    if page is None:
        return None
    if not isinstance(page, int) or not 1 <= page <= total_pages or page in own_pages:
        logger.info(f"[solution-fix] Reader returned unusable page {page!r} for \"{article.title}\"")
        return None
    return page


def _release_page(articles: List[ArticleCandidate], owner: ArticleCandidate, page: int) -> None:
    """
    Clip a newly located solution page out of every other article.

    Expansion treats solution pages as reserved, so the page is removed
    from ranges an earlier expansion let other articles absorb. Articles
    that also own it as a solution page, or that would be left with no
    pages, are not touched.
    """
    for other in articles:
        if other is owner or page not in other.page_set() or page in other.solution_page_set():
            continue
        clipped = clip_ranges(other.pages, {page})
        if not clipped:
            continue
        before = format_ranges(other.pages)
        other.pages = clipped
        logger.info(
            f"[solution-fix] Released page {page} from \"{other.title}\": "
            f"{before} -> {format_ranges(clipped)}"
        )
