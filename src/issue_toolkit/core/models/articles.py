"""
Module: articles

Purpose:
    Provides the ArticleCandidate and IssueMeta models. An
    ArticleCandidate is one table-of-contents entry with its page
    coverage; IssueMeta is the read-only issue context threaded through
    every phase.

Key Classes:
    - IssueMeta: Issue month/year/volume/number/title (immutable)
    - ArticleCandidate: One TOC article (mutable, reconciled in place)

Dependencies:
    - core.models.pages: PageRange and range algebra
    - core.models.warnings: ReconcileWarning

Used By:
    - toc.* (every reconciliation phase)
    - core.utils.serialization

Design Deviation:
    Unlike the other core models, ArticleCandidate is NOT frozen. It is
    created once from the TOC extraction and then corrected in place by
    each phase; it is never re-created mid-pipeline. `parent_title` is a
    lookup key, not a reference to another ArticleCandidate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Set

from .pages import PageRange, normalize_ranges, pages_of
from .warnings import ReconcileWarning

MONTH_COUNT = 12


@dataclass(frozen=True)
class IssueMeta:
    """
    Issue context (read-only).

    Attributes:
        month: Issue month, 1-12
        year: Issue year
        volume: Optional volume number
        number: Optional issue number within the volume
        title: Display title, e.g. "April 2025"

    Example:
        >>> IssueMeta(month=12, year=2024).next_month
        1
    """

    month: int
    year: int
    volume: Optional[int] = None
    number: Optional[int] = None
    title: str = ""

    def __post_init__(self) -> None:
        if not 1 <= self.month <= MONTH_COUNT:
            raise ValueError(f"month must be 1-12: {self.month}")

    @property
    def next_month(self) -> int:
        """Month number of the following issue (December rolls to January)."""
        return 1 if self.month == MONTH_COUNT else self.month + 1


@dataclass
class ArticleCandidate:
    """
    One table-of-contents article under reconciliation.

    Attributes:
        title: Article title; identity key within one issue
        author_name: Author as printed
        category: Category from an open taxonomy
        tags: Free-form tags
        excerpt: Short teaser text
        pages: Page coverage, sorted by start
        solution_pages: Subset of `pages` holding solutions
        interleaved: True if embedded mid-page inside another article
        parent_title: Title of the enclosing article (weak reference)
        source_page: Printed TOC page number, informational only
        warnings: Warnings from the most recent reconciliation run

    Invariants (after reconciliation):
        - every range has start <= end (enforced by PageRange)
        - solution_pages ⊆ pages
        - parent_title is None unless interleaved
    """

    title: str
    author_name: str = ""
    category: str = ""
    tags: List[str] = field(default_factory=list)
    excerpt: str = ""
    pages: List[PageRange] = field(default_factory=list)
    solution_pages: List[PageRange] = field(default_factory=list)
    interleaved: bool = False
    parent_title: Optional[str] = None
    source_page: Optional[int] = None
    warnings: List[ReconcileWarning] = field(default_factory=list)

    # ─────────────────────────────────────────────────────────────────────────
    # Page Views
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def title_key(self) -> str:
        """Lowercase title used for lookups."""
        return self.title.strip().lower()

    @property
    def first_page(self) -> Optional[int]:
        """Start page of the first range, or None if the article has no pages."""
        return self.pages[0].start if self.pages else None

    def page_set(self) -> Set[int]:
        return pages_of(self.pages)

    def solution_page_set(self) -> Set[int]:
        return pages_of(self.solution_pages)

    def content_page_set(self) -> Set[int]:
        """Pages that are not solution pages."""
        return self.page_set() - self.solution_page_set()

    # ─────────────────────────────────────────────────────────────────────────
    # Mutation Helpers
    # ─────────────────────────────────────────────────────────────────────────

    def add_solution_ranges(self, ranges: List[PageRange]) -> None:
        """Append ranges to both pages and solution_pages, keeping both sorted."""
        self.pages = normalize_ranges([*self.pages, *ranges])
        self.solution_pages = normalize_ranges([*self.solution_pages, *ranges])

    def clear_interleave(self) -> None:
        self.interleaved = False
        self.parent_title = None

    def mark_interleaved(self, parent_title: str) -> None:
        self.interleaved = True
        self.parent_title = parent_title
