"""
Module: pages

Purpose:
    Provides the PageRange dataclass and the page-range algebra used by
    every reconciliation phase. A "range set" is a plain list of
    PageRange sorted by start page; ranges are inclusive and 1-indexed.

Key Functions:
    - normalize_ranges(): Sort a range set (never merges touching ranges)
    - pages_of(): Expand a range set into its individual pages
    - clip_ranges(): Remove excluded pages, splitting ranges as needed
    - contains_all(): Check a range set covers every given page
    - ranges_from_pages(): Compress a page set into maximal runs
    - clamp_range(): Correct raw bounds into [1, total_pages]
    - format_ranges(): Compact "3-8, 72" form for log lines

Dependencies:
    - dataclasses (std)

Used By:
    - core.models.articles.ArticleCandidate
    - toc.* (every reconciliation phase)
    - core.utils.serialization

Design Note:
    Touching ranges such as [3, 5] and [6, 8] are deliberately kept
    separate. Range count is read as a structural signal elsewhere
    (a trailing range is usually a separately located solution page).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence, Set, Tuple


@dataclass(frozen=True, slots=True, order=True)
class PageRange:
    """
    Inclusive page interval.

    Attributes:
        start: First page (1-indexed, inclusive)
        end: Last page (inclusive)

    Invariants:
        - start >= 1
        - end >= start

    Example:
        >>> r = PageRange(3, 8)
        >>> len(r)
        6
        >>> 5 in r
        True
    """

    start: int
    end: int

    def __post_init__(self) -> None:
        """Validate range on construction."""
        if self.start < 1:
            raise ValueError(f"start must be >= 1: {self.start}")
        if self.end < self.start:
            raise ValueError(f"end must be >= start: {self.end} < {self.start}")

    def __len__(self) -> int:
        return self.end - self.start + 1

    def __contains__(self, page: object) -> bool:
        return isinstance(page, int) and self.start <= page <= self.end

    def pages(self) -> range:
        """Iterate the pages covered by this range."""
        return range(self.start, self.end + 1)

    def to_list(self) -> List[int]:
        """Serialize to the [start, end] wire shape."""
        return [self.start, self.end]

    @classmethod
    def from_list(cls, data: Sequence[int]) -> PageRange:
        """Deserialize from a [start, end] pair."""
        return cls(int(data[0]), int(data[1]))

    @classmethod
    def single(cls, page: int) -> PageRange:
        """Range covering exactly one page."""
        return cls(page, page)

    def __repr__(self) -> str:
        if self.start == self.end:
            return f"PageRange({self.start})"
        return f"PageRange({self.start}-{self.end})"


# ─────────────────────────────────────────────────────────────────────────────
# Range Set Algebra
# ─────────────────────────────────────────────────────────────────────────────

def normalize_ranges(ranges: Iterable[PageRange]) -> List[PageRange]:
    """
    Sort a range set ascending by start page.

    Touching or overlapping ranges are NOT merged.

    Args:
        ranges: Ranges in any order

    Returns:
        New list sorted by (start, end)
    """
    return sorted(ranges, key=lambda r: (r.start, r.end))


def pages_of(ranges: Iterable[PageRange]) -> Set[int]:
    """
    Expand a range set into the set of individual covered pages.

    Example:
        >>> sorted(pages_of([PageRange(3, 5), PageRange(9, 9)]))
        [3, 4, 5, 9]
    """
    pages: Set[int] = set()
    for r in ranges:
        pages.update(r.pages())
    return pages


def page_count(ranges: Iterable[PageRange]) -> int:
    """Number of distinct pages covered by a range set."""
    return len(pages_of(ranges))


def clip_ranges(ranges: Iterable[PageRange], excluded: Set[int]) -> List[PageRange]:
    """
    Remove excluded pages from a range set.

    Walks each range page by page and emits one sub-range for every
    maximal run of non-excluded pages. A range that is entirely
    excluded disappears; a range with an excluded page in the middle
    splits in two.

    Args:
        ranges: Range set to clip
        excluded: Pages to remove

    Returns:
        New range set (input order preserved)

    Example:
        >>> clip_ranges([PageRange(38, 42)], {40})
        [PageRange(38-39), PageRange(41-42)]
    """
    result: List[PageRange] = []
    for r in ranges:
        run_start = None
        for page in r.pages():
            if page not in excluded:
                if run_start is None:
                    run_start = page
            elif run_start is not None:
                result.append(PageRange(run_start, page - 1))
                run_start = None
        if run_start is not None:
            result.append(PageRange(run_start, r.end))
    return result


def contains_all(ranges: Iterable[PageRange], pages: Iterable[int]) -> bool:
    """Check that every page in `pages` is covered by the range set."""
    covered = pages_of(ranges)
    return all(p in covered for p in pages)


def ranges_from_pages(pages: Iterable[int]) -> List[PageRange]:
    """
    Compress a set of pages into maximal consecutive runs.

    Example:
        >>> ranges_from_pages({7, 8, 9, 72})
        [PageRange(7-9), PageRange(72)]
    """
    result: List[PageRange] = []
    run_start = run_end = None
    for page in sorted(set(pages)):
        if run_end is not None and page == run_end + 1:
            run_end = page
            continue
        if run_start is not None:
            result.append(PageRange(run_start, run_end))
        run_start = run_end = page
    if run_start is not None:
        result.append(PageRange(run_start, run_end))
    return result


def clamp_range(start: int, end: int, total_pages: int) -> Tuple[PageRange, bool]:
    """
    Clamp raw bounds into the document and repair inverted ranges.

    Start is clamped into [1, total_pages]; end is clamped into
    [start, total_pages].

    Args:
        start: Raw start page (may be 0, negative or past the end)
        end: Raw end page
        total_pages: Document page count

    Returns:
        Tuple of (valid PageRange, changed flag)

    Example:
        >>> clamp_range(9, 4, 12)
        (PageRange(9), True)
    """
    clamped_start = max(1, min(start, total_pages))
    clamped_end = max(clamped_start, min(end, total_pages))
    changed = (clamped_start, clamped_end) != (start, end)
    return PageRange(clamped_start, clamped_end), changed


def format_ranges(ranges: Iterable[PageRange]) -> str:
    """
    Human-readable form used in log lines.

    Example:
        >>> format_ranges([PageRange(3, 8), PageRange(72, 72)])
        '3-8, 72'
    """
    parts = []
    for r in ranges:
        parts.append(str(r.start) if r.start == r.end else f"{r.start}-{r.end}")
    return ", ".join(parts)
