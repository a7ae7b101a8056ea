"""
Core Models Package

Data models shared by the TOC reconciliation phases and the fragment
interleaver.

| Model | Mutable | Notes |
|-------|---------|-------|
| `PageRange` | no | inclusive, 1-indexed, validated |
| `IssueMeta` | no | month 1-12 validated |
| `ArticleCandidate` | yes | corrected in place by each phase |
| `Fragment` / `SolutionGroup` | no | one nesting level only |
| `ReconcileWarning` | no | structured, non-fatal |
"""

from .pages import (
    PageRange,
    clamp_range,
    clip_ranges,
    contains_all,
    format_ranges,
    normalize_ranges,
    page_count,
    pages_of,
    ranges_from_pages,
)
from .articles import ArticleCandidate, IssueMeta
from .fragments import AnyFragment, Fragment, FragmentKind, SolutionGroup
from .warnings import ReconcileWarning, WarningKind

__all__ = [
    "PageRange",
    "clamp_range",
    "clip_ranges",
    "contains_all",
    "format_ranges",
    "normalize_ranges",
    "page_count",
    "pages_of",
    "ranges_from_pages",
    "ArticleCandidate",
    "IssueMeta",
    "AnyFragment",
    "Fragment",
    "FragmentKind",
    "SolutionGroup",
    "ReconcileWarning",
    "WarningKind",
]
