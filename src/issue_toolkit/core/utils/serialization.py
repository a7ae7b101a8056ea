"""
Serialization Utilities

Provides to/from JSON utilities for the TOC and fragment models.

Wire format (TOC):
    {
      "schema_version": 1,
      "total_pages": 80,
      "issue": {"month": 4, "year": 2025, "volume": 97, "number": 4, "title": "April 2025"},
      "articles": [
        {"title": ..., "author_name": ..., "category": ..., "tags": [...],
         "excerpt": ..., "source_page": 9,
         "pdf_pages": [[9, 9], [72, 72]],
         "solution_page_ranges": [[72, 72]],
         "interleaved": true, "parent_article": "..."}
      ]
    }

Legacy page shapes accepted on input: a flat [start, end] pair, a bare
page number, or no pages at all with only source_page set. Inverted or
out-of-document ranges are repaired and recorded as malformed-input
warnings rather than rejected.

Fragment type names from older exports (bridgeHand, playHand,
biddingTable, solution) are mapped onto FragmentKind.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Tuple

from ..models.articles import ArticleCandidate, IssueMeta
from ..models.fragments import AnyFragment, Fragment, FragmentKind, SolutionGroup
from ..models.pages import PageRange, clamp_range, format_ranges, normalize_ranges
from ..models.warnings import ReconcileWarning
from ..schemas.validator import TOC_SCHEMA_VERSION, ValidationError, validate_toc_payload

logger = logging.getLogger(__name__)

FRAGMENT_TYPE_ALIASES = {
    "bridgeHand": FragmentKind.CARD_HAND_DIAGRAM,
    "playHand": FragmentKind.CARD_HAND_DIAGRAM,
    "biddingTable": FragmentKind.AUCTION_TABLE,
    "solution": FragmentKind.SOLUTION_GROUP,
    "resultsTable": FragmentKind.RESULTS_TABLE,
}


# ─────────────────────────────────────────────────────────────────────────────
# Page Ranges
# ─────────────────────────────────────────────────────────────────────────────

def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def parse_page_ranges(
    raw: Any,
    *,
    title: str = "",
    total_pages: Optional[int] = None,
    collector=None,
) -> List[PageRange]:
    """
    Parse a page field in any accepted shape into a sorted range set.

    Args:
        raw: [[s, e], ...], [s, e], a bare int, or None
        title: Article title (for warnings)
        total_pages: Clamp into [1, total_pages] when given
        collector: Optional WarningCollector for corrections

    Returns:
        Sorted list of valid PageRange

    Example:
        >>> parse_page_ranges([9, 4], total_pages=80)
        [PageRange(9)]
        >>> parse_page_ranges(12)
        [PageRange(12)]
    """
    if raw is None:
        return []
    if _is_int(raw):
        pairs = [[raw, raw]]
    elif isinstance(raw, (list, tuple)) and len(raw) == 2 and all(_is_int(v) for v in raw):
        pairs = [list(raw)]
    elif isinstance(raw, (list, tuple)):
        pairs = list(raw)
    else:
        _record(collector, title, repr(raw), "(dropped)")
        return []

    ranges: List[PageRange] = []
    for pair in pairs:
        if _is_int(pair):
            pair = [pair, pair]
        if not (isinstance(pair, (list, tuple)) and len(pair) == 2 and all(_is_int(v) for v in pair)):
            _record(collector, title, repr(pair), "(dropped)")
            continue
        start, end = pair
        limit = total_pages if total_pages is not None else max(start, end, 1)
        clamped, changed = clamp_range(start, end, limit)
        if changed:
            _record(collector, title, f"[{start}, {end}]", format_ranges([clamped]))
        ranges.append(clamped)
    return normalize_ranges(ranges)


def _record(collector, title: str, raw: str, corrected: str) -> None:
    if collector is not None:
        collector.add_malformed_range(title, raw, corrected)
    else:
        logger.warning(f"\"{title}\": page range {raw} corrected to {corrected}")


def ranges_to_list(ranges: List[PageRange]) -> List[List[int]]:
    return [r.to_list() for r in ranges]


# ─────────────────────────────────────────────────────────────────────────────
# Issue / Article Serialization
# ─────────────────────────────────────────────────────────────────────────────

def issue_from_dict(data: dict[str, Any]) -> IssueMeta:
    return IssueMeta(
        month=int(data["month"]),
        year=int(data["year"]),
        volume=data.get("volume"),
        number=data.get("number"),
        title=data.get("title") or "",
    )


def issue_to_dict(issue: IssueMeta) -> dict[str, Any]:
    return {
        "month": issue.month,
        "year": issue.year,
        "volume": issue.volume,
        "number": issue.number,
        "title": issue.title,
    }


def article_from_dict(
    data: dict[str, Any],
    *,
    total_pages: Optional[int] = None,
    collector=None,
) -> ArticleCandidate:
    """
    Build an ArticleCandidate from its wire form.

    An article with no pdf_pages but a source_page gets that single
    page. Warnings stored on a previous run are not loaded; they are
    recomputed by the next reconciliation.
    """
    title = data["title"]
    source_page = data.get("source_page")
    raw_pages = data.get("pdf_pages")
    if not raw_pages and _is_int(source_page) and source_page >= 1:
        raw_pages = [[source_page, source_page]]

    interleaved = bool(data.get("interleaved", False))
    return ArticleCandidate(
        title=title,
        author_name=data.get("author_name") or "",
        category=data.get("category") or "",
        tags=list(data.get("tags") or []),
        excerpt=data.get("excerpt") or "",
        pages=parse_page_ranges(raw_pages, title=title, total_pages=total_pages, collector=collector),
        solution_pages=parse_page_ranges(
            data.get("solution_page_ranges"), title=title, total_pages=total_pages, collector=collector,
        ),
        interleaved=interleaved,
        parent_title=data.get("parent_article") if interleaved else None,
        source_page=source_page if _is_int(source_page) else None,
    )


def article_to_dict(article: ArticleCandidate, *, include_warnings: bool = True) -> dict[str, Any]:
    d: dict[str, Any] = {
        "title": article.title,
        "author_name": article.author_name,
        "category": article.category,
        "tags": list(article.tags),
        "excerpt": article.excerpt,
        "source_page": article.source_page,
        "pdf_pages": ranges_to_list(article.pages),
    }
    if article.solution_pages:
        d["solution_page_ranges"] = ranges_to_list(article.solution_pages)
    if article.interleaved:
        d["interleaved"] = True
        d["parent_article"] = article.parent_title
    if include_warnings and article.warnings:
        d["warnings"] = [w.to_dict() for w in article.warnings]
    return d


def deserialize_toc(
    data: dict[str, Any],
    *,
    validate: bool = True,
    strict: bool = False,
    total_pages: Optional[int] = None,
    collector=None,
) -> Tuple[IssueMeta, List[ArticleCandidate]]:
    """
    Deserialize a TOC payload.

    Args:
        data: Dictionary from JSON
        validate: Whether to validate before deserialization
        strict: Use full JSON Schema validation
        total_pages: Clamp page ranges into the document (falls back to
            the payload's own total_pages)
        collector: Optional WarningCollector for page corrections

    Returns:
        Tuple of (issue metadata, article candidates)

    Raises:
        ValidationError: If validate=True and data is invalid
    """
    if validate:
        validate_toc_payload(data, strict=strict)

    if total_pages is None and _is_int(data.get("total_pages")):
        total_pages = data["total_pages"]

    issue = issue_from_dict(data["issue"])
    articles = [
        article_from_dict(a, total_pages=total_pages, collector=collector)
        for a in data["articles"]
    ]
    return issue, articles


def serialize_toc(
    issue: IssueMeta,
    articles: List[ArticleCandidate],
    *,
    total_pages: Optional[int] = None,
    warnings: Optional[List[ReconcileWarning]] = None,
) -> dict[str, Any]:
    """Serialize an issue and its articles to the TOC wire form."""
    d: dict[str, Any] = {
        "schema_version": TOC_SCHEMA_VERSION,
        "issue": issue_to_dict(issue),
        "articles": [article_to_dict(a) for a in articles],
    }
    if total_pages is not None:
        d["total_pages"] = total_pages
    if warnings:
        d["warnings"] = [w.to_dict() for w in warnings]
    return d


def load_toc_json(path: Path, **kwargs: Any) -> Tuple[IssueMeta, List[ArticleCandidate]]:
    """Load and deserialize a TOC JSON file (kwargs go to deserialize_toc)."""
    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValidationError(f"Invalid JSON in {path}: {e}", path="") from e
    return deserialize_toc(data, **kwargs)


def save_toc_json(path: Path, issue: IssueMeta, articles: List[ArticleCandidate], **kwargs: Any) -> None:
    """Serialize and write a TOC JSON file."""
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(serialize_toc(issue, articles, **kwargs), f, indent=2)


# ─────────────────────────────────────────────────────────────────────────────
# Fragment Serialization
# ─────────────────────────────────────────────────────────────────────────────

def _fragment_kind(type_name: str) -> FragmentKind:
    if type_name in FRAGMENT_TYPE_ALIASES:
        return FRAGMENT_TYPE_ALIASES[type_name]
    try:
        return FragmentKind(type_name)
    except ValueError as e:
        raise ValueError(f"Unknown fragment type: {type_name!r}") from e


def fragment_from_dict(data: dict[str, Any]) -> AnyFragment:
    """
    Build a fragment from {"id", "type", "data"}.

    Raises:
        ValueError: On an unknown type or a nested solution group
    """
    kind = _fragment_kind(data["type"])
    payload = data.get("data") or {}
    if kind is FragmentKind.SOLUTION_GROUP:
        inner = tuple(fragment_from_dict(b) for b in payload.get("blocks", []))
        return SolutionGroup(
            id=str(data["id"]),
            label=payload.get("label") or "",
            fragments=inner,
        )
    return Fragment(id=str(data["id"]), kind=kind, data=dict(payload))


def fragments_from_list(items: List[dict[str, Any]]) -> List[AnyFragment]:
    return [fragment_from_dict(item) for item in items]


def fragments_to_list(fragments: List[AnyFragment]) -> List[dict[str, Any]]:
    return [f.to_dict() for f in fragments]


def page_fragments_from_list(items: List[dict[str, Any]]) -> List[Tuple[int, AnyFragment]]:
    """Build (page, fragment) pairs from fragment dicts carrying a "page" key."""
    pairs = []
    for item in items:
        if not _is_int(item.get("page")):
            raise ValueError(f"Fragment {item.get('id')!r} has no integer page")
        pairs.append((item["page"], fragment_from_dict(item)))
    return pairs
