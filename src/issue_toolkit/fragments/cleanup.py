"""
Module: fragments.cleanup

Purpose:
    Cleanup passes applied to an article's fragments before the
    solution interleaver runs. Each pass returns the new fragment list
    and the number of fragments it changed or removed.

Key Functions:
    - strip_cross_references(): Remove "Solution on page 73" style print artifacts
    - strip_next_month_fragments(): Drop trailing next-issue problem sets
    - strip_boilerplate_fragments(): Drop subscription/bookshelf filler
    - apply_cleanup(): Run the passes enabled in a FragmentCleanupConfig

Key Classes:
    - FragmentCleanupConfig: Which passes to run
    - CleanupReport: Per-pass counts

Used By:
    - fragments.batch
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from issue_toolkit.common.months import month_name, next_month
from issue_toolkit.core.models.fragments import AnyFragment, FragmentKind

logger = logging.getLogger(__name__)

CROSS_REFERENCE_PATTERNS = (
    re.compile(r"\(?\b(?:solution|answer|continued|see)\s+(?:on\s+)?page\s+\d+\.?\)?\.?", re.IGNORECASE),
    re.compile(r"\(?\bturn to page\s+\d+\.?\)?\.?", re.IGNORECASE),
)

BOILERPLATE_PHRASES = (
    "patronize the bookshelf",
    "subscribe to the bridge world",
    "the bridge world bookshelf",
    "bridge world bookshelf",
    "subscription information",
    "subscription rates",
    "advertise in the bridge world",
    "back issues available",
)

# Non-text fragments that follow a next-month marker belong to next month's set.
NEXT_MONTH_TRAILING_KINDS = frozenset({FragmentKind.CARD_HAND_DIAGRAM, FragmentKind.AUCTION_TABLE})


@dataclass(frozen=True)
class FragmentCleanupConfig:
    """
    Fragment cleanup settings (immutable).

    Attributes:
        cross_references: Strip page cross-references from text
        next_month: Strip trailing next-month problem sets
        boilerplate: Strip boilerplate-only text fragments
    """
    cross_references: bool = True
    next_month: bool = True
    boilerplate: bool = True


@dataclass(frozen=True)
class CleanupReport:
    """Number of fragments touched by each pass."""
    cross_references: int = 0
    next_month: int = 0
    boilerplate: int = 0

    @property
    def total(self) -> int:
        return self.cross_references + self.next_month + self.boilerplate


def strip_cross_references(fragments: Sequence[AnyFragment]) -> Tuple[List[AnyFragment], int]:
    """
    Remove page cross-references from text fragments.

    Text left empty after stripping is dropped entirely.

    Example:
        >>> out, n = strip_cross_references([Fragment.text_fragment("t", "Make 4S. (Solution on page 73.)")])
        >>> out[0].text, n
        ('Make 4S.', 1)
    """
    stripped = 0
    result: List[AnyFragment] = []
    for fragment in fragments:
        if not fragment.is_text:
            result.append(fragment)
            continue
        original = fragment.text
        text = original
        for pattern in CROSS_REFERENCE_PATTERNS:
            text = pattern.sub("", text)
        text = re.sub(r"\n{3,}", "\n\n", text).strip()
        if text == original:
            result.append(fragment)
            continue
        stripped += 1
        if text:
            result.append(fragment.with_text(text))
    return result, stripped


def _next_month_patterns(issue_month: int) -> Tuple[re.Pattern, ...]:
    name = month_name(next_month(issue_month)).lower()
    return (
        re.compile(rf"\b{name}\s+problems?\b", re.IGNORECASE),
        re.compile(rf"\bproblems?\s+for\s+{name}\b", re.IGNORECASE),
        re.compile(rf"\b{name}\s+hands?\b", re.IGNORECASE),
        re.compile(rf"\bhands?\s+for\s+{name}\b", re.IGNORECASE),
        re.compile(r"\bnext\s+month'?s?\s+problems?\b", re.IGNORECASE),
    )


def strip_next_month_fragments(
    fragments: Sequence[AnyFragment],
    issue_month: int,
) -> Tuple[List[AnyFragment], int]:
    """
    Drop a trailing next-month problem set from an article.

    Scans backwards from the end: text fragments that announce next
    month's problems are dropped, as are hand diagrams and auctions
    once such a marker has been seen. The scan stops at the first other
    fragment, so only the tail of the article is ever removed.

    Args:
        fragments: Article fragments in order
        issue_month: Current issue month, 1-12

    Returns:
        Tuple of (kept fragments, number dropped)
    """
    if not fragments:
        return list(fragments), 0
    patterns = _next_month_patterns(issue_month)

    cutoff = len(fragments)
    for i in range(len(fragments) - 1, -1, -1):
        fragment = fragments[i]
        if fragment.is_text and any(p.search(fragment.text) for p in patterns):
            cutoff = i
            continue
        if cutoff < len(fragments) and fragment.kind in NEXT_MONTH_TRAILING_KINDS:
            cutoff = i
            continue
        break

    dropped = len(fragments) - cutoff
    if dropped:
        logger.info(f"[cleanup] Dropped {dropped} trailing next-month fragment(s)")
    return list(fragments[:cutoff]), dropped


def _is_boilerplate(text: str) -> bool:
    plain = re.sub(r"\n+", " ", text.replace("*", "")).strip().lower()
    return any(
        plain == phrase or plain.startswith(phrase + ".") or plain.startswith(phrase + "!")
        for phrase in BOILERPLATE_PHRASES
    )


def strip_boilerplate_fragments(fragments: Sequence[AnyFragment]) -> Tuple[List[AnyFragment], int]:
    """Drop text fragments that consist only of magazine boilerplate."""
    kept: List[AnyFragment] = []
    stripped = 0
    for fragment in fragments:
        if fragment.is_text and fragment.text.strip() and _is_boilerplate(fragment.text):
            stripped += 1
            continue
        kept.append(fragment)
    return kept, stripped


def apply_cleanup(
    fragments: Sequence[AnyFragment],
    issue_month: Optional[int] = None,
    config: Optional[FragmentCleanupConfig] = None,
) -> Tuple[List[AnyFragment], CleanupReport]:
    """
    Run the enabled cleanup passes in order.

    The next-month pass is skipped when issue_month is None.
    """
    config = config or FragmentCleanupConfig()
    result = list(fragments)
    cross = nxt = boiler = 0

    if config.cross_references:
        result, cross = strip_cross_references(result)
    if config.next_month and issue_month is not None:
        result, nxt = strip_next_month_fragments(result, issue_month)
    if config.boilerplate:
        result, boiler = strip_boilerplate_fragments(result)

    return result, CleanupReport(cross_references=cross, next_month=nxt, boilerplate=boiler)
