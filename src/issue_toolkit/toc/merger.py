"""
Module: toc.merger

Purpose:
    Folds standalone "... Solutions" TOC entries into the problem
    article they answer. The solutions entry's pages are appended to the
    parent's pages and recorded as the parent's solution pages, and the
    solutions entry is removed.

Key Functions:
    - merge_problem_solutions(): Apply the merge to an article list
    - parse_solutions_title(): Recognize a solutions title and its base

Key Classes:
    - MatchStrategy: One named step of the title-matching cascade
    - MergeDecision: Record of how a solutions entry was resolved

Used By:
    - toc.pipeline (first phase after normalization)

Algorithm:
    Parents are all articles whose title does not mention "solution(s)".
    Each solutions entry is resolved by trying the strategies in
    DEFAULT_STRATEGIES order; the first one returning a parent wins.
    New heuristics are added by inserting a MatchStrategy into the list.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from issue_toolkit.common.features import DEFAULT_TAXONOMY, FeatureMatcher
from issue_toolkit.common.thresholds import RECONCILE_THRESHOLDS
from issue_toolkit.core.models.articles import ArticleCandidate
from issue_toolkit.core.models.pages import format_ranges
from .diagnostics import WarningCollector

logger = logging.getLogger(__name__)

SOLUTIONS_WORD = re.compile(r"\bsolutions?\b", re.IGNORECASE)
BASE_THEN_SOLUTIONS = re.compile(r"^(.+?)\s+solutions?$", re.IGNORECASE)
SOLUTIONS_THEN_BASE = re.compile(r"^solutions?\s+(?:to\s+)?(.+)$", re.IGNORECASE)
BARE_SOLUTIONS = re.compile(r"^solutions?$", re.IGNORECASE)


@dataclass(frozen=True)
class SolutionsTitle:
    """
    A recognized solutions title.

    Attributes:
        base: Lowercase base name ("" for a bare "Solutions")
        is_bare: True for a bare "Solutions" / "Solution" title
    """
    base: str
    is_bare: bool


@dataclass
class MergeContext:
    """State shared by the strategies while resolving one solutions entry."""
    articles: List[ArticleCandidate]
    parents: Dict[str, int]  # lowercase title -> index, input order
    features: FeatureMatcher
    window: int

    def feature_parent(self, feature: str) -> Optional[int]:
        """Parent index for a known feature: exact title first, then any title containing it."""
        if feature in self.parents:
            return self.parents[feature]
        for parent_title, idx in self.parents.items():
            if feature in parent_title:
                return idx
        return None


# (context, solutions index, parsed title) -> parent index or None
StrategyFn = Callable[[MergeContext, int, SolutionsTitle], Optional[int]]


@dataclass(frozen=True)
class MatchStrategy:
    """One named step of the matching cascade."""
    name: str
    resolve: StrategyFn


@dataclass(frozen=True)
class MergeDecision:
    """
    Outcome for one solutions entry.

    Attributes:
        solutions_title: Title of the solutions entry
        parent_title: Parent it was merged into, None if unresolved
        strategy: Name of the strategy that resolved it, None if unresolved
        pages: Pages moved to the parent
    """
    solutions_title: str
    parent_title: Optional[str]
    strategy: Optional[str]
    pages: Tuple[int, ...] = field(default_factory=tuple)

    @property
    def resolved(self) -> bool:
        return self.parent_title is not None


# ─────────────────────────────────────────────────────────────────────────────
# Strategies
# ─────────────────────────────────────────────────────────────────────────────

def _exact(ctx: MergeContext, index: int, parsed: SolutionsTitle) -> Optional[int]:
    """Base name equals a parent title."""
    if not parsed.base:
        return None
    return ctx.parents.get(parsed.base)


def _known_feature(ctx: MergeContext, index: int, parsed: SolutionsTitle) -> Optional[int]:
    """A known problem feature is named in the title (or contains the base) and is a parent."""
    title = ctx.articles[index].title_key
    for feature in ctx.features.names:
        if feature in title or (parsed.base and parsed.base in feature):
            parent = ctx.parents.get(feature)
            if parent is not None:
                return parent
    return None


def _substring(ctx: MergeContext, index: int, parsed: SolutionsTitle) -> Optional[int]:
    """Base name and a parent title contain one another."""
    if not parsed.base:
        return None
    for parent_title, idx in ctx.parents.items():
        if parsed.base in parent_title or parent_title in parsed.base:
            return idx
    return None


def _nearby_known_feature(ctx: MergeContext, index: int, parsed: SolutionsTitle) -> Optional[int]:
    """Bare "Solutions": nearest known-feature parent within the window."""
    if not parsed.is_bare:
        return None
    best: Optional[int] = None
    for feature in ctx.features.names:
        idx = ctx.feature_parent(feature)
        if idx is None or abs(idx - index) > ctx.window:
            continue
        if best is None or (abs(idx - index), idx) < (abs(best - index), best):
            best = idx
    return best


DEFAULT_STRATEGIES: Tuple[MatchStrategy, ...] = (
    MatchStrategy("exact", _exact),
    MatchStrategy("known_feature", _known_feature),
    MatchStrategy("substring", _substring),
    MatchStrategy("nearby_known_feature", _nearby_known_feature),
)


# ─────────────────────────────────────────────────────────────────────────────
# Public API
# ─────────────────────────────────────────────────────────────────────────────

def parse_solutions_title(title: str) -> Optional[SolutionsTitle]:
    """
    Recognize a solutions title.

    Example:
        >>> parse_solutions_title("Test Your Play Solutions")
        SolutionsTitle(base='test your play', is_bare=False)
        >>> parse_solutions_title("Solutions to Improve Your Defense")
        SolutionsTitle(base='improve your defense', is_bare=False)
        >>> parse_solutions_title("Solutions")
        SolutionsTitle(base='', is_bare=True)
        >>> parse_solutions_title("Bidding Theory") is None
        True
    """
    title = (title or "").strip()
    if BARE_SOLUTIONS.match(title):
        return SolutionsTitle(base="", is_bare=True)
    match = BASE_THEN_SOLUTIONS.match(title) or SOLUTIONS_THEN_BASE.match(title)
    if not match:
        return None
    return SolutionsTitle(base=match.group(1).strip().lower(), is_bare=False)


def merge_problem_solutions(
    articles: List[ArticleCandidate],
    *,
    features: FeatureMatcher = DEFAULT_TAXONOMY.problem_features,
    window: int = RECONCILE_THRESHOLDS.bare_solutions_window,
    strategies: Sequence[MatchStrategy] = DEFAULT_STRATEGIES,
    collector: Optional[WarningCollector] = None,
) -> Tuple[List[ArticleCandidate], List[MergeDecision]]:
    """
    Merge standalone solutions entries into their parent articles.

    Args:
        articles: Normalized article list (parents are mutated)
        features: Known recurring problem-feature names
        window: List-position window for bare "Solutions" entries
        strategies: Ordered matching cascade
        collector: Optional warning collector

    Returns:
        Tuple of (article list without merged entries, one decision per
        solutions entry)

    Example:
        >>> kept, decisions = merge_problem_solutions([
        ...     ArticleCandidate("Test Your Play", pages=[PageRange(9, 9)]),
        ...     ArticleCandidate("Test Your Play Solutions", pages=[PageRange(72, 72)]),
        ... ])
        >>> kept[0].pages
        [PageRange(9), PageRange(72)]
        >>> decisions[0].strategy
        'exact'
    """
    parents: Dict[str, int] = {}
    for i, article in enumerate(articles):
        if not SOLUTIONS_WORD.search(article.title or ""):
            parents.setdefault(article.title_key, i)

    ctx = MergeContext(articles=articles, parents=parents, features=features, window=window)
    merged: set[int] = set()
    decisions: List[MergeDecision] = []

    for i, article in enumerate(articles):
        parsed = parse_solutions_title(article.title)
        if parsed is None:
            continue

        parent_idx, strategy_name = _resolve(ctx, i, parsed, strategies)
        if parent_idx is None:
            logger.info(f"[merge] No parent for \"{article.title}\" (base: \"{parsed.base}\")")
            if collector is not None:
                collector.add_unresolved_solutions(article.title, article.page_set())
            decisions.append(MergeDecision(article.title, None, None, tuple(sorted(article.page_set()))))
            continue

        parent = articles[parent_idx]
        parent.add_solution_ranges(list(article.pages))
        merged.add(i)
        logger.info(
            f"[merge] Merged \"{article.title}\" -> \"{parent.title}\" via {strategy_name} "
            f"(solution pages: {format_ranges(article.pages)})"
        )
        decisions.append(
            MergeDecision(article.title, parent.title, strategy_name, tuple(sorted(article.page_set())))
        )

    if not merged:
        return articles, decisions
    return [a for i, a in enumerate(articles) if i not in merged], decisions


def _resolve(
    ctx: MergeContext,
    index: int,
    parsed: SolutionsTitle,
    strategies: Sequence[MatchStrategy],
) -> Tuple[Optional[int], Optional[str]]:
    for strategy in strategies:
        parent_idx = strategy.resolve(ctx, index, parsed)
        if parent_idx is not None and parent_idx != index:
            return parent_idx, strategy.name
    return None, None
