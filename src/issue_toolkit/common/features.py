"""Recurring-feature taxonomy.

The reconciliation phases never hard-code feature names. They ask a
FeatureTaxonomy which titles are short recurring features, which may be
interleaved inside another article, and which are problem articles with
solutions printed elsewhere. Callers can inject a different taxonomy
to grow the list without touching the algorithms.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple


# Weekly problem columns that are typeset mid-page inside a longer article.
SHORT_FEATURES: Tuple[str, ...] = (
    "test your play",
    "improve your play",
    "test your defense",
    "improve your defense",
    "playing suit combinations",
)

# Always standalone, but its solutions are interleaved like the short features.
STANDALONE_PROBLEM_FEATURES: Tuple[str, ...] = (
    "new critical moments",
)

INTERLEAVABLE_FEATURES: Tuple[str, ...] = SHORT_FEATURES + STANDALONE_PROBLEM_FEATURES

# Articles that always carry a separate solutions page.
PROBLEM_FEATURES: Tuple[str, ...] = SHORT_FEATURES + STANDALONE_PROBLEM_FEATURES


@dataclass(frozen=True)
class FeatureMatcher:
    """
    Case-insensitive substring matcher over a set of feature names.

    Attributes:
        names: Lowercase feature names; a title matches if it contains one

    Example:
        >>> m = FeatureMatcher(("test your play",))
        >>> m.matches("Test Your Play (conducted by J. Smith)")
        True
    """

    names: Tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "names", tuple(n.strip().lower() for n in self.names if n.strip()))

    def match(self, title: str) -> Optional[str]:
        """Return the first feature name contained in the title, if any."""
        lowered = (title or "").lower()
        for name in self.names:
            if name in lowered:
                return name
        return None

    def matches(self, title: str) -> bool:
        return self.match(title) is not None

    def extended(self, extra: Iterable[str]) -> FeatureMatcher:
        """New matcher with additional names appended."""
        return FeatureMatcher(self.names + tuple(extra))


@dataclass(frozen=True)
class FeatureTaxonomy:
    """
    The feature lookup tables used by reconciliation.

    Attributes:
        short_features: Features that expansion treats as non-anchors and
            that the trimmer may shrink to their start page
        interleavable: Features the annotator links to a parent article
            (superset of short_features)
        problem_features: Features whose solutions are printed elsewhere;
            used by the merger and the solution-page locator
    """

    short_features: FeatureMatcher = field(default_factory=lambda: FeatureMatcher(SHORT_FEATURES))
    interleavable: FeatureMatcher = field(default_factory=lambda: FeatureMatcher(INTERLEAVABLE_FEATURES))
    problem_features: FeatureMatcher = field(default_factory=lambda: FeatureMatcher(PROBLEM_FEATURES))

    def __post_init__(self) -> None:
        missing = [n for n in self.short_features.names if not self.interleavable.matches(n)]
        if missing:
            raise ValueError(f"interleavable features must cover short features, missing: {missing}")


DEFAULT_TAXONOMY = FeatureTaxonomy()
