"""Common utilities shared across the toolkit."""

from __future__ import annotations

from .features import (
    DEFAULT_TAXONOMY,
    INTERLEAVABLE_FEATURES,
    PROBLEM_FEATURES,
    SHORT_FEATURES,
    FeatureMatcher,
    FeatureTaxonomy,
)
from .months import MONTH_NAMES, mentions_month, month_name, next_month, parse_issue_month
from .thresholds import (
    FRAGMENT_THRESHOLDS,
    RECONCILE_THRESHOLDS,
    FragmentThresholds,
    ReconcileThresholds,
)

__all__ = [
    # features
    "DEFAULT_TAXONOMY",
    "INTERLEAVABLE_FEATURES",
    "PROBLEM_FEATURES",
    "SHORT_FEATURES",
    "FeatureMatcher",
    "FeatureTaxonomy",
    # months
    "MONTH_NAMES",
    "mentions_month",
    "month_name",
    "next_month",
    "parse_issue_month",
    # thresholds
    "FRAGMENT_THRESHOLDS",
    "RECONCILE_THRESHOLDS",
    "FragmentThresholds",
    "ReconcileThresholds",
]
