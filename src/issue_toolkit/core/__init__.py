"""
Issue Toolkit Core Package

Shared data models, schemas and serialization used by the TOC
reconciliation phases and the fragment interleaver.

**MODEL CONVENTIONS:**

1. **Validated on construction**
   - PageRange, IssueMeta, Fragment and SolutionGroup raise ValueError
     for impossible values

2. **One mutable model**
   - ArticleCandidate is corrected in place by each reconciliation
     phase; everything else is frozen

3. **Weak references**
   - An interleaved article names its parent by title only
"""

from .models import (
    ArticleCandidate,
    Fragment,
    FragmentKind,
    IssueMeta,
    PageRange,
    ReconcileWarning,
    SolutionGroup,
    WarningKind,
)

__all__ = [
    "ArticleCandidate",
    "Fragment",
    "FragmentKind",
    "IssueMeta",
    "PageRange",
    "ReconcileWarning",
    "SolutionGroup",
    "WarningKind",
]
