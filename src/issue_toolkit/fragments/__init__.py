"""
Module: fragments

Purpose:
    Per-article fragment processing: cleanup passes and the solution
    interleaver that places each solution after its problem.

Key Functions:
    - interleave_solutions(): Reorder one article's fragments
    - process_issue_fragments(): Cleanup + interleave across an issue
    - assign_fragments_to_articles(): Map page-tagged fragments to articles
"""

from .assign import FragmentAssignment, assign_fragments_to_articles, resolve_shared_page
from .batch import ArticleFragments, IssueFragments, process_article_fragments, process_issue_fragments
from .cleanup import (
    CleanupReport,
    FragmentCleanupConfig,
    apply_cleanup,
    strip_boilerplate_fragments,
    strip_cross_references,
    strip_next_month_fragments,
)
from .interleaver import InterleaveResult, interleave_solutions, wrap_solution
from .markers import Marker, detect_markers, match_problem_marker, match_solution_marker

__all__ = [
    "interleave_solutions",
    "wrap_solution",
    "InterleaveResult",
    "detect_markers",
    "match_problem_marker",
    "match_solution_marker",
    "Marker",
    "apply_cleanup",
    "strip_cross_references",
    "strip_next_month_fragments",
    "strip_boilerplate_fragments",
    "FragmentCleanupConfig",
    "CleanupReport",
    "process_article_fragments",
    "process_issue_fragments",
    "ArticleFragments",
    "IssueFragments",
    "assign_fragments_to_articles",
    "resolve_shared_page",
    "FragmentAssignment",
]
