"""
Module: fragments.markers

Purpose:
    Problem and solution marker detection. Scans the leading characters
    of each text fragment for bold headings such as "**Problem A**" or
    "**Solution to B**" and records where each problem and each
    solution starts.

Key Functions:
    - detect_markers(): Find every problem and solution start
    - match_solution_marker(): Solution id in one text head, if any
    - match_problem_marker(): Problem id in one text head, if any

Key Classes:
    - Marker: Immutable record of one detected start

Used By:
    - fragments.interleaver
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from issue_toolkit.common.thresholds import FRAGMENT_THRESHOLDS
from issue_toolkit.core.models.fragments import AnyFragment

logger = logging.getLogger(__name__)

_ID = r"([A-Ha-h]|\d+)\b"

# Checked before the problem patterns; the first match wins.
SOLUTION_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"\*\*Solutions?\s+(?:to\s+(?:Problem\s+)?)?" + _ID, re.IGNORECASE),
    re.compile(r"\*\*Solutions?\s+(?:to\s+)?#?" + _ID, re.IGNORECASE),
    re.compile(r"\*\*Solution\s+" + _ID, re.IGNORECASE),
    re.compile(r"\*\*Solution\*\*"),
    re.compile(r"\*\*Answer\s+(?:to\s+)?" + _ID, re.IGNORECASE),
)

PROBLEM_PATTERNS: Tuple[re.Pattern, ...] = (
    re.compile(r"\*\*Problem\s+" + _ID, re.IGNORECASE),
    re.compile(r"^\*\*([A-H])\.\*\*"),
    re.compile(r"^\*\*(\d+)\.\*\*"),
    re.compile(r"\*\*Deal\s+" + _ID, re.IGNORECASE),
)


@dataclass(frozen=True)
class Marker:
    """
    One detected problem or solution start.

    Attributes:
        index: Position of the text fragment in the article
        id: Uppercase identifier ("A", "3")
    """
    index: int
    id: str


def match_solution_marker(head: str) -> Tuple[bool, Optional[str]]:
    """
    Check a text head for a solution marker.

    Returns:
        (matched, id). id is None for a bare "**Solution**" heading,
        which the caller numbers from context.

    Example:
        >>> match_solution_marker("**Solution to Problem c** ...")
        (True, 'C')
        >>> match_solution_marker("**Solution** The key play...")
        (True, None)
    """
    for pattern in SOLUTION_PATTERNS:
        match = pattern.search(head)
        if match:
            group = match.group(1) if pattern.groups else None
            return True, group.upper() if group else None
    return False, None


def match_problem_marker(head: str) -> Optional[str]:
    """
    Problem id in a text head, or None.

    Example:
        >>> match_problem_marker("**B.** Both vulnerable")
        'B'
    """
    for pattern in PROBLEM_PATTERNS:
        match = pattern.search(head)
        if match:
            return match.group(1).upper()
    return None


def detect_markers(
    fragments: Sequence[AnyFragment],
    *,
    scan_chars: int = FRAGMENT_THRESHOLDS.marker_scan_chars,
) -> Tuple[List[Marker], List[Marker]]:
    """
    Find every problem and solution start in an article.

    Only text fragments are scanned, and only their first `scan_chars`
    characters. A fragment that carries a solution marker is never also
    counted as a problem.

    Args:
        fragments: Article fragments in order
        scan_chars: Leading characters scanned per text fragment

    Returns:
        Tuple of (problem markers, solution markers), each in order
    """
    problems: List[Marker] = []
    solutions: List[Marker] = []

    for i, fragment in enumerate(fragments):
        if not fragment.is_text:
            continue
        head = fragment.text[:scan_chars]

        is_solution, solution_id = match_solution_marker(head)
        if is_solution:
            if solution_id is None:
                solution_id = str(len(problems) if problems else len(solutions) + 1)
                logger.info(
                    f"[interleave] Fragment {i}: solution marker has no id, using '{solution_id}'"
                )
            solutions.append(Marker(i, solution_id))
            continue

        problem_id = match_problem_marker(head)
        if problem_id is not None:
            problems.append(Marker(i, problem_id))

    logger.debug(f"[interleave] Found {len(problems)} problems, {len(solutions)} solutions")
    return problems, solutions
