"""
Module: fragments.interleaver

Purpose:
    Reorders an article's fragments so each solution follows the problem
    it answers, wrapped in a labeled SolutionGroup.

Key Functions:
    - interleave_solutions(): Main entry point
    - wrap_solution(): Build a SolutionGroup around one solution run

Key Classes:
    - InterleaveResult: Container for interleaver output

Used By:
    - fragments.batch

Layouts:
    Grouped: every solution marker comes after the last problem marker
    (all problems, then all solutions). Fragments before the first
    problem stay in front; each problem run is emitted and followed by
    the solution run with the same id. Solutions with no matching
    problem are appended at the end. Duplicate solution ids are matched
    to problems in order and never dropped.

    Already interleaved: every solution run is wrapped in place. A run
    ends at the next problem marker, the next solution marker or the end
    of the article.

Already-wrapped fragments are never scanned, so running the
interleaver on its own output changes nothing.
"""

from __future__ import annotations

import logging
import re
from collections import OrderedDict, deque
from dataclasses import dataclass, field
from typing import Deque, Dict, List, Sequence, Tuple

from issue_toolkit.common.thresholds import FRAGMENT_THRESHOLDS
from issue_toolkit.core.models.fragments import AnyFragment, Fragment, SolutionGroup
from .markers import Marker, detect_markers

logger = logging.getLogger(__name__)

LABEL_PATTERN = re.compile(r"\*\*(.+?)\*\*")


@dataclass
class InterleaveResult:
    """
    Interleaver output for one article.

    Attributes:
        fragments: Fragments in their new order
        reordered: True if the grouped layout was reordered
        problem_count: Problem markers found
        solution_count: Solution markers found
        unmatched_solution_ids: Solution ids with no problem of the same id
    """
    fragments: List[AnyFragment]
    reordered: bool
    problem_count: int
    solution_count: int
    unmatched_solution_ids: List[str] = field(default_factory=list)


def wrap_solution(solution_id: str, fragments: Sequence[AnyFragment]) -> SolutionGroup:
    """
    Wrap a solution run in a SolutionGroup.

    The label is the first bold phrase in the run's first text fragment,
    or "Solution <id>" when there is none.

    Example:
        >>> group = wrap_solution("A", [Fragment.text_fragment("b9", "**Solution A** Win the ace...")])
        >>> group.id, group.label
        ('sol-a', 'Solution A')
    """
    leaves: List[Fragment] = []
    for f in fragments:
        if isinstance(f, SolutionGroup):
            leaves.extend(f.fragments)
        else:
            leaves.append(f)
    label = ""
    for fragment in leaves:
        if fragment.is_text:
            match = LABEL_PATTERN.search(fragment.text)
            label = match.group(1) if match else ""
            break
    return SolutionGroup(
        id=f"sol-{solution_id.lower()}",
        label=label or f"Solution {solution_id}",
        fragments=tuple(leaves),
    )


def interleave_solutions(
    fragments: Sequence[AnyFragment],
    *,
    scan_chars: int = FRAGMENT_THRESHOLDS.marker_scan_chars,
) -> InterleaveResult:
    """
    Place each solution right after its problem.

    Args:
        fragments: Article fragments in reading order
        scan_chars: Leading characters scanned for markers

    Returns:
        InterleaveResult; fragments are unchanged when either no problem
        or no solution marker is found

    Example:
        >>> # P_A, P_B, S_A, S_B
        >>> result = interleave_solutions(blocks)
        >>> [f.id for f in result.fragments]
        ['pa', 'sol-a', 'pb', 'sol-b']
    """
    fragments = list(fragments)
    problems, solutions = detect_markers(fragments, scan_chars=scan_chars)

    if not problems or not solutions:
        return InterleaveResult(fragments, False, len(problems), len(solutions))

    if solutions[0].index > problems[-1].index:
        ordered, unmatched = _reorder_grouped(fragments, problems, solutions)
        logger.info(
            f"[interleave] Reordered {len(problems)} problems and {len(solutions)} solutions"
            + (f" ({len(unmatched)} unmatched: {', '.join(unmatched)})" if unmatched else "")
        )
        return InterleaveResult(ordered, True, len(problems), len(solutions), unmatched)

    ordered = _wrap_in_place(fragments, problems, solutions)
    problem_ids = {p.id for p in problems}
    unmatched = [s.id for s in solutions if s.id not in problem_ids]
    logger.info(f"[interleave] Wrapped {len(solutions)} in-place solutions")
    return InterleaveResult(ordered, False, len(problems), len(solutions), unmatched)


# ─────────────────────────────────────────────────────────────────────────────
# Layouts
# ─────────────────────────────────────────────────────────────────────────────

def _reorder_grouped(
    fragments: List[AnyFragment],
    problems: List[Marker],
    solutions: List[Marker],
) -> Tuple[List[AnyFragment], List[str]]:
    first_solution = solutions[0].index
    result: List[AnyFragment] = list(fragments[:problems[0].index])

    runs: Dict[str, Deque[List[AnyFragment]]] = OrderedDict()
    for si, marker in enumerate(solutions):
        end = solutions[si + 1].index if si + 1 < len(solutions) else len(fragments)
        runs.setdefault(marker.id, deque()).append(fragments[marker.index:end])

    for pi, marker in enumerate(problems):
        end = problems[pi + 1].index if pi + 1 < len(problems) else first_solution
        result.extend(fragments[marker.index:end])
        queue = runs.get(marker.id)
        if queue:
            result.append(wrap_solution(marker.id, queue.popleft()))

    unmatched: List[str] = []
    for solution_id, queue in runs.items():
        while queue:
            unmatched.append(solution_id)
            result.append(wrap_solution(solution_id, queue.popleft()))

    return result, unmatched


def _wrap_in_place(
    fragments: List[AnyFragment],
    problems: List[Marker],
    solutions: List[Marker],
) -> List[AnyFragment]:
    run_ends: Dict[int, Tuple[str, int]] = {}
    for si, marker in enumerate(solutions):
        end = len(fragments)
        next_problem = next((p.index for p in problems if p.index > marker.index), None)
        if next_problem is not None:
            end = min(end, next_problem)
        if si + 1 < len(solutions):
            end = min(end, solutions[si + 1].index)
        run_ends[marker.index] = (marker.id, end)

    result: List[AnyFragment] = []
    i = 0
    while i < len(fragments):
        if i in run_ends:
            solution_id, end = run_ends[i]
            result.append(wrap_solution(solution_id, fragments[i:end]))
            i = end
        else:
            result.append(fragments[i])
            i += 1
    return result
