"""
Module: toc.timing

Purpose:
    Timing instrumentation for the reconciliation pipeline. Records how
    long each phase took so slow issues (usually the external reader
    fallback) are easy to spot.

Key Classes:
    - TimingLog: Collects phase durations for one run

Key Functions:
    - timed_phase: Context manager for timing code blocks

Used By:
    - toc.pipeline: Main reconciliation orchestrator
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, Generator, Optional

logger = logging.getLogger(__name__)


@dataclass
class TimingLog:
    """
    Phase timings for one reconciliation run.

    Attributes:
        phase_timings: Dict of phase_name -> duration_seconds

    Example:
        >>> log = TimingLog()
        >>> log.log_phase("merge", 0.002)
        >>> log.total
        0.002
    """
    phase_timings: Dict[str, float] = field(default_factory=dict)

    def log_phase(self, phase: str, duration: float) -> None:
        """Log a phase duration (repeated phases accumulate)."""
        self.phase_timings[phase] = self.phase_timings.get(phase, 0.0) + duration

    @property
    def total(self) -> float:
        return sum(self.phase_timings.values())

    def slowest_phase(self) -> Optional[str]:
        if not self.phase_timings:
            return None
        return max(self.phase_timings.items(), key=lambda x: x[1])[0]

    def summary(self) -> str:
        """Generate human-readable timing summary."""
        lines = ["", "=== Reconciliation Timing Summary ==="]
        for phase, duration in self.phase_timings.items():
            lines.append(f"  {phase:20s} {duration:.3f}s")
        lines.append(f"  {'total':20s} {self.total:.3f}s")
        return "\n".join(lines)

    def to_dict(self) -> Dict[str, float]:
        return {phase: round(duration, 6) for phase, duration in self.phase_timings.items()}


@contextmanager
def timed_phase(log: Optional[TimingLog], phase: str) -> Generator[None, None, None]:
    """
    Time a block of code and record it on the log.

    Args:
        log: TimingLog to record to (None disables timing)
        phase: Phase name

    Example:
        >>> with timed_phase(log, "merge"):
        ...     merge_problem_solutions(articles)
    """
    if log is None:
        yield
        return
    start = time.perf_counter()
    try:
        yield
    finally:
        log.log_phase(phase, time.perf_counter() - start)
