"""
Module: sources.throttle

Purpose:
    Rate limiting for the external solution-page reader. Enforces a
    minimum delay between calls and retries with exponential backoff
    when the reader signals it is being rate limited.

Key Classes:
    - RateLimitedError: Raised by a reader to request backoff
    - ThrottledSolutionPageReader: Wrapper usable anywhere a reader is

Used By:
    - scripts/reconcile_toc.py (wraps any configured reader)
    - toc.locator via the SolutionPageReader callable contract
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional

from PIL import Image

logger = logging.getLogger(__name__)

DEFAULT_MIN_DELAY = 1.0
MAX_RETRIES = 5
INITIAL_BACKOFF = 2.0


class RateLimitedError(Exception):
    """
    Raised by a solution-page reader when the upstream service is throttling.

    Attributes:
        retry_after: Seconds the service asked to wait, if known
    """

    def __init__(self, message: str = "rate limited", retry_after: Optional[float] = None):
        super().__init__(message)
        self.retry_after = retry_after


class ThrottledSolutionPageReader:
    """
    Rate-limited wrapper around a solution-page reader.

    Calls are spaced at least `min_delay` seconds apart. A
    RateLimitedError from the wrapped reader is retried up to
    `max_retries` attempts in total, doubling the wait each time (or
    honouring retry_after when it is longer). After the last attempt the
    error is re-raised.

    Example:
        >>> reader = ThrottledSolutionPageReader(my_reader, min_delay=0.5)
        >>> locate_solution_pages(articles, 80, source, reader=reader)
    """

    def __init__(
        self,
        reader: Callable[[Image.Image, str], Optional[int]],
        *,
        min_delay: float = DEFAULT_MIN_DELAY,
        max_retries: int = MAX_RETRIES,
        initial_backoff: float = INITIAL_BACKOFF,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        if min_delay < 0:
            raise ValueError(f"min_delay must be >= 0: {min_delay}")
        if max_retries < 1:
            raise ValueError(f"max_retries must be >= 1: {max_retries}")
        if initial_backoff < 0:
            raise ValueError(f"initial_backoff must be >= 0: {initial_backoff}")
        self._reader = reader
        self.min_delay = min_delay
        self.max_retries = max_retries
        self.initial_backoff = initial_backoff
        self._sleep = sleep
        self._clock = clock
        self._last_call: Optional[float] = None
        self._lock = threading.Lock()
        self.calls = 0

    def _wait_turn(self) -> None:
        if self._last_call is None:
            return
        wait = self._last_call + self.min_delay - self._clock()
        if wait > 0:
            logger.debug(f"Throttling solution reader for {wait:.2f}s")
            self._sleep(wait)

    def __call__(self, image: Image.Image, title: str) -> Optional[int]:
        with self._lock:
            backoff = self.initial_backoff
            for attempt in range(self.max_retries):
                self._wait_turn()
                self._last_call = self._clock()
                self.calls += 1
                try:
                    return self._reader(image, title)
                except RateLimitedError as e:
                    if attempt >= self.max_retries - 1:
                        logger.error(f"Solution reader still rate limited after {self.max_retries} attempts")
                        raise
                    wait = max(backoff, e.retry_after or 0.0)
                    logger.warning(f"Solution reader rate limited for \"{title}\", waiting {wait:.1f}s")
                    self._sleep(wait)
                    backoff *= 2
            return None
