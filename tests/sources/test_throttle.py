"""
Unit Tests for the throttled solution-page reader.
"""

import pytest

from issue_toolkit.sources import RateLimitedError, ThrottledSolutionPageReader


class FakeClock:
    """Monotonic clock advanced only by the fake sleep."""

    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def _flaky(failures, answer=73, retry_after=None):
    """Reader that is rate limited `failures` times, then answers."""
    state = {"calls": 0}

    def reader(image, title):
        state["calls"] += 1
        if state["calls"] <= failures:
            raise RateLimitedError(retry_after=retry_after)
        return answer

    return reader


class TestThrottledSolutionPageReader:
    """Tests for ThrottledSolutionPageReader."""

    # ─────────────────────────────────────────────────────────────────────────
    # Spacing
    # ─────────────────────────────────────────────────────────────────────────

    def test_call_when_back_to_back_then_spaced_by_min_delay(self, sample_image):
        clock = FakeClock()
        reader = ThrottledSolutionPageReader(
            lambda image, title: 73, min_delay=1.0, sleep=clock.sleep, clock=clock,
        )

        reader(sample_image, "Test Your Play")
        reader(sample_image, "Improve Your Defense")

        assert clock.sleeps == [1.0]
        assert reader.calls == 2

    # ─────────────────────────────────────────────────────────────────────────
    # Backoff
    # ─────────────────────────────────────────────────────────────────────────

    def test_call_when_rate_limited_then_retries_with_doubling_backoff(self, sample_image):
        # Arrange
        clock = FakeClock()
        reader = ThrottledSolutionPageReader(
            _flaky(2), min_delay=0.0, initial_backoff=2.0, sleep=clock.sleep, clock=clock,
        )

        # Act
        page = reader(sample_image, "Test Your Play")

        # Assert
        assert page == 73
        assert clock.sleeps == [2.0, 4.0]
        assert reader.calls == 3

    def test_call_when_retry_after_longer_then_honoured(self, sample_image):
        clock = FakeClock()
        reader = ThrottledSolutionPageReader(
            _flaky(1, retry_after=10.0), min_delay=0.0, initial_backoff=2.0,
            sleep=clock.sleep, clock=clock,
        )

        reader(sample_image, "Test Your Play")

        assert clock.sleeps == [10.0]

    def test_call_when_retries_exhausted_then_raises(self, sample_image):
        clock = FakeClock()
        reader = ThrottledSolutionPageReader(
            _flaky(5), min_delay=0.0, max_retries=2, sleep=clock.sleep, clock=clock,
        )

        with pytest.raises(RateLimitedError):
            reader(sample_image, "Test Your Play")
        assert reader.calls == 2

    def test_call_when_other_error_then_not_retried(self, sample_image):
        def reader_fn(image, title):
            raise RuntimeError("bad request")

        reader = ThrottledSolutionPageReader(reader_fn, min_delay=0.0, sleep=lambda s: None)

        with pytest.raises(RuntimeError):
            reader(sample_image, "Test Your Play")
        assert reader.calls == 1

    # ─────────────────────────────────────────────────────────────────────────
    # Validation
    # ─────────────────────────────────────────────────────────────────────────

    @pytest.mark.parametrize("kwargs", [
        {"min_delay": -1},
        {"max_retries": 0},
        {"initial_backoff": -0.5},
    ])
    def test_init_when_invalid_settings_then_raises_error(self, kwargs):
        with pytest.raises(ValueError):
            ThrottledSolutionPageReader(lambda image, title: None, **kwargs)
