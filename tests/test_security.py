"""Tests for the allow-list and the rate limiter."""

from security.auth import is_allowed
from security.rate_limiter import RateLimiter


def test_empty_allow_list_admits_everyone():
    assert is_allowed(42, [])


def test_allow_list():
    assert is_allowed(1, [1, 2])
    assert not is_allowed(3, [1, 2])


class TestRateLimiter:

    def test_blocks_after_limit_within_window(self):
        limiter = RateLimiter(limit=2, window=60)
        assert limiter.hit(1, now=0)
        assert limiter.hit(1, now=1)
        assert not limiter.hit(1, now=2)
        assert limiter.hit(2, now=2)

    def test_window_slides(self):
        limiter = RateLimiter(limit=1, window=10)
        assert limiter.hit(1, now=0)
        assert not limiter.hit(1, now=5)
        assert limiter.hit(1, now=10.5)

    def test_uses_clock(self):
        ticks = iter([0, 1, 100])
        limiter = RateLimiter(limit=1, window=10, clock=lambda: next(ticks))
        assert limiter.hit(1)
        assert not limiter.hit(1)
        assert limiter.hit(1)
