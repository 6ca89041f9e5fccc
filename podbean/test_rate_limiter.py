"""
Tests for the sliding-window rate limiter.
"""

import asyncio
import time

import pytest

from podbean import RateLimiter, RateLimitError


@pytest.mark.asyncio
async def test_admits_up_to_capacity_without_waiting():
    limiter = RateLimiter(max_calls=5, window=60.0)

    started = time.monotonic()
    for _ in range(5):
        await limiter.admit()

    assert time.monotonic() - started < 0.5
    assert limiter.available == 0


@pytest.mark.asyncio
async def test_never_exceeds_capacity_in_any_window_under_concurrency():
    max_calls, window = 3, 0.2
    limiter = RateLimiter(max_calls=max_calls, window=window)
    admitted = []

    async def call():
        await limiter.admit()
        admitted.append(time.monotonic())

    await asyncio.gather(*(call() for _ in range(10)))

    admitted.sort()
    assert len(admitted) == 10
    # Any max_calls + 1 consecutive admissions must span at least a window.
    for first, last in zip(admitted, admitted[max_calls:]):
        assert last - first >= window - 0.01


@pytest.mark.asyncio
async def test_non_blocking_mode_raises_with_retry_after():
    limiter = RateLimiter(max_calls=1, window=30.0, blocking=False)
    await limiter.admit()

    with pytest.raises(RateLimitError) as excinfo:
        await limiter.admit()

    assert excinfo.value.retry_after is not None
    assert 1 <= excinfo.value.retry_after <= 30


@pytest.mark.asyncio
async def test_slots_free_up_after_window():
    now = [0.0]
    limiter = RateLimiter(max_calls=2, window=10.0, blocking=False, clock=lambda: now[0])

    await limiter.admit()
    await limiter.admit()
    assert limiter.available == 0

    now[0] = 10.0
    assert limiter.available == 2
    await limiter.admit()


@pytest.mark.asyncio
async def test_reset_clears_recorded_calls():
    limiter = RateLimiter(max_calls=1, window=60.0, blocking=False)
    await limiter.admit()

    limiter.reset()

    await limiter.admit()


def test_rejects_invalid_configuration():
    with pytest.raises(ValueError):
        RateLimiter(max_calls=0)
    with pytest.raises(ValueError):
        RateLimiter(max_calls=1, window=0)
