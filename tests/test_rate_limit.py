"""Tests for the rate limiter and retry helper."""
import pytest

from windwatch.errors import APIError, NetworkError, RateLimitExceededError
from windwatch.ingestion.rate_limit import RateLimiter, fetch_with_retry


def test_allows_up_to_max_requests(clock):
    limiter = RateLimiter(max_requests=30, window_seconds=60, clock=clock)

    for _ in range(30):
        limiter.check('weather')
        clock.advance(1)

    with pytest.raises(RateLimitExceededError) as exc_info:
        limiter.check('weather')
    assert exc_info.value.endpoint == 'weather'


def test_endpoints_are_counted_separately(clock):
    limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)

    limiter.check('weather')
    limiter.check('forecast')
    with pytest.raises(RateLimitExceededError):
        limiter.check('weather')


def test_counter_resets_after_idle_window(clock):
    limiter = RateLimiter(max_requests=2, window_seconds=60, clock=clock)
    limiter.check('weather')
    limiter.check('weather')

    clock.advance(61)
    limiter.check('weather')
    assert limiter.remaining('weather') == 1


def test_steady_traffic_does_not_reset_counter(clock):
    """The reset needs a full idle window since the last request."""
    limiter = RateLimiter(max_requests=3, window_seconds=60, clock=clock)
    for _ in range(3):
        limiter.check('weather')
        clock.advance(50)

    with pytest.raises(RateLimitExceededError):
        limiter.check('weather')


def test_rejected_call_does_not_count(clock):
    limiter = RateLimiter(max_requests=1, window_seconds=60, clock=clock)
    limiter.check('weather')
    with pytest.raises(RateLimitExceededError):
        limiter.check('weather')
    assert limiter.remaining('weather') == 0

    limiter.reset()
    assert limiter.remaining('weather') == 1


def test_retry_succeeds_after_network_errors():
    sleeps = []
    attempts = []

    def operation():
        attempts.append(1)
        if len(attempts) < 3:
            raise NetworkError(ConnectionError('refused'))
        return 'ok'

    assert fetch_with_retry(operation, attempts=3, delay=2.0, sleep=sleeps.append) == 'ok'
    assert len(attempts) == 3
    assert sleeps == [2.0, 2.0]


def test_retry_gives_up_and_reraises_last_error():
    sleeps = []

    def operation():
        raise NetworkError(ConnectionError('refused'))

    with pytest.raises(NetworkError):
        fetch_with_retry(operation, attempts=3, delay=2.0, sleep=sleeps.append)
    assert sleeps == [2.0, 2.0]


def test_retry_does_not_retry_api_errors():
    calls = []

    def operation():
        calls.append(1)
        raise APIError(404, 'city not found')

    with pytest.raises(APIError):
        fetch_with_retry(operation, attempts=3, delay=0, sleep=lambda s: None)
    assert len(calls) == 1
