"""
Outbound request guards.

RateLimiter keeps a per-endpoint request counter. The counter resets once
an endpoint has been idle for longer than the window; while it is active,
at most ``max_requests`` calls are let through.

fetch_with_retry is a fixed-delay retry loop for best-effort background
work. Interactive fetches do not retry.
"""

import logging
import threading
import time
from typing import Callable, Dict, Tuple, Type, TypeVar

from windwatch.config import config
from windwatch.errors import NetworkError, RateLimitExceededError

logger = logging.getLogger(__name__)

T = TypeVar('T')


class RateLimiter:
    """
    Per-endpoint request counter.

    OpenWeatherMap free tier allows 60 calls/minute per key; we stay at
    half that by default.
    """

    def __init__(
        self,
        max_requests: int = 30,
        window_seconds: float = 60.0,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self._clock = clock

        self._counts: Dict[str, int] = {}
        self._last_request: Dict[str, float] = {}
        self._lock = threading.Lock()

    @classmethod
    def from_config(cls) -> 'RateLimiter':
        """Create limiter from application configuration."""
        return cls(
            max_requests=config.rate_limit.max_requests,
            window_seconds=config.rate_limit.window_seconds,
        )

    def check(self, endpoint: str) -> None:
        """
        Count one request against endpoint.

        Raises:
            RateLimitExceededError if the endpoint's budget is used up
        """
        with self._lock:
            now = self._clock()

            last = self._last_request.get(endpoint)
            if last is not None and now - last > self.window_seconds:
                self._counts[endpoint] = 0
                self._last_request[endpoint] = now

            count = self._counts.get(endpoint, 0)
            if count >= self.max_requests:
                logger.warning(f'Rate limit reached for {endpoint} ({count}/{self.max_requests})')
                raise RateLimitExceededError(endpoint)

            self._counts[endpoint] = count + 1
            self._last_request[endpoint] = now

    def remaining(self, endpoint: str) -> int:
        """Requests left for endpoint in the current window."""
        with self._lock:
            last = self._last_request.get(endpoint)
            if last is not None and self._clock() - last > self.window_seconds:
                return self.max_requests
            return max(0, self.max_requests - self._counts.get(endpoint, 0))

    def reset(self) -> None:
        with self._lock:
            self._counts.clear()
            self._last_request.clear()


def fetch_with_retry(
    operation: Callable[[], T],
    attempts: int = 3,
    delay: float = 2.0,
    retry_on: Tuple[Type[Exception], ...] = (NetworkError,),
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call operation up to ``attempts`` times with a fixed delay in between.

    Only exceptions listed in ``retry_on`` are retried; anything else
    propagates immediately. The last failure is re-raised.
    """
    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except retry_on as e:
            logger.warning(f'Attempt {attempt}/{attempts} failed: {e}')
            if attempt == attempts:
                raise
            sleep(delay)

    raise ValueError('attempts must be at least 1')
