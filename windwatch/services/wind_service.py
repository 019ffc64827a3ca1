"""
Wind/weather fetch service.

Orchestrates cache check -> network fetch -> cache populate for current
wind, plus uncached weather snapshots and the history/forecast pair.

Wind history is synthesized, not fetched: the free API tier has no
historical endpoint, so the past 6 hours are approximated by jittering
the current reading (speed x U[0.8, 1.2], direction + U[-20, 20]).
"""

import logging
import random
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from datetime import datetime, timedelta, timezone
from typing import Callable, Dict, List, Optional, Tuple

from windwatch.cache import TTLCache
from windwatch.config import config
from windwatch.errors import NetworkError, WeatherError
from windwatch.ingestion.openweather_client import OpenWeatherClient
from windwatch.models import Airport, WeatherSnapshot, WindHistoryPoint, WindReading

logger = logging.getLogger(__name__)

HISTORY_HOURS = 6
FORECAST_POINTS = 6

SPEED_JITTER = (0.8, 1.2)
DIRECTION_JITTER = (-20.0, 20.0)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def synthesize_history(
    current: WindReading,
    now: Optional[datetime] = None,
    rng: Optional[random.Random] = None,
    hours: int = HISTORY_HOURS,
) -> List[WindHistoryPoint]:
    """
    Approximate the past ``hours`` hours of wind from one reading.

    One point per hour, oldest first, the last one hour before ``now``.
    Each point gets its own speed factor (also applied to gust) and its
    own direction offset, wrapped into [0, 360).
    """
    now = now or _utcnow()
    rng = rng or random.Random()

    points = []
    for hour_offset in range(hours, 0, -1):
        factor = rng.uniform(*SPEED_JITTER)
        offset = rng.uniform(*DIRECTION_JITTER)
        points.append(WindHistoryPoint(
            time=now - timedelta(hours=hour_offset),
            direction=(current.direction + offset) % 360,
            speed=current.speed * factor,
            gust=current.gust * factor if current.gust is not None else None,
        ))

    return points


class WindService:
    """
    Current wind, weather and wind series for airports.

    Owns a TTL cache of WindReadings keyed by airport id. Concurrent
    cache misses for the same airport share a single in-flight request.
    """

    def __init__(
        self,
        client: Optional[OpenWeatherClient] = None,
        cache_ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
        rng: Optional[random.Random] = None,
        now: Callable[[], datetime] = _utcnow,
    ):
        self.client = client or OpenWeatherClient.from_config()
        self.cache: TTLCache[WindReading] = TTLCache(
            config.cache.weather_ttl_seconds if cache_ttl_seconds is None else cache_ttl_seconds,
            clock=clock,
            name='wind',
        )
        self._rng = rng or random.Random()
        self._now = now

        # airport id -> future of the fetch currently on the wire
        self._inflight: Dict[str, Future] = {}
        self._inflight_lock = threading.Lock()

    def fetch_wind_data(self, airport: Airport) -> WindReading:
        """
        Current wind at an airport, served from cache when fresh.

        Raises:
            WeatherError subclass; the cache is left untouched on failure
        """
        cached = self.cache.get(airport.id)
        if cached is not None:
            logger.debug(f'Using cached wind for {airport.id}')
            return cached

        with self._inflight_lock:
            future = self._inflight.get(airport.id)
            is_owner = future is None
            if is_owner:
                # A fetch may have completed between the cache check and the lock
                cached = self.cache.peek(airport.id)
                if cached is not None:
                    return cached
                future = Future()
                self._inflight[airport.id] = future

        if not is_owner:
            logger.debug(f'Waiting on in-flight wind fetch for {airport.id}')
            return future.result()

        try:
            reading = self._fetch_current_wind(airport)
        except WeatherError as e:
            future.set_exception(e)
            raise
        else:
            self.cache.put(airport.id, reading)
            future.set_result(reading)
            logger.info(f'Fetched wind for {airport.id}: {reading.direction:.0f}° {reading.speed:.1f}kt')
            return reading
        finally:
            with self._inflight_lock:
                self._inflight.pop(airport.id, None)

    def _fetch_current_wind(self, airport: Airport) -> WindReading:
        try:
            return self.client.get_wind(airport.latitude, airport.longitude)
        except WeatherError:
            raise
        except Exception as e:
            raise NetworkError(e) from e

    def fetch_weather_info(self, lat: float, lon: float) -> WeatherSnapshot:
        """Current weather at a point. Not cached."""
        return self.client.get_weather(lat, lon)

    def fetch_wind_history_and_forecast(
        self,
        airport: Airport,
    ) -> Tuple[List[WindHistoryPoint], List[WindHistoryPoint]]:
        """
        Synthesized 6-hour history and the next 6 forecast points.

        Both branches run concurrently; if either fails, the whole call
        fails with that error.
        """
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix='wind-series') as pool:
            history_future = pool.submit(self._fetch_history, airport)
            forecast_future = pool.submit(
                self.client.get_forecast,
                airport.latitude,
                airport.longitude,
                FORECAST_POINTS,
            )
            history = history_future.result()
            forecast = forecast_future.result()

        logger.info(f'Wind series for {airport.id}: {len(history)} history, {len(forecast)} forecast')
        return history, forecast

    def _fetch_history(self, airport: Airport) -> List[WindHistoryPoint]:
        # Always a fresh reading; the cache is for the headline value only
        current = self._fetch_current_wind(airport)
        return synthesize_history(current, now=self._now(), rng=self._rng)

    def clear_cache(self) -> None:
        self.cache.clear()

    @property
    def stats(self) -> dict:
        with self._inflight_lock:
            inflight = len(self._inflight)
        return {
            'cache': self.cache.stats,
            'inflight': inflight,
        }
