"""
OpenWeatherMap API client.

Uses the free Current Weather (data/2.5/weather) and 5 day / 3 hour
Forecast (data/2.5/forecast) endpoints. Both take the same query:
lat, lon, units=metric, appid=<key>.

Note: with units=metric wind speed comes back in meters/second. The
parsers convert to knots.
"""

import logging
from typing import Any, List, Optional

from windwatch.config import config
from windwatch.ingestion.http_client import HttpClient
from windwatch.ingestion.parsers import (
    parse_forecast,
    parse_weather_snapshot,
    parse_wind_reading,
)
from windwatch.ingestion.rate_limit import RateLimiter
from windwatch.models import WeatherSnapshot, WindHistoryPoint, WindReading

logger = logging.getLogger(__name__)

WEATHER_ENDPOINT = 'openweather:weather'
FORECAST_ENDPOINT = 'openweather:forecast'


class OpenWeatherClient:
    """
    Client for the OpenWeatherMap REST API.

    Each call performs exactly one HTTP request. Caching lives in the
    service layer.
    """

    def __init__(
        self,
        api_key: Optional[str],
        http: Optional[HttpClient] = None,
        weather_url: str = 'https://api.openweathermap.org/data/2.5/weather',
        forecast_url: str = 'https://api.openweathermap.org/data/2.5/forecast',
        units: str = 'metric',
    ):
        self.api_key = api_key
        self.http = http or HttpClient()
        self.weather_url = weather_url
        self.forecast_url = forecast_url
        self.units = units

        if not api_key:
            logger.warning('OpenWeather API key not configured - requests will be rejected')

    @classmethod
    def from_config(cls) -> 'OpenWeatherClient':
        """Create client from application configuration."""
        limiter = RateLimiter.from_config() if config.rate_limit.enabled else None
        return cls(
            api_key=config.openweather.api_key,
            http=HttpClient(
                timeout=config.openweather.timeout_seconds,
                rate_limiter=limiter,
            ),
            weather_url=config.openweather.weather_url,
            forecast_url=config.openweather.forecast_url,
        )

    def _params(self, lat: float, lon: float) -> dict:
        return {
            'lat': lat,
            'lon': lon,
            'units': self.units,
            'appid': self.api_key,
        }

    def get_current(self, lat: float, lon: float) -> Any:
        """Raw current-weather payload."""
        logger.info(f'Fetching current weather for ({lat:.4f}, {lon:.4f})')
        return self.http.get_json(
            self.weather_url,
            params=self._params(lat, lon),
            endpoint=WEATHER_ENDPOINT,
        )

    def get_wind(self, lat: float, lon: float) -> WindReading:
        """Current wind, in knots."""
        reading = parse_wind_reading(self.get_current(lat, lon))
        logger.debug(
            f'Wind {reading.direction:.0f}° {reading.speed:.1f}kt'
            + (f' G{reading.gust:.1f}kt' if reading.gust is not None else '')
        )
        return reading

    def get_weather(self, lat: float, lon: float) -> WeatherSnapshot:
        """Current weather snapshot."""
        snapshot = parse_weather_snapshot(self.get_current(lat, lon))
        logger.debug(f'Weather {snapshot.temperature}°C {snapshot.condition.value}')
        return snapshot

    def get_forecast(self, lat: float, lon: float, limit: int = 6) -> List[WindHistoryPoint]:
        """First ``limit`` forecast wind points, in knots."""
        logger.info(f'Fetching wind forecast for ({lat:.4f}, {lon:.4f})')
        payload = self.http.get_json(
            self.forecast_url,
            params=self._params(lat, lon),
            endpoint=FORECAST_ENDPOINT,
        )
        return parse_forecast(payload, limit=limit)
