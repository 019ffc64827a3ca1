"""
Configuration management for WindWatch.

Loads settings from environment variables with sensible defaults.
All configuration is centralized here to avoid magic strings scattered
throughout the codebase.
"""

import os
from dataclasses import dataclass
from typing import Optional, Tuple

from dotenv import load_dotenv

load_dotenv()


def _parse_location(value: str) -> Optional[Tuple[float, float]]:
    """Parse 'lat,lon' string into tuple, or None if empty/invalid."""
    if not value:
        return None
    try:
        lat, lon = value.split(',')
        return (float(lat.strip()), float(lon.strip()))
    except (ValueError, AttributeError):
        return None


def _parse_bool(value: str) -> bool:
    return value.strip().lower() in ('1', 'true', 'yes', 'on')


@dataclass(frozen=True)
class OpenWeatherConfig:
    """OpenWeatherMap API configuration."""
    api_key: Optional[str] = os.getenv('OPENWEATHER_API_KEY') or None
    weather_url: str = os.getenv(
        'OPENWEATHER_WEATHER_URL',
        'https://api.openweathermap.org/data/2.5/weather',
    )
    forecast_url: str = os.getenv(
        'OPENWEATHER_FORECAST_URL',
        'https://api.openweathermap.org/data/2.5/forecast',
    )
    timeout_seconds: float = float(os.getenv('HTTP_TIMEOUT_SECONDS', '30'))

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True)
class FlightFeedConfig:
    """FlightRadar24 live feed settings."""
    feed_url: str = os.getenv(
        'FLIGHT_FEED_URL',
        'https://data-live.flightradar24.com/zones/fcgi/feed.js',
    )
    poll_interval: int = int(os.getenv('POLL_INTERVAL_SECONDS', '10'))
    default_radius_km: float = float(os.getenv('FLIGHT_RADIUS_KM', '150'))

    # Tracked flights closer than this to the polled airport are replaced
    retain_distance_km: float = 100.0


@dataclass(frozen=True)
class CacheConfig:
    """In-memory cache settings."""
    weather_ttl_seconds: int = int(os.getenv('WEATHER_CACHE_TTL_SECONDS', '300'))
    flight_ttl_seconds: int = int(os.getenv('FLIGHT_CACHE_TTL_SECONDS', '10'))


@dataclass(frozen=True)
class RateLimitConfig:
    """Outbound request limits, per endpoint."""
    enabled: bool = _parse_bool(os.getenv('RATE_LIMIT_ENABLED', '1'))
    max_requests: int = int(os.getenv('RATE_LIMIT_PER_MINUTE', '30'))
    window_seconds: int = 60


@dataclass(frozen=True)
class RetryConfig:
    """Retry policy for best-effort background fetches."""
    attempts: int = 3
    delay_seconds: float = 2.0


@dataclass(frozen=True)
class MonitorConfig:
    """Selected-airport auto refresh."""
    refresh_interval: int = int(os.getenv('REFRESH_INTERVAL_SECONDS', '300'))


@dataclass(frozen=True)
class AppConfig:
    """Main application configuration."""
    openweather: OpenWeatherConfig
    flight_feed: FlightFeedConfig
    cache: CacheConfig
    rate_limit: RateLimitConfig
    retry: RetryConfig
    monitor: MonitorConfig

    # User location (None = auto-detect via IP)
    user_location: Optional[Tuple[float, float]]

    # Flask settings
    secret_key: str
    debug: bool


def load_config() -> AppConfig:
    """Load and validate all configuration."""
    return AppConfig(
        openweather=OpenWeatherConfig(),
        flight_feed=FlightFeedConfig(),
        cache=CacheConfig(),
        rate_limit=RateLimitConfig(),
        retry=RetryConfig(),
        monitor=MonitorConfig(),
        user_location=_parse_location(os.getenv('USER_LOCATION', '')),
        secret_key=os.getenv('SECRET_KEY', 'dev-key-change-in-prod'),
        debug=os.getenv('FLASK_DEBUG', '0') == '1',
    )


# Singleton instance
config = load_config()
