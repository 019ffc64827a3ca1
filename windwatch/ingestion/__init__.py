"""
Provider integration for WindWatch.

HTTP adapter, response parsers and the OpenWeatherMap / FlightRadar24
clients built on them.
"""

from windwatch.ingestion.flightradar_client import FlightRadarClient
from windwatch.ingestion.http_client import HttpClient
from windwatch.ingestion.openweather_client import OpenWeatherClient
from windwatch.ingestion.rate_limit import RateLimiter, fetch_with_retry

__all__ = [
    'FlightRadarClient',
    'HttpClient',
    'OpenWeatherClient',
    'RateLimiter',
    'fetch_with_retry',
]
