"""
Domain models for WindWatch.

Plain dataclasses, independent of any provider's wire format:
1. Airport catalog (static, immutable)
2. Wind readings and wind series (knots)
3. Weather snapshots with a closed condition enum
4. Flight positions from the live feed
"""

from windwatch.models.airport import (
    Airport,
    AirportType,
    DOMINICAN_AIRPORTS,
    get_airport,
    international_airports,
    search_airports,
    sort_by_distance,
)
from windwatch.models.flight import FlightPosition
from windwatch.models.weather import WeatherCondition, WeatherSnapshot
from windwatch.models.wind import MS_TO_KNOTS, WindHistoryPoint, WindReading, ms_to_knots

__all__ = [
    'Airport',
    'AirportType',
    'DOMINICAN_AIRPORTS',
    'get_airport',
    'international_airports',
    'search_airports',
    'sort_by_distance',
    'FlightPosition',
    'WeatherCondition',
    'WeatherSnapshot',
    'MS_TO_KNOTS',
    'WindHistoryPoint',
    'WindReading',
    'ms_to_knots',
]
