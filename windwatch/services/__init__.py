"""
Data services consumed by the API layer.

Wrap the provider clients with caching, concurrency and background
polling.
"""

from windwatch.services.flight_service import FlightService
from windwatch.services.monitor import AirportConditions, WindMonitor
from windwatch.services.tracker import FlightTracker, TrackerState, merge_flights
from windwatch.services.wind_service import WindService, synthesize_history

__all__ = [
    'FlightService',
    'AirportConditions',
    'WindMonitor',
    'FlightTracker',
    'TrackerState',
    'merge_flights',
    'WindService',
    'synthesize_history',
]
