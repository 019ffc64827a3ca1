"""
API module for WindWatch.

Provides REST endpoints for:
- Airport catalog
- Wind, weather and wind series
- Tracked flights
- System status
"""

from windwatch.api.airports import airports_bp
from windwatch.api.flights import flights_bp
from windwatch.api.status import status_bp
from windwatch.api.wind import wind_bp

__all__ = ['airports_bp', 'flights_bp', 'status_bp', 'wind_bp']
