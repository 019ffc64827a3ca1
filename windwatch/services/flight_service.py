"""
Flight lookup near an airport, with a short-lived query cache.

The feed updates every few seconds, so results are reused for 10 seconds
per (airport, radius) pair.
"""

import logging
import time
from typing import Callable, List, Optional, Tuple

from windwatch.cache import TTLCache
from windwatch.config import config
from windwatch.ingestion.flightradar_client import FlightRadarClient
from windwatch.models import Airport, FlightPosition

logger = logging.getLogger(__name__)


class FlightService:
    """Fetches flights around airports through the live feed."""

    def __init__(
        self,
        client: Optional[FlightRadarClient] = None,
        cache_ttl_seconds: Optional[float] = None,
        default_radius_km: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.client = client or FlightRadarClient.from_config()
        self.default_radius_km = (
            config.flight_feed.default_radius_km if default_radius_km is None else default_radius_km
        )
        self.cache: TTLCache[Tuple[FlightPosition, ...]] = TTLCache(
            config.cache.flight_ttl_seconds if cache_ttl_seconds is None else cache_ttl_seconds,
            clock=clock,
            name='flights',
        )

    def fetch_flights(
        self,
        near: Airport,
        radius_km: Optional[float] = None,
    ) -> List[FlightPosition]:
        """
        Flights inside the bounding box around an airport.

        Raises:
            WeatherError subclass on feed failure
        """
        if radius_km is None:
            radius_km = self.default_radius_km
        key = (near.id, radius_km)

        cached = self.cache.get(key)
        if cached is not None:
            logger.debug(f'Using cached flights for {near.id} ({radius_km}km)')
            return list(cached)

        logger.info(f'Searching flights near {near.name} ({radius_km}km)')
        flights = self.client.get_flights_near(near.latitude, near.longitude, radius_km)
        self.cache.put(key, tuple(flights))

        logger.info(f'Found {len(flights)} flights near {near.name}')
        return flights

    def clear_cache(self) -> None:
        self.cache.clear()
