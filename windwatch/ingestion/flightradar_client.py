"""
FlightRadar24 live feed client.

The feed endpoint (zones/fcgi/feed.js) is undocumented; it is what the
flightradar24.com map polls. It wants browser-like headers and a
``bounds`` box plus a set of source/filter flags.
"""

import logging
from typing import List, Optional

from windwatch.config import config
from windwatch.geo import BoundingBox
from windwatch.ingestion.http_client import HttpClient
from windwatch.ingestion.parsers import parse_flight_feed
from windwatch.models import FlightPosition

logger = logging.getLogger(__name__)

FEED_ENDPOINT = 'flightradar:feed'

BROWSER_HEADERS = {
    'User-Agent': (
        'Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 '
        '(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36'
    ),
    'Accept': 'application/json',
    'Origin': 'https://www.flightradar24.com',
    'Referer': 'https://www.flightradar24.com/',
    'Accept-Language': 'en-US,en;q=0.9',
    'Connection': 'keep-alive',
}

# Include every data source and both airborne and ground traffic
FEED_FLAGS = {
    'faa': 1,
    'satellite': 1,
    'mlat': 1,
    'flarm': 1,
    'adsb': 1,
    'gnd': 1,
    'air': 1,
    'vehicles': 1,
    'estimated': 1,
    'maxage': 14400,
    'gliders': 1,
    'stats': 1,
}


class FlightRadarClient:
    """
    Client for the FlightRadar24 live feed.

    Handles:
    - Bounding box queries
    - Browser header spoofing the feed requires
    - Parsing the array-per-flight response format
    """

    def __init__(
        self,
        http: Optional[HttpClient] = None,
        feed_url: str = 'https://data-live.flightradar24.com/zones/fcgi/feed.js',
    ):
        self.http = http or HttpClient(headers=BROWSER_HEADERS)
        self.feed_url = feed_url

    @classmethod
    def from_config(cls) -> 'FlightRadarClient':
        """Create client from application configuration."""
        return cls(
            http=HttpClient(
                timeout=config.openweather.timeout_seconds,
                headers=BROWSER_HEADERS,
            ),
            feed_url=config.flight_feed.feed_url,
        )

    def get_flights(self, bbox: BoundingBox) -> List[FlightPosition]:
        """
        Fetch all flights inside a bounding box.

        Raises:
            WeatherError subclass on network, HTTP or decoding failure
        """
        params = {'bounds': bbox.to_bounds_param(), **FEED_FLAGS}
        logger.debug(f'Fetching flights: bounds={params["bounds"]}')

        payload = self.http.get_json(self.feed_url, params=params, endpoint=FEED_ENDPOINT)
        flights = parse_flight_feed(payload)

        logger.info(f'Received {len(flights)} flights from feed')
        return flights

    def get_flights_near(
        self,
        center_lat: float,
        center_lon: float,
        radius_km: float,
    ) -> List[FlightPosition]:
        """
        Fetch flights within radius of a center point.

        Convenience method that constructs bounding box from center + radius.
        """
        bbox = BoundingBox.from_center_radius(center_lat, center_lon, radius_km)
        return self.get_flights(bbox)
