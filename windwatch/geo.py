"""
Geographic helpers shared by the airport catalog and flight tracking.
"""

import math
from dataclasses import dataclass


EARTH_RADIUS_KM = 6371.0
KM_PER_DEGREE = 111.0


def haversine_distance(
    lat1: float, lon1: float,
    lat2: float, lon2: float
) -> float:
    """
    Calculate great-circle distance between two points in kilometers.

    Uses the Haversine formula for accuracy over short to medium distances.
    """
    lat1_rad = math.radians(lat1)
    lat2_rad = math.radians(lat2)
    delta_lat = math.radians(lat2 - lat1)
    delta_lon = math.radians(lon2 - lon1)

    a = (
        math.sin(delta_lat / 2) ** 2 +
        math.cos(lat1_rad) * math.cos(lat2_rad) *
        math.sin(delta_lon / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))

    return EARTH_RADIUS_KM * c


@dataclass(frozen=True)
class BoundingBox:
    """
    Geographic bounding box for feed queries.

    The flight feed expects ``lat1,lat2,lon1,lon2`` where lat1/lon1 are
    the minimums.
    """
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float

    @classmethod
    def from_center_radius(
        cls,
        center_lat: float,
        center_lon: float,
        radius_km: float
    ) -> 'BoundingBox':
        """
        Create bounding box from center point and radius.

        Uses approximate conversion: 1 degree ~ 111 km.
        Longitude degrees shrink with latitude, so the longitude
        span is widened by 1/cos(latitude).
        """
        lat_delta = radius_km / KM_PER_DEGREE
        lon_delta = radius_km / (KM_PER_DEGREE * math.cos(math.radians(center_lat)))

        return cls(
            lat_min=center_lat - lat_delta,
            lat_max=center_lat + lat_delta,
            lon_min=center_lon - lon_delta,
            lon_max=center_lon + lon_delta,
        )

    @property
    def lat_delta(self) -> float:
        return (self.lat_max - self.lat_min) / 2

    @property
    def lon_delta(self) -> float:
        return (self.lon_max - self.lon_min) / 2

    def to_bounds_param(self) -> str:
        """Format as the feed's ``bounds`` query value."""
        return f'{self.lat_min},{self.lat_max},{self.lon_min},{self.lon_max}'
