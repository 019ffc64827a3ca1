"""
FlightPosition - a single aircraft seen in the live flight feed.

Transient: every poll cycle produces fresh instances. Two positions
with the same feed id are the same flight, whatever their coordinates.
"""

from dataclasses import dataclass, field
from typing import Optional

from windwatch.geo import haversine_distance


@dataclass(frozen=True)
class FlightPosition:
    """Aircraft position as reported by the flight feed."""
    id: str
    callsign: str = field(compare=False)
    latitude: float = field(compare=False)
    longitude: float = field(compare=False)
    heading: float = field(compare=False)
    altitude: int = field(compare=False)  # feet
    ground_speed: int = field(compare=False)  # knots
    aircraft_type: str = field(default='Unknown', compare=False)

    def distance_to(self, lat: float, lon: float) -> float:
        """Great-circle distance in km from this aircraft to a point."""
        return haversine_distance(self.latitude, self.longitude, lat, lon)

    @property
    def flight_level(self) -> Optional[str]:
        """Flight level string (e.g., 'FL350'), None below 18000 ft."""
        if self.altitude < 18000:
            return None
        return f'FL{self.altitude // 100}'

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'callsign': self.callsign,
            'aircraft_type': self.aircraft_type,
            'position': {
                'latitude': self.latitude,
                'longitude': self.longitude,
            },
            'telemetry': {
                'altitude_ft': self.altitude,
                'flight_level': self.flight_level,
                'speed_kts': self.ground_speed,
                'heading': self.heading,
            },
        }
