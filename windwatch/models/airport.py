"""
Airport catalog.

A static, finite set of airports loaded once at import time and never
mutated. Identity is the ICAO code.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional

from windwatch.geo import haversine_distance


class AirportType(str, Enum):
    """Airport classification."""
    INTERNATIONAL = 'international'
    DOMESTIC = 'domestic'
    PRIVATE = 'private'


@dataclass(frozen=True)
class Airport:
    """Immutable airport record. Equality and hashing use ``id`` only."""
    id: str
    name: str = field(compare=False)
    city: str = field(compare=False)
    latitude: float = field(compare=False)
    longitude: float = field(compare=False)
    airport_type: AirportType = field(default=AirportType.INTERNATIONAL, compare=False)

    @property
    def is_international(self) -> bool:
        return self.airport_type == AirportType.INTERNATIONAL

    def distance_to(self, lat: float, lon: float) -> float:
        """Great-circle distance in km from this airport to a point."""
        return haversine_distance(self.latitude, self.longitude, lat, lon)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'name': self.name,
            'city': self.city,
            'latitude': self.latitude,
            'longitude': self.longitude,
            'type': self.airport_type.value,
        }


DOMINICAN_AIRPORTS: List[Airport] = [
    # International
    Airport('MDPC', 'Punta Cana International Airport', 'Punta Cana',
            18.5674, -68.3634, AirportType.INTERNATIONAL),
    Airport('MDSD', 'Las Américas International Airport', 'Santo Domingo',
            18.4297, -69.6689, AirportType.INTERNATIONAL),
    Airport('MDST', 'Cibao International Airport', 'Santiago',
            19.4069, -70.6044, AirportType.INTERNATIONAL),
    Airport('MDPP', 'Gregorio Luperón International Airport', 'Puerto Plata',
            19.7579, -70.5699, AirportType.INTERNATIONAL),
    Airport('MDLR', 'La Romana International Airport', 'La Romana',
            18.4507, -68.9118, AirportType.INTERNATIONAL),
    Airport('MDJB', 'La Isabela International Airport', 'Santo Domingo North',
            18.5725, -69.9856, AirportType.INTERNATIONAL),
    Airport('MDCY', 'Samaná El Catey International Airport', 'Samaná',
            19.2670, -69.7420, AirportType.INTERNATIONAL),

    # Domestic
    Airport('MDAB', 'Arroyo Barril Airport', 'Samaná',
            19.1989, -69.4299, AirportType.DOMESTIC),
    Airport('MDBE', 'Cabo Rojo Airport', 'Pedernales',
            17.9289, -71.6446, AirportType.DOMESTIC),
    Airport('MDCR', 'Constanza Airport', 'Constanza',
            18.9075, -70.7219, AirportType.DOMESTIC),
]

_BY_ID = {airport.id: airport for airport in DOMINICAN_AIRPORTS}


def get_airport(airport_id: str) -> Optional[Airport]:
    """Look up an airport by ICAO code (case-insensitive)."""
    if not airport_id:
        return None
    return _BY_ID.get(airport_id.strip().upper())


def international_airports() -> List[Airport]:
    """Airports used for the flight tracker rotation, in catalog order."""
    return [a for a in DOMINICAN_AIRPORTS if a.is_international]


def search_airports(
    text: str,
    airports: Optional[Iterable[Airport]] = None,
) -> List[Airport]:
    """Case-insensitive match on city or name. Empty text returns everything."""
    airports = list(DOMINICAN_AIRPORTS if airports is None else airports)
    needle = (text or '').strip().casefold()
    if not needle:
        return airports
    return [
        a for a in airports
        if needle in a.city.casefold() or needle in a.name.casefold()
    ]


def sort_by_distance(
    lat: float,
    lon: float,
    airports: Optional[Iterable[Airport]] = None,
) -> List[Airport]:
    """Airports ordered nearest-first from the given point."""
    airports = DOMINICAN_AIRPORTS if airports is None else airports
    return sorted(airports, key=lambda a: a.distance_to(lat, lon))
