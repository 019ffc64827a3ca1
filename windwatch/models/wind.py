"""
Wind readings and wind time series.

All speeds are stored in knots. Providers report meters/second, so
conversion happens once, at parse time.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

# m/s -> kt
MS_TO_KNOTS = 1.94384


def ms_to_knots(value: Optional[float]) -> Optional[float]:
    """Convert meters/second to knots, passing None through."""
    if value is None:
        return None
    return value * MS_TO_KNOTS


def _round(value: Optional[float], digits: int = 1) -> Optional[float]:
    return round(value, digits) if value is not None else None


@dataclass(frozen=True)
class WindReading:
    """
    Current wind at an airport.

    ``gust`` is the peak over the provider's sampling window. It is not
    checked against ``speed``; a provider reporting gust < speed is
    passed through as-is.
    """
    direction: float  # degrees, 0-360
    speed: float  # knots
    gust: Optional[float]  # knots
    timestamp: datetime

    @property
    def has_gust(self) -> bool:
        return self.gust is not None

    def to_dict(self) -> dict:
        return {
            'direction': self.direction,
            'speed_kts': _round(self.speed),
            'gust_kts': _round(self.gust),
            'timestamp': self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class WindHistoryPoint:
    """One point of a wind history or forecast series."""
    time: datetime
    direction: float
    speed: float
    gust: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            'time': self.time.isoformat(),
            'direction': round(self.direction, 1),
            'speed_kts': _round(self.speed),
            'gust_kts': _round(self.gust),
        }
