"""
Wind series analysis using NumPy.

Summarizes a history or forecast series into the numbers a pilot scans
for: average and peak wind, strongest gust, prevailing direction and
whether the wind is building or dying off.

Direction is circular (350° and 10° average to 0°, not 180°), so the
mean direction is taken from the mean unit vector.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from windwatch.models import WindHistoryPoint

logger = logging.getLogger(__name__)


class TrendDirection(str, Enum):
    """Trend direction classification."""
    INCREASING = 'increasing'
    STABLE = 'stable'
    DECREASING = 'decreasing'
    UNKNOWN = 'unknown'


@dataclass(frozen=True)
class WindSeriesSummary:
    """Aggregate statistics for one wind series."""
    count: int
    mean_speed: float
    max_speed: float
    max_gust: Optional[float]
    mean_direction: float
    direction_spread: float  # largest deviation from mean_direction, degrees
    speed_trend: TrendDirection

    def to_dict(self) -> dict:
        return {
            'count': self.count,
            'mean_speed_kts': round(self.mean_speed, 1),
            'max_speed_kts': round(self.max_speed, 1),
            'max_gust_kts': round(self.max_gust, 1) if self.max_gust is not None else None,
            'mean_direction': round(self.mean_direction, 0),
            'direction_spread': round(self.direction_spread, 0),
            'speed_trend': self.speed_trend.value,
        }


def circular_mean(directions: np.ndarray) -> float:
    """Mean of angles in degrees, in [0, 360)."""
    radians = np.radians(directions)
    mean = np.degrees(np.arctan2(np.mean(np.sin(radians)), np.mean(np.cos(radians))))
    return float(mean % 360)


def angular_difference(a: np.ndarray, b: float) -> np.ndarray:
    """Smallest absolute difference between angles, degrees in [0, 180]."""
    diff = np.abs((a - b) % 360)
    return np.minimum(diff, 360 - diff)


def compute_trend(
    hours: np.ndarray,
    values: np.ndarray,
    threshold: float = 0.1,
    min_samples: int = 2,
) -> TrendDirection:
    """
    Determine trend direction using linear regression.

    The slope (per hour) is normalized by the series' peak-to-peak range
    so the threshold works for light and strong winds alike.
    """
    if len(values) < min_samples:
        return TrendDirection.UNKNOWN

    try:
        slope, _ = np.polyfit(hours, values, 1)
    except (np.linalg.LinAlgError, ValueError):
        return TrendDirection.UNKNOWN

    value_range = np.ptp(values)
    normalized_slope = slope / value_range if value_range > 0 else 0

    if normalized_slope > threshold:
        return TrendDirection.INCREASING
    elif normalized_slope < -threshold:
        return TrendDirection.DECREASING
    return TrendDirection.STABLE


def summarize_series(
    points: Sequence[WindHistoryPoint],
    trend_threshold: float = 0.1,
) -> Optional[WindSeriesSummary]:
    """
    Summarize a wind series.

    Returns None for an empty series. Points need not be sorted.
    """
    if not points:
        return None

    ordered = sorted(points, key=lambda p: p.time)
    start = ordered[0].time

    hours = np.array([(p.time - start).total_seconds() / 3600 for p in ordered], dtype=np.float64)
    speeds = np.array([p.speed for p in ordered], dtype=np.float64)
    directions = np.array([p.direction for p in ordered], dtype=np.float64)
    gusts = np.array(
        [p.gust if p.gust is not None else np.nan for p in ordered],
        dtype=np.float64,
    )

    mean_direction = circular_mean(directions)
    valid_gusts = gusts[~np.isnan(gusts)]

    return WindSeriesSummary(
        count=len(ordered),
        mean_speed=float(np.mean(speeds)),
        max_speed=float(np.max(speeds)),
        max_gust=float(np.max(valid_gusts)) if len(valid_gusts) else None,
        mean_direction=mean_direction,
        direction_spread=float(np.max(angular_difference(directions, mean_direction))),
        speed_trend=compute_trend(hours, speeds, threshold=trend_threshold),
    )
