"""
Weather snapshot model and condition classification.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional

METERS_PER_NAUTICAL_MILE = 1852.0
HPA_TO_INHG = 0.02953


class WeatherCondition(str, Enum):
    """
    Simplified sky condition.

    Provider condition codes are free text ("Clouds", "Drizzle", ...).
    Anything we don't recognize is shown as CLEAR.
    """
    CLEAR = 'clear'
    CLOUDY = 'cloudy'
    RAIN = 'rain'
    STORM = 'storm'
    SNOW = 'snow'
    MIST = 'mist'
    HAZE = 'haze'

    @classmethod
    def from_provider_code(cls, code: Optional[str]) -> 'WeatherCondition':
        if not code:
            return cls.CLEAR
        return _PROVIDER_CODES.get(code.strip().lower(), cls.CLEAR)

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]


_PROVIDER_CODES = {
    'clear': WeatherCondition.CLEAR,
    'clouds': WeatherCondition.CLOUDY,
    'rain': WeatherCondition.RAIN,
    'drizzle': WeatherCondition.RAIN,
    'thunderstorm': WeatherCondition.STORM,
    'snow': WeatherCondition.SNOW,
    'mist': WeatherCondition.MIST,
    'fog': WeatherCondition.MIST,
    'haze': WeatherCondition.HAZE,
    'smoke': WeatherCondition.HAZE,
    'dust': WeatherCondition.HAZE,
}

_DESCRIPTIONS = {
    WeatherCondition.CLEAR: 'Clear Skies',
    WeatherCondition.CLOUDY: 'Cloudy',
    WeatherCondition.RAIN: 'Rain',
    WeatherCondition.STORM: 'Thunderstorm',
    WeatherCondition.SNOW: 'Snow',
    WeatherCondition.MIST: 'Mist',
    WeatherCondition.HAZE: 'Haze',
}


@dataclass(frozen=True)
class WeatherSnapshot:
    """Current weather at a location, in metric units."""
    temperature: float  # C
    condition: WeatherCondition
    pressure: float  # hPa
    humidity: int  # %
    visibility: float  # meters
    feels_like: float  # C
    cloud_cover: int  # %
    dew_point: Optional[float] = None
    sunrise: Optional[datetime] = None
    sunset: Optional[datetime] = None

    @property
    def visibility_nm(self) -> float:
        """Visibility in nautical miles."""
        return self.visibility / METERS_PER_NAUTICAL_MILE

    @property
    def altimeter_inhg(self) -> str:
        """Pressure as an altimeter setting string, e.g. '29.92'."""
        return f'{self.pressure * HPA_TO_INHG:.2f}'

    def to_dict(self) -> dict:
        return {
            'temperature_c': self.temperature,
            'feels_like_c': self.feels_like,
            'condition': self.condition.value,
            'condition_description': self.condition.description,
            'pressure_hpa': self.pressure,
            'altimeter_inhg': self.altimeter_inhg,
            'humidity_pct': self.humidity,
            'visibility_m': self.visibility,
            'visibility_nm': round(self.visibility_nm, 1),
            'cloud_cover_pct': self.cloud_cover,
            'dew_point_c': self.dew_point,
            'sunrise': self.sunrise.isoformat() if self.sunrise else None,
            'sunset': self.sunset.isoformat() if self.sunset else None,
        }
