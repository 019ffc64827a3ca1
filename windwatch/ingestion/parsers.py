"""
Response parsers - provider JSON to domain records.

OpenWeatherMap current weather (data/2.5/weather), fields we use:
    main.temp, main.feels_like, main.pressure, main.humidity, main.temp_min
    weather[0].main                 - condition code ("Clouds", "Rain", ...)
    wind.speed, wind.deg, wind.gust - m/s, degrees, m/s (gust optional)
    visibility                      - meters
    clouds.all                      - %
    sys.sunrise, sys.sunset         - epoch seconds

OpenWeatherMap forecast (data/2.5/forecast):
    list[].dt                       - epoch seconds, ~3 hour cadence
    list[].wind.{speed,deg,gust}

FlightRadar24 feed: a JSON object keyed by flight id. Each flight maps to
a positional array; metadata keys are mixed in at the top level.
    0: icao24 hex
    1: latitude
    2: longitude
    3: heading (degrees)
    4: altitude (feet)
    5: ground speed (knots)
    6: squawk
    7: radar / callsign field
    8: aircraft type code
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from windwatch.errors import DecodingError
from windwatch.models import (
    FlightPosition,
    WeatherCondition,
    WeatherSnapshot,
    WindHistoryPoint,
    WindReading,
    ms_to_knots,
)

logger = logging.getLogger(__name__)

FEED_METADATA_KEYS = frozenset({'full_count', 'version', 'stats'})
MIN_FEED_FIELDS = 8


def _number(value: Any) -> Optional[float]:
    """Return value as float if it is a JSON number, else None."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _integer(value: Any) -> Optional[int]:
    """Return value as int if it is an integral JSON number, else None."""
    number = _number(value)
    if number is None or not number.is_integer():
        return None
    return int(number)


def _require_number(value: Any, field_name: str) -> float:
    number = _number(value)
    if number is None:
        raise DecodingError(f'Expected number for {field_name}, got {value!r}')
    return number


def _optional_number(value: Any, field_name: str) -> Optional[float]:
    if value is None:
        return None
    return _require_number(value, field_name)


def _object(value: Any, field_name: str) -> dict:
    if not isinstance(value, dict):
        raise DecodingError(f'Expected object for {field_name}')
    return value


def _epoch(value: Any) -> Optional[datetime]:
    seconds = _number(value)
    if seconds is None:
        return None
    try:
        return datetime.fromtimestamp(seconds, tz=timezone.utc)
    except (OverflowError, ValueError, OSError) as e:
        raise DecodingError(f'Timestamp out of range: {value!r}') from e


def _parse_wind_block(wind: Any, field_name: str = 'wind'):
    """Return (direction, speed_kts, gust_kts) from a provider wind block."""
    wind = _object(wind, field_name)
    direction = _require_number(wind.get('deg'), f'{field_name}.deg')
    speed = _require_number(wind.get('speed'), f'{field_name}.speed')
    gust = _optional_number(wind.get('gust'), f'{field_name}.gust')
    return direction, ms_to_knots(speed), ms_to_knots(gust)


def parse_wind_reading(data: Any, timestamp: Optional[datetime] = None) -> WindReading:
    """
    Build a WindReading from a current-weather payload.

    Speeds are converted to knots; direction passes through unchanged.
    ``timestamp`` defaults to now (the time we received the data).
    """
    data = _object(data, 'response')
    direction, speed, gust = _parse_wind_block(data.get('wind'))

    return WindReading(
        direction=direction,
        speed=speed,
        gust=gust,
        timestamp=timestamp or datetime.now(timezone.utc),
    )


def parse_weather_snapshot(data: Any) -> WeatherSnapshot:
    """Build a WeatherSnapshot from a current-weather payload."""
    data = _object(data, 'response')
    main = _object(data.get('main'), 'main')

    weather = data.get('weather')
    if not isinstance(weather, list):
        raise DecodingError('Expected array for weather')
    condition_code = None
    if weather and isinstance(weather[0], dict):
        condition_code = weather[0].get('main')

    clouds = _object(data.get('clouds'), 'clouds')
    sys_block = _object(data.get('sys') or {}, 'sys')

    return WeatherSnapshot(
        temperature=_require_number(main.get('temp'), 'main.temp'),
        condition=WeatherCondition.from_provider_code(condition_code),
        pressure=_require_number(main.get('pressure'), 'main.pressure'),
        humidity=int(_require_number(main.get('humidity'), 'main.humidity')),
        visibility=_require_number(data.get('visibility'), 'visibility'),
        feels_like=_require_number(main.get('feels_like'), 'main.feels_like'),
        cloud_cover=int(_require_number(clouds.get('all'), 'clouds.all')),
        dew_point=_optional_number(main.get('temp_min'), 'main.temp_min'),
        sunrise=_epoch(sys_block.get('sunrise')),
        sunset=_epoch(sys_block.get('sunset')),
    )


def parse_forecast(data: Any, limit: int = 6) -> List[WindHistoryPoint]:
    """
    Build forecast points from a forecast payload.

    Takes the first ``limit`` entries as-is; no resampling.
    """
    data = _object(data, 'response')
    entries = data.get('list')
    if not isinstance(entries, list):
        raise DecodingError('Expected array for list')

    points = []
    for i, entry in enumerate(entries[:limit]):
        entry = _object(entry, f'list[{i}]')
        time = _epoch(entry.get('dt'))
        if time is None:
            raise DecodingError(f'Expected epoch seconds for list[{i}].dt')
        direction, speed, gust = _parse_wind_block(entry.get('wind'), f'list[{i}].wind')
        points.append(WindHistoryPoint(
            time=time,
            direction=direction,
            speed=speed,
            gust=gust,
        ))

    return points


def parse_flight_entry(flight_id: str, fields: List[Any]) -> Optional[FlightPosition]:
    """
    Parse one feed array into a FlightPosition.

    Returns None if the array is too short or a required field has
    the wrong type.
    """
    if len(fields) < MIN_FEED_FIELDS:
        return None

    latitude = _number(fields[1])
    longitude = _number(fields[2])
    heading = _number(fields[3])
    altitude = _integer(fields[4])
    speed = _integer(fields[5])
    callsign = fields[7]

    if None in (latitude, longitude, heading, altitude, speed):
        return None
    if not isinstance(callsign, str):
        return None

    aircraft_type = 'Unknown'
    if len(fields) > MIN_FEED_FIELDS and isinstance(fields[8], str) and fields[8]:
        aircraft_type = fields[8]

    return FlightPosition(
        id=flight_id,
        callsign=callsign,
        latitude=latitude,
        longitude=longitude,
        heading=heading,
        altitude=altitude,
        ground_speed=speed,
        aircraft_type=aircraft_type,
    )


def parse_flight_feed(data: Any) -> List[FlightPosition]:
    """
    Parse a feed response into flight positions.

    Metadata keys and entries that aren't arrays are skipped, as are
    arrays that don't carry a usable position.
    """
    if not isinstance(data, dict):
        raise DecodingError('Expected object for flight feed response')

    flights = []
    skipped = 0
    for key, value in data.items():
        if key in FEED_METADATA_KEYS or not isinstance(value, list):
            continue
        flight = parse_flight_entry(key, value)
        if flight is None:
            skipped += 1
            continue
        flights.append(flight)

    if skipped:
        logger.debug(f'Skipped {skipped} malformed feed entries')

    return flights
