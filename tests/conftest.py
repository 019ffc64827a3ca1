"""Shared fixtures and fakes for WindWatch tests."""
import json
import threading
from datetime import datetime, timedelta, timezone

import pytest
import requests

from windwatch.models import (
    FlightPosition,
    WeatherCondition,
    WeatherSnapshot,
    WindHistoryPoint,
    WindReading,
    get_airport,
)


def make_response(status=200, payload=None, body=None, content_type='application/json'):
    """Build a real requests.Response without touching the network."""
    response = requests.Response()
    response.status_code = status
    if payload is not None:
        body = json.dumps(payload)
    response._content = (body or '').encode('utf-8')
    response.encoding = 'utf-8'
    response.headers['Content-Type'] = content_type
    return response


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


class StubWeatherClient:
    """Stands in for OpenWeatherClient; counts calls per method."""

    def __init__(self, wind=None, weather=None, forecast=None, error=None):
        self.wind = wind
        self.weather = weather
        self.forecast = forecast or []
        self.error = error
        self.forecast_error = None
        self.wind_calls = 0
        self.weather_calls = 0
        self.forecast_calls = 0
        self.release = None  # threading.Event to block get_wind on
        self._lock = threading.Lock()

    def get_wind(self, lat, lon):
        with self._lock:
            self.wind_calls += 1
        if self.release is not None:
            self.release.wait(timeout=5)
        if self.error:
            raise self.error
        return self.wind

    def get_weather(self, lat, lon):
        self.weather_calls += 1
        if self.error:
            raise self.error
        return self.weather

    def get_forecast(self, lat, lon, limit=6):
        self.forecast_calls += 1
        if self.forecast_error:
            raise self.forecast_error
        return self.forecast[:limit]


class StubFlightService:
    """Stands in for FlightService; returns queued results per call."""

    def __init__(self, results=None):
        self.results = list(results or [])
        self.calls = []

    def fetch_flights(self, near, radius_km=None):
        self.calls.append((near.id, radius_km))
        result = self.results.pop(0) if self.results else []
        if isinstance(result, Exception):
            raise result
        return result


@pytest.fixture
def punta_cana():
    return get_airport('MDPC')


@pytest.fixture
def santo_domingo():
    return get_airport('MDSD')


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def wind_reading():
    return WindReading(
        direction=90.0,
        speed=10.0,
        gust=None,
        timestamp=datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc),
    )


@pytest.fixture
def weather_snapshot():
    return WeatherSnapshot(
        temperature=29.5,
        condition=WeatherCondition.CLOUDY,
        pressure=1013.0,
        humidity=74,
        visibility=10000.0,
        feels_like=33.1,
        cloud_cover=40,
    )


@pytest.fixture
def forecast_points():
    return [
        WindHistoryPoint(
            time=datetime(2024, 5, 1, 15, 0, tzinfo=timezone.utc) + timedelta(hours=3 * i),
            direction=80.0 + i,
            speed=12.0,
        )
        for i in range(8)
    ]


@pytest.fixture
def weather_payload():
    """OpenWeatherMap current weather response for Punta Cana."""
    return {
        'coord': {'lon': -68.3634, 'lat': 18.5674},
        'weather': [
            {'id': 803, 'main': 'Clouds', 'description': 'broken clouds', 'icon': '04d'}
        ],
        'base': 'stations',
        'main': {
            'temp': 29.5,
            'feels_like': 33.1,
            'temp_min': 28.9,
            'temp_max': 30.2,
            'pressure': 1013,
            'humidity': 74,
        },
        'visibility': 10000,
        'wind': {'speed': 10, 'deg': 90, 'gust': 12.5},
        'clouds': {'all': 40},
        'dt': 1714564800,
        'sys': {'country': 'DO', 'sunrise': 1714557000, 'sunset': 1714603200},
        'timezone': -14400,
        'name': 'Punta Cana',
    }


@pytest.fixture
def forecast_payload():
    """OpenWeatherMap 3-hourly forecast response with 8 entries."""
    base = 1714575600
    return {
        'cod': '200',
        'cnt': 8,
        'list': [
            {
                'dt': base + i * 10800,
                'main': {'temp': 28.0},
                'wind': {'speed': 5.0 + i, 'deg': 100 + i * 5, **({'gust': 9.0} if i % 2 == 0 else {})},
            }
            for i in range(8)
        ],
    }


@pytest.fixture
def feed_payload():
    """FlightRadar24 feed response with metadata keys and one malformed entry."""
    return {
        'full_count': 14231,
        'version': 4,
        '2f1a3b4c': ['0C2056', 18.61, -68.45, 275, 3500, 180, '4521', 'F-MDPC1', 'B738', 'HI1024', 1714564800],
        '2f1a3b4d': ['0C2057', 18.95, -68.10, 90.5, 37000, 455, '1200', 'F-TJSJ2', 'A321', 'N123AA'],
        '2f1a3b4e': ['0C2058', 18.40, -68.90, 10, 0, 0, '', 'F-MDPC3'],
        'short01': ['0C2059', 18.5, -68.3],
        'badalt01': ['0C2060', 18.5, -68.3, 45, 'high', 200, '', 'F-X', 'C172'],
        'stats': {'total': {'ads-b': 10000}, 'visible': {'ads-b': 3}},
    }


@pytest.fixture
def flight_factory():
    def make(flight_id, lat, lon, callsign=None, altitude=30000, speed=400):
        return FlightPosition(
            id=flight_id,
            callsign=callsign or flight_id.upper(),
            latitude=lat,
            longitude=lon,
            heading=90.0,
            altitude=altitude,
            ground_speed=speed,
        )
    return make
