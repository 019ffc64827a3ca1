"""
Conditions monitor - keeps the selected airport's data fresh.

Selecting an airport fetches wind, weather and the wind series at once;
a background thread repeats that every refresh interval (5 minutes by
default, matching the wind cache TTL).
"""

import logging
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

from windwatch.config import config
from windwatch.errors import NetworkError, WeatherError
from windwatch.models import Airport, WeatherSnapshot, WindHistoryPoint, WindReading
from windwatch.services.wind_service import WindService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AirportConditions:
    """Everything shown for one airport, fetched together."""
    airport: Airport
    wind: WindReading
    weather: WeatherSnapshot
    history: List[WindHistoryPoint]
    forecast: List[WindHistoryPoint]
    updated_at: datetime

    def to_dict(self) -> dict:
        return {
            'airport': self.airport.to_dict(),
            'wind': self.wind.to_dict(),
            'weather': self.weather.to_dict(),
            'history': [p.to_dict() for p in self.history],
            'forecast': [p.to_dict() for p in self.forecast],
            'updated_at': self.updated_at.isoformat(),
        }


class WindMonitor:
    """
    Tracks one selected airport and refreshes it periodically.

    A failed refresh keeps the previous conditions and records the
    error in ``last_error``.
    """

    def __init__(
        self,
        service: Optional[WindService] = None,
        refresh_interval: Optional[float] = None,
    ):
        self.service = service or WindService()
        self.refresh_interval = config.monitor.refresh_interval if refresh_interval is None else refresh_interval

        self.selected_airport: Optional[Airport] = None
        self.conditions: Optional[AirportConditions] = None
        self.last_error: Optional[WeatherError] = None
        self.is_loading = False

        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._refresh_count = 0
        self._error_count = 0

    def select(self, airport: Airport) -> Optional[AirportConditions]:
        """Make airport the selected one and fetch its conditions now."""
        self.selected_airport = airport
        logger.info(f'Selected airport {airport.id}')
        return self.refresh()

    def refresh(self) -> Optional[AirportConditions]:
        """
        Fetch conditions for the selected airport.

        Returns the new conditions, or None if nothing is selected or
        the fetch failed.
        """
        airport = self.selected_airport
        if airport is None:
            return None

        with self._lock:
            self.is_loading = True
            self.last_error = None
            try:
                wind = self.service.fetch_wind_data(airport)
                weather = self.service.fetch_weather_info(airport.latitude, airport.longitude)
                history, forecast = self.service.fetch_wind_history_and_forecast(airport)
            except Exception as e:
                self._error_count += 1
                self.last_error = e if isinstance(e, WeatherError) else NetworkError(e)
                logger.error(f'Refresh failed for {airport.id}: {e}')
                return None
            finally:
                self.is_loading = False

            self.conditions = AirportConditions(
                airport=airport,
                wind=wind,
                weather=weather,
                history=history,
                forecast=forecast,
                updated_at=datetime.now(timezone.utc),
            )
            self._refresh_count += 1
            return self.conditions

    def _run(self) -> None:
        logger.info(f'Auto refresh started (interval={self.refresh_interval}s)')
        while not self._stop_event.wait(self.refresh_interval):
            self.refresh()
        logger.info('Auto refresh stopped')

    def start(self) -> None:
        """Start periodic refresh in a background thread."""
        if self._thread and self._thread.is_alive():
            logger.warning('Auto refresh already running')
            return

        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._run,
            name='wind-monitor',
            daemon=True,
        )
        self._thread.start()

    def stop(self, timeout: float = 5) -> None:
        """Stop periodic refresh and wait for the thread to exit."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=timeout)
            self._thread = None

    @property
    def running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    @property
    def stats(self) -> dict:
        return {
            'selected_airport': self.selected_airport.id if self.selected_airport else None,
            'running': self.running,
            'refresh_count': self._refresh_count,
            'error_count': self._error_count,
            'last_error': self.last_error.user_message if self.last_error else None,
            'updated_at': self.conditions.updated_at.isoformat() if self.conditions else None,
        }
