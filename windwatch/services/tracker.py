"""
Flight tracker - polls the live feed around a rotation of airports.

Each tick covers one airport:
1. Pick the next international airport (round robin)
2. Fetch flights inside a bounding box around it
3. Merge: drop tracked flights within 100 km of that airport, keep the
   rest (they belong to other airports' areas), add the fresh ones
4. Advance the rotation, whether or not the fetch succeeded

A failed tick is recorded in ``last_error``; polling carries on.
"""

import logging
import threading
import time
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional

from windwatch.config import config
from windwatch.ingestion.rate_limit import fetch_with_retry
from windwatch.models import Airport, FlightPosition, international_airports
from windwatch.services.flight_service import FlightService

logger = logging.getLogger(__name__)


class TrackerState(str, Enum):
    """Polling state."""
    IDLE = 'idle'
    POLLING = 'polling'


def merge_flights(
    existing: Iterable[FlightPosition],
    fetched: Iterable[FlightPosition],
    center_lat: float,
    center_lon: float,
    retain_distance_km: float = 100.0,
) -> List[FlightPosition]:
    """
    Merge a fresh fetch around a center point into the tracked set.

    Existing flights farther than ``retain_distance_km`` from the center
    are kept. Fetched flights replace anything with the same id.
    """
    merged: Dict[str, FlightPosition] = {}
    for flight in existing:
        if flight.distance_to(center_lat, center_lon) > retain_distance_km:
            merged[flight.id] = flight
    for flight in fetched:
        merged[flight.id] = flight
    return list(merged.values())


class FlightTracker:
    """
    Manages the flight polling lifecycle.

    Can run as a background thread for continuous polling; the thread
    is owned by the tracker and stopped with ``stop()``.
    """

    def __init__(
        self,
        service: Optional[FlightService] = None,
        airports: Optional[Iterable[Airport]] = None,
        radius_km: Optional[float] = None,
        retain_distance_km: Optional[float] = None,
        retry_attempts: Optional[int] = None,
        retry_delay: Optional[float] = None,
    ):
        """
        Initialize the tracker.

        Args:
            service: Flight service (created from config if None)
            airports: Rotation to cycle through (international airports if None)
            radius_km: Query radius in kilometers
            retain_distance_km: Distance beyond which tracked flights survive a merge
            retry_attempts: Fetch attempts per tick on network failure
            retry_delay: Seconds between attempts
        """
        self.service = service or FlightService()
        self.airports: List[Airport] = list(airports) if airports is not None else international_airports()
        self.radius_km = config.flight_feed.default_radius_km if radius_km is None else radius_km
        self.retain_distance_km = (
            config.flight_feed.retain_distance_km if retain_distance_km is None else retain_distance_km
        )
        self.retry_attempts = config.retry.attempts if retry_attempts is None else retry_attempts
        self.retry_delay = config.retry.delay_seconds if retry_delay is None else retry_delay

        # State tracking
        self._flights: List[FlightPosition] = []
        self._index = 0
        self._lock = threading.RLock()
        self.last_error: Optional[Exception] = None

        self._state = TrackerState.IDLE
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._tick_count = 0
        self._error_count = 0
        self._last_tick_time: float = 0

        # Callbacks for external integration
        self._on_update_callbacks: List[Callable[[int], None]] = []

    @property
    def flights(self) -> List[FlightPosition]:
        with self._lock:
            return list(self._flights)

    @property
    def state(self) -> TrackerState:
        return self._state

    @property
    def rotation_index(self) -> int:
        return self._index

    @property
    def current_airport(self) -> Optional[Airport]:
        """Airport the next tick will poll."""
        if not self.airports:
            return None
        return self.airports[self._index]

    def add_update_callback(self, callback: Callable[[int], None]) -> None:
        """
        Register callback to be invoked after each successful tick.

        Callback receives the count of tracked flights.
        """
        self._on_update_callbacks.append(callback)

    def tick(self) -> int:
        """
        Execute one polling cycle.

        Returns count of tracked flights, or -1 on error.
        """
        if not self.airports:
            logger.warning('No airports in rotation, skipping tick')
            return -1

        with self._lock:
            airport = self.airports[self._index]
        logger.debug(f'Updating flights for {airport.name}...')

        # Lock is not held across the fetch or its retry sleeps
        try:
            fetched = fetch_with_retry(
                lambda: self.service.fetch_flights(airport, self.radius_km),
                attempts=self.retry_attempts,
                delay=self.retry_delay,
                sleep=self._stop_event.wait,
            )
        except Exception as e:
            fetched = None
            error = e
            logger.error(f'Error fetching flights for {airport.name}: {e}')

        with self._lock:
            if fetched is not None:
                self._flights = merge_flights(
                    self._flights,
                    fetched,
                    airport.latitude,
                    airport.longitude,
                    self.retain_distance_km,
                )
                self.last_error = None
                count = len(self._flights)
                logger.info(f'{len(fetched)} flights near {airport.id}, {count} tracked in total')
            else:
                self._error_count += 1
                self.last_error = error
                count = -1

            # Move on even after a failure
            self._index = (self._index + 1) % len(self.airports)
            self._tick_count += 1
            self._last_tick_time = time.time()

        if count >= 0:
            for callback in self._on_update_callbacks:
                try:
                    callback(count)
                except Exception as e:
                    logger.error(f'Update callback error: {e}')

        return count

    def run_continuous(self, interval: Optional[float] = None) -> None:
        """
        Poll continuously until ``stop()``.

        Ticks once immediately, then every ``interval`` seconds. This
        method blocks - use start() for non-blocking.
        """
        interval = config.flight_feed.poll_interval if interval is None else interval
        self._state = TrackerState.POLLING

        logger.info(f'Starting flight tracking (interval={interval}s, {len(self.airports)} airports)')

        try:
            self.tick()
            while not self._stop_event.wait(interval):
                self.tick()
        finally:
            self._state = TrackerState.IDLE
            logger.info('Flight tracking stopped')

    def start(self, interval: Optional[float] = None) -> None:
        """Start polling in background thread."""
        if self._thread and self._thread.is_alive():
            logger.warning('Flight tracking already running')
            return

        self._stop_event.clear()
        self._state = TrackerState.POLLING
        self._thread = threading.Thread(
            target=self.run_continuous,
            args=(interval,),
            name='flight-tracker',
            daemon=True,
        )
        self._thread.start()
        logger.info('Background flight tracking started')

    def stop(self, timeout: float = 5) -> None:
        """Stop background polling."""
        self._stop_event.set()
        if self._thread:
            self._thread.join(timeout=timeout)
            self._thread = None
        self._state = TrackerState.IDLE

    @property
    def stats(self) -> dict:
        """Get tracker statistics."""
        current = self.current_airport
        return {
            'state': self._state.value,
            'tracked_flights': len(self.flights),
            'tick_count': self._tick_count,
            'error_count': self._error_count,
            'last_tick_time': self._last_tick_time,
            'next_airport': current.id if current else None,
            'last_error': str(self.last_error) if self.last_error else None,
        }
