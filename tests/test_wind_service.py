"""Tests for the wind/weather fetch service."""
import random
import threading
import time
from datetime import datetime, timedelta, timezone

import pytest

from conftest import StubWeatherClient
from windwatch.errors import APIError, DecodingError, NetworkError
from windwatch.models import WindReading
from windwatch.services.wind_service import WindService, synthesize_history

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def stub_client(wind_reading, weather_snapshot, forecast_points):
    return StubWeatherClient(wind=wind_reading, weather=weather_snapshot, forecast=forecast_points)


@pytest.fixture
def service(stub_client, clock):
    return WindService(
        client=stub_client,
        cache_ttl_seconds=300,
        clock=clock,
        rng=random.Random(42),
        now=lambda: NOW,
    )


def test_cache_hit_makes_no_network_call(service, stub_client, punta_cana, clock):
    first = service.fetch_wind_data(punta_cana)
    clock.advance(299)
    second = service.fetch_wind_data(punta_cana)

    assert stub_client.wind_calls == 1
    assert second is first


def test_expired_entry_triggers_exactly_one_fetch(service, stub_client, punta_cana, clock):
    service.fetch_wind_data(punta_cana)
    clock.advance(300)

    service.fetch_wind_data(punta_cana)
    service.fetch_wind_data(punta_cana)

    assert stub_client.wind_calls == 2


def test_cache_is_per_airport(service, stub_client, punta_cana, santo_domingo):
    service.fetch_wind_data(punta_cana)
    service.fetch_wind_data(santo_domingo)
    service.fetch_wind_data(punta_cana)

    assert stub_client.wind_calls == 2


def test_failure_leaves_previous_entry_untouched(service, stub_client, punta_cana, clock):
    first = service.fetch_wind_data(punta_cana)
    stored_at = service.cache.get_entry(punta_cana.id).stored_at

    clock.advance(301)
    stub_client.error = APIError(500, 'Internal error')
    with pytest.raises(APIError):
        service.fetch_wind_data(punta_cana)

    entry = service.cache.get_entry(punta_cana.id)
    # The expired entry was dropped on read; nothing new was written
    assert entry is None or (entry.value is first and entry.stored_at == stored_at)


def test_failure_on_first_fetch_caches_nothing(service, stub_client, punta_cana):
    stub_client.error = DecodingError()

    with pytest.raises(DecodingError):
        service.fetch_wind_data(punta_cana)
    assert len(service.cache) == 0


def test_unexpected_errors_become_network_errors(service, stub_client, punta_cana):
    stub_client.error = OSError('socket closed')

    with pytest.raises(NetworkError) as exc_info:
        service.fetch_wind_data(punta_cana)
    assert isinstance(exc_info.value.cause, OSError)


def test_concurrent_misses_share_one_request(service, stub_client, punta_cana):
    stub_client.release = threading.Event()
    results = []

    def worker():
        results.append(service.fetch_wind_data(punta_cana))

    threads = [threading.Thread(target=worker) for _ in range(5)]
    for t in threads:
        t.start()

    # Let every thread reach the cache/in-flight check while the fetch is blocked
    time.sleep(0.2)
    stub_client.release.set()
    for t in threads:
        t.join(timeout=5)

    assert stub_client.wind_calls == 1
    assert len(results) == 5
    assert all(r is results[0] for r in results)


def test_concurrent_waiters_share_the_error(service, stub_client, punta_cana):
    stub_client.release = threading.Event()
    stub_client.error = APIError(502, 'Bad Gateway')
    errors = []

    def worker():
        try:
            service.fetch_wind_data(punta_cana)
        except APIError as e:
            errors.append(e)

    threads = [threading.Thread(target=worker) for _ in range(3)]
    for t in threads:
        t.start()
    time.sleep(0.2)
    stub_client.release.set()
    for t in threads:
        t.join(timeout=5)

    assert stub_client.wind_calls == 1
    assert len(errors) == 3


def test_weather_info_is_not_cached(service, stub_client):
    service.fetch_weather_info(18.5674, -68.3634)
    service.fetch_weather_info(18.5674, -68.3634)

    assert stub_client.weather_calls == 2


def test_history_and_forecast(service, stub_client, punta_cana):
    history, forecast = service.fetch_wind_history_and_forecast(punta_cana)

    assert len(history) == 6
    assert len(forecast) == 6
    assert stub_client.forecast_calls == 1
    # History always takes a fresh reading
    assert stub_client.wind_calls == 1
    assert forecast[0].speed == 12.0


def test_history_fetch_does_not_populate_cache(service, punta_cana):
    service.fetch_wind_history_and_forecast(punta_cana)
    assert len(service.cache) == 0


def test_forecast_failure_fails_whole_operation(service, stub_client, punta_cana):
    stub_client.forecast_error = APIError(429, 'Too many requests')

    with pytest.raises(APIError):
        service.fetch_wind_history_and_forecast(punta_cana)


def test_history_failure_fails_whole_operation(service, stub_client, punta_cana):
    stub_client.error = NetworkError(ConnectionError('offline'))

    with pytest.raises(NetworkError):
        service.fetch_wind_history_and_forecast(punta_cana)


def test_clear_cache(service, stub_client, punta_cana):
    service.fetch_wind_data(punta_cana)
    service.clear_cache()
    service.fetch_wind_data(punta_cana)

    assert stub_client.wind_calls == 2


@pytest.mark.parametrize('seed', range(20))
def test_synthesized_history_bounds(wind_reading, seed):
    history = synthesize_history(wind_reading, now=NOW, rng=random.Random(seed))

    assert len(history) == 6
    for point in history:
        assert 8.0 <= point.speed <= 12.0
        assert 70.0 <= point.direction <= 110.0
        assert point.gust is None

    times = [p.time for p in history]
    assert times == sorted(times)
    assert times[0] == NOW - timedelta(hours=6)
    assert times[-1] == NOW - timedelta(hours=1)


def test_synthesized_history_wraps_direction():
    north = WindReading(direction=5.0, speed=10.0, gust=14.0, timestamp=NOW)

    for seed in range(20):
        for point in synthesize_history(north, now=NOW, rng=random.Random(seed)):
            assert 0.0 <= point.direction < 360.0
            assert point.direction <= 25.0 or point.direction >= 345.0
            # Gust scales with the same factor as speed
            assert point.gust == pytest.approx(point.speed * 1.4)
