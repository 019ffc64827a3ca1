"""
Wind and weather API endpoints.

Provides endpoints for:
- GET /api/wind/<airport_id> - Current wind (cached for 5 minutes)
- GET /api/wind/<airport_id>/weather - Current weather snapshot
- GET /api/wind/<airport_id>/series - Wind history and forecast with summaries
- GET /api/wind/selected - Conditions for the monitored airport
- POST /api/wind/selected - Select the monitored airport

Provider failures propagate as WeatherError and are rendered by the
application's error handler.
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request

from windwatch.analytics import summarize_series
from windwatch.models import get_airport

logger = logging.getLogger(__name__)

wind_bp = Blueprint('wind', __name__, url_prefix='/api/wind')


def _unknown_airport(airport_id: str):
    return jsonify({'error': f'Unknown airport {airport_id}'}), 404


def _summary_dict(points):
    summary = summarize_series(points)
    return summary.to_dict() if summary else None


@wind_bp.route('/selected', methods=['GET', 'POST'])
def selected_conditions():
    """
    Get or set the monitored airport.

    GET: Returns the latest conditions for the selected airport
    POST: Select an airport and fetch its conditions now
        Body: {"airport_id": "MDPC"}
    """
    monitor = current_app.config.get('WIND_MONITOR')
    if monitor is None:
        return jsonify({'error': 'Monitor not running'}), 503

    if request.method == 'POST':
        data = request.get_json(silent=True)
        if not data or not data.get('airport_id'):
            return jsonify({'error': 'airport_id required'}), 400

        airport = get_airport(data['airport_id'])
        if airport is None:
            return _unknown_airport(data['airport_id'])

        monitor.select(airport)

    conditions = monitor.conditions
    return jsonify({
        'selected': monitor.selected_airport.id if monitor.selected_airport else None,
        'conditions': conditions.to_dict() if conditions else None,
        'error': monitor.last_error.user_message if monitor.last_error else None,
    })


@wind_bp.route('/<airport_id>', methods=['GET'])
def get_wind(airport_id: str):
    """Current wind at an airport."""
    airport = get_airport(airport_id)
    if airport is None:
        return _unknown_airport(airport_id)

    start_time = time.perf_counter()
    reading = current_app.config['WIND_SERVICE'].fetch_wind_data(airport)
    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'airport': airport.id,
        'wind': reading.to_dict(),
        'query_time_ms': round(query_time_ms, 2),
    })


@wind_bp.route('/<airport_id>/weather', methods=['GET'])
def get_weather(airport_id: str):
    """Current weather at an airport."""
    airport = get_airport(airport_id)
    if airport is None:
        return _unknown_airport(airport_id)

    snapshot = current_app.config['WIND_SERVICE'].fetch_weather_info(
        airport.latitude,
        airport.longitude,
    )

    return jsonify({
        'airport': airport.id,
        'weather': snapshot.to_dict(),
        'timestamp': datetime.now(timezone.utc).isoformat(),
    })


@wind_bp.route('/<airport_id>/series', methods=['GET'])
def get_series(airport_id: str):
    """
    Wind history (past 6 hours, synthesized) and forecast (next 6 points).

    Each series comes with a summary: mean/max speed, max gust,
    prevailing direction and speed trend.
    """
    airport = get_airport(airport_id)
    if airport is None:
        return _unknown_airport(airport_id)

    history, forecast = current_app.config['WIND_SERVICE'].fetch_wind_history_and_forecast(airport)

    return jsonify({
        'airport': airport.id,
        'history': [p.to_dict() for p in history],
        'forecast': [p.to_dict() for p in forecast],
        'summary': {
            'history': _summary_dict(history),
            'forecast': _summary_dict(forecast),
        },
    })
