"""
Flight data API endpoints.

Provides endpoints for:
- GET /api/flights - List all tracked flights
- GET /api/flights/near/<airport_id> - Flights around one airport
"""

import logging
import time
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request

from windwatch.models import get_airport

logger = logging.getLogger(__name__)

flights_bp = Blueprint('flights', __name__, url_prefix='/api/flights')


@flights_bp.route('', methods=['GET'])
def list_flights():
    """
    List all flights collected by the tracker.

    Query parameters:
    - limit: int, max results to return (default 100)
    - sort: string, sort field (altitude|speed|callsign, default callsign)
    """
    tracker = current_app.config.get('FLIGHT_TRACKER')
    if tracker is None:
        return jsonify({'error': 'Flight tracking not running'}), 503

    limit = min(request.args.get('limit', 100, type=int), 500)
    sort_by = request.args.get('sort', 'callsign')

    flights = tracker.flights
    if sort_by == 'altitude':
        flights.sort(key=lambda f: f.altitude, reverse=True)
    elif sort_by == 'speed':
        flights.sort(key=lambda f: f.ground_speed, reverse=True)
    else:
        flights.sort(key=lambda f: f.callsign)

    flights = flights[:limit]

    return jsonify({
        'flights': [f.to_dict() for f in flights],
        'count': len(flights),
        'tracker': tracker.stats,
        'timestamp': datetime.now(timezone.utc).isoformat(),
    })


@flights_bp.route('/near/<airport_id>', methods=['GET'])
def flights_near(airport_id: str):
    """
    Flights inside the bounding box around an airport.

    Query parameters:
    - radius: float, kilometers (default 150)
    """
    airport = get_airport(airport_id)
    if airport is None:
        return jsonify({'error': f'Unknown airport {airport_id}'}), 404

    radius = request.args.get('radius', type=float)
    if radius is not None and radius <= 0:
        return jsonify({'error': 'radius must be positive'}), 400

    start_time = time.perf_counter()
    flights = current_app.config['FLIGHT_SERVICE'].fetch_flights(airport, radius)
    query_time_ms = (time.perf_counter() - start_time) * 1000

    return jsonify({
        'airport': airport.id,
        'flights': [f.to_dict() for f in flights],
        'count': len(flights),
        'query_time_ms': round(query_time_ms, 2),
    })
