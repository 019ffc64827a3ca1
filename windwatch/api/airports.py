"""
Airport catalog API endpoints.

Provides endpoints for:
- GET /api/airports - List airports (search and distance sort)
- GET /api/airports/<airport_id> - Get a single airport
"""

import logging

from flask import Blueprint, current_app, jsonify, request

from windwatch.models import get_airport, search_airports, sort_by_distance

logger = logging.getLogger(__name__)

airports_bp = Blueprint('airports', __name__, url_prefix='/api/airports')


def _parse_point(args):
    """Return (lat, lon) from query args, or None if absent/invalid."""
    lat = args.get('lat', type=float)
    lon = args.get('lon', type=float)
    if lat is None or lon is None:
        return None
    if not (-90 <= lat <= 90) or not (-180 <= lon <= 180):
        return None
    return (lat, lon)


@airports_bp.route('', methods=['GET'])
def list_airports():
    """
    List airports.

    Query parameters:
    - q: string, case-insensitive match on city or name
    - lat, lon: floats, sort nearest-first from this point
      (defaults to the observer location when configured)
    - type: string, international|domestic|private
    """
    airports = search_airports(request.args.get('q', ''))

    airport_type = request.args.get('type')
    if airport_type:
        airports = [a for a in airports if a.airport_type.value == airport_type.lower()]

    point = _parse_point(request.args) or current_app.config.get('OBSERVER_LOCATION')

    if point:
        airports = sort_by_distance(point[0], point[1], airports)

    results = []
    for airport in airports:
        entry = airport.to_dict()
        if point:
            entry['distance_km'] = round(airport.distance_to(point[0], point[1]), 1)
        results.append(entry)

    return jsonify({
        'airports': results,
        'count': len(results),
        'sorted_from': {'latitude': point[0], 'longitude': point[1]} if point else None,
    })


@airports_bp.route('/<airport_id>', methods=['GET'])
def get_airport_detail(airport_id: str):
    """Get a single airport by ICAO code."""
    airport = get_airport(airport_id)
    if airport is None:
        return jsonify({'error': f'Unknown airport {airport_id}'}), 404
    return jsonify(airport.to_dict())
