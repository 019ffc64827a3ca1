"""
Status API endpoint.

Provides endpoints for:
- GET /api/status - Background services, caches and configuration
"""

import logging
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify

from windwatch.config import config

logger = logging.getLogger(__name__)

status_bp = Blueprint('status', __name__, url_prefix='/api/status')


@status_bp.route('', methods=['GET'])
def get_system_status():
    """
    Get system health and status information.

    Returns:
    - Flight tracker status
    - Wind monitor status
    - Cache statistics
    - Configuration info
    """
    tracker = current_app.config.get('FLIGHT_TRACKER')
    monitor = current_app.config.get('WIND_MONITOR')
    wind_service = current_app.config.get('WIND_SERVICE')
    flight_service = current_app.config.get('FLIGHT_SERVICE')

    tracker_stats = tracker.stats if tracker else {'state': 'idle'}
    healthy = tracker_stats.get('last_error') is None

    return jsonify({
        'status': 'healthy' if healthy else 'degraded',
        'tracker': tracker_stats,
        'monitor': monitor.stats if monitor else None,
        'cache': {
            'wind': wind_service.cache.stats if wind_service else None,
            'flights': flight_service.cache.stats if flight_service else None,
        },
        'observer': current_app.config.get('OBSERVER_LOCATION'),
        'config': {
            'poll_interval': config.flight_feed.poll_interval,
            'radius_km': config.flight_feed.default_radius_km,
            'refresh_interval': config.monitor.refresh_interval,
            'openweather_configured': config.openweather.is_configured,
            'rate_limit_per_minute': config.rate_limit.max_requests if config.rate_limit.enabled else None,
        },
        'timestamp': datetime.now(timezone.utc).isoformat(),
    })
