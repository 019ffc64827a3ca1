"""
WindWatch Flask Application.

Main entry point for the web application. Initializes:
- Wind and flight services (each owning its cache)
- Flight tracker polling loop
- Selected-airport auto refresh
- API routes

Usage:
    python -m windwatch.app

Or with gunicorn:
    gunicorn 'windwatch.app:create_app()'
"""

import atexit
import logging
import os
from typing import Optional

from flask import Flask
from flask_cors import CORS

from windwatch.api import airports_bp, flights_bp, status_bp, wind_bp
from windwatch.config import config
from windwatch.errors import RateLimitExceededError, WeatherError
from windwatch.services import FlightService, FlightTracker, WindMonitor, WindService

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if config.debug else logging.INFO,
    format='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S',
)
logger = logging.getLogger(__name__)


def _detect_observer_location():
    """Approximate location from IP, or None."""
    try:
        import geocoder
        g = geocoder.ip('me')
        if g.ok and g.latlng:
            logger.info(f'Auto-detected location: {tuple(g.latlng)} ({g.city}, {g.country})')
            return tuple(g.latlng)
    except Exception as e:
        logger.warning(f'Location auto-detect failed: {e}')
    return None


def create_app(
    start_background: bool = True,
    wind_service: Optional[WindService] = None,
    flight_service: Optional[FlightService] = None,
) -> Flask:
    """
    Application factory for Flask.

    Args:
        start_background: Whether to start flight tracking and auto refresh.
                          Set to False for testing.
        wind_service: Wind service to use (created from config if None)
        flight_service: Flight service to use (created from config if None)

    Returns:
        Configured Flask application instance.
    """
    app = Flask(__name__)

    # Configuration
    app.config['SECRET_KEY'] = config.secret_key

    # Enable CORS for API endpoints
    CORS(app, resources={r'/api/*': {'origins': '*'}})

    # Register API blueprints
    app.register_blueprint(airports_bp)
    app.register_blueprint(wind_bp)
    app.register_blueprint(flights_bp)
    app.register_blueprint(status_bp)

    wind_service = wind_service or WindService()
    flight_service = flight_service or FlightService()
    app.config['WIND_SERVICE'] = wind_service
    app.config['FLIGHT_SERVICE'] = flight_service

    tracker = FlightTracker(service=flight_service)
    monitor = WindMonitor(service=wind_service)
    app.config['FLIGHT_TRACKER'] = tracker
    app.config['WIND_MONITOR'] = monitor

    # Observer location is only used to sort airports by distance
    observer_location = config.user_location
    if not observer_location and start_background:
        observer_location = _detect_observer_location()
    app.config['OBSERVER_LOCATION'] = observer_location

    if start_background:
        tracker.start()
        monitor.start()
        atexit.register(tracker.stop)
        atexit.register(monitor.stop)
        logger.info(
            f'Flight tracking started over {len(tracker.airports)} airports '
            f'every {config.flight_feed.poll_interval}s'
        )

    # -------------------------------------------------------------------------
    # Routes
    # -------------------------------------------------------------------------

    @app.route('/health')
    def health():
        """Simple health check endpoint."""
        return {'status': 'ok'}

    # -------------------------------------------------------------------------
    # Error handlers
    # -------------------------------------------------------------------------

    @app.errorhandler(WeatherError)
    def weather_error(e: WeatherError):
        status = 429 if isinstance(e, RateLimitExceededError) else 502
        logger.error(f'{type(e).__name__}: {e}')
        return {'error': type(e).__name__, 'message': e.user_message}, status

    @app.errorhandler(404)
    def not_found(e):
        return {'error': 'Not found'}, 404

    @app.errorhandler(500)
    def server_error(e):
        logger.error(f'Server error: {e}')
        return {'error': 'Internal server error'}, 500

    return app


def run_development_server():
    """Run the development server."""
    app = create_app()

    # Get port from environment or default
    port = int(os.environ.get('PORT', 5000))

    logger.info(f'Starting WindWatch on http://localhost:{port}')

    app.run(
        host='0.0.0.0',
        port=port,
        debug=config.debug,
        use_reloader=False,  # Disable reloader to prevent duplicate polling threads
    )


if __name__ == '__main__':
    run_development_server()
