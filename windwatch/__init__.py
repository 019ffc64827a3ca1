"""
WindWatch Package.

Wind and weather for Dominican Republic airports, plus live flight
tracking around them. Built with Flask, requests and NumPy.

Modules:
    api/         REST endpoints for airports, wind, flights and status
    models/      Domain dataclasses (Airport, WindReading, WeatherSnapshot, FlightPosition)
    ingestion/   HTTP adapter, parsers, OpenWeatherMap and FlightRadar24 clients
    services/    Cached fetch services, flight tracker and auto refresh
    analytics/   NumPy summaries of wind series
    cache.py     Thread-safe TTL cache
    config.py    Centralized configuration from environment variables
    errors.py    Error taxonomy with user-facing messages
    geo.py       Haversine distance and bounding boxes
"""

__version__ = '1.0.0'
