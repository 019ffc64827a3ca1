"""
Error taxonomy for weather and flight data fetching.

Every error carries a human-readable ``user_message`` so the
presentation layer can show something sensible without inspecting
the exception type.
"""

from typing import Optional


class WeatherError(Exception):
    """Base class for all data-fetching failures."""

    user_message = 'Unexpected error'

    def __init__(self, message: Optional[str] = None):
        super().__init__(message or self.user_message)


class InvalidURLError(WeatherError):
    """Request URL could not be constructed."""
    user_message = 'Invalid airport code'


class InvalidResponseError(WeatherError):
    """Response was not a usable HTTP response."""
    user_message = 'Server error'


class NoDataError(WeatherError):
    """Provider answered but returned nothing usable."""
    user_message = 'No weather data available'


class DecodingError(WeatherError):
    """Payload does not match the expected schema."""
    user_message = 'Error processing weather data'


class NetworkError(WeatherError):
    """Transport-level failure; wraps the underlying exception."""
    user_message = 'Network connection error'

    def __init__(self, cause: Exception):
        super().__init__(f'{self.user_message}: {cause}')
        self.cause = cause


class APIError(WeatherError):
    """Provider returned a non-200 status."""

    def __init__(self, status_code: int, body: str = ''):
        self.status_code = status_code
        self.body = body
        super().__init__(f'Server returned {status_code}: {body}')

    @property
    def user_message(self) -> str:
        return str(self)


class RateLimitExceededError(WeatherError):
    """Outbound request budget for an endpoint is exhausted."""
    user_message = 'Rate limit exceeded. Please try again later.'

    def __init__(self, endpoint: str = ''):
        super().__init__(self.user_message)
        self.endpoint = endpoint
