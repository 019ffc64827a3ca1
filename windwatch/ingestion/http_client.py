"""
HTTP client adapter shared by the weather and flight providers.

Wraps a requests.Session and turns every failure into one of the
WeatherError types:

- malformed URL                     -> InvalidURLError
- timeout / connection / transport  -> NetworkError (cause chained)
- HTTP status other than 200        -> APIError (status code + body)
- empty body                        -> NoDataError
- HTML page instead of JSON         -> InvalidResponseError
- body that isn't valid JSON        -> DecodingError
"""

import logging
from typing import Any, Dict, Optional

import requests

from windwatch.errors import (
    APIError,
    DecodingError,
    InvalidResponseError,
    InvalidURLError,
    NetworkError,
    NoDataError,
)
from windwatch.ingestion.rate_limit import RateLimiter

logger = logging.getLogger(__name__)

# Keep logged error bodies readable
MAX_ERROR_BODY = 500


class HttpClient:
    """
    JSON-over-HTTP GET helper.

    One instance per provider, so each gets its own default headers
    and connection pool.
    """

    def __init__(
        self,
        timeout: float = 30,
        headers: Optional[Dict[str, str]] = None,
        rate_limiter: Optional[RateLimiter] = None,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.rate_limiter = rate_limiter

        self.session = session or requests.Session()
        if headers:
            self.session.headers.update(headers)

    def get_json(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        endpoint: Optional[str] = None,
    ) -> Any:
        """
        GET url and decode the JSON body.

        Args:
            url: Absolute URL
            params: Query parameters
            endpoint: Rate limiter bucket name (defaults to url)

        Raises:
            WeatherError subclass on any failure
        """
        if self.rate_limiter is not None:
            self.rate_limiter.check(endpoint or url)

        logger.debug(f'GET {url}')

        try:
            response = self.session.get(url, params=params, timeout=self.timeout)
        except (requests.exceptions.MissingSchema,
                requests.exceptions.InvalidSchema,
                requests.exceptions.InvalidURL) as e:
            logger.error(f'Invalid request URL {url}: {e}')
            raise InvalidURLError(f'Invalid URL: {url}') from e
        except requests.exceptions.Timeout as e:
            logger.error(f'Request timed out after {self.timeout}s: {url}')
            raise NetworkError(e) from e
        except requests.exceptions.RequestException as e:
            logger.error(f'Request failed: {e}')
            raise NetworkError(e) from e

        logger.debug(f'Response status: {response.status_code}')

        if response.status_code != 200:
            body = response.text[:MAX_ERROR_BODY]
            logger.error(f'API error {response.status_code} from {url}: {body}')
            raise APIError(response.status_code, body)

        if not response.content:
            raise NoDataError()

        try:
            return response.json()
        except ValueError as e:
            content_type = response.headers.get('Content-Type', '')
            if 'html' in content_type:
                logger.error(f'Expected JSON from {url}, got {content_type}')
                raise InvalidResponseError(f'Unexpected content type: {content_type}') from e
            logger.error(f'Failed to decode JSON from {url}: {e}')
            raise DecodingError(f'Invalid JSON: {e}') from e

    def close(self) -> None:
        self.session.close()
