"""Tests for the HTTP client adapter's error classification."""
from unittest.mock import Mock

import pytest
import requests

from conftest import make_response
from windwatch.errors import (
    APIError,
    DecodingError,
    InvalidResponseError,
    InvalidURLError,
    NetworkError,
    NoDataError,
    RateLimitExceededError,
)
from windwatch.ingestion.http_client import HttpClient
from windwatch.ingestion.rate_limit import RateLimiter


@pytest.fixture
def client():
    http = HttpClient(timeout=30)
    http.session.get = Mock()
    return http


def test_returns_decoded_json(client):
    client.session.get.return_value = make_response(200, {'ok': True})

    assert client.get_json('https://example.test/api', params={'a': 1}) == {'ok': True}
    client.session.get.assert_called_once_with(
        'https://example.test/api', params={'a': 1}, timeout=30,
    )


def test_non_200_raises_api_error_with_status_and_body(client):
    client.session.get.return_value = make_response(
        401, body='{"cod":401, "message": "Invalid API key"}',
    )

    with pytest.raises(APIError) as exc_info:
        client.get_json('https://example.test/api')

    assert exc_info.value.status_code == 401
    assert 'Invalid API key' in exc_info.value.body
    assert exc_info.value.user_message.startswith('Server returned 401')


def test_timeout_is_network_error(client):
    client.session.get.side_effect = requests.exceptions.Timeout('read timed out')

    with pytest.raises(NetworkError) as exc_info:
        client.get_json('https://example.test/api')

    assert isinstance(exc_info.value.cause, requests.exceptions.Timeout)
    assert exc_info.value.__cause__ is exc_info.value.cause


def test_connection_error_is_network_error(client):
    client.session.get.side_effect = requests.exceptions.ConnectionError('refused')

    with pytest.raises(NetworkError):
        client.get_json('https://example.test/api')


def test_malformed_url_is_invalid_url_error():
    http = HttpClient()
    with pytest.raises(InvalidURLError):
        http.get_json('not a url')


def test_empty_body_is_no_data(client):
    client.session.get.return_value = make_response(200, body='')

    with pytest.raises(NoDataError):
        client.get_json('https://example.test/api')


def test_bad_json_is_decoding_error(client):
    client.session.get.return_value = make_response(200, body='{"truncated": ')

    with pytest.raises(DecodingError):
        client.get_json('https://example.test/api')


def test_html_page_is_invalid_response(client):
    client.session.get.return_value = make_response(
        200, body='<html>Please verify you are human</html>', content_type='text/html; charset=utf-8',
    )

    with pytest.raises(InvalidResponseError):
        client.get_json('https://example.test/api')


def test_rate_limiter_is_checked_before_request(client):
    client.rate_limiter = RateLimiter(max_requests=2, window_seconds=60)
    client.session.get.return_value = make_response(200, {'ok': True})

    client.get_json('https://example.test/api', endpoint='weather')
    client.get_json('https://example.test/api', endpoint='weather')
    with pytest.raises(RateLimitExceededError):
        client.get_json('https://example.test/api', endpoint='weather')

    assert client.session.get.call_count == 2


def test_default_headers_are_applied():
    http = HttpClient(headers={'User-Agent': 'windwatch-test'})
    assert http.session.headers['User-Agent'] == 'windwatch-test'


def test_error_messages_are_user_facing():
    assert NetworkError(OSError('boom')).user_message == 'Network connection error'
    assert DecodingError().user_message == 'Error processing weather data'
    assert RateLimitExceededError().user_message == 'Rate limit exceeded. Please try again later.'
    assert InvalidURLError().user_message == 'Invalid airport code'
    assert NoDataError().user_message == 'No weather data available'
    assert InvalidResponseError().user_message == 'Server error'
