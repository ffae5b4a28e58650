"""Shared fixtures for Microsoft Graph client tests."""

from typing import Callable
from unittest.mock import Mock

import pytest
import requests


@pytest.fixture
def mock_msal_app() -> Mock:
    """Mock msal ConfidentialClientApplication returning a token."""
    app = Mock()
    app.acquire_token_for_client.return_value = {
        "access_token": "token-abc",
        "token_type": "Bearer",
        "expires_in": 3599,
    }
    return app


@pytest.fixture
def mock_app_factory(mock_msal_app: Mock) -> Mock:
    return Mock(return_value=mock_msal_app)


@pytest.fixture
def mock_http_session() -> Mock:
    """Mock requests.Session; configure ``get`` per test."""
    return Mock(spec=requests.Session)


@pytest.fixture
def make_response() -> Callable[..., requests.Response]:
    """Factory for real requests.Response objects."""

    def _make(status: int = 200, body: str = "{}", headers: dict | None = None):
        response = requests.Response()
        response.status_code = status
        response._content = body.encode()
        response.headers.update(headers or {})
        response.url = "https://graph.microsoft.com/v1.0/test"
        return response

    return _make


@pytest.fixture
def mock_session_provider() -> Mock:
    """Mock GraphSessionProvider that prevents real API calls.

    Usage:
        mock_session_provider.get.return_value = {"value": []}
    """
    return Mock()


@pytest.fixture
def http_error() -> Callable[[int], requests.HTTPError]:
    def _make(status: int) -> requests.HTTPError:
        response = requests.Response()
        response.status_code = status
        response._content = b""
        return requests.HTTPError(f"{status}", response=response)

    return _make
