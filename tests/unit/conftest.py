"""Unit test fixtures (mocks and stubs).

Provides mock collaborators for testing the dispatcher without network I/O.
"""

from unittest.mock import MagicMock, Mock

import pytest

from olp_client.http.transport import HttpRequest


@pytest.fixture
def mock_http_request():
    """Mock built request recording added headers."""
    mock = MagicMock(spec=HttpRequest)
    mock.method = "GET"
    return mock


@pytest.fixture
def mock_transport(mock_http_request):
    """Mock Transport whose build_request returns mock_http_request.

    Configure ``execute`` per test:
        mock_transport.execute.return_value = make_response(200, b'{}')
        mock_transport.execute.side_effect = TransportError("down")
    """
    mock = Mock()
    mock.build_request = Mock(return_value=mock_http_request)
    mock.execute = Mock()
    return mock


@pytest.fixture
def no_sleep():
    """Recording replacement for time.sleep."""
    return Mock(return_value=None)
