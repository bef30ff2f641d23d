"""
Unit tests for BearerTokenAuthorizer.
"""

from unittest.mock import Mock

import pytest

from olp_client.auth.bearer import BearerTokenAuthorizer


def test_adds_bearer_header(mock_http_request):
    authorizer = BearerTokenAuthorizer(lambda: "token-123")

    authorizer.authorize(mock_http_request, "GET", "http://x/y", None)

    mock_http_request.add_authorization_header.assert_called_once_with("Bearer token-123")


def test_supplier_called_per_request(mock_http_request):
    supplier = Mock(side_effect=["first", "second"])
    authorizer = BearerTokenAuthorizer(supplier)

    authorizer.authorize(mock_http_request, "GET", "http://x/y", None)
    authorizer.authorize(mock_http_request, "GET", "http://x/y", None)

    assert supplier.call_count == 2
    mock_http_request.add_authorization_header.assert_called_with("Bearer second")


def test_static_token_trimmed(mock_http_request):
    BearerTokenAuthorizer.from_token("  abc  ").authorize(mock_http_request, "POST", "http://x/y", None)

    mock_http_request.add_authorization_header.assert_called_once_with("Bearer abc")


def test_static_token_must_not_be_empty():
    with pytest.raises(ValueError, match="Token cannot be empty"):
        BearerTokenAuthorizer.from_token("   ")


def test_empty_supplied_token_rejected(mock_http_request):
    authorizer = BearerTokenAuthorizer(lambda: "")

    with pytest.raises(ValueError, match="empty access token"):
        authorizer.authorize(mock_http_request, "GET", "http://x/y", None)
    mock_http_request.add_authorization_header.assert_not_called()
