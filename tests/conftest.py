"""Shared test fixtures and configuration for all tests.

This conftest.py provides common fixtures used across unit and integration tests.
"""

import io
from typing import Optional

import pytest

from olp_client.config import Settings
from olp_client.http.transport import HttpResponse


class TrackingBody(io.BytesIO):
    """In-memory response body that counts close() calls."""

    def __init__(self, content: bytes = b""):
        super().__init__(content)
        self.close_count = 0

    def close(self) -> None:
        self.close_count += 1
        super().close()


@pytest.fixture
def test_settings() -> Settings:
    """Settings with fast, deterministic retry values.

    Override specific settings in individual tests as needed:
        def test_something(test_settings):
            test_settings.MAX_RETRIES = 0
    """
    return Settings(
        LOG_LEVEL="DEBUG",
        ENVIRONMENT="development",
        HTTP_CONNECT_TIMEOUT=1.0,
        HTTP_READ_TIMEOUT=2.0,
        MAX_RETRIES=2,
        RETRY_INTERVAL_MILLIS=10,
        MAX_RETRY_DELAY_MILLIS=50,
        ERROR_BODY_EXCERPT_LIMIT=1024,
    )


@pytest.fixture
def make_response():
    """Factory fixture building an HttpResponse over a TrackingBody.

    Usage:
        def test_something(make_response):
            response = make_response(200, b'{"id": 1}', {"Content-Type": ["application/json"]})
            ...
            assert response.body.close_count == 1
    """
    def _create(
        status_code: int = 200,
        content: bytes = b"",
        headers: Optional[dict[str, list[str]]] = None,
    ) -> HttpResponse:
        return HttpResponse(
            status_code=status_code,
            body=TrackingBody(content),
            headers=headers or {},
            content_length=len(content),
        )

    return _create
