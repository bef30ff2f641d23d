"""Integration test fixtures.

Resource servers are simulated with ``httpx.MockTransport`` handlers, so the
full stack (dispatcher, retry executor, httpx binding, serializer) runs
without network access.
"""

import random
from typing import Callable
from unittest.mock import Mock

import httpx
import pytest

from olp_client.auth.bearer import BearerTokenAuthorizer
from olp_client.client.dispatcher import Client
from olp_client.http.httpx_transport import HttpxTransport
from olp_client.retry.policies import ExponentialRandomBackoffPolicy


@pytest.fixture
def sleep() -> Mock:
    return Mock()


@pytest.fixture
def client_factory(sleep):
    """Factory building a Client over a scripted server.

    Usage:
        def test_something(client_factory):
            server = RecordingServer(httpx.Response(200, json={...}))
            client = client_factory(server, max_retries=2)
    """
    transports: list[HttpxTransport] = []

    def _create(handler: Callable[[httpx.Request], httpx.Response], max_retries: int = 0) -> Client:
        transport = HttpxTransport(client=httpx.Client(transport=httpx.MockTransport(handler)), close_client=True)
        transports.append(transport)
        return Client(
            transport,
            authorizer=BearerTokenAuthorizer.from_token("test-token"),
            retry_policy=ExponentialRandomBackoffPolicy(
                max_retries=max_retries,
                retry_interval_millis=10,
                max_retry_delay_millis=50,
                rng=random.Random(42),
            ),
            sleep=sleep,
        )

    yield _create

    for transport in transports:
        transport.close()
