"""
Integration tests for the full dispatch stack.

Client -> RetryExecutor -> HttpxTransport -> httpx.MockTransport, with a
real PydanticSerializer and BearerTokenAuthorizer.

Run with: pytest tests/integration -v
"""

import json
from typing import Optional

import httpx
import pytest
from pydantic import Field

from olp_client.client.exceptions import OlpClientHttpError, RequestExecutionError
from olp_client.client.messages import ErrorResponse, OlpHttpMessage


pytestmark = pytest.mark.integration

URL = "https://api.example.com/projects/p-1"


class RecordingServer:
    """MockTransport handler replaying scripted responses and recording requests."""

    def __init__(self, *responses: httpx.Response):
        self.responses = list(responses)
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        template = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        # A response stream is consumed once, so every request gets its own copy
        return httpx.Response(template.status_code, headers=template.headers, content=template.content)


class Project(OlpHttpMessage):
    project_id: str = Field(alias="projectId")
    name: str
    description: Optional[str] = None


def send_project(client, method="GET", request=None, **kwargs):
    return client.send(
        method,
        URL,
        request,
        response_type=Project,
        error_type=ErrorResponse,
        new_exception=OlpClientHttpError,
        **kwargs,
    )


def test_put_round_trip_with_headers(client_factory):
    server = RecordingServer(
        httpx.Response(
            201,
            json={"projectId": "p-1", "name": "Roads"},
            headers={"X-Correlation-Id": "corr-42"},
        )
    )
    client = client_factory(server)

    project = send_project(
        client,
        "PUT",
        Project(projectId="p-1", name="Roads"),
        additional_headers={"X-Correlation-Id": "req-7", "foohead": "barval"},
    )

    assert project.model_dump(by_alias=True, exclude_none=True) == {"projectId": "p-1", "name": "Roads"}
    assert project.correlation_id == "corr-42"

    (sent,) = server.requests
    assert sent.method == "PUT"
    assert sent.headers["authorization"] == "Bearer test-token"
    assert sent.headers["content-type"] == "application/json; charset=utf-8"
    assert sent.headers["x-correlation-id"] == "req-7"
    assert sent.headers["foohead"] == "barval"
    assert json.loads(sent.content) == {"projectId": "p-1", "name": "Roads"}


def test_delete_no_content(client_factory):
    server = RecordingServer(httpx.Response(204))
    client = client_factory(server)

    result = client.send(
        "DELETE",
        URL,
        response_type=None,
        error_type=ErrorResponse,
        new_exception=OlpClientHttpError,
    )

    assert result is None
    assert server.requests[0].content == b""


def test_json_error_response(client_factory):
    server = RecordingServer(
        httpx.Response(
            404,
            json={"errorId": "E404", "httpStatus": 404, "message": "Project not found"},
        )
    )
    client = client_factory(server)

    with pytest.raises(OlpClientHttpError) as exc_info:
        send_project(client)

    assert exc_info.value.status_code == 404
    assert exc_info.value.error_response == ErrorResponse(
        error_id="E404", http_status=404, message="Project not found"
    )


def test_html_error_response_synthesized(client_factory):
    server = RecordingServer(
        httpx.Response(
            502,
            content=b"<html>Bad Gateway</html>",
            headers={"Content-Type": "text/html"},
        )
    )
    client = client_factory(server)

    with pytest.raises(OlpClientHttpError) as exc_info:
        send_project(client)

    assert exc_info.value.error_response == ErrorResponse(
        http_status=502, message="<html>Bad Gateway</html>"
    )


def test_unavailable_retried_then_success(client_factory, sleep):
    server = RecordingServer(
        httpx.Response(503, text="busy"),
        httpx.Response(503, text="busy"),
        httpx.Response(200, json={"projectId": "p-1", "name": "Roads"}),
    )
    client = client_factory(server, max_retries=2)

    project = send_project(client)

    assert project.name == "Roads"
    assert len(server.requests) == 3
    assert sleep.call_count <= 2
    for call in sleep.call_args_list:
        assert 0 < call.args[0] <= 0.05


def test_retries_exhausted_returns_last_error(client_factory):
    server = RecordingServer(httpx.Response(503, json={"message": "busy"}))
    client = client_factory(server, max_retries=2)

    with pytest.raises(OlpClientHttpError) as exc_info:
        send_project(client)

    assert exc_info.value.status_code == 503
    assert len(server.requests) == 3


def test_client_error_not_retried(client_factory):
    server = RecordingServer(httpx.Response(400, json={"error": "invalid_request"}))
    client = client_factory(server, max_retries=2)

    with pytest.raises(OlpClientHttpError):
        send_project(client)

    assert len(server.requests) == 1


def test_connection_failure_retried_then_wrapped(client_factory):
    attempts = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    client = client_factory(handler, max_retries=1)

    with pytest.raises(RequestExecutionError) as exc_info:
        send_project(client)

    assert len(attempts) == 2
    assert exc_info.value.details["error_type"] == "TransportError"
