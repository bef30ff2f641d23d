"""
Transport abstraction consumed by the message dispatcher.

A transport builds authorized requests and executes them. The dispatcher
only ever talks to these protocols, so any HTTP library can be plugged in
(see ``HttpxTransport`` for the bundled httpx binding).

Ownership:
    - The transport is a long-lived resource owned by whoever created it.
      The dispatcher never closes it.
    - ``HttpResponse.body`` is a single-use stream owned by the caller of
      ``Transport.execute``; it must be closed exactly once.
"""

from dataclasses import dataclass, field
from typing import BinaryIO, Mapping, Optional, Protocol, runtime_checkable


class TransportError(Exception):
    """
    Raised by a transport when the HTTP exchange cannot be completed.

    Covers connection failures, timeouts and protocol errors. Malformed
    requests are reported with ``ValueError`` instead.
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


@runtime_checkable
class HttpRequest(Protocol):
    """A built request that headers can still be appended to before send."""

    def add_authorization_header(self, value: str) -> None:
        """Set the Authorization header value (e.g. ``Bearer <token>``)."""
        ...

    def add_header(self, name: str, value: str) -> None:
        """Append a header; existing values with the same name are kept."""
        ...


class Authorizer(Protocol):
    """
    Adds authentication to a request while it is being built.

    Called by ``Transport.build_request`` before the request is returned,
    so anything added here precedes the caller's additional headers.
    """

    def authorize(
        self,
        request: HttpRequest,
        method: str,
        url: str,
        form_params: Optional[Mapping[str, list[str]]],
    ) -> None:
        ...


@dataclass
class HttpResponse:
    """
    Outcome of one executed HTTP request.

    Attributes:
        status_code: HTTP status code
        headers: Header name -> values, original casing and order preserved
        body: Single-consumption byte stream (close exactly once)
        content_length: Declared body length, -1 when unknown
    """

    status_code: int
    body: BinaryIO
    headers: dict[str, list[str]] = field(default_factory=dict)
    content_length: int = -1


class Transport(Protocol):
    """Capability interface for building and executing HTTP requests."""

    def build_request(
        self,
        authorizer: Optional[Authorizer],
        method: str,
        url: str,
        json_body: Optional[str],
    ) -> HttpRequest:
        """
        Build an authorized request.

        Raises:
            ValueError: Malformed URL, unsupported method, or a body on a
                method that does not permit one
        """
        ...

    def execute(self, request: HttpRequest) -> HttpResponse:
        """
        Execute a request built by this transport.

        Raises:
            TransportError: I/O failure before a response was obtained
            ValueError: The request was not built by this transport
        """
        ...
