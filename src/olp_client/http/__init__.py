"""
HTTP transport layer.

Components:
- Transport / HttpRequest / HttpResponse / Authorizer: collaborator protocols
- HttpxTransport: bundled transport on top of httpx
- headers: case-insensitive Content-Type and X-Correlation-Id lookups
"""

from olp_client.http.constants import (
    AUTHORIZATION,
    CONTENT_TYPE,
    CONTENT_TYPE_JSON,
    X_CORRELATION_ID,
    HttpMethod,
)
from olp_client.http.httpx_transport import HttpxRequest, HttpxTransport
from olp_client.http.transport import (
    Authorizer,
    HttpRequest,
    HttpResponse,
    Transport,
    TransportError,
)

__all__ = [
    "AUTHORIZATION",
    "CONTENT_TYPE",
    "CONTENT_TYPE_JSON",
    "X_CORRELATION_ID",
    "HttpMethod",
    "Authorizer",
    "HttpRequest",
    "HttpResponse",
    "HttpxRequest",
    "HttpxTransport",
    "Transport",
    "TransportError",
]
