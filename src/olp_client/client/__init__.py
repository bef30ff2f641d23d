"""
Message dispatch for resource-server APIs.

Components:
- Client: builds, authorizes, executes (with retries) and maps requests
- messages: CarriesCorrelationId / StructuredErrorPayload capabilities,
  OlpHttpMessage and ErrorResponse models
- exceptions: RequestExecutionError, ResponseParsingError, OlpClientHttpError
"""

from olp_client.client.dispatcher import Client
from olp_client.client.exceptions import (
    OlpClientError,
    OlpClientHttpError,
    RequestExecutionError,
    ResponseParsingError,
)
from olp_client.client.messages import (
    CarriesCorrelationId,
    ErrorResponse,
    OlpHttpMessage,
    StructuredErrorPayload,
)

__all__ = [
    "Client",
    "OlpClientError",
    "OlpClientHttpError",
    "RequestExecutionError",
    "ResponseParsingError",
    "CarriesCorrelationId",
    "ErrorResponse",
    "OlpHttpMessage",
    "StructuredErrorPayload",
]
