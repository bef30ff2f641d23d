"""
Exceptions raised by the message dispatcher.

Callers of ``Client.send`` see either a deserialized response or exactly
one of:
- RequestExecutionError: no usable response was obtained
- ResponseParsingError: a response body could not be deserialized
- the domain error built by the caller's ``new_exception`` function for
  any non-success status code (``OlpClientHttpError`` is a ready-made one)
"""

from typing import Any, Optional


class OlpClientError(Exception):
    """
    Base exception for all client errors.

    Attributes:
        message: Human-readable error description
        details: Structured error data for logging
    """

    def __init__(self, message: str, details: dict | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class RequestExecutionError(OlpClientError):
    """
    Raised when the request could not be executed.

    Connectivity failures and timeouts (after any retries the policy
    allowed) end up here, with the transport's exception as ``__cause__``.
    Also raised when an error payload type cannot be constructed.
    """
    pass


class ResponseParsingError(OlpClientError):
    """
    Raised when a success or error response body cannot be deserialized.

    The underlying parser exception is kept as ``__cause__``.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        target_type: Optional[str] = None,
    ):
        details: dict[str, Any] = {}
        if status_code is not None:
            details["status_code"] = status_code
        if target_type:
            details["target_type"] = target_type
        super().__init__(message, details)
        self.status_code = status_code


class OlpClientHttpError(OlpClientError):
    """
    Generic domain error for a non-success response.

    Suitable as ``new_exception`` for callers that don't define their own
    error vocabulary: ``new_exception=OlpClientHttpError``.

    Attributes:
        status_code: HTTP status code of the response
        error_response: Deserialized or synthesized error payload
    """

    def __init__(self, status_code: int, error_response: Any):
        self.status_code = status_code
        self.error_response = error_response
        super().__init__(
            f"HTTP {status_code}: {error_response!r}",
            details={"status_code": status_code},
        )
