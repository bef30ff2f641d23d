"""
Well-known HTTP names shared by the transport layer and the dispatcher.
"""

from enum import Enum


CONTENT_TYPE = "Content-Type"
CONTENT_TYPE_JSON = "application/json"
CONTENT_TYPE_JSON_UTF8 = "application/json; charset=utf-8"
CONTENT_TYPE_FORM_URLENCODED = "application/x-www-form-urlencoded"
AUTHORIZATION = "Authorization"
X_CORRELATION_ID = "X-Correlation-Id"

UTF_8 = "utf-8"


class HttpMethod(str, Enum):
    """HTTP request methods supported by the client."""

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"

    @classmethod
    def parse(cls, method: str) -> "HttpMethod":
        """
        Resolve a method name (case-insensitive) to an HttpMethod.

        Raises:
            ValueError: If the method is not supported
        """
        try:
            return cls(method.strip().upper())
        except (ValueError, AttributeError):
            raise ValueError(f"no support for request method={method}") from None


# Methods that may carry a request entity (JSON body or form params)
ENTITY_METHODS = frozenset({HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH})
