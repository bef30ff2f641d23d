"""
Message dispatcher for OAuth2-protected resource servers.

``Client`` turns a logical request (method, URL, optional request object,
optional extra headers) into an authorized HTTP call, executes it through
the retry executor and the transport, and maps the outcome to either a
deserialized response object or an exception.

Status handling:
    - 200, 201: body deserialized as ``response_type``
    - 204: ``None`` when ``response_type`` is None, otherwise deserialized
      (an empty body reads as JSON ``null``)
    - anything else: error payload deserialized (JSON or no Content-Type) or
      synthesized (other content types), then ``new_exception`` is raised

Usage:
    client = Client(transport, authorizer=BearerTokenAuthorizer.from_token(token))
    project = client.send(
        "GET", "https://api.example.com/projects/1",
        response_type=Project,
        error_type=ErrorResponse,
        new_exception=OlpClientHttpError,
    )
"""

import io
import time
from typing import Any, BinaryIO, Callable, Mapping, Optional, TypeVar

import httpx
import structlog

from olp_client.client.exceptions import (
    OlpClientError,
    RequestExecutionError,
    ResponseParsingError,
)
from olp_client.client.messages import CarriesCorrelationId, StructuredErrorPayload
from olp_client.config import Settings
from olp_client.http.constants import UTF_8, X_CORRELATION_ID
from olp_client.http.headers import get_correlation_id, is_json_content_type
from olp_client.http.httpx_transport import HttpxTransport
from olp_client.http.transport import Authorizer, HttpRequest, HttpResponse, Transport
from olp_client.monitoring.metrics import request_latency_seconds, requests_total
from olp_client.retry.executor import RetryExecutor
from olp_client.retry.policies import NoRetryPolicy, RetryPolicy, build_retry_policy
from olp_client.serialization.serializer import PydanticSerializer, Serializer


logger = structlog.get_logger(__name__)

T = TypeVar("T")
U = TypeVar("U")

SUCCESS_STATUS_CODES = frozenset({200, 201, 204})
NO_CONTENT = 204

# Raised by the retry loop and propagated to the caller without wrapping
_UNWRAPPED_ERRORS = (OlpClientError, ValueError, TypeError)


class Client:
    """
    Client for JSON resource-server APIs.

    Stateless between calls: every ``send`` runs its own retry loop and owns
    its own response body. The transport is shared and owned by the caller;
    the client never closes it.

    Attributes:
        transport: Transport used to build and execute requests
        serializer: JSON serializer for request and response documents
        authorizer: Authorizer run while building each request (optional)
        retry_policy: Policy consulted by the retry executor
    """

    def __init__(
        self,
        transport: Transport,
        serializer: Optional[Serializer] = None,
        authorizer: Optional[Authorizer] = None,
        retry_policy: Optional[RetryPolicy] = None,
        error_body_excerpt_limit: int = 1024,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize client.

        Args:
            transport: Transport used to build and execute requests
            serializer: JSON serializer (default: PydanticSerializer)
            authorizer: Adds authentication to every request
            retry_policy: Retry policy (default: NoRetryPolicy)
            error_body_excerpt_limit: Max characters of a non-JSON error body
                passed to ``StructuredErrorPayload.from_status_and_body``
            sleep: Blocking sleep used between retries
        """
        self.transport = transport
        self.serializer = serializer or PydanticSerializer()
        self.authorizer = authorizer
        self.retry_policy = retry_policy or NoRetryPolicy()
        self.error_body_excerpt_limit = error_body_excerpt_limit
        self._retry_executor = RetryExecutor(self.retry_policy, sleep=sleep)

        logger.debug(
            "Initialized client",
            transport=type(transport).__name__,
            serializer=type(self.serializer).__name__,
            retry_policy=repr(self.retry_policy),
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        authorizer: Optional[Authorizer] = None,
        serializer: Optional[Serializer] = None,
    ) -> "Client":
        """
        Create a client on a new ``HttpxTransport`` configured from settings.

        The transport belongs to the caller: close it with
        ``client.transport.close()`` on shutdown.
        """
        transport = HttpxTransport(
            timeout=httpx.Timeout(settings.HTTP_READ_TIMEOUT, connect=settings.HTTP_CONNECT_TIMEOUT),
            limits=httpx.Limits(
                max_keepalive_connections=settings.HTTP_MAX_KEEPALIVE_CONNECTIONS,
                max_connections=settings.HTTP_MAX_CONNECTIONS,
            ),
        )
        return cls(
            transport,
            serializer=serializer,
            authorizer=authorizer,
            retry_policy=build_retry_policy(settings),
            error_body_excerpt_limit=settings.ERROR_BODY_EXCERPT_LIMIT,
        )

    def send(
        self,
        method: str,
        url: str,
        request: Any = None,
        *,
        additional_headers: Optional[Mapping[str, str]] = None,
        response_type: Optional[type[T]],
        error_type: type[U],
        new_exception: Callable[[int, U], BaseException],
    ) -> Optional[T]:
        """
        Send a request object and return the deserialized response.

        Args:
            method: HTTP method
            url: Request URL
            request: Request object serialized as the JSON body, or None
            additional_headers: Headers added after the authorizer ran; they
                are appended, so whether they override authorizer headers is
                up to the transport
            response_type: Success document type, or None for no content
            error_type: Error document type
            new_exception: Builds the exception raised for non-success
                statuses from ``(status_code, error_payload)``

        Returns:
            The deserialized response, or None for no-content responses

        Raises:
            ValueError: Empty method or URL, or the transport rejected the
                request while building it
            RequestExecutionError: The request could not be executed
            ResponseParsingError: A response body could not be deserialized
            BaseException: Whatever ``new_exception`` built, for non-success
                statuses
        """
        if not method:
            raise ValueError("method must not be empty")
        if not url:
            raise ValueError("url must not be empty")

        json_body = None
        if request is not None:
            try:
                json_body = self.serializer.to_json(request)
            except Exception as e:
                raise ResponseParsingError(
                    f"Failed to serialize request body: {e}",
                    target_type=type(request).__name__,
                ) from e

        http_request = self.transport.build_request(self.authorizer, method, url, json_body)
        self._add_additional_headers(http_request, additional_headers)

        return self._dispatch(
            http_request, method.upper(), response_type, error_type, new_exception
        )

    def send_request(
        self,
        http_request: HttpRequest,
        response_type: Optional[type[T]],
        error_type: type[U],
        new_exception: Callable[[int, U], BaseException],
    ) -> Optional[T]:
        """
        Execute an already-built request and return the deserialized response.

        Same outcome handling as ``send``; use it when the request was built
        directly on the transport (e.g. a form-encoded request).
        """
        method = getattr(http_request, "method", None)
        method_label = str(getattr(method, "value", method) or "UNKNOWN")
        return self._dispatch(http_request, method_label, response_type, error_type, new_exception)

    def _dispatch(
        self,
        http_request: HttpRequest,
        method_label: str,
        response_type: Optional[type[T]],
        error_type: type[U],
        new_exception: Callable[[int, U], BaseException],
    ) -> Optional[T]:
        start_time = time.perf_counter()
        try:
            response = self._retry_executor.execute(lambda: self.transport.execute(http_request))
        except _UNWRAPPED_ERRORS:
            requests_total.labels(method=method_label, outcome="execution_error").inc()
            raise
        except Exception as e:
            requests_total.labels(method=method_label, outcome="execution_error").inc()
            logger.error(
                "Request execution failed",
                method=method_label,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise RequestExecutionError(
                f"Failed to execute request: {e}",
                details={"method": method_label, "error_type": type(e).__name__},
            ) from e

        status_code = response.status_code
        outcome = "parsing_error"
        try:
            correlation_id = get_correlation_id(response.headers)
            if status_code in SUCCESS_STATUS_CODES:
                if response_type is None:
                    outcome = "no_content"
                    return None
                result = self._parse_success(response, response_type)
                if correlation_id is not None and isinstance(result, CarriesCorrelationId):
                    result.set_correlation_id(correlation_id)
                outcome = "success"
                return result

            error_payload = self._parse_error(response, error_type)
            outcome = "error_response"
            logger.warning(
                "Error response from resource server",
                method=method_label,
                status_code=status_code,
                correlation_id=correlation_id,
                error_type=type(error_payload).__name__,
            )
            raise new_exception(status_code, error_payload)
        finally:
            response.body.close()
            requests_total.labels(method=method_label, outcome=outcome).inc()
            request_latency_seconds.labels(method=method_label).observe(
                time.perf_counter() - start_time
            )

    def _parse_success(self, response: HttpResponse, response_type: type[T]) -> T:
        try:
            body: BinaryIO = response.body
            if response.status_code == NO_CONTENT:
                content = response.body.read()
                body = io.BytesIO(content if content.strip() else b"null")
            return self.serializer.from_json(body, response_type)
        except Exception as e:
            raise ResponseParsingError(
                f"Failed to parse response as {_type_name(response_type)}: {e}",
                status_code=response.status_code,
                target_type=_type_name(response_type),
            ) from e

    def _parse_error(self, response: HttpResponse, error_type: type[U]) -> U:
        if is_json_content_type(response.headers):
            try:
                return self.serializer.from_json(response.body, error_type)
            except Exception as e:
                raise ResponseParsingError(
                    f"Failed to parse error response as {_type_name(error_type)}: {e}",
                    status_code=response.status_code,
                    target_type=_type_name(error_type),
                ) from e
        return self._instantiate_error_type(error_type, response)

    def _instantiate_error_type(self, error_type: type[U], response: HttpResponse) -> U:
        """
        Synthesize an error payload for a non-JSON error response.

        Raises:
            RequestExecutionError: ``error_type`` is neither a
                StructuredErrorPayload nor constructible without arguments
        """
        if isinstance(error_type, type) and issubclass(error_type, StructuredErrorPayload):
            excerpt = self._read_body_excerpt(response.body)
            return error_type.from_status_and_body(response.status_code, excerpt)

        try:
            return error_type()
        except TypeError as e:
            raise RequestExecutionError(
                f"Internal Error: {_type_name(error_type)} has no default constructor"
            ) from e
        except ValueError as e:
            raise RequestExecutionError(
                f"Internal Error: {_type_name(error_type)} cannot be constructed"
            ) from e

    def _read_body_excerpt(self, body: BinaryIO) -> str:
        # 4 bytes per character covers any UTF-8 text up to the limit
        raw = body.read(self.error_body_excerpt_limit * 4)
        return raw.decode(UTF_8, errors="replace")[: self.error_body_excerpt_limit]

    @staticmethod
    def _add_additional_headers(
        http_request: HttpRequest, additional_headers: Optional[Mapping[str, str]]
    ) -> None:
        if not additional_headers:
            return
        for name, value in additional_headers.items():
            http_request.add_header(name, value)
            if name.lower() == X_CORRELATION_ID.lower() and value is not None:
                logger.debug("Request correlation id", correlation_id=value)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"transport={type(self.transport).__name__}, "
            f"retry_policy={self.retry_policy!r})"
        )


def _type_name(target_type: Any) -> str:
    return getattr(target_type, "__name__", repr(target_type))
