"""
httpx binding of the Transport abstraction.

Builds requests eagerly (validating method, URL and entity up front) and
sends them through a shared, pooled ``httpx.Client``. Responses are
streamed: the returned body wraps the open httpx response and releases
the connection when it is closed.
"""

import io
from typing import Iterator, Mapping, Optional
from urllib.parse import urlencode

import httpx
import structlog

from olp_client.http.constants import (
    AUTHORIZATION,
    CONTENT_TYPE,
    CONTENT_TYPE_FORM_URLENCODED,
    CONTENT_TYPE_JSON_UTF8,
    ENTITY_METHODS,
    UTF_8,
    HttpMethod,
)
from olp_client.http.transport import Authorizer, HttpRequest, HttpResponse, TransportError


logger = structlog.get_logger(__name__)


class HttpxRequest:
    """
    Request built by ``HttpxTransport``.

    Headers are stored as an ordered list of (name, value) pairs so that
    repeated names survive until the request is handed to httpx.
    """

    def __init__(self, method: HttpMethod, url: str, content: Optional[bytes] = None):
        self.method = method
        self.url = url
        self.content = content
        self.headers: list[tuple[str, str]] = []

    def add_authorization_header(self, value: str) -> None:
        self.headers = [(n, v) for n, v in self.headers if n.lower() != AUTHORIZATION.lower()]
        self.headers.append((AUTHORIZATION, value))

    def add_header(self, name: str, value: str) -> None:
        self.headers.append((name, value))

    def get_headers(self, name: str) -> list[str]:
        """Return the values of a header added so far (case-insensitive)."""
        return [v for n, v in self.headers if n.lower() == name.lower()]

    def __repr__(self) -> str:
        return f"HttpxRequest(method={self.method.value}, url={self.url})"


class _StreamingBody(io.RawIOBase):
    """Readable stream over an open httpx response; closing releases it."""

    def __init__(self, response: httpx.Response):
        super().__init__()
        self._response = response
        self._chunks: Iterator[bytes] = response.iter_bytes()
        self._pending = b""

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        while not self._pending:
            try:
                self._pending = next(self._chunks)
            except StopIteration:
                return 0
        size = min(len(buffer), len(self._pending))
        buffer[:size] = self._pending[:size]
        self._pending = self._pending[size:]
        return size

    def close(self) -> None:
        if not self.closed:
            self._response.close()
        super().close()


class HttpxTransport:
    """
    Transport backed by a synchronous ``httpx.Client``.

    The client is thread-safe and reused across calls. When a client is
    injected, ``close()`` leaves it open unless ``close_client=True``.
    """

    def __init__(
        self,
        client: Optional[httpx.Client] = None,
        timeout: Optional[httpx.Timeout] = None,
        limits: Optional[httpx.Limits] = None,
        close_client: Optional[bool] = None,
    ):
        """
        Initialize the transport.

        Args:
            client: Pre-configured httpx client (created when omitted)
            timeout: Timeout for a created client (default 10s connect, 60s read)
            limits: Connection pool limits for a created client
            close_client: Whether ``close()`` closes the client (default: only
                when the transport created it)
        """
        if client is None:
            client = httpx.Client(
                timeout=timeout or httpx.Timeout(60.0, connect=10.0),
                limits=limits or httpx.Limits(max_keepalive_connections=5, max_connections=20),
                follow_redirects=True,
            )
            owns_client = True
        else:
            owns_client = False
        self._client = client
        self._close_client = owns_client if close_client is None else close_client

        logger.debug(
            "httpx transport initialized",
            owns_client=owns_client,
            close_client=self._close_client,
        )

    @property
    def client(self) -> httpx.Client:
        return self._client

    def build_request(
        self,
        authorizer: Optional[Authorizer],
        method: str,
        url: str,
        json_body: Optional[str],
    ) -> HttpxRequest:
        """
        Build a request carrying an optional JSON body.

        Raises:
            ValueError: Unsupported method, malformed URL, or a JSON body on
                a method other than POST, PUT or PATCH
        """
        http_method = HttpMethod.parse(method)
        self._check_url(url)

        request = HttpxRequest(http_method, url)
        if json_body is not None:
            if http_method not in ENTITY_METHODS:
                raise ValueError(f"no JSON request body permitted for method={http_method.value}")
            request.content = json_body.encode(UTF_8)
            request.add_header(CONTENT_TYPE, CONTENT_TYPE_JSON_UTF8)

        if authorizer is not None:
            authorizer.authorize(request, http_method.value, url, None)
        return request

    def build_form_request(
        self,
        authorizer: Optional[Authorizer],
        method: str,
        url: str,
        form_params: Optional[Mapping[str, list[str]]],
    ) -> HttpxRequest:
        """
        Build a request carrying optional url-encoded form parameters.

        Raises:
            ValueError: Unsupported method, malformed URL, or form params on
                a method other than POST, PUT or PATCH
        """
        http_method = HttpMethod.parse(method)
        self._check_url(url)

        request = HttpxRequest(http_method, url)
        if form_params is not None:
            if http_method not in ENTITY_METHODS:
                raise ValueError(f"no formParams permitted for method={http_method.value}")
            request.content = urlencode(
                [(name, value) for name, values in form_params.items() for value in values]
            ).encode(UTF_8)
            request.add_header(CONTENT_TYPE, CONTENT_TYPE_FORM_URLENCODED)

        if authorizer is not None:
            authorizer.authorize(request, http_method.value, url, form_params)
        return request

    def execute(self, request: HttpRequest) -> HttpResponse:
        """
        Send a request built by this transport and stream its response.

        Raises:
            ValueError: Request was not built by an HttpxTransport
            TransportError: Connection, timeout or protocol failure
        """
        if not isinstance(request, HttpxRequest):
            raise ValueError(
                f"request is of type {type(request).__name__}, expected HttpxRequest"
            )

        outgoing = self._client.build_request(
            request.method.value,
            request.url,
            headers=request.headers,
            content=request.content,
        )
        try:
            response = self._client.send(outgoing, stream=True)
        except httpx.TransportError as e:
            logger.warning(
                "HTTP transport failure",
                method=request.method.value,
                url=request.url,
                error_type=type(e).__name__,
                error=str(e),
            )
            raise TransportError(
                f"{type(e).__name__}: {e}",
                details={"method": request.method.value, "url": request.url},
            ) from e

        headers: dict[str, list[str]] = {}
        for raw_name, raw_value in response.headers.raw:
            name = raw_name.decode("latin-1")
            headers.setdefault(name, []).append(raw_value.decode("latin-1"))

        try:
            content_length = int(response.headers.get("content-length", -1))
        except ValueError:
            content_length = -1

        logger.debug(
            "HTTP response received",
            method=request.method.value,
            url=request.url,
            status_code=response.status_code,
            content_length=content_length,
        )
        return HttpResponse(
            status_code=response.status_code,
            body=io.BufferedReader(_StreamingBody(response)),
            headers=headers,
            content_length=content_length,
        )

    def close(self) -> None:
        """Close the underlying httpx client if this transport owns it."""
        if self._close_client and not self._client.is_closed:
            self._client.close()
            logger.debug("Closed httpx client")

    def __enter__(self) -> "HttpxTransport":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    @staticmethod
    def _check_url(url: str) -> None:
        try:
            parsed = httpx.URL(url)
        except (httpx.InvalidURL, TypeError) as e:
            raise ValueError(f"malformed URL: {url}") from e
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise ValueError(f"malformed URL: {url}")
