"""Bearer token request authorization."""

from typing import Callable, Mapping, Optional

import structlog

from olp_client.http.transport import HttpRequest


logger = structlog.get_logger(__name__)


class BearerTokenAuthorizer:
    """
    Authorizer adding ``Authorization: Bearer <token>`` to every request.

    Tokens come from ``token_supplier``, called once per request. Obtaining
    and refreshing the token is the supplier's job (e.g. a token provider
    that caches until expiry).
    """

    def __init__(self, token_supplier: Callable[[], str]):
        """
        Initialize with a token supplier.

        Args:
            token_supplier: Zero-argument callable returning the access token
        """
        self.token_supplier = token_supplier

    @classmethod
    def from_token(cls, token: str) -> "BearerTokenAuthorizer":
        """Create an authorizer for a static token."""
        token = token.strip()
        if not token:
            raise ValueError("Token cannot be empty")
        return cls(lambda: token)

    def authorize(
        self,
        request: HttpRequest,
        method: str,
        url: str,
        form_params: Optional[Mapping[str, list[str]]],
    ) -> None:
        """
        Add the bearer Authorization header.

        Raises:
            ValueError: If the supplier returned an empty token
        """
        token = self.token_supplier()
        if not token or not token.strip():
            raise ValueError("Token supplier returned an empty access token")
        request.add_authorization_header(f"Bearer {token.strip()}")
        logger.debug("Authorized request", method=method, url=url)
