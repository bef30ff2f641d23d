"""Request authorizers."""

from olp_client.auth.bearer import BearerTokenAuthorizer

__all__ = ["BearerTokenAuthorizer"]
