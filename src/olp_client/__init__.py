"""
OAuth2 client for OLP resource servers.

Sends JSON documents to OAuth2-protected resource servers:
- Authorization through a pluggable authorizer (bearer tokens bundled)
- Execution through a pluggable transport (httpx bundled)
- Retries through a pluggable retry policy (exponential random backoff bundled)
- Typed responses and errors through pydantic
- X-Correlation-Id propagation onto response objects

Architecture: Client -> Transport.build_request -> RetryExecutor -> Transport.execute
"""

__version__ = "0.1.0"
