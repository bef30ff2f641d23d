"""
Retry machinery for HTTP dispatch.

Main Components:
    - RetryExecutor: loops an operation until the policy stops it
    - RetryPolicy: protocol deciding whether and when to retry
    - RetryContext: immutable per-attempt snapshot handed to the policy
    - NoRetryPolicy / ExponentialRandomBackoffPolicy: bundled policies

Usage:
    >>> from olp_client.retry import RetryExecutor, ExponentialRandomBackoffPolicy
    >>> executor = RetryExecutor(ExponentialRandomBackoffPolicy(max_retries=2))
    >>> response = executor.execute(lambda: transport.execute(request))
"""

from olp_client.retry.context import RetryContext
from olp_client.retry.executor import RetryExecutor
from olp_client.retry.policies import (
    ExponentialRandomBackoffPolicy,
    NoRetryPolicy,
    RetryPolicy,
    build_retry_policy,
)

__all__ = [
    "RetryContext",
    "RetryExecutor",
    "RetryPolicy",
    "NoRetryPolicy",
    "ExponentialRandomBackoffPolicy",
    "build_retry_policy",
]
