"""
Retry policies.

A policy is a pure decision function over a ``RetryContext``: whether the
last attempt should be retried, and how long to wait before doing so.

Bundled policies:
    - NoRetryPolicy: never retries (the executor becomes a pass-through)
    - ExponentialRandomBackoffPolicy: retries 429/5xx responses and transport
      failures with full-jitter exponential backoff

A policy whose ``should_retry`` never returns False makes the executor
loop forever. Policies must bound the retry count themselves.
"""

import random
from typing import TYPE_CHECKING, Optional, Protocol

from olp_client.http.transport import TransportError
from olp_client.retry.context import RetryContext

if TYPE_CHECKING:
    from olp_client.config import Settings


class RetryPolicy(Protocol):
    """Protocol for retry policies."""

    def should_retry(self, context: RetryContext) -> bool:
        """Return True if the attempt described by ``context`` should be retried."""
        ...

    def next_delay_millis(self, context: RetryContext) -> int:
        """Return the non-negative wait before the next attempt, in milliseconds."""
        ...


class NoRetryPolicy:
    """Policy that never retries."""

    def should_retry(self, context: RetryContext) -> bool:
        return False

    def next_delay_millis(self, context: RetryContext) -> int:
        return 0

    def __repr__(self) -> str:
        return "NoRetryPolicy()"


DEFAULT_RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})
DEFAULT_RETRYABLE_EXCEPTIONS: tuple[type[BaseException], ...] = (TransportError, OSError)


class ExponentialRandomBackoffPolicy:
    """
    Exponential backoff with full jitter.

    Retries while fewer than ``max_retries`` retries were made and the last
    attempt either returned a retryable status code or raised a retryable
    exception. The wait before retry ``n`` (0-based) is drawn uniformly from
    ``[0, min(max_retry_delay_millis, retry_interval_millis * 2**n)]``.
    """

    def __init__(
        self,
        max_retries: int = 3,
        retry_interval_millis: int = 1000,
        max_retry_delay_millis: int = 30000,
        retryable_status_codes: frozenset[int] = DEFAULT_RETRYABLE_STATUS_CODES,
        retryable_exceptions: tuple[type[BaseException], ...] = DEFAULT_RETRYABLE_EXCEPTIONS,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize backoff policy.

        Args:
            max_retries: Maximum number of retries (attempts = retries + 1)
            retry_interval_millis: Base interval, doubled per retry
            max_retry_delay_millis: Upper bound for any single wait
            retryable_status_codes: Response status codes worth retrying
            retryable_exceptions: Exception types worth retrying
            rng: Random source (seed it for deterministic tests)

        Raises:
            ValueError: If any numeric argument is negative
        """
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")
        if retry_interval_millis < 0:
            raise ValueError("retry_interval_millis must be >= 0")
        if max_retry_delay_millis < 0:
            raise ValueError("max_retry_delay_millis must be >= 0")

        self.max_retries = max_retries
        self.retry_interval_millis = retry_interval_millis
        self.max_retry_delay_millis = max_retry_delay_millis
        self.retryable_status_codes = frozenset(retryable_status_codes)
        self.retryable_exceptions = tuple(retryable_exceptions)
        self._rng = rng or random.Random()

    def should_retry(self, context: RetryContext) -> bool:
        if context.retry_count >= self.max_retries:
            return False
        if context.last_exception is not None:
            return isinstance(context.last_exception, self.retryable_exceptions)
        return context.last_status_code in self.retryable_status_codes

    def next_delay_millis(self, context: RetryContext) -> int:
        ceiling = min(
            self.max_retry_delay_millis,
            self.retry_interval_millis * (2 ** context.retry_count),
        )
        return self._rng.randint(0, ceiling)

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"max_retries={self.max_retries}, "
            f"retry_interval_millis={self.retry_interval_millis}, "
            f"max_retry_delay_millis={self.max_retry_delay_millis})"
        )


def build_retry_policy(settings: "Settings") -> RetryPolicy:
    """
    Build the retry policy described by settings.

    ``MAX_RETRIES == 0`` yields ``NoRetryPolicy``; anything else an
    ``ExponentialRandomBackoffPolicy``.
    """
    if settings.MAX_RETRIES == 0:
        return NoRetryPolicy()
    return ExponentialRandomBackoffPolicy(
        max_retries=settings.MAX_RETRIES,
        retry_interval_millis=settings.RETRY_INTERVAL_MILLIS,
        max_retry_delay_millis=settings.MAX_RETRY_DELAY_MILLIS,
    )
