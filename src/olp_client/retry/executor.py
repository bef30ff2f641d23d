"""
Retry executor.

Drives a retryable HTTP operation through a ``RetryPolicy``. Each attempt
runs to completion before the next one starts; waits between attempts are
blocking sleeps.

Usage:
    executor = RetryExecutor(ExponentialRandomBackoffPolicy())
    response = executor.execute(lambda: transport.execute(request))
"""

import time
from typing import Callable

import structlog

from olp_client.http.transport import HttpResponse
from olp_client.monitoring.metrics import retries_total
from olp_client.retry.context import RetryContext
from olp_client.retry.policies import RetryPolicy


logger = structlog.get_logger(__name__)


class RetryExecutor:
    """
    Runs an operation until it succeeds or the policy declines a retry.

    After every attempt the policy sees a fresh ``RetryContext``:
    - the attempt returned a response: ``last_status_code`` is set. If the
      policy declines, the response is returned to the caller; otherwise its
      body is closed and discarded.
    - the attempt raised: ``last_exception`` is set. If the policy declines,
      the exception propagates unchanged.

    The executor holds no per-call state, so one instance can serve
    concurrent callers.

    Attributes:
        retry_policy: Policy consulted after each attempt
    """

    def __init__(
        self,
        retry_policy: RetryPolicy,
        sleep: Callable[[float], None] = time.sleep,
    ):
        """
        Initialize retry executor.

        Args:
            retry_policy: Policy deciding on retries and delays
            sleep: Blocking sleep taking seconds (injectable for tests)
        """
        self.retry_policy = retry_policy
        self._sleep = sleep

    def execute(self, operation: Callable[[], HttpResponse]) -> HttpResponse:
        """
        Execute ``operation`` with retries.

        Returns:
            The response of the last attempt

        Raises:
            Exception: Whatever the last attempt raised, once the policy
                declines to retry it
        """
        retry_count = 0
        while True:
            try:
                response = operation()
            except Exception as e:
                context = RetryContext(retry_count=retry_count, last_exception=e)
                if not self.retry_policy.should_retry(context):
                    if retry_count:
                        logger.warning(
                            "Giving up after retries",
                            retry_count=retry_count,
                            error_type=type(e).__name__,
                        )
                    raise
                reason = "exception"
                logger.warning(
                    "Attempt failed, retrying",
                    retry_count=retry_count,
                    error_type=type(e).__name__,
                    error=str(e),
                )
            else:
                context = RetryContext(
                    retry_count=retry_count, last_status_code=response.status_code
                )
                if not self.retry_policy.should_retry(context):
                    return response
                reason = "status"
                logger.warning(
                    "Retryable response status, retrying",
                    retry_count=retry_count,
                    status_code=response.status_code,
                )
                response.body.close()

            delay_millis = self.retry_policy.next_delay_millis(context)
            retries_total.labels(reason=reason).inc()
            logger.info(
                f"Retrying after {delay_millis}ms backoff",
                next_attempt=retry_count + 2,
                delay_millis=delay_millis,
            )
            if delay_millis > 0:
                self._sleep(delay_millis / 1000.0)
            retry_count += 1
