"""
Retry context passed to retry policies.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class RetryContext:
    """
    Read-only snapshot of one logical call's retry state.

    A fresh snapshot is handed to the policy after every attempt; it is
    local to a single ``RetryExecutor.execute`` call.

    Attributes:
        retry_count: Retries already performed (0 after the first attempt)
        last_exception: Exception raised by the last attempt, if it raised
        last_status_code: Status code of the last attempt, if it returned
    """

    retry_count: int = 0
    last_exception: Optional[BaseException] = None
    last_status_code: Optional[int] = None

    def __post_init__(self) -> None:
        if self.retry_count < 0:
            raise ValueError("retry_count must be >= 0")
