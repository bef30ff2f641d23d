"""
Monitoring for the OLP client.

Exports Prometheus metrics recorded by the dispatcher and retry executor.
"""

from olp_client.monitoring.metrics import (
    request_latency_seconds,
    requests_total,
    retries_total,
)

__all__ = [
    "request_latency_seconds",
    "requests_total",
    "retries_total",
]
