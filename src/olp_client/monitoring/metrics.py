"""Prometheus metrics for the OLP client.

The client only records into the default registry; exposing them (e.g. via
``prometheus_client.start_http_server``) is left to the host application.
Useful alerts:
- olp_client_requests_total{outcome="execution_error"} (resource server unreachable)
- olp_client_retries_total (transient failures absorbed by the retry policy)
"""

from prometheus_client import Counter, Histogram

# === Dispatch Metrics ===

requests_total = Counter(
    "olp_client_requests_total",
    "Total dispatched requests by method and outcome",
    ["method", "outcome"],
)
"""
Dispatched requests by outcome.

Labels:
- method: HTTP method
- outcome: success, no_content, error_response, parsing_error, execution_error
"""

request_latency_seconds = Histogram(
    "olp_client_request_latency_seconds",
    "End-to-end latency of a send call, retries included",
    ["method"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
)

# === Retry Metrics ===

retries_total = Counter(
    "olp_client_retries_total",
    "Total retry attempts by trigger",
    ["reason"],
)
"""
Retries granted by the retry policy.

Labels:
- reason: status (retryable status code) or exception (transport failure)
"""
