"""Prometheus metrics for the Moneytree LINK client.

Metrics are registered on the default prometheus_client registry; the host
application decides whether and where to expose them.
Alert rules should be configured for:
- moneytree_retries_total (sustained 429s mean the request rate is too high)
- moneytree_requests_total{outcome="api_error"} (client-side bugs or bad tokens)
"""

from prometheus_client import Counter, Histogram

# === Request Metrics ===

requests_total = Counter(
    "moneytree_requests_total",
    "Total executor invocations by HTTP method and final outcome",
    ["method", "outcome"],
)
"""
Executor invocations by final outcome.

Labels:
- method: HTTP method (GET, POST, ...)
- outcome: success, api_error, transport_error, decode_error, cancelled

Retries are not counted here; one invocation is one sample.
"""

request_latency_seconds = Histogram(
    "moneytree_request_latency_seconds",
    "End-to-end executor latency in seconds, including backoff waits",
    ["method"],
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0],
)
"""
End-to-end latency histogram.

Includes inter-retry waits, so rate-limited calls land in the upper buckets
(the default base delay alone is 3s).
"""

# === Retry Metrics ===

retries_total = Counter(
    "moneytree_retries_total",
    "Total retries scheduled after a retryable response",
    ["status"],
)
"""
Retries scheduled, by the status code that triggered them.

Labels:
- status: HTTP status code (currently always 429)

Alert thresholds:
- WARN: retry rate > 5% of requests
- CRITICAL: retry rate > 20% of requests
"""
