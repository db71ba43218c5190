"""Application metrics using the Prometheus client library.

This module defines all metrics in one place: a single inventory of
everything the service measures.  Other modules import specific metrics
and increment/observe them at the point of action.

Two groups:

  HTTP metrics — populated by MetricsMiddleware for every request
  (count, latency histogram, in-flight gauge).

  Lifecycle metrics — incremented by the services that own the state
  change: issuance, revocation, disclosure outcomes, generated proofs,
  and storage failures.  Together they answer questions like "how many
  disclosures were refused because the credential was revoked?" without
  grepping logs.

Counters never go down and survive for the life of the process; tests
assert on deltas (see tests/middleware/test_metrics.py).
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# ---------------------------------------------------------------------------
# HTTP metrics (populated by the MetricsMiddleware)
# ---------------------------------------------------------------------------

REQUEST_COUNT = Counter(
    "http_requests_total",
    "Total HTTP requests by method, endpoint, and status code",
    ["method", "endpoint", "status_code"],
)

REQUEST_DURATION = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    # File-backed requests read the whole collection, so the upper
    # buckets matter more than for a cache-backed API.
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0],
)

ACTIVE_REQUESTS = Gauge(
    "http_active_requests",
    "Number of HTTP requests currently being processed",
)

# ---------------------------------------------------------------------------
# Credential lifecycle metrics
# ---------------------------------------------------------------------------

CREDENTIALS_ISSUED = Counter(
    "credentials_issued_total",
    "Credentials created through the issuance service",
)

CREDENTIALS_REVOKED = Counter(
    "credentials_revoked_total",
    "Revocation calls that updated a stored credential (re-revocations included)",
)

DISCLOSURES = Counter(
    "disclosures_total",
    "Selective disclosure requests by outcome",
    ["outcome"],  # "disclosed" or "refused_revoked"
)

PROOFS_GENERATED = Counter(
    "zk_proofs_generated_total",
    "Mock proofs produced by the disclosure engine",
    ["type", "status"],  # e.g. AgeVerification / verified
)

STORAGE_ERRORS = Counter(
    "storage_errors_total",
    "File store read/write failures",
    ["operation"],  # "read" or "write"
)
