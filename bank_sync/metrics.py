"""
Prometheus metrics for bank account sync runs, provider calls and the transactions cache.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Example:
    >>> from bank_sync.metrics import account_syncs, account_sync_duration
    >>> with account_sync_duration.time():
    ...     result = sync_account(account)
    >>> account_syncs.labels(status="success").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Gauge, Histogram

# =============================================================================
# Sync Metrics
# =============================================================================

account_syncs = Counter(
    "bank_sync_account_syncs_total",
    "Total number of single-account sync attempts",
    ["status"],
)
"""
Counter for per-account sync attempts.

Labels:
    status: success or failure
"""

account_sync_duration = Histogram(
    "bank_sync_account_sync_duration_seconds",
    "Duration of a single-account sync in seconds",
    buckets=(0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0, 60.0, float("inf")),
)

batch_sync_runs = Counter(
    "bank_sync_batch_runs_total",
    "Total number of bulk sync runs by outcome",
    ["outcome"],
)
"""
Counter for bulk sync runs.

Labels:
    outcome: no_linked_accounts, success or degraded
"""

sync_progress = Gauge(
    "bank_sync_progress_percent",
    "Progress of the bulk sync run currently in flight (0-100, 0 when idle)",
)

# =============================================================================
# Provider API Metrics
# =============================================================================

api_requests = Counter(
    "bank_sync_provider_requests_total",
    "Total bank data provider requests made",
    ["endpoint", "status_code"],
)
"""
Counter for requests to the bank data provider.

Labels:
    endpoint: Logical endpoint name (e.g., "token", "transactions")
    status_code: HTTP status code, or "error" when no response was received
"""

api_latency = Histogram(
    "bank_sync_provider_latency_seconds",
    "Bank data provider request latency in seconds",
    ["endpoint"],
    buckets=(0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, float("inf")),
)

# =============================================================================
# Transactions Cache Metrics
# =============================================================================

transactions_cache_hits = Counter(
    "bank_sync_transactions_cache_hits_total",
    "Total number of transactions cache hits",
)

transactions_cache_misses = Counter(
    "bank_sync_transactions_cache_misses_total",
    "Total number of transactions cache misses",
)

transactions_cache_invalidations = Counter(
    "bank_sync_transactions_cache_invalidations_total",
    "Total number of transactions cache invalidations",
    ["scope"],
)
"""
Counter for cache invalidations.

Labels:
    scope: account (one entry dropped) or all (whole cache cleared)
"""
