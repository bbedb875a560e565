"""
Prometheus metrics for the Transaction API.

Tracks HTTP traffic and the outcome of every transaction operation.
"""

from fastapi import Response
from prometheus_client import (CONTENT_TYPE_LATEST, Counter, Histogram,
                               generate_latest)

# Request metrics
http_requests_total = Counter(
    "transaction_api_http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status"]
)

http_request_duration_seconds = Histogram(
    "transaction_api_http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0)
)

# Transaction operation metrics
transaction_operations_total = Counter(
    "transaction_api_operations_total",
    "Total transaction operations by outcome",
    ["operation", "outcome"]
)


def track_request_metrics(method: str, endpoint: str, status_code: int, duration: float):
    """Track HTTP request metrics."""
    http_requests_total.labels(method=method, endpoint=endpoint, status=status_code).inc()
    http_request_duration_seconds.labels(method=method, endpoint=endpoint).observe(duration)


def track_transaction_operation(operation: str, outcome: str):
    """Track a transaction operation (outcome: success, not_found, error)."""
    transaction_operations_total.labels(operation=operation, outcome=outcome).inc()


async def metrics_endpoint():
    """
    Prometheus metrics endpoint.

    Returns:
        Response with Prometheus metrics in text format
    """
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
