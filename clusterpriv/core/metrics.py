"""Prometheus metrics for privilege resolution."""

from prometheus_client import Counter, Histogram

privilege_cache_operations = Counter(
    "privilege_cache_operations_total",
    "Total number of privilege cache operations",
    ["operation", "result"],
)

privilege_resolution_duration = Histogram(
    "privilege_resolution_duration_seconds",
    "Time spent resolving a privilege set on a cache miss",
)

privilege_resolution_errors = Counter(
    "privilege_resolution_errors_total",
    "Total number of failed privilege resolutions",
    ["error_type"],
)
