"""Prometheus metrics helpers for export observability.

Metrics taxonomy:
Export operations:
    - export_requests_total (label format)
    - export_failures_total (labels format, reason)
    - export_generation_seconds (label format)
    - export_bytes_total (counter of bytes delivered/stored)
Remote storage:
    - export_r2_store_seconds
    - export_r2_failures_total
"""
from prometheus_client import Counter, Histogram

EXPORT_REQUESTS = Counter(
    "export_requests_total",
    "Total export requests",
    ["format"]
)
EXPORT_FAILURES = Counter(
    "export_failures_total",
    "Total export requests that returned an error result",
    ["format", "reason"]
)

# Export generation timing (Solution[] -> format bytes)
EXPORT_GENERATION_SECONDS = Histogram(
    "export_generation_seconds",
    "Time to render an export payload (pdf/png/svg/json/yaml/markdown/terraform)",
    ["format"],
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5)
)
EXPORT_BYTES_TOTAL = Counter(
    "export_bytes_total",
    "Total bytes generated for exports (streamed, written or stored)"
)

EXPORT_R2_STORE_SECONDS = Histogram(
    "export_r2_store_seconds",
    "Time to store generated export file in R2",
    buckets=(0.05, 0.1, 0.25, 0.5, 1, 2, 5)
)
EXPORT_R2_FAILURES = Counter(
    "export_r2_failures_total",
    "Total failures storing export file in R2"
)

__all__ = [
    "EXPORT_REQUESTS",
    "EXPORT_FAILURES",
    "EXPORT_GENERATION_SECONDS",
    "EXPORT_BYTES_TOTAL",
    "EXPORT_R2_STORE_SECONDS",
    "EXPORT_R2_FAILURES",
]
