"""Prometheus metrics for MemMachine requests and memory retrieval."""

from prometheus_client import Counter, Histogram

API_REQUEST_COUNT = Counter(
    "memmachine_api_requests_total",
    "Total number of MemMachine API requests",
    labelnames=["endpoint", "status"],
)

API_REQUEST_LATENCY = Histogram(
    "memmachine_api_request_latency_seconds",
    "MemMachine API request latency in seconds",
    labelnames=["endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

PROJECT_AUTO_CREATED = Counter(
    "memmachine_project_auto_created_total",
    "Projects created automatically after a store hit a missing project",
)

MEMORY_RECORDS = Histogram(
    "memmachine_memory_records",
    "Memory records per search after normalization and deduplication",
    labelnames=["kind"],
    buckets=(0, 1, 2, 5, 10, 20, 50, 100),
)

TEMPLATE_RENDERS = Counter(
    "memmachine_template_renders_total",
    "Context templates rendered",
)
